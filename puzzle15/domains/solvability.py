from __future__ import annotations
from typing import Sequence

from puzzle15.domains.board import BLANK, SIZE, Board

GOAL_BLANK_ROW = SIZE - 1


def count_inversions(cells: Sequence[int]) -> int:
    """Pairs of tiles (blank ignored) appearing in the wrong relative order."""
    arr = [x for x in cells if x != BLANK]
    inv = 0
    for i in range(len(arr)):
        for j in range(i + 1, len(arr)):
            if arr[i] > arr[j]:
                inv += 1
    return inv


def is_solvable(board: Board) -> bool:
    """4-wide parity rule: (inversions + blank rows away from the goal row) must be even.

    Every horizontal move keeps the inversion count; every vertical move
    changes it by an odd amount (3 tiles jumped) and moves the blank one row,
    so the sum's parity is invariant and the goal has sum 0.
    """
    inv = count_inversions(board.cells)
    blank_row_distance = abs(GOAL_BLANK_ROW - board.blank // SIZE)
    return (inv + blank_row_distance) % 2 == 0
