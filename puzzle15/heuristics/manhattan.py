from __future__ import annotations
from typing import Dict, Tuple

from puzzle15.domains.board import BLANK, CELLS, SIZE, Board

# Goal (row, col) for each tile
_goal_pos: Dict[int, Tuple[int, int]] = {t: divmod(t - 1, SIZE) for t in range(1, CELLS)}

# distance table indexed [tile][cell]
_DIST = [[0] * CELLS] + [
    [abs(r - _goal_pos[t][0]) + abs(c - _goal_pos[t][1]) for r, c in (divmod(i, SIZE) for i in range(CELLS))]
    for t in range(1, CELLS)
]


def manhattan(board: Board) -> int:
    """Sum of Manhattan distances to goal positions (blank ignored)."""
    dist = 0
    for idx, tile in enumerate(board.cells):
        if tile == BLANK:
            continue
        dist += _DIST[tile][idx]
    return dist


class ManhattanDistance:
    name = "manhattan-distance"

    def estimate(self, board: Board) -> int:
        return manhattan(board)

    def __repr__(self) -> str:
        return "ManhattanDistance()"
