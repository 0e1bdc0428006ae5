from __future__ import annotations
from typing import Protocol, runtime_checkable

from puzzle15.domains.board import Board


@runtime_checkable
class Heuristic(Protocol):
    """Lower bound on the moves left from a board. A* only depends on this."""
    name: str

    def estimate(self, board: Board) -> int:
        ...
