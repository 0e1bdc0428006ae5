from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from puzzle15.domains.board import Board
from puzzle15.domains.solvability import is_solvable
from puzzle15.errors import UnknownHeuristicError
from puzzle15.heuristics.base import Heuristic
from puzzle15.heuristics.selection import HEURISTIC_NAMES, MANHATTAN, get_heuristic
from puzzle15.search.a_star import TIE_BREAKS, SolveResult, a_star


def solve(
    board: Board,
    heuristic: Union[str, Heuristic] = MANHATTAN,
    tie_break: str = "g",
    pdb_cache: Optional[Path] = None,
    max_workers: Optional[int] = None,
) -> SolveResult:
    """
    Solve ``board`` optimally.

    heuristic: ``"manhattan-distance"``, ``"disjoint-databases"`` or any object
    with ``estimate(board) -> int``. Selecting disjoint databases builds the
    process-wide tables before the first estimate (optionally through
    ``pdb_cache``, with ``max_workers`` build processes); an unsolvable board
    never triggers the build.
    """
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"unknown tie_break {tie_break!r}, expected one of {TIE_BREAKS}")
    if isinstance(heuristic, str) and heuristic not in HEURISTIC_NAMES:
        raise UnknownHeuristicError(
            f"unknown heuristic {heuristic!r}, expected one of {', '.join(HEURISTIC_NAMES)}"
        )
    solvable = is_solvable(board)
    if isinstance(heuristic, str):
        if not solvable:
            return SolveResult(moves=None, heuristic=heuristic, tie_break=tie_break, termination="unsolvable")
        heuristic = get_heuristic(heuristic, cache_path=pdb_cache, max_workers=max_workers)
    return a_star(board, heuristic, tie_break=tie_break, solvable=solvable)
