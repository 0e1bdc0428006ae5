from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple
from time import perf_counter
import heapq
import itertools
import logging

from puzzle15.domains.board import Board, Move
from puzzle15.domains.solvability import is_solvable
from puzzle15.errors import SearchInvariantError
from puzzle15.heuristics.base import Heuristic

logger = logging.getLogger(__name__)

TIE_BREAKS = ("g", "h", "fifo", "lifo")


@dataclass
class SearchNode:
    board: Board
    g: int
    h: int
    parent: Optional[int] = None  # arena index of the predecessor
    move: Optional[Move] = None

    @property
    def f(self) -> int:
        return self.g + self.h


@dataclass
class SolveResult:
    """Optimal move list, or ``moves is None`` when the board cannot reach the goal."""
    moves: Optional[List[Move]]
    expanded: int = 0
    generated: int = 0
    duplicates: int = 0
    peak_open: int = 0
    peak_closed: int = 0
    time: float = 0.0
    heuristic: str = ""
    tie_break: str = "g"
    termination: str = "ok"

    @property
    def solvable(self) -> bool:
        return self.moves is not None

    @property
    def length(self) -> Optional[int]:
        return None if self.moves is None else len(self.moves)


def reconstruct_moves(arena: List[SearchNode], idx: int) -> List[Move]:
    moves: List[Move] = []
    node = arena[idx]
    while node.parent is not None:
        moves.append(node.move)  # type: ignore[arg-type]
        node = arena[node.parent]
    moves.reverse()
    return moves


def priority_tuple(f: int, g: int, h: int, ctr: int, tie_break: str) -> Tuple[int, int, int]:
    """Heap key; equal f is settled by ``tie_break``, then by insertion order."""
    if tie_break == "g":    return (f, -g, ctr)
    if tie_break == "h":    return (f, h, ctr)
    if tie_break == "fifo": return (f, 0, ctr)
    if tie_break == "lifo": return (f, 0, -ctr)
    raise ValueError(f"unknown tie_break {tie_break!r}, expected one of {TIE_BREAKS}")


def a_star(start: Board, heuristic: Heuristic, tie_break: str = "g",
           solvable: Optional[bool] = None) -> SolveResult:
    """
    A* over 15-puzzle boards.

    The heuristic must be admissible and consistent; then the first time the
    goal is popped its path is a shortest one. Unsolvable boards return
    immediately without expanding anything. ``solvable`` is a verdict the
    caller already holds for ``start``; when omitted it is computed here.
    """
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"unknown tie_break {tie_break!r}, expected one of {TIE_BREAKS}")
    name = getattr(heuristic, "name", type(heuristic).__name__)
    t0 = perf_counter()

    if solvable is None:
        solvable = is_solvable(start)
    if not solvable:
        logger.debug("board %s is unsolvable", start)
        return SolveResult(moves=None, time=perf_counter() - t0, heuristic=name,
                           tie_break=tie_break, termination="unsolvable")

    arena: List[SearchNode] = []
    open_heap: List[Tuple[Tuple[int, int, int], int]] = []
    counter = itertools.count()

    h0 = heuristic.estimate(start)
    arena.append(SearchNode(board=start, g=0, h=h0))
    heapq.heappush(open_heap, (priority_tuple(h0, 0, h0, next(counter), tie_break), 0))

    best_g: Dict[Board, int] = {start: 0}
    closed: Set[Board] = set()

    expanded = 0
    generated = 0
    duplicates = 0
    peak_open = 1
    peak_closed = 0

    while open_heap:
        peak_open = max(peak_open, len(open_heap))
        _, idx = heapq.heappop(open_heap)
        node = arena[idx]
        if node.board in closed or node.g > best_g[node.board]:
            continue

        if node.board.is_goal():
            moves = reconstruct_moves(arena, idx)
            t1 = perf_counter()
            logger.debug("%s: solved in %d moves, %d expanded, %.3fs", name, len(moves), expanded, t1 - t0)
            return SolveResult(
                moves=moves,
                expanded=expanded,
                generated=generated,
                duplicates=duplicates,
                peak_open=peak_open,
                peak_closed=peak_closed,
                time=t1 - t0,
                heuristic=name,
                tie_break=tie_break,
            )

        closed.add(node.board)
        expanded += 1
        peak_closed = max(peak_closed, len(closed))

        g2 = node.g + 1
        for mv, b2 in node.board.successors():
            generated += 1
            prev = best_g.get(b2)
            if prev is not None:
                duplicates += 1
                if g2 >= prev:
                    continue
            best_g[b2] = g2
            h2 = heuristic.estimate(b2)
            arena.append(SearchNode(board=b2, g=g2, h=h2, parent=idx, move=mv))
            pr = priority_tuple(g2 + h2, g2, h2, next(counter), tie_break)
            heapq.heappush(open_heap, (pr, len(arena) - 1))

    raise SearchInvariantError(
        f"open list exhausted after {expanded} expansions on solvable board {start}"
    )
