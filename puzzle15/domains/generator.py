from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import random

from puzzle15.domains.board import BLANK, CELLS, GOAL, NEIGHBORS, Board
from puzzle15.domains.solvability import is_solvable


@dataclass
class Instance:
    seed: int
    depth: int
    board: Board


def scramble(depth: int, seed: int) -> Board:
    """Random walk of ``depth`` blank moves from the goal with no immediate backtrack."""
    rng = random.Random(seed)
    s = list(GOAL)
    z = CELLS - 1
    last_blank: Optional[int] = None
    for _ in range(depth):
        cand = [j for _, j in NEIGHBORS[z]]
        if last_blank in cand and len(cand) > 1:
            cand.remove(last_blank)
        j = rng.choice(cand)
        s[z], s[j] = s[j], s[z]
        last_blank = z
        z = j
    return Board(tuple(s))


def random_board(seed: int) -> Board:
    """Uniformly shuffled cells; about half of these boards are unsolvable."""
    rng = random.Random(seed)
    cells = list(range(CELLS))
    rng.shuffle(cells)
    return Board(tuple(cells))


def make_unsolvable_variant(board: Board) -> Board:
    """Swap the first two tiles, which flips the permutation parity."""
    lst = list(board.cells)
    i = next(k for k, v in enumerate(lst) if v != BLANK)
    j = next(k for k, v in enumerate(lst[i + 1:], start=i + 1) if v != BLANK)
    lst[i], lst[j] = lst[j], lst[i]
    return Board(tuple(lst))


def generate_instances(depths: List[int], per_depth: int, start_seed: int = 0) -> List[Instance]:
    out: List[Instance] = []
    seed = start_seed
    for d in depths:
        made = 0
        attempts = 0
        while made < per_depth:
            b = scramble(d, seed)
            attempts += 1
            if is_solvable(b):
                out.append(Instance(seed=seed, depth=d, board=b))
                made += 1
            seed += 1
            if attempts > per_depth * 2000:
                raise RuntimeError(f"Instance generation took too long at depth={d}. Check solvability logic.")
    return out
