from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from puzzle15.errors import IllegalMoveError, InvalidBoardError

SIZE = 4
CELLS = SIZE * SIZE
BLANK = 0

State = Tuple[int, ...]  # 16-length tuple in reading order, 0 is blank
GOAL: State = tuple(list(range(1, CELLS)) + [BLANK])


class Move(Enum):
    """Direction the blank travels; the neighbouring tile slides the other way."""
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    def opposite(self) -> "Move":
        return _OPPOSITE[self]

    def __str__(self) -> str:
        return self.name.capitalize()


_OPPOSITE = {
    Move.UP: Move.DOWN,
    Move.DOWN: Move.UP,
    Move.LEFT: Move.RIGHT,
    Move.RIGHT: Move.LEFT,
}


def _blank_moves(i: int) -> Tuple[Tuple[Move, int], ...]:
    r, c = divmod(i, SIZE)
    out = []
    for mv in Move:  # Up, Down, Left, Right
        dr, dc = mv.delta
        r2, c2 = r + dr, c + dc
        if 0 <= r2 < SIZE and 0 <= c2 < SIZE:
            out.append((mv, r2 * SIZE + c2))
    return tuple(out)


# Precomputed legal blank moves per blank index, in fixed order
NEIGHBORS: Dict[int, Tuple[Tuple[Move, int], ...]] = {i: _blank_moves(i) for i in range(CELLS)}


def _check_cells(cells: Sequence[int]) -> None:
    if len(cells) != CELLS:
        raise InvalidBoardError(f"board needs {CELLS} cells, got {len(cells)}")
    seen = set()
    for v in cells:
        if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v < CELLS:
            raise InvalidBoardError(f"cell value {v!r} is not a tile label in 0..{CELLS - 1}")
        if v in seen:
            if v == BLANK:
                raise InvalidBoardError("board has more than one blank")
            raise InvalidBoardError(f"tile {v} appears more than once")
        seen.add(v)


@dataclass(frozen=True)
class Board:
    """Immutable 4x4 arrangement. Two boards are equal iff their cells are equal."""
    cells: State
    blank: int = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        cells = tuple(self.cells)
        _check_cells(cells)
        object.__setattr__(self, "cells", cells)
        object.__setattr__(self, "blank", cells.index(BLANK))

    @classmethod
    def _trusted(cls, cells: State, blank: int) -> "Board":
        # Successor boards are permutations of a validated board; skip re-validation.
        b = object.__new__(cls)
        object.__setattr__(b, "cells", cells)
        object.__setattr__(b, "blank", blank)
        return b

    # ---------- construction ----------
    @classmethod
    def goal(cls) -> "Board":
        return cls._trusted(GOAL, CELLS - 1)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
            raise InvalidBoardError(f"board needs {SIZE} rows of {SIZE} cells")
        return cls(tuple(v for row in rows for v in row))

    @classmethod
    def parse(cls, text: str) -> "Board":
        """Parse ``[1, 2, ..., 15, ]``; an empty entry or 0 is the blank."""
        s = text.strip()
        start, end = s.find("["), s.find("]")
        if start < 0 or end < start:
            raise InvalidBoardError(f"board text must be enclosed in brackets: {text!r}")
        members = [m.strip() for m in s[start + 1:end].split(",")]
        if len(members) != CELLS:
            raise InvalidBoardError(f"board text has {len(members)} entries, expected {CELLS}")
        cells: List[int] = []
        for m in members:
            if m == "":
                cells.append(BLANK)
                continue
            try:
                cells.append(int(m))
            except ValueError:
                raise InvalidBoardError(f"cannot parse board entry {m!r}") from None
        return cls(tuple(cells))

    def __str__(self) -> str:
        return "[" + ", ".join("" if v == BLANK else str(v) for v in self.cells) + "]"

    # ---------- queries ----------
    def is_goal(self) -> bool:
        return self.cells == GOAL

    def position_of(self, tile: int) -> int:
        return self.cells.index(tile)

    def positions(self) -> List[int]:
        """Inverse permutation: ``positions()[tile]`` is the cell index holding ``tile``."""
        pos = [0] * CELLS
        for idx, t in enumerate(self.cells):
            pos[t] = idx
        return pos

    # ---------- core dynamics ----------
    def successors(self) -> List[Tuple[Move, "Board"]]:
        """Legal (move, board) pairs in Up, Down, Left, Right order."""
        z = self.blank
        out: List[Tuple[Move, Board]] = []
        for mv, j in NEIGHBORS[z]:
            lst = list(self.cells)
            lst[z], lst[j] = lst[j], lst[z]
            out.append((mv, Board._trusted(tuple(lst), j)))
        return out

    def can_move(self, move: Move) -> bool:
        return any(mv is move for mv, _ in NEIGHBORS[self.blank])

    def apply(self, move: Move) -> "Board":
        z = self.blank
        for mv, j in NEIGHBORS[z]:
            if mv is move:
                lst = list(self.cells)
                lst[z], lst[j] = lst[j], lst[z]
                return Board._trusted(tuple(lst), j)
        raise IllegalMoveError(f"blank at row {z // SIZE}, col {z % SIZE} cannot move {move}")

    def apply_all(self, moves: Iterable[Move]) -> "Board":
        b = self
        for mv in moves:
            b = b.apply(mv)
        return b


def successors(board: Board) -> List[Tuple[Move, Board]]:
    return board.successors()


def is_goal(board: Board) -> bool:
    return board.is_goal()
