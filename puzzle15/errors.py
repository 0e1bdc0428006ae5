"""Exceptions raised by the 15-puzzle solver.

An unsolvable board is not an error: the solver reports it through ``SolveResult``.
"""


class PuzzleError(Exception):
    """Base class for every solver error."""


class InvalidBoardError(PuzzleError, ValueError):
    """Cells are not a permutation of 0..15, or board text could not be parsed."""


class IllegalMoveError(PuzzleError, ValueError):
    """The blank would leave the board."""


class PartitionError(PuzzleError, ValueError):
    """Pattern-database groups do not cover tiles 1..15 exactly once."""


class GroupSizeError(PuzzleError, ValueError):
    """A pattern-database group is too large for a dense tiles-plus-blank table."""


class UnknownHeuristicError(PuzzleError, ValueError):
    """Heuristic selector is not one of the recognised names."""


class PatternDatabaseError(PuzzleError, RuntimeError):
    """A pattern-database table is incomplete or does not match its partition."""


class SearchInvariantError(PuzzleError, RuntimeError):
    """A* ran out of nodes on a board that passed the solvability check."""
