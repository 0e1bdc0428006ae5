from __future__ import annotations
from pathlib import Path
from typing import Optional

from puzzle15.errors import UnknownHeuristicError
from puzzle15.heuristics.base import Heuristic
from puzzle15.heuristics.disjoint_databases import default_databases
from puzzle15.heuristics.manhattan import ManhattanDistance

MANHATTAN = "manhattan-distance"
DISJOINT_DATABASES = "disjoint-databases"
HEURISTIC_NAMES = (MANHATTAN, DISJOINT_DATABASES)


def get_heuristic(name: str, cache_path: Optional[Path] = None,
                  max_workers: Optional[int] = None) -> Heuristic:
    """Map a selector to a heuristic; disjoint databases are built lazily, once per process."""
    if name == MANHATTAN:
        return ManhattanDistance()
    if name == DISJOINT_DATABASES:
        return default_databases(cache_path=cache_path, max_workers=max_workers)
    raise UnknownHeuristicError(f"unknown heuristic {name!r}, expected one of {', '.join(HEURISTIC_NAMES)}")
