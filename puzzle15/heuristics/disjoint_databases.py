from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
import logging
import threading

from puzzle15.domains.board import Board
from puzzle15.errors import PatternDatabaseError
from puzzle15.heuristics.pattern_db import (
    DEFAULT_PARTITION,
    Partition,
    PatternDatabase,
    PatternDatabaseBuilder,
    load_databases,
    save_databases,
    validate_partition,
)

logger = logging.getLogger(__name__)


class DisjointDatabases:
    """
    Sum of per-group pattern-database lookups.

    Groups are disjoint and each table only counts moves of its own tiles, so
    one physical move lowers at most one term by one: the sum is admissible,
    consistent, and never below the Manhattan distance.
    """
    name = "disjoint-databases"

    def __init__(self, databases: Sequence[PatternDatabase]):
        self.databases: List[PatternDatabase] = list(databases)
        self.partition: Partition = validate_partition(db.group for db in self.databases)

    @classmethod
    def build(cls, partition: Iterable[Iterable[int]] = DEFAULT_PARTITION,
              max_workers: Optional[int] = None) -> "DisjointDatabases":
        return cls(PatternDatabaseBuilder(partition).build(max_workers=max_workers))

    @classmethod
    def load(cls, path: Path, partition: Iterable[Iterable[int]] = DEFAULT_PARTITION) -> "DisjointDatabases":
        return cls(load_databases(path, partition))

    def save(self, path: Path) -> None:
        save_databases(path, self.databases)

    def estimate(self, board: Board) -> int:
        positions = board.positions()
        return sum(db.lookup_positions(positions) for db in self.databases)

    def group_estimates(self, board: Board) -> List[int]:
        positions = board.positions()
        return [db.lookup_positions(positions) for db in self.databases]

    def __repr__(self) -> str:
        return f"DisjointDatabases(partition={self.partition})"


# ---------- process-wide tables ----------

_default: Optional[DisjointDatabases] = None
_default_lock = threading.Lock()


def _create_default(cache_path: Optional[Path], max_workers: Optional[int]) -> DisjointDatabases:
    if cache_path is not None and Path(cache_path).exists():
        try:
            return DisjointDatabases.load(cache_path)
        except (OSError, PatternDatabaseError) as e:
            logger.warning("ignoring pattern database cache %s: %s", cache_path, e)
    dd = DisjointDatabases.build(DEFAULT_PARTITION, max_workers=max_workers)
    if cache_path is not None:
        try:
            dd.save(cache_path)
        except OSError as e:
            logger.warning("could not write pattern database cache %s: %s", cache_path, e)
    return dd


def default_databases(cache_path: Optional[Path] = None,
                      max_workers: Optional[int] = None) -> DisjointDatabases:
    """Default-partition tables, built at most once per process.

    ``cache_path`` and ``max_workers`` only take effect on the call that builds.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = _create_default(cache_path, max_workers)
    return _default
