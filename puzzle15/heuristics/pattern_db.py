"""
Additive pattern databases for the 15-puzzle.

Each group of tiles gets its own table of exact distances in an abstracted
puzzle where only the group's tiles and the blank are distinguishable. The
table is addressed by the partial permutation (group tile cells..., blank cell)
ranked in a mixed-radix system, so it is a dense uint8 array of length P(16, m)
with m = group size + 1.

Tables are filled by a breadth-first traversal backwards from the goal. Moving
the blank over a non-group tile is free in the abstraction, so every cell of
the blank's connected region (cells not covered by group tiles) shares one
distance; only sliding a group tile costs a move.
"""
from __future__ import annotations
from collections import deque
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import zipfile
import zlib

import numpy as np

from puzzle15.domains.board import BLANK, CELLS, NEIGHBORS, Board
from puzzle15.errors import GroupSizeError, PartitionError, PatternDatabaseError

logger = logging.getLogger(__name__)

Group = Tuple[int, ...]
Partition = Tuple[Group, ...]

# Rows of the goal board; the 3-tile last row leaves room for the blank.
DEFAULT_PARTITION: Partition = ((1, 2, 3, 4), (5, 6, 7, 8), (9, 10, 11, 12), (13, 14, 15))
MAX_GROUP_SIZE = 7
UNREACHED = 255
TILES = frozenset(range(1, CELLS))


def validate_partition(groups: Iterable[Iterable[int]]) -> Partition:
    """Return ``groups`` as a tuple of tuples or raise if it does not cover 1..15 exactly once."""
    partition: Partition = tuple(tuple(g) for g in groups)
    if not partition:
        raise PartitionError("partition has no groups")
    seen = set()
    for g in partition:
        if not g:
            raise PartitionError("partition contains an empty group")
        for t in g:
            if t not in TILES:
                raise PartitionError(f"tile {t!r} in group {g} is not in 1..{CELLS - 1}")
            if t in seen:
                raise PartitionError(f"tile {t} appears in more than one group")
            seen.add(t)
        if len(g) > MAX_GROUP_SIZE:
            raise GroupSizeError(
                f"group {g} has {len(g)} tiles, at most {MAX_GROUP_SIZE} supported; its tiles-plus-blank "
                f"table would need {table_size(len(g) + 1) / 1e9:.1f} GB"
            )
    missing = sorted(TILES - seen)
    if missing:
        raise PartitionError(f"tiles {missing} are not covered by any group")
    return partition


# ---------- encoding ----------

def radix_weights(m: int) -> Tuple[int, ...]:
    """weights[i] = P(16 - i - 1, m - i - 1), the block size of position i."""
    w = []
    for i in range(m):
        prod = 1
        for a in range(m - i - 1):
            prod *= (CELLS - i - 1 - a)
        w.append(prod)
    return tuple(w)


def table_size(m: int) -> int:
    """P(16, m): number of sequences of m distinct cells."""
    return radix_weights(m)[0] * CELLS


def rank(seq: Sequence[int], weights: Sequence[int]) -> int:
    """Rank a sequence of distinct cells; the inverse of :func:`unrank`."""
    r = 0
    for i, x in enumerate(seq):
        smaller = 0
        for j in range(i):
            if seq[j] < x:
                smaller += 1
        r += (x - smaller) * weights[i]
    return r


def unrank(r: int, weights: Sequence[int]) -> List[int]:
    avail = list(range(CELLS))
    seq = []
    for block in weights:
        idx, r = divmod(r, block)
        seq.append(avail.pop(idx))
    return seq


# ---------- retrograde BFS ----------

def _tiles_rank(tiles: Sequence[int], weights: Sequence[int]) -> int:
    return rank(tiles, weights[:len(tiles)])


def build_group_table(group: Sequence[int]) -> np.ndarray:
    """Exact abstract distance for every (group tile cells, blank cell) encoding of ``group``."""
    group = tuple(group)
    k = len(group)
    weights = radix_weights(k + 1)
    table = bytearray([UNREACHED]) * table_size(k + 1)

    t0 = perf_counter()
    start = tuple(t - 1 for t in group)  # tile t sits on cell t - 1 in the goal
    queue = deque([(start, CELLS - 1, 0)])
    regions = 0

    while queue:
        tiles, blank, dist = queue.popleft()

        occupied = [False] * CELLS
        for p in tiles:
            occupied[p] = True
        # below[c]: group tiles on cells < c, turns a blank cell into its radix digit
        below = [0] * CELLS
        acc = 0
        for c in range(CELLS):
            below[c] = acc
            if occupied[c]:
                acc += 1

        base = _tiles_rank(tiles, weights)
        if table[base + blank - below[blank]] != UNREACHED:
            continue

        # Flood the blank's free region; each of its cells gets this distance.
        region = [blank]
        in_region = [False] * CELLS
        in_region[blank] = True
        stack = [blank]
        while stack:
            c = stack.pop()
            for _, j in NEIGHBORS[c]:
                if not occupied[j] and not in_region[j]:
                    in_region[j] = True
                    region.append(j)
                    stack.append(j)
        for c in region:
            table[base + c - below[c]] = dist
        regions += 1

        # Slide a group tile into the region; the blank takes its old cell.
        for c in region:
            for _, j in NEIGHBORS[c]:
                if not occupied[j]:
                    continue
                i = tiles.index(j)
                nxt = tiles[:i] + (c,) + tiles[i + 1:]
                code = _tiles_rank(nxt, weights) + j - sum(1 for p in nxt if p < j)
                if table[code] == UNREACHED:
                    queue.append((nxt, j, dist + 1))

    if UNREACHED in table:
        holes = len(table) - sum(1 for v in table if v != UNREACHED)
        raise PatternDatabaseError(f"group {group}: {holes} encodings were never reached")

    logger.info(
        "pattern database for group %s: %d entries, %d blank regions, max distance %d, %.2fs",
        group, len(table), regions, max(table), perf_counter() - t0,
    )
    return np.frombuffer(bytes(table), dtype=np.uint8)


@dataclass(frozen=True, eq=False)
class PatternDatabase:
    """Read-only distance table for one group."""
    group: Group
    table: np.ndarray

    def __post_init__(self):
        expected = table_size(len(self.group) + 1)
        if self.table.shape != (expected,):
            raise PatternDatabaseError(
                f"table for group {self.group} has shape {self.table.shape}, expected ({expected},)"
            )
        if self.table.flags.writeable:
            table = self.table.copy()
            table.setflags(write=False)
            object.__setattr__(self, "table", table)
        object.__setattr__(self, "_weights", radix_weights(len(self.group) + 1))

    def __len__(self) -> int:
        return int(self.table.shape[0])

    def encode_positions(self, positions: Sequence[int]) -> int:
        """``positions[tile]`` is the cell of ``tile`` (``positions[0]`` the blank)."""
        seq = [positions[t] for t in self.group]
        seq.append(positions[BLANK])
        return rank(seq, self._weights)

    def encode(self, board: Board) -> int:
        return self.encode_positions(board.positions())

    def lookup_positions(self, positions: Sequence[int]) -> int:
        return int(self.table[self.encode_positions(positions)])

    def lookup(self, board: Board) -> int:
        return self.lookup_positions(board.positions())

    def unreached(self) -> int:
        return int(np.count_nonzero(self.table == UNREACHED))


class PatternDatabaseBuilder:
    """Validates a partition up front and builds one table per group."""

    def __init__(self, partition: Iterable[Iterable[int]] = DEFAULT_PARTITION):
        self.partition: Partition = validate_partition(partition)

    def build(self, max_workers: Optional[int] = None) -> List[PatternDatabase]:
        """Build all groups; with ``max_workers`` > 1 groups are built in worker processes."""
        t0 = perf_counter()
        groups = list(self.partition)
        if max_workers is not None and max_workers > 1 and len(groups) > 1:
            with ProcessPoolExecutor(max_workers=min(max_workers, len(groups))) as pool:
                tables = list(pool.map(build_group_table, groups))
        else:
            tables = [build_group_table(g) for g in groups]
        logger.info("built %d pattern databases in %.2fs", len(tables), perf_counter() - t0)
        return [PatternDatabase(group=g, table=t) for g, t in zip(groups, tables)]


# ---------- optional cache ----------

def save_databases(path: Path, databases: Sequence[PatternDatabase]) -> None:
    """Write tables to a numpy ``.npz`` archive. Not a stable format across versions."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    arrays = {f"group_{i}": db.table for i, db in enumerate(databases)}
    arrays["partition"] = np.array(
        [t for db in databases for t in db.group + (BLANK,)], dtype=np.uint8
    )
    with path.open("wb") as f:
        np.savez_compressed(f, **arrays)
    logger.info("saved %d pattern databases to %s", len(databases), path)


def load_databases(path: Path, partition: Iterable[Iterable[int]] = DEFAULT_PARTITION) -> List[PatternDatabase]:
    """Load tables saved by :func:`save_databases`; the stored partition must match."""
    expected = validate_partition(partition)
    try:
        dbs = _read_archive(Path(path), expected)
    except (zipfile.BadZipFile, zlib.error, EOFError, KeyError, ValueError) as e:
        raise PatternDatabaseError(f"{path} is not a readable pattern database archive: {e}") from e
    for db in dbs:
        if db.unreached():
            raise PatternDatabaseError(f"{path}: table for group {db.group} has unreached entries")
    logger.info("loaded %d pattern databases from %s", len(dbs), path)
    return dbs


def _read_archive(path: Path, expected: Partition) -> List[PatternDatabase]:
    with np.load(path) as data:
        flat = [int(v) for v in data["partition"]]
        stored: List[Group] = []
        cur: List[int] = []
        for v in flat:
            if v == BLANK:
                stored.append(tuple(cur))
                cur = []
            else:
                cur.append(v)
        if tuple(stored) != expected:
            raise PatternDatabaseError(f"{path} holds partition {stored}, expected {list(expected)}")
        dbs = [PatternDatabase(group=g, table=np.array(data[f"group_{i}"])) for i, g in enumerate(expected)]
    return dbs
