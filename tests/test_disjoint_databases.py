"""Disjoint pattern-database heuristic and heuristic selection."""

import pytest

from puzzle15.domains.board import Board
from puzzle15.domains.generator import random_board, scramble
from puzzle15.errors import PartitionError, UnknownHeuristicError
from puzzle15.heuristics.base import Heuristic
from puzzle15.heuristics import disjoint_databases
from puzzle15.heuristics.disjoint_databases import DisjointDatabases, default_databases
from puzzle15.heuristics.manhattan import ManhattanDistance, manhattan
from puzzle15.heuristics.pattern_db import PatternDatabaseBuilder, load_databases
from puzzle15.heuristics.selection import HEURISTIC_NAMES, get_heuristic
from puzzle15.search.solver import solve


class TestDisjointDatabases:
    def test_goal_is_zero(self, disjoint, goal):
        assert disjoint.estimate(goal) == 0

    def test_known_value(self, disjoint):
        b = Board.from_rows([[1, 2, 3, 4], [5, 6, 0, 8], [9, 10, 7, 12], [13, 14, 11, 15]])
        assert disjoint.estimate(b) == 3
        assert disjoint.group_estimates(b) == [0, 1, 1, 1]

    def test_interface(self, disjoint):
        assert isinstance(disjoint, Heuristic)
        assert disjoint.name == "disjoint-databases"

    @pytest.mark.parametrize("seed", range(40))
    def test_dominates_manhattan(self, disjoint, seed):
        b = random_board(seed)
        assert manhattan(b) <= disjoint.estimate(b)

    @pytest.mark.parametrize("seed", range(20))
    def test_consistent(self, disjoint, seed):
        b = random_board(1000 + seed)
        h = disjoint.estimate(b)
        for _, b2 in b.successors():
            assert abs(disjoint.estimate(b2) - h) <= 1

    @pytest.mark.parametrize("seed", range(10))
    def test_admissible_on_scrambles(self, disjoint, seed):
        # a scramble of depth d is at most d moves from the goal
        assert disjoint.estimate(scramble(14, seed)) <= 14

    def test_singleton_partition_is_manhattan(self):
        dd = DisjointDatabases(PatternDatabaseBuilder([(t,) for t in range(1, 16)]).build())
        for seed in range(20):
            b = random_board(seed)
            assert dd.estimate(b) == manhattan(b)

    def test_incomplete_database_set_rejected(self, disjoint):
        with pytest.raises(PartitionError):
            DisjointDatabases(disjoint.databases[:-1])


class TestSelection:
    def test_names(self):
        assert HEURISTIC_NAMES == ("manhattan-distance", "disjoint-databases")

    def test_manhattan(self):
        assert isinstance(get_heuristic("manhattan-distance"), ManhattanDistance)

    def test_disjoint_memoized(self, disjoint):
        assert get_heuristic("disjoint-databases") is disjoint
        assert default_databases() is disjoint

    def test_unknown(self):
        with pytest.raises(UnknownHeuristicError):
            get_heuristic("linear-conflict")


@pytest.fixture
def fresh_default(monkeypatch, disjoint):
    """Forget the process tables; a rebuild hands back the session tables instead of building."""
    built = []

    def fake_build(cls, partition=None, max_workers=None):
        built.append(partition)
        return disjoint

    monkeypatch.setattr(disjoint_databases, "_default", None)
    monkeypatch.setattr(DisjointDatabases, "build", classmethod(fake_build))
    return built


class TestLazyTables:
    def test_unsolvable_board_skips_build(self, fresh_default):
        b = Board.from_rows([[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12], [13, 15, 14, 0]])
        res = solve(b, "disjoint-databases")
        assert not res.solvable
        assert disjoint_databases._default is None
        assert fresh_default == []

    def test_solvable_board_builds_once(self, fresh_default, disjoint):
        b = Board.from_rows([[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12], [13, 14, 0, 15]])
        assert solve(b, "disjoint-databases").length == 1
        assert solve(b, "disjoint-databases").length == 1
        assert disjoint_databases._default is disjoint
        assert len(fresh_default) == 1

    def test_corrupt_cache_is_rebuilt(self, fresh_default, disjoint, tmp_path, caplog):
        path = tmp_path / "pdb.npz"
        path.write_bytes(b"PK\x03\x04" + bytes(40))
        assert default_databases(cache_path=path) is disjoint
        assert len(fresh_default) == 1
        assert "ignoring pattern database cache" in caplog.text
        # the rebuilt tables replaced the bad file
        assert [db.group for db in load_databases(path)] == [db.group for db in disjoint.databases]

    def test_valid_cache_is_loaded(self, fresh_default, disjoint, tmp_path):
        path = tmp_path / "pdb.npz"
        disjoint.save(path)
        dd = default_databases(cache_path=path)
        assert fresh_default == []
        assert dd.partition == disjoint.partition
