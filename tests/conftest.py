"""Shared fixtures. Pattern databases take seconds to build, so they are built once per session."""

import pytest

from puzzle15.domains.board import Board
from puzzle15.heuristics.disjoint_databases import default_databases


@pytest.fixture(scope="session")
def disjoint():
    return default_databases()


@pytest.fixture
def goal():
    return Board.goal()
