"""Manhattan distance heuristic."""

import pytest

from puzzle15.domains.board import Board
from puzzle15.domains.generator import random_board, scramble
from puzzle15.heuristics.base import Heuristic
from puzzle15.heuristics.manhattan import ManhattanDistance, manhattan


class TestManhattan:
    def test_goal_is_zero(self, goal):
        assert manhattan(goal) == 0

    def test_one_move(self):
        b = Board.from_rows([[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12], [13, 14, 0, 15]])
        assert manhattan(b) == 1

    def test_known_value(self):
        b = Board.from_rows([[0, 2, 3, 4], [1, 6, 7, 8], [5, 10, 11, 12], [9, 13, 14, 15]])
        assert manhattan(b) == 6

    def test_far_corner(self):
        # 15 and 1 swapped corners relative to blank position
        b = Board.from_rows([[15, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12], [13, 14, 1, 0]])
        # 1: (3,2) -> (0,0) = 5 ; 15: (0,0) -> (3,2) = 5
        assert manhattan(b) == 10

    def test_interface(self):
        h = ManhattanDistance()
        assert isinstance(h, Heuristic)
        assert h.name == "manhattan-distance"
        assert h.estimate(scramble(10, 3)) == manhattan(scramble(10, 3))

    @pytest.mark.parametrize("seed", range(10))
    def test_consistent(self, seed):
        b = random_board(seed)
        h = manhattan(b)
        for _, b2 in b.successors():
            assert abs(manhattan(b2) - h) == 1

    @pytest.mark.parametrize("seed", range(10))
    def test_bounded_by_scramble_depth(self, seed):
        assert manhattan(scramble(12, seed)) <= 12
