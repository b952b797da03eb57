"""Tests for path reconstruction, cost and validation."""

import pytest

from searchviz.domain.path import calculate_path_cost, reconstruct_path, validate_path


class TestReconstructPath:

    def test_follows_parents_back_to_start(self):
        parents = {"b": "a", "c": "b", "d": "c"}
        assert reconstruct_path(parents, "d") == ["a", "b", "c", "d"]

    def test_goal_without_parent(self):
        assert reconstruct_path({}, "a") == ["a"]

    def test_cycle_in_parents_terminates(self):
        parents = {"a": "b", "b": "a"}
        assert reconstruct_path(parents, "a") == ["b", "a"]


class TestPathCost:

    def test_grid_cost(self, open_grid):
        path = ["0-0", "0-1", "0-2", "1-2", "2-2"]
        assert calculate_path_cost(path, open_grid) == pytest.approx(4.0)

    def test_graph_cost(self, triangle_graph):
        assert calculate_path_cost(["A", "B", "C"], triangle_graph) == pytest.approx(6.0)

    def test_single_node_costs_nothing(self, open_grid):
        assert calculate_path_cost(["0-0"], open_grid) == 0.0

    def test_invalid_move_raises(self, open_grid):
        with pytest.raises(ValueError):
            calculate_path_cost(["0-0", "2-2"], open_grid)


class TestValidatePath:

    def test_valid_path(self, open_grid):
        assert validate_path(["0-0", "1-0", "2-0", "2-1", "2-2"], open_grid, "0-0", "2-2")

    def test_wrong_endpoints(self, open_grid):
        assert not validate_path(["0-1", "0-2", "1-2", "2-2"], open_grid, "0-0", "2-2")
        assert not validate_path([], open_grid, "0-0", "2-2")

    def test_repeated_node(self, open_grid):
        path = ["0-0", "0-1", "0-0", "1-0", "2-0", "2-1", "2-2"]
        assert not validate_path(path, open_grid, "0-0", "2-2")

    def test_disconnected_step(self, open_grid):
        assert not validate_path(["0-0", "1-1", "2-2"], open_grid, "0-0", "2-2")
