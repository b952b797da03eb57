"""Tests for heuristic functions."""

import pytest

from searchviz.domain.heuristics import (
    heuristic, is_admissible_for, manhattan_distance, scaled_euclidean_distance,
)
from searchviz.domain.types import SearchConfig


class TestHeuristics:

    def test_manhattan_distance(self):
        assert manhattan_distance("0-0", "2-2") == 4.0
        assert manhattan_distance("3-1", "0-5") == 7.0
        assert manhattan_distance("1-1", "1-1") == 0.0

    def test_manhattan_with_malformed_id_is_zero(self):
        assert manhattan_distance("x", "2-2") == 0.0

    def test_grid_dispatch(self, open_grid):
        assert heuristic("0-0", "2-2", open_grid) == 4.0

    def test_graph_uses_scaled_euclidean(self, triangle_graph):
        # A (0,0) to C (100,100)
        expected = (100 ** 2 + 100 ** 2) ** 0.5 / 50
        assert heuristic("A", "C", triangle_graph) == pytest.approx(expected)

    def test_graph_scale_is_configurable(self, triangle_graph):
        config = SearchConfig(graph_heuristic_scale=100.0)
        assert heuristic("A", "B", triangle_graph, config) == pytest.approx(1.0)

    def test_unknown_graph_node_is_zero(self, triangle_graph):
        assert scaled_euclidean_distance("Z", "C", triangle_graph, 50.0) == 0.0

    def test_admissibility(self, open_grid, diagonal_grid, triangle_graph):
        assert is_admissible_for(open_grid)
        assert not is_admissible_for(diagonal_grid)
        assert not is_admissible_for(triangle_graph)

    def test_unsupported_problem_type(self):
        with pytest.raises(TypeError):
            heuristic("a", "b", object())
