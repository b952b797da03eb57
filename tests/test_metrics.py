"""Tests for run metrics and algorithm comparison."""

import pytest

from searchviz.domain.engine import run_algorithm
from searchviz.domain.metrics import (
    best_path_cost, compare_algorithms, format_comparison_table, metrics_from_result,
)
from searchviz.domain.types import ALGORITHM_NAMES, AlgorithmId


class TestCompareAlgorithms:

    def test_runs_every_algorithm_by_default(self, open_grid):
        report = compare_algorithms(open_grid)
        assert [r.algorithm for r in report.results] == list(AlgorithmId)
        assert len(report.metrics) == len(report.results)
        assert report.best_cost == pytest.approx(4.0)

    def test_optimal_flags(self, triangle_graph):
        report = compare_algorithms(triangle_graph, ["bfs", "ucs", "astar"])
        flags = {m.algorithm: m.optimal for m in report.metrics}
        assert flags[AlgorithmId.UCS] is True
        assert flags[AlgorithmId.ASTAR] is True
        # BFS takes the direct A-C edge with cost 10
        assert flags[AlgorithmId.BFS] is False

    def test_result_for(self, open_grid):
        report = compare_algorithms(open_grid, [AlgorithmId.DFS])
        assert report.result_for(AlgorithmId.DFS) is report.results[0]
        assert report.result_for(AlgorithmId.BFS) is None

    def test_unsolvable_problem(self, walled_grid):
        report = compare_algorithms(walled_grid, [AlgorithmId.BFS, AlgorithmId.ASTAR])
        assert report.best_cost is None
        assert all(m.optimal is None for m in report.metrics)


class TestMetricsFromResult:

    def test_without_reference_cost(self, open_grid):
        result = run_algorithm(AlgorithmId.BFS, open_grid)
        metrics = metrics_from_result(result)
        assert metrics.optimal is None
        assert metrics.nodes_visited == result.nodes_visited
        assert metrics.path_length == 4

    def test_failed_run_is_not_optimal(self, walled_grid):
        result = run_algorithm(AlgorithmId.BFS, walled_grid)
        assert metrics_from_result(result, best_cost=4.0).optimal is False

    def test_best_path_cost_ignores_failures(self, open_grid, walled_grid):
        results = [run_algorithm(AlgorithmId.BFS, walled_grid),
                   run_algorithm(AlgorithmId.BFS, open_grid)]
        assert best_path_cost(results) == pytest.approx(4.0)
        assert best_path_cost([]) is None


class TestFormatComparisonTable:

    def test_contains_every_algorithm(self, open_grid):
        table = format_comparison_table(compare_algorithms(open_grid))
        lines = table.splitlines()
        assert lines[0].startswith("Algorithm")
        assert len(lines) == 2 + len(AlgorithmId)
        for name in ALGORITHM_NAMES.values():
            assert name in table

    def test_notes_inadmissible_heuristic(self, open_grid, diagonal_grid, triangle_graph):
        assert compare_algorithms(open_grid).heuristic_admissible
        for problem in (diagonal_grid, triangle_graph):
            report = compare_algorithms(problem, [AlgorithmId.ASTAR])
            assert not report.heuristic_admissible
            assert format_comparison_table(report).splitlines()[-1].startswith("Note:")
