"""Tests for the search algorithms and the engine entry point."""

import math

import pytest

from searchviz.domain.engine import UnsupportedAlgorithmError, get_algorithm, run_algorithm
from searchviz.domain.path import calculate_path_cost, validate_path
from searchviz.domain.recorder import SearchContext
from searchviz.domain.results import estimate_memory_kb
from searchviz.domain.types import AlgorithmId, SearchConfig, goal_id, start_id
from searchviz.utils.problem_factory import (
    build_grid, generate_random_graph, generate_random_grid,
)

from .helpers import brute_force_best, make_graph, reachable_count

ALL_ALGORITHMS = list(AlgorithmId)
COMPLETE_ALGORITHMS = [
    AlgorithmId.BFS, AlgorithmId.DFS, AlgorithmId.UCS,
    AlgorithmId.GREEDY, AlgorithmId.ASTAR, AlgorithmId.IDA_STAR,
]
LOCAL_ALGORITHMS = [AlgorithmId.HILL_CLIMBING, AlgorithmId.BEAM_SEARCH]


class TestScenarios:
    """End-to-end behaviour on small hand-checked problems."""

    def test_bfs_on_open_grid(self, open_grid):
        result = run_algorithm(AlgorithmId.BFS, open_grid)
        assert result.success
        assert len(result.final_path) == 5
        assert result.path_length == 4
        assert result.path_cost == pytest.approx(4.0)
        assert result.final_path == ("0-0", "0-1", "0-2", "1-2", "2-2")

    def test_astar_uses_diagonals(self, diagonal_grid):
        astar = run_algorithm(AlgorithmId.ASTAR, diagonal_grid)
        bfs = run_algorithm(AlgorithmId.BFS, diagonal_grid)
        assert astar.success
        assert astar.final_path == ("0-0", "1-1", "2-2")
        assert astar.path_cost == pytest.approx(2 * math.sqrt(2))
        assert astar.path_cost <= bfs.path_cost + 1e-9

    def test_ucs_prefers_cheaper_detour(self, triangle_graph):
        result = run_algorithm(AlgorithmId.UCS, triangle_graph)
        assert result.success
        assert result.final_path == ("A", "B", "C")
        assert result.path_cost == pytest.approx(6.0)

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_walled_off_goal_fails(self, walled_grid, algorithm):
        result = run_algorithm(algorithm, walled_grid)
        assert not result.success
        assert result.final_path is None
        assert result.path_cost is None
        assert result.steps
        assert not any(step.found_goal for step in result.steps)

    @pytest.mark.parametrize("algorithm", COMPLETE_ALGORITHMS)
    def test_walled_off_goal_visits_reachable_component(self, walled_grid, algorithm):
        result = run_algorithm(algorithm, walled_grid)
        assert result.nodes_visited == reachable_count(walled_grid) == 6

    @pytest.mark.parametrize("algorithm", LOCAL_ALGORITHMS)
    def test_local_search_stops_inside_reachable_component(self, walled_grid, algorithm):
        result = run_algorithm(algorithm, walled_grid)
        assert 0 < result.nodes_visited <= reachable_count(walled_grid)

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_start_equals_goal_on_grid(self, algorithm):
        grid = build_grid(3, 3, start=(1, 1), goal=(1, 1))
        result = run_algorithm(algorithm, grid)
        assert result.success
        assert result.final_path == ("1-1",)
        assert result.path_cost == 0.0
        assert result.steps[-1].found_goal

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_start_equals_goal_on_graph(self, algorithm):
        graph = make_graph({"A": (0, 0), "B": (10, 0)}, [("A", "B", 1)], start="A", goal="A")
        result = run_algorithm(algorithm, graph)
        assert result.success
        assert result.final_path == ("A",)
        assert result.path_cost == 0.0

    def test_ida_star_on_cyclic_graph_matches_astar(self, cyclic_graph):
        ida = run_algorithm(AlgorithmId.IDA_STAR, cyclic_graph)
        astar = run_algorithm(AlgorithmId.ASTAR, cyclic_graph)
        assert ida.success
        assert ida.path_cost == pytest.approx(astar.path_cost)
        assert ida.path_cost == pytest.approx(4.0)
        assert ida.final_path == ("A", "B", "C")


class TestAlgorithmDetails:

    def test_bfs_first_step_shows_start_in_frontier(self, open_grid):
        first = run_algorithm(AlgorithmId.BFS, open_grid).steps[0]
        assert first.current_node == "0-0"
        assert first.frontier == ("0-0",)
        assert first.visited == ()

    def test_dfs_explores_first_listed_neighbor_first(self, open_grid):
        steps = run_algorithm(AlgorithmId.DFS, open_grid).steps
        assert steps[1].current_node == "0-0"
        assert steps[1].frontier == ("1-0", "0-1")
        assert steps[2].current_node == "0-1"

    def test_greedy_reports_h_as_f(self, open_grid):
        result = run_algorithm(AlgorithmId.GREEDY, open_grid)
        assert result.success
        for step in result.steps:
            assert step.f_values == step.h_values

    def test_greedy_rediscovery_moves_parent(self):
        # N is first queued from S, then found again from Y before it is expanded
        graph = make_graph(
            {"S": (100, 0), "A": (20, 0), "N": (30, 0), "Y": (10, 0), "G": (0, 0)},
            [("S", "A", 1), ("S", "N", 1), ("A", "Y", 1), ("Y", "N", 1), ("N", "G", 1)],
            start="S", goal="G",
        )
        result = run_algorithm(AlgorithmId.GREEDY, graph)
        assert result.final_path == ("S", "A", "Y", "N", "G")
        assert result.path_cost == pytest.approx(4.0)
        assert result.steps[-1].parent_map["N"] == "Y"

    def test_astar_f_is_g_plus_h(self, open_grid):
        result = run_algorithm(AlgorithmId.ASTAR, open_grid)
        final = result.steps[-1]
        for node_id, f in final.f_values.items():
            assert f == pytest.approx(final.g_values[node_id] + final.h_values[node_id])

    def test_hill_climbing_on_open_grid(self, open_grid):
        result = run_algorithm(AlgorithmId.HILL_CLIMBING, open_grid)
        assert result.success
        assert result.final_path == ("0-0", "0-1", "0-2", "1-2", "2-2")
        assert result.path_cost == pytest.approx(4.0)

    def test_hill_climbing_stops_at_local_minimum(self, walled_grid):
        result = run_algorithm(AlgorithmId.HILL_CLIMBING, walled_grid)
        assert not result.success
        assert result.steps[-1].current_node == "0-2"
        assert result.nodes_visited == 3

    def test_beam_never_exceeds_width(self):
        grid = build_grid(6, 6, start=(0, 0), goal=(5, 5), obstacles=[(2, 2), (3, 3)])
        for width in (1, 2, 3):
            result = run_algorithm(AlgorithmId.BEAM_SEARCH, grid, SearchConfig(beam_width=width))
            assert all(len(step.frontier) <= width for step in result.steps)

    def test_beam_pools_candidates_across_members(self, walled_grid):
        result = run_algorithm(AlgorithmId.BEAM_SEARCH, walled_grid)
        beams = [step.frontier for step in result.steps if not step.is_complete]
        assert beams[1] == ("0-1", "1-0")
        # Both survivors of the second round are children of 0-1
        assert beams[2] == ("0-2", "1-1")
        assert result.nodes_visited == 5

    def test_ida_star_final_step_shows_path(self, cyclic_graph):
        final = run_algorithm(AlgorithmId.IDA_STAR, cyclic_graph).steps[-1]
        assert final.found_goal
        assert final.path == ("A", "B", "C")
        assert final.frontier == ("A", "B", "C")

    def test_ida_star_counts_distinct_nodes(self, cyclic_graph):
        result = run_algorithm(AlgorithmId.IDA_STAR, cyclic_graph)
        assert result.total_steps > result.nodes_visited
        assert result.nodes_visited == len(result.steps[-1].visited) == 4

    def test_ida_star_memory_estimate_on_failure(self, walled_grid):
        result = run_algorithm(AlgorithmId.IDA_STAR, walled_grid)
        assert result.memory_usage_kb == int(result.nodes_visited * 50 / 1024 + 0.5)

    def test_memory_estimate(self, open_grid):
        result = run_algorithm(AlgorithmId.BFS, open_grid)
        assert result.memory_usage_kb == int(result.nodes_visited * 100 / 1024 + 0.5)

    def test_memory_estimate_rounds_half_up(self):
        assert estimate_memory_kb(128, 100) == 13
        assert estimate_memory_kb(0, 100) == 0
        assert estimate_memory_kb(10, 100) == 1


class TestProperties:
    """Invariants that hold for every algorithm on every problem."""

    @pytest.fixture
    def problems(self, open_grid, diagonal_grid, walled_grid, triangle_graph, cyclic_graph):
        return [open_grid, diagonal_grid, walled_grid, triangle_graph, cyclic_graph,
                generate_random_grid(6, 6, 0.3, seed=7),
                generate_random_graph(9, extra_edges=5, seed=3)]

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_path_validity(self, problems, algorithm):
        for problem in problems:
            result = run_algorithm(algorithm, problem)
            if result.success:
                assert validate_path(result.final_path, problem, start_id(problem), goal_id(problem))
                assert result.steps[-1].path == result.final_path

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_cost_consistency(self, problems, algorithm):
        for problem in problems:
            result = run_algorithm(algorithm, problem)
            if result.success:
                assert result.path_cost == pytest.approx(
                    calculate_path_cost(result.final_path, problem)
                )

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_visited_grows_monotonically(self, problems, algorithm):
        for problem in problems:
            result = run_algorithm(algorithm, problem)
            sizes = [len(step.visited) for step in result.steps]
            assert sizes == sorted(sizes)
            assert result.nodes_visited == sizes[-1]

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_steps_are_numbered_and_terminated(self, problems, algorithm):
        for problem in problems:
            result = run_algorithm(algorithm, problem)
            assert [step.step_number for step in result.steps] == list(range(len(result.steps)))
            if result.success:
                assert result.steps[-1].is_complete
            assert not any(step.is_complete for step in result.steps[:-1])
            assert result.steps[-1].found_goal == result.success

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_runs_are_deterministic(self, problems, algorithm):
        for problem in problems:
            first = run_algorithm(algorithm, problem)
            second = run_algorithm(algorithm, problem)
            assert first.steps == second.steps
            assert first.final_path == second.final_path
            assert first.path_cost == second.path_cost
            assert first.nodes_visited == second.nodes_visited

    def test_problem_is_not_modified(self, open_grid):
        before = open_grid.cells
        for algorithm in ALL_ALGORITHMS:
            run_algorithm(algorithm, open_grid)
        assert open_grid.cells == before


class TestOptimality:
    """Compare against exhaustive enumeration on problems with at most 10 nodes."""

    @pytest.mark.parametrize("seed", range(6))
    def test_bfs_fewest_moves_on_unit_grids(self, seed):
        grid = generate_random_grid(3, 3, 0.3, seed=seed)
        result = run_algorithm(AlgorithmId.BFS, grid)
        _, best_moves = brute_force_best(grid)
        assert result.success
        assert result.path_length == best_moves

    @pytest.mark.parametrize("seed", range(6))
    @pytest.mark.parametrize("algorithm", [AlgorithmId.UCS, AlgorithmId.ASTAR, AlgorithmId.IDA_STAR])
    def test_cheapest_cost_on_unit_grids(self, seed, algorithm):
        grid = generate_random_grid(3, 3, 0.3, seed=seed)
        result = run_algorithm(algorithm, grid)
        best_cost, _ = brute_force_best(grid)
        assert result.path_cost == pytest.approx(best_cost)

    @pytest.mark.parametrize("seed", range(6))
    @pytest.mark.parametrize("algorithm", [AlgorithmId.UCS, AlgorithmId.ASTAR, AlgorithmId.IDA_STAR])
    def test_cheapest_cost_on_graphs(self, seed, algorithm):
        # Generated weights are ceil(distance / 50), which keeps h admissible
        graph = generate_random_graph(8, extra_edges=6, seed=seed)
        result = run_algorithm(algorithm, graph)
        best_cost, _ = brute_force_best(graph)
        assert result.success
        assert result.path_cost == pytest.approx(best_cost)

    def test_ucs_on_weighted_grid(self):
        grid = build_grid(3, 3, start=(0, 0), goal=(2, 2), weights={(0, 1): 5.0, (1, 1): 5.0})
        result = run_algorithm(AlgorithmId.UCS, grid)
        best_cost, _ = brute_force_best(grid)
        assert result.path_cost == pytest.approx(best_cost)
        assert result.path_cost == pytest.approx(4.0)
        assert result.final_path == ("0-0", "1-0", "2-0", "2-1", "2-2")


class TestSnapshotIsolation:

    def test_snapshot_is_independent_of_live_maps(self, open_grid):
        context = SearchContext(open_grid, SearchConfig())
        context.g_values["0-0"] = 0.0
        context.visit("0-0")
        step = context.snapshot("0-0", ["0-1"])

        context.g_values["0-1"] = 1.0
        context.h_values["0-1"] = 3.0
        context.f_values["0-1"] = 4.0
        context.parent_map["0-1"] = "0-0"
        context.visit("0-1")

        assert step.g_values == {"0-0": 0.0}
        assert step.h_values == {}
        assert step.f_values == {}
        assert step.parent_map == {}
        assert step.visited == ("0-0",)
        assert step.frontier == ("0-1",)

    def test_recorded_maps_are_read_only(self, open_grid):
        result = run_algorithm(AlgorithmId.ASTAR, open_grid)
        step = result.steps[1]
        with pytest.raises(TypeError):
            step.g_values["0-0"] = 999.0
        with pytest.raises(TypeError):
            step.parent_map["0-0"] = "bogus"
        with pytest.raises(TypeError):
            del step.h_values["0-0"]
        assert result.steps[1].g_values["0-0"] == 0.0
        assert "0-0" not in result.steps[1].parent_map

    def test_recorded_steps_differ_over_a_run(self, open_grid):
        steps = run_algorithm(AlgorithmId.ASTAR, open_grid).steps
        assert steps[0].parent_map == {}
        assert steps[-1].parent_map
        assert steps[0].visited == ()


class TestEngine:

    def test_accepts_string_ids(self, open_grid):
        result = run_algorithm("idaStar", open_grid)
        assert result.algorithm is AlgorithmId.IDA_STAR

    def test_every_id_has_an_implementation(self):
        for algorithm in AlgorithmId:
            assert callable(get_algorithm(algorithm))

    def test_unknown_algorithm_is_rejected(self, open_grid):
        with pytest.raises(UnsupportedAlgorithmError) as excinfo:
            run_algorithm("dijkstra", open_grid)
        assert isinstance(excinfo.value, ValueError)
        assert excinfo.value.algorithm == "dijkstra"

    def test_invalid_config_is_rejected(self):
        with pytest.raises(ValueError):
            SearchConfig(beam_width=0)
        with pytest.raises(ValueError):
            SearchConfig(graph_heuristic_scale=0)
