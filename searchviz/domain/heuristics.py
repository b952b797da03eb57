"""Heuristic functions guiding the informed and local search algorithms."""

import math
from typing import Optional

from .types import GraphProblem, GridProblem, Problem, SearchConfig, id_to_grid_cell

_DEFAULT_CONFIG = SearchConfig()


def manhattan_distance(node_id: str, goal_id: str) -> float:
    """
    Manhattan (L1) distance between two grid ids.
    Exact lower bound for 4-directional unit movement; for 8-directional
    movement it can overestimate, so A* and IDA* lose their optimality
    guarantee there.
    """
    current = id_to_grid_cell(node_id)
    goal = id_to_grid_cell(goal_id)
    if current is None or goal is None:
        return 0.0
    return float(abs(current[0] - goal[0]) + abs(current[1] - goal[1]))


def scaled_euclidean_distance(node_id: str, goal_id: str, problem: GraphProblem,
                              scale: float) -> float:
    """
    Euclidean distance between two graph node positions divided by scale.
    A guidance estimate only; edge weights are unrelated to layout, so it is
    not admissible in general.
    """
    current = problem.get_node(node_id)
    goal = problem.get_node(goal_id)
    if current is None or goal is None:
        return 0.0
    dx = current.x - goal.x
    dy = current.y - goal.y
    return math.sqrt(dx * dx + dy * dy) / scale


def heuristic(node_id: str, goal_id: str, problem: Problem,
              config: Optional[SearchConfig] = None) -> float:
    """Estimate the remaining cost from node_id to goal_id."""
    if isinstance(problem, GridProblem):
        return manhattan_distance(node_id, goal_id)
    if isinstance(problem, GraphProblem):
        scale = (config or _DEFAULT_CONFIG).graph_heuristic_scale
        return scaled_euclidean_distance(node_id, goal_id, problem, scale)
    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


def is_admissible_for(problem: Problem) -> bool:
    """
    Check if the heuristic is known to be admissible for the problem.
    Only 4-directional grids qualify; weights >= 1 keep Manhattan a lower bound.
    """
    if isinstance(problem, GridProblem):
        return not problem.allow_diagonal
    return False
