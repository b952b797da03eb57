"""Validation of problem invariants before a problem reaches the engine."""

import math
from typing import List

from .types import GraphProblem, GridProblem, Problem

MIN_GRID_SIZE = 3
MAX_GRID_SIZE = 50


class InvalidProblemError(ValueError):
    """Raised when a problem violates its structural invariants."""

    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__("Invalid problem: " + "; ".join(self.issues))


def problem_issues(problem: Problem) -> List[str]:
    """
    Collect every invariant violation of a problem.
    Returns an empty list if the problem is well formed.
    """
    if isinstance(problem, GridProblem):
        return _grid_issues(problem)
    if isinstance(problem, GraphProblem):
        return _graph_issues(problem)
    return [f"unsupported problem type: {type(problem).__name__}"]


def validate_problem(problem: Problem) -> Problem:
    """
    Check a problem and return it unchanged.
    Raises InvalidProblemError listing all violations.
    """
    issues = problem_issues(problem)
    if issues:
        raise InvalidProblemError(issues)
    return problem


def _grid_issues(problem: GridProblem) -> List[str]:
    issues = []

    for name, size in (("rows", problem.rows), ("cols", problem.cols)):
        if not MIN_GRID_SIZE <= size <= MAX_GRID_SIZE:
            issues.append(f"{name} must be in [{MIN_GRID_SIZE}, {MAX_GRID_SIZE}], got {size}")

    # Every coordinate exactly once
    seen = set()
    for cell in problem.cells:
        coord = (cell.row, cell.col)
        if not problem.is_valid_coord(cell.row, cell.col):
            issues.append(f"cell {coord} is out of bounds")
        elif coord in seen:
            issues.append(f"cell {coord} is listed more than once")
        seen.add(coord)
        if not math.isfinite(cell.weight):
            issues.append(f"cell {coord} has non-finite weight {cell.weight}")
        elif cell.weight < 1:
            issues.append(f"cell {coord} has weight {cell.weight} < 1")
        if cell.is_obstacle and (cell.is_start or cell.is_goal):
            issues.append(f"cell {coord} is both an obstacle and start/goal")

    expected = {(r, c) for r in range(problem.rows) for c in range(problem.cols)}
    missing = len(expected - seen)
    if missing:
        issues.append(f"{missing} cell(s) missing from the grid enumeration")

    starts = [cell for cell in problem.cells if cell.is_start]
    goals = [cell for cell in problem.cells if cell.is_goal]
    if len(starts) > 1:
        issues.append(f"grid has {len(starts)} start cells")
    if len(goals) > 1:
        issues.append(f"grid has {len(goals)} goal cells")

    for role, coord, flagged in (("start", problem.start, starts), ("goal", problem.goal, goals)):
        cell = problem.get_cell(coord.row, coord.col)
        if cell is None:
            issues.append(f"{role} {(coord.row, coord.col)} is not a grid cell")
        elif cell.is_obstacle:
            issues.append(f"{role} {(coord.row, coord.col)} is an obstacle")
        if len(flagged) == 1 and (flagged[0].row, flagged[0].col) != (coord.row, coord.col):
            issues.append(f"{role} flag is on {(flagged[0].row, flagged[0].col)} "
                          f"but {role} is {(coord.row, coord.col)}")

    return issues


def _graph_issues(problem: GraphProblem) -> List[str]:
    issues = []

    node_ids = set()
    for node in problem.nodes:
        if node.id in node_ids:
            issues.append(f"node id {node.id!r} is not unique")
        node_ids.add(node.id)

    for edge in problem.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                issues.append(f"edge {edge.source!r}->{edge.target!r} references "
                              f"unknown node {endpoint!r}")
        if not math.isfinite(edge.weight):
            issues.append(f"edge {edge.source!r}->{edge.target!r} has non-finite weight {edge.weight}")
        elif edge.weight < 1:
            issues.append(f"edge {edge.source!r}->{edge.target!r} has weight {edge.weight} < 1")

    if problem.start_node_id not in node_ids:
        issues.append(f"start node {problem.start_node_id!r} does not exist")
    if problem.goal_node_id not in node_ids:
        issues.append(f"goal node {problem.goal_node_id!r} does not exist")

    return issues
