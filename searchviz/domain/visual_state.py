"""Derivation of per-node render states from recorded search steps."""

from typing import Collection, Dict, FrozenSet, Optional, Set, Tuple

from .types import GraphProblem, GridProblem, NodeState, Problem, SearchStep, goal_id, start_id

_EMPTY: FrozenSet[str] = frozenset()


def _classify(node_id: str, problem: Problem, current: Optional[str],
              path: Collection[str], frontier: Collection[str],
              visited: Collection[str]) -> NodeState:
    """
    Static roles win over search progress: obstacle, start and goal first,
    then path, current, frontier and visited.
    """
    if isinstance(problem, GridProblem):
        cell = problem.get_cell_by_id(node_id)
        if cell is not None and cell.is_obstacle:
            return "obstacle"
    if node_id == start_id(problem):
        return "start"
    if node_id == goal_id(problem):
        return "goal"
    if node_id in path:
        return "path"
    if node_id == current:
        return "current"
    if node_id in frontier:
        return "frontier"
    if node_id in visited:
        return "visited"
    return "unvisited"


def node_state(node_id: str, problem: Problem, step: Optional[SearchStep]) -> NodeState:
    """Visual state of one node at one step (None means before any run)."""
    if step is None:
        return _classify(node_id, problem, None, _EMPTY, _EMPTY, _EMPTY)
    return _classify(node_id, problem, step.current_node, step.path or (),
                     step.frontier, step.visited)


def derive_node_states(problem: Problem,
                       step: Optional[SearchStep] = None) -> Dict[str, NodeState]:
    """Map every node id of the problem to its visual state at step."""
    if not isinstance(problem, (GridProblem, GraphProblem)):
        raise TypeError(f"Unsupported problem type: {type(problem).__name__}")

    if step is None:
        current, path, frontier, visited = None, _EMPTY, _EMPTY, _EMPTY
    else:
        # Set views keep lookups constant-time on large grids
        current = step.current_node
        path = frozenset(step.path or ())
        frontier = frozenset(step.frontier)
        visited = frozenset(step.visited)

    return {
        node_id: _classify(node_id, problem, current, path, frontier, visited)
        for node_id in problem.node_ids
    }


def path_edges(step: Optional[SearchStep]) -> FrozenSet[Tuple[str, str]]:
    """Edges along the step's path, each in both orientations."""
    if step is None or not step.path:
        return frozenset()
    edges: Set[Tuple[str, str]] = set()
    for source, target in zip(step.path, step.path[1:]):
        edges.add((source, target))
        edges.add((target, source))
    return frozenset(edges)
