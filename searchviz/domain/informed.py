"""Informed search algorithms: Greedy Best-First, A* and IDA*."""

import math
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, Set, Tuple

from .neighbors import get_neighbors
from .path import reconstruct_path
from .priority_queue import PriorityQueue
from .recorder import SearchContext
from .results import assemble_result, finish_found
from .types import AlgorithmId, GraphProblem, GridProblem, Problem, SearchConfig, SearchResult


def greedy_best_first_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Greedy best-first search ordered by the heuristic alone.
    g is tracked as an estimate for display; the path cost is recomputed
    from the path itself.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    frontier = PriorityQueue()
    frontier.put(start, context.heuristic(start))
    context.g_values[start] = 0.0

    context.snapshot(start, frontier, f_values=context.h_values)

    while not frontier.is_empty():
        current, _ = frontier.get()

        if context.is_visited(current):
            continue
        context.visit(current)

        if current == goal:
            path = reconstruct_path(context.parent_map, goal)
            return finish_found(AlgorithmId.GREEDY, context, current, frontier, path,
                                f_values=context.h_values)

        current_g = context.g_values.get(current, 0.0)
        for neighbor_id, move_cost in get_neighbors(problem, current, config):
            if context.is_visited(neighbor_id):
                continue

            # Rediscovery reroutes the parent; the queued h is unchanged
            context.g_values[neighbor_id] = current_g + move_cost
            context.parent_map[neighbor_id] = current
            frontier.put(neighbor_id, context.heuristic(neighbor_id))

        context.snapshot(current, frontier, f_values=context.h_values)

    return assemble_result(AlgorithmId.GREEDY, context)


def astar_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    A* search ordered by f(n) = g(n) + h(n).
    Optimal whenever the heuristic is admissible for the problem.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    start_h = context.heuristic(start)
    context.g_values[start] = 0.0
    context.f_values[start] = start_h

    frontier = PriorityQueue()
    frontier.put(start, start_h)

    context.snapshot(start, frontier)

    while not frontier.is_empty():
        # Get the node with lowest f-cost
        current, _ = frontier.get()

        if context.is_visited(current):
            continue
        context.visit(current)

        if current == goal:
            path = reconstruct_path(context.parent_map, goal)
            return finish_found(AlgorithmId.ASTAR, context, current, frontier, path,
                                path_cost=context.g_values[goal])

        current_g = context.g_values[current]
        for neighbor_id, move_cost in get_neighbors(problem, current, config):
            # Skip if already evaluated
            if context.is_visited(neighbor_id):
                continue

            tentative_g = current_g + move_cost
            known_g = context.g_values.get(neighbor_id)

            # Check if this is a better path to the neighbor
            if known_g is None or tentative_g < known_g:
                h_cost = context.heuristic(neighbor_id)
                f_cost = tentative_g + h_cost

                context.g_values[neighbor_id] = tentative_g
                context.f_values[neighbor_id] = f_cost
                context.parent_map[neighbor_id] = current
                frontier.put(neighbor_id, f_cost)

        context.snapshot(current, frontier)

    return assemble_result(AlgorithmId.ASTAR, context)


def ida_star_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Iterative deepening A*.

    Each iteration is a depth-first search that prunes nodes whose f exceeds
    the current bound; the smallest pruned f becomes the next bound. Nodes
    already on the current path are skipped. The search fails when no
    pruned node remains (next bound is infinite).
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    start_h = context.heuristic(start)
    context.g_values[start] = 0.0
    context.f_values[start] = start_h

    bound = start_h
    path = [start]

    context.snapshot(start, path)

    with _recursion_headroom(_node_count(problem)):
        while True:
            found, next_bound = _bounded_search(context, path, {start}, 0.0, bound)

            if found is not None:
                return finish_found(
                    AlgorithmId.IDA_STAR, context, goal, found, found,
                    path_cost=context.g_values[goal],
                )

            if math.isinf(next_bound):
                context.snapshot(start, [], is_complete=True)
                return assemble_result(
                    AlgorithmId.IDA_STAR, context,
                    bytes_per_node=config.ida_memory_bytes_per_node,
                )

            bound = next_bound


def _bounded_search(context: SearchContext, path: List[str], on_path: Set[str],
                    g: float, bound: float) -> Tuple[Optional[List[str]], float]:
    """
    Depth-first search below an f bound from the last node of path.
    Returns (path to goal, f) on success, otherwise (None, smallest f that
    exceeded the bound).
    """
    node = path[-1]
    h = context.heuristic(node)
    f = g + h
    context.g_values[node] = g
    context.f_values[node] = f
    context.visit(node)

    context.snapshot(node, path)

    if f > bound:
        return None, f

    if node == context.goal_id:
        return list(path), f

    minimum = math.inf
    for neighbor_id, move_cost in get_neighbors(context.problem, node, context.config):
        if neighbor_id in on_path:
            continue

        path.append(neighbor_id)
        on_path.add(neighbor_id)
        context.parent_map[neighbor_id] = node

        found, threshold = _bounded_search(context, path, on_path, g + move_cost, bound)
        if found is not None:
            return found, threshold
        minimum = min(minimum, threshold)

        path.pop()
        on_path.discard(neighbor_id)

    return None, minimum


def _node_count(problem: Problem) -> int:
    if isinstance(problem, GridProblem):
        return problem.rows * problem.cols
    if isinstance(problem, GraphProblem):
        return len(problem.nodes)
    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


@contextmanager
def _recursion_headroom(depth: int) -> Iterator[None]:
    """Raise the interpreter recursion limit so a path of depth nodes fits."""
    original = sys.getrecursionlimit()
    required = original + depth + 100
    sys.setrecursionlimit(required)
    try:
        yield
    finally:
        sys.setrecursionlimit(original)
