"""Uninformed search algorithms: BFS, DFS and Uniform Cost Search."""

from collections import deque
from typing import Deque, List, Set

from .neighbors import get_neighbors
from .path import reconstruct_path
from .priority_queue import PriorityQueue
from .recorder import SearchContext
from .results import assemble_result, finish_found
from .types import AlgorithmId, Problem, SearchConfig, SearchResult


def breadth_first_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Breadth-first search with a FIFO queue.
    Nodes are queued once; the parent is recorded when a node is first queued.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    queue: Deque[str] = deque([start])
    queued: Set[str] = {start}

    context.snapshot(start, queue)

    while queue:
        current = queue.popleft()
        queued.discard(current)

        if context.is_visited(current):
            continue
        context.visit(current)

        if current == goal:
            path = reconstruct_path(context.parent_map, goal)
            return finish_found(AlgorithmId.BFS, context, current, queue, path)

        for neighbor_id, _ in get_neighbors(problem, current, config):
            if not context.is_visited(neighbor_id) and neighbor_id not in queued:
                queue.append(neighbor_id)
                queued.add(neighbor_id)
                context.parent_map[neighbor_id] = current

        context.snapshot(current, queue)

    return assemble_result(AlgorithmId.BFS, context)


def depth_first_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Depth-first search with a LIFO stack.
    Neighbors are pushed in reverse so the first listed neighbor is explored
    first. A node may sit on the stack more than once; its parent is the
    first node that discovered it.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    stack: List[str] = [start]

    context.snapshot(start, stack)

    while stack:
        current = stack.pop()

        if context.is_visited(current):
            continue
        context.visit(current)

        if current == goal:
            path = reconstruct_path(context.parent_map, goal)
            return finish_found(AlgorithmId.DFS, context, current, stack, path)

        for neighbor_id, _ in reversed(get_neighbors(problem, current, config)):
            if not context.is_visited(neighbor_id):
                stack.append(neighbor_id)
                if neighbor_id not in context.parent_map:
                    context.parent_map[neighbor_id] = current

        context.snapshot(current, stack)

    return assemble_result(AlgorithmId.DFS, context)


def uniform_cost_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Uniform cost search ordered by accumulated cost g(n).
    A queued node is re-prioritized whenever a strictly cheaper route is found.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    frontier = PriorityQueue()
    frontier.put(start, 0.0)
    context.g_values[start] = 0.0

    context.snapshot(start, frontier)

    while not frontier.is_empty():
        current, _ = frontier.get()

        if context.is_visited(current):
            continue
        context.visit(current)

        if current == goal:
            path = reconstruct_path(context.parent_map, goal)
            return finish_found(AlgorithmId.UCS, context, current, frontier, path,
                                path_cost=context.g_values[goal])

        current_g = context.g_values[current]
        for neighbor_id, move_cost in get_neighbors(problem, current, config):
            if context.is_visited(neighbor_id):
                continue

            tentative_g = current_g + move_cost
            known_g = context.g_values.get(neighbor_id)
            if known_g is None or tentative_g < known_g:
                context.g_values[neighbor_id] = tentative_g
                context.parent_map[neighbor_id] = current
                frontier.put(neighbor_id, tentative_g)

        context.snapshot(current, frontier)

    return assemble_result(AlgorithmId.UCS, context)
