"""Problem builders and brute-force oracles shared by the tests."""

import math

from searchviz.domain.neighbors import get_neighbors
from searchviz.domain.types import GraphEdge, GraphNode, GraphProblem, goal_id, start_id


def make_graph(positions, edges, start, goal, directed=False):
    """Build a graph problem from {id: (x, y)} and [(source, target, weight)]."""
    nodes = tuple(
        GraphNode(id=node_id, x=x, y=y, is_start=node_id == start, is_goal=node_id == goal)
        for node_id, (x, y) in positions.items()
    )
    return GraphProblem(
        nodes=nodes,
        edges=tuple(GraphEdge(source=a, target=b, weight=w) for a, b, w in edges),
        start_node_id=start,
        goal_node_id=goal,
        is_directed=directed,
    )


def brute_force_best(problem):
    """
    Cheapest cost and fewest moves over every simple start-goal path.
    Returns (math.inf, math.inf) if the goal is unreachable. Small problems only.
    """
    start, goal = start_id(problem), goal_id(problem)
    best_cost, best_moves = math.inf, math.inf

    stack = [(start, (start,), 0.0)]
    while stack:
        node, path, cost = stack.pop()
        if node == goal:
            best_cost = min(best_cost, cost)
            best_moves = min(best_moves, len(path) - 1)
            continue
        for neighbor_id, move_cost in get_neighbors(problem, node):
            if neighbor_id not in path:
                stack.append((neighbor_id, path + (neighbor_id,), cost + move_cost))

    return best_cost, best_moves


def reachable_count(problem):
    """Number of nodes reachable from the start, start included."""
    seen = {start_id(problem)}
    stack = [start_id(problem)]
    while stack:
        node = stack.pop()
        for neighbor_id, _ in get_neighbors(problem, node):
            if neighbor_id not in seen:
                seen.add(neighbor_id)
                stack.append(neighbor_id)
    return len(seen)
