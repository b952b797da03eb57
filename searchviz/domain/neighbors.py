"""Neighbor generation for grid and graph problems."""

from typing import List, Optional, Tuple

from .types import GraphProblem, GridProblem, Problem, SearchConfig, grid_cell_to_id, id_to_grid_cell

# Fixed direction orders; neighbor order drives tie-breaking in every algorithm.
ORTHOGONAL_DIRECTIONS = [
    (-1, 0),
    (0, -1), (0, 1),
    (1, 0),
]

ALL_DIRECTIONS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]

Neighbor = Tuple[str, float]

_DEFAULT_CONFIG = SearchConfig()


def get_neighbors(problem: Problem, node_id: str,
                  config: Optional[SearchConfig] = None) -> List[Neighbor]:
    """
    Get reachable neighbors of a node with their traversal costs.
    Returns list of (neighbor_id, cost) tuples in a stable order.
    """
    if isinstance(problem, GridProblem):
        return get_grid_neighbors(problem, node_id, config or _DEFAULT_CONFIG)
    if isinstance(problem, GraphProblem):
        return get_graph_neighbors(problem, node_id)
    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


def get_grid_neighbors(problem: GridProblem, node_id: str,
                       config: SearchConfig) -> List[Neighbor]:
    """
    Get passable neighbors of a grid cell.
    Diagonal moves cost config.diagonal_cost, orthogonal moves 1; both are
    multiplied by the weight of the destination cell.
    """
    coord = id_to_grid_cell(node_id)
    if coord is None:
        return []
    row, col = coord

    directions = ALL_DIRECTIONS if problem.allow_diagonal else ORTHOGONAL_DIRECTIONS
    neighbors = []

    for dr, dc in directions:
        new_row, new_col = row + dr, col + dc

        # Check bounds
        if not problem.is_valid_coord(new_row, new_col):
            continue

        cell = problem.get_cell(new_row, new_col)
        if cell is None or not cell.is_passable():
            continue

        base_cost = config.diagonal_cost if abs(dr) + abs(dc) == 2 else 1.0
        neighbors.append((grid_cell_to_id(new_row, new_col), base_cost * cell.weight))

    return neighbors


def get_graph_neighbors(problem: GraphProblem, node_id: str) -> List[Neighbor]:
    """
    Get neighbors of a graph node in edge-list order.
    Undirected edges are followed in both directions.
    """
    neighbors = []
    for edge in problem.edges:
        if edge.source == node_id:
            neighbors.append((edge.target, float(edge.weight)))
        if not problem.is_directed and edge.target == node_id:
            neighbors.append((edge.source, float(edge.weight)))
    return neighbors


def get_step_cost(problem: Problem, from_id: str, to_id: str,
                  config: Optional[SearchConfig] = None) -> Optional[float]:
    """
    Cost of moving directly between two nodes.
    Returns the cheapest matching move, or None if to_id is not a neighbor.
    """
    costs = [cost for neighbor_id, cost in get_neighbors(problem, from_id, config)
             if neighbor_id == to_id]
    if not costs:
        return None
    return min(costs)
