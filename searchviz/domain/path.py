"""Path reconstruction and validation utilities."""

from typing import Dict, List, Optional, Sequence

from .neighbors import get_step_cost
from .types import Problem, SearchConfig


def reconstruct_path(parent_map: Dict[str, str], goal_id: str) -> List[str]:
    """
    Reconstruct the path from start to goal using parent pointers.
    Walks back from the goal until a node without a parent (the start).
    """
    path = [goal_id]
    seen = {goal_id}
    current = goal_id

    while current in parent_map:
        current = parent_map[current]
        if current in seen:
            # Parent chain loops back on itself
            break
        seen.add(current)
        path.append(current)

    # Reverse to get path from start to goal
    path.reverse()
    return path


def calculate_path_cost(path: Sequence[str], problem: Problem,
                        config: Optional[SearchConfig] = None) -> float:
    """
    Calculate the total cost of a path by summing the cost of each move.
    Raises ValueError if two consecutive nodes are not neighbors.
    """
    total_cost = 0.0
    for i in range(1, len(path)):
        move_cost = get_step_cost(problem, path[i - 1], path[i], config)
        if move_cost is None:
            raise ValueError(f"Invalid move from {path[i - 1]} to {path[i]}")
        total_cost += move_cost
    return total_cost


def validate_path(path: Sequence[str], problem: Problem, start_id: str, goal_id: str,
                  config: Optional[SearchConfig] = None) -> bool:
    """
    Validate that a path is connected, simple, and runs from start to goal.
    Returns True if path is valid.
    """
    if not path:
        return False
    if path[0] != start_id or path[-1] != goal_id:
        return False
    if len(set(path)) != len(path):
        return False

    for i in range(1, len(path)):
        if get_step_cost(problem, path[i - 1], path[i], config) is None:
            return False

    return True
