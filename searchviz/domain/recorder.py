"""Per-run search state and step snapshot recording."""

import time
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional

from .heuristics import heuristic
from .types import Problem, SearchConfig, SearchStep, goal_id, start_id


class SearchContext:
    """
    Working state owned by one algorithm run.

    Holds the visited set, parent map, g/h/f maps and the recorded steps.
    Nothing outside the running algorithm mutates it; recorded steps are
    independent copies taken through snapshot().
    """

    def __init__(self, problem: Problem, config: SearchConfig):
        self.problem = problem
        self.config = config
        self.start_id = start_id(problem)
        self.goal_id = goal_id(problem)

        self.parent_map: Dict[str, str] = {}
        self.g_values: Dict[str, float] = {}
        self.h_values: Dict[str, float] = {}
        self.f_values: Dict[str, float] = {}
        self._visited: Dict[str, None] = {}  # insertion-ordered set

        self.steps: List[SearchStep] = []
        self.started_at = time.perf_counter()

    # Visited set

    def visit(self, node_id: str):
        """Mark a node as expanded."""
        self._visited[node_id] = None

    def is_visited(self, node_id: str) -> bool:
        return node_id in self._visited

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    @property
    def visited_ids(self) -> List[str]:
        return list(self._visited)

    # Heuristic values

    def heuristic(self, node_id: str) -> float:
        """Heuristic estimate from node_id to the goal, recorded in h_values."""
        h = heuristic(node_id, self.goal_id, self.problem, self.config)
        self.h_values[node_id] = h
        return h

    # Step recording

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def snapshot(self, current_node: str, frontier: Iterable[str],
                 is_complete: bool = False, found_goal: bool = False,
                 path: Optional[Iterable[str]] = None,
                 f_values: Optional[Dict[str, float]] = None) -> SearchStep:
        """
        Record an immutable copy of the current state.
        f_values overrides the recorded f map (Greedy and local search show h as f).
        """
        step = SearchStep(
            step_number=len(self.steps),
            current_node=current_node,
            frontier=tuple(frontier),
            visited=tuple(self._visited),
            parent_map=MappingProxyType(dict(self.parent_map)),
            g_values=MappingProxyType(dict(self.g_values)),
            h_values=MappingProxyType(dict(self.h_values)),
            f_values=MappingProxyType(dict(self.f_values if f_values is None else f_values)),
            is_complete=is_complete,
            found_goal=found_goal,
            path=tuple(path) if path is not None else None,
        )
        self.steps.append(step)
        return step

    @property
    def elapsed_ms(self) -> float:
        """Wall-clock time since the context was created."""
        return (time.perf_counter() - self.started_at) * 1000.0
