"""Packaging of a finished run into a SearchResult."""

import logging
from typing import Dict, Iterable, Optional, Sequence

from .path import calculate_path_cost
from .recorder import SearchContext
from .types import AlgorithmId, SearchResult

logger = logging.getLogger(__name__)


def estimate_memory_kb(node_count: int, bytes_per_node: int) -> int:
    """
    Rough memory footprint of a run.
    A proxy proportional to the number of visited nodes, not a measurement.
    """
    return int(node_count * bytes_per_node / 1024 + 0.5)


def assemble_result(algorithm: AlgorithmId, context: SearchContext,
                    path: Optional[Sequence[str]] = None,
                    path_cost: Optional[float] = None,
                    nodes_visited: Optional[int] = None,
                    bytes_per_node: Optional[int] = None) -> SearchResult:
    """
    Build the immutable result record for a run.

    Args:
        algorithm: Algorithm that produced the trace
        context: Run state holding the recorded steps and visited set
        path: Final path from start to goal, None on failure
        path_cost: Cost of the final path
        nodes_visited: Overrides the visited set size
        bytes_per_node: Overrides config.memory_bytes_per_node

    Returns:
        SearchResult with success derived from the presence of a path
    """
    if nodes_visited is None:
        nodes_visited = context.visited_count
    if bytes_per_node is None:
        bytes_per_node = context.config.memory_bytes_per_node

    success = path is not None
    result = SearchResult(
        algorithm=algorithm,
        problem=context.problem,
        steps=tuple(context.steps),
        nodes_visited=nodes_visited,
        execution_time_ms=context.elapsed_ms,
        memory_usage_kb=estimate_memory_kb(nodes_visited, bytes_per_node),
        success=success,
        final_path=tuple(path) if success else None,
        path_cost=path_cost if success else None,
    )

    logger.debug(
        "%s finished: success=%s steps=%d visited=%d cost=%s time=%.2fms",
        algorithm.value, success, len(result.steps), nodes_visited,
        result.path_cost, result.execution_time_ms,
    )
    return result


def finish_found(algorithm: AlgorithmId, context: SearchContext, current: str,
                 frontier: Iterable[str], path: Sequence[str],
                 path_cost: Optional[float] = None,
                 f_values: Optional[Dict[str, float]] = None) -> SearchResult:
    """
    Record the terminal success step and assemble the result.
    When path_cost is None it is recomputed by summing moves along the path.
    """
    context.snapshot(current, frontier, is_complete=True, found_goal=True,
                     path=path, f_values=f_values)
    if path_cost is None:
        path_cost = calculate_path_cost(path, context.problem, context.config)
    return assemble_result(algorithm, context, path=path, path_cost=path_cost)
