"""Local search algorithms: Hill Climbing and Beam Search."""

from typing import Dict, List, Optional, Tuple

from .neighbors import get_neighbors
from .path import reconstruct_path
from .recorder import SearchContext
from .results import assemble_result, finish_found
from .types import AlgorithmId, Problem, SearchConfig, SearchResult


def hill_climbing_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Steepest-ascent hill climbing on the heuristic.

    Moves to the unvisited neighbor with the strictly lowest h, provided it
    improves on the current h. Stops without a path on a plateau or local
    minimum.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id

    current = start
    context.visit(start)
    context.heuristic(start)
    context.g_values[start] = 0.0

    context.snapshot(start, [], f_values=context.h_values)

    while current != goal:
        best_neighbor: Optional[str] = None
        best_h = context.h_values[current]
        current_g = context.g_values.get(current, 0.0)

        for neighbor_id, move_cost in get_neighbors(problem, current, config):
            if context.is_visited(neighbor_id):
                continue
            h = context.heuristic(neighbor_id)
            context.g_values[neighbor_id] = current_g + move_cost
            if h < best_h:
                best_h = h
                best_neighbor = neighbor_id

        if best_neighbor is None:
            context.snapshot(current, [], is_complete=True, f_values=context.h_values)
            return assemble_result(AlgorithmId.HILL_CLIMBING, context)

        context.parent_map[best_neighbor] = current
        current = best_neighbor
        context.visit(current)

        if current != goal:
            context.snapshot(current, [], f_values=context.h_values)

    path = reconstruct_path(context.parent_map, goal)
    return finish_found(AlgorithmId.HILL_CLIMBING, context, current, [], path,
                        f_values=context.h_values)


def beam_search(problem: Problem, config: SearchConfig) -> SearchResult:
    """
    Beam search keeping the config.beam_width best candidates by h.

    Every round expands the whole beam, pools the unvisited neighbors of all
    members and keeps the lowest-h candidates across the pool, so a single
    promising member may fill the entire next beam.
    """
    context = SearchContext(problem, config)
    start, goal = context.start_id, context.goal_id
    width = config.beam_width

    beam: List[str] = [start]
    context.visit(start)
    context.heuristic(start)
    context.g_values[start] = 0.0

    context.snapshot(start, beam, f_values=context.h_values)

    while beam:
        # Candidates keyed by id so a node reached from two members is pooled once
        candidates: Dict[str, Tuple[float, str]] = {}

        for current in beam:
            if current == goal:
                path = reconstruct_path(context.parent_map, goal)
                return finish_found(AlgorithmId.BEAM_SEARCH, context, current, beam, path,
                                    f_values=context.h_values)

            current_g = context.g_values.get(current, 0.0)
            for neighbor_id, move_cost in get_neighbors(problem, current, config):
                if context.is_visited(neighbor_id) or neighbor_id in candidates:
                    continue
                h = context.heuristic(neighbor_id)
                context.g_values[neighbor_id] = current_g + move_cost
                candidates[neighbor_id] = (h, current)

        if not candidates:
            context.snapshot(beam[0], [], is_complete=True, f_values=context.h_values)
            return assemble_result(AlgorithmId.BEAM_SEARCH, context)

        # Stable sort keeps discovery order among equal h
        ranked = sorted(candidates.items(), key=lambda item: item[1][0])[:width]
        beam = [node_id for node_id, _ in ranked]
        for node_id, (_, parent_id) in ranked:
            context.visit(node_id)
            context.parent_map[node_id] = parent_id

        context.snapshot(beam[0], beam, f_values=context.h_values)

    return assemble_result(AlgorithmId.BEAM_SEARCH, context)
