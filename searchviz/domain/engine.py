"""Algorithm dispatch: the engine's single entry point."""

import logging
from typing import Callable, Dict, Optional, Union

from .informed import astar_search, greedy_best_first_search, ida_star_search
from .local import beam_search, hill_climbing_search
from .types import AlgorithmId, Problem, SearchConfig, SearchResult
from .uninformed import breadth_first_search, depth_first_search, uniform_cost_search

logger = logging.getLogger(__name__)

SearchFunction = Callable[[Problem, SearchConfig], SearchResult]


class UnsupportedAlgorithmError(ValueError):
    """Raised when an algorithm selector is not one of the supported ids."""

    def __init__(self, algorithm: object):
        self.algorithm = algorithm
        super().__init__(f"Unsupported algorithm: {algorithm!r}")


# Mapping from algorithm ids to implementations
ALGORITHMS: Dict[AlgorithmId, SearchFunction] = {
    AlgorithmId.BFS: breadth_first_search,
    AlgorithmId.DFS: depth_first_search,
    AlgorithmId.UCS: uniform_cost_search,
    AlgorithmId.GREEDY: greedy_best_first_search,
    AlgorithmId.ASTAR: astar_search,
    AlgorithmId.HILL_CLIMBING: hill_climbing_search,
    AlgorithmId.BEAM_SEARCH: beam_search,
    AlgorithmId.IDA_STAR: ida_star_search,
}


def parse_algorithm(algorithm: Union[AlgorithmId, str]) -> AlgorithmId:
    """
    Coerce a selector to an AlgorithmId.
    Raises UnsupportedAlgorithmError for anything outside the closed set.
    """
    if isinstance(algorithm, AlgorithmId):
        return algorithm
    try:
        return AlgorithmId(algorithm)
    except ValueError:
        raise UnsupportedAlgorithmError(algorithm) from None


def get_algorithm(algorithm: Union[AlgorithmId, str]) -> SearchFunction:
    """Get the search function for an algorithm id."""
    return ALGORITHMS[parse_algorithm(algorithm)]


def run_algorithm(algorithm: Union[AlgorithmId, str], problem: Problem,
                  config: Optional[SearchConfig] = None) -> SearchResult:
    """
    Run one algorithm against one problem to completion.

    Args:
        algorithm: Algorithm selector (AlgorithmId or its string value)
        problem: Validated grid or graph problem, treated as read-only
        config: Engine constants, defaults to SearchConfig()

    Returns:
        SearchResult; an unreachable goal is reported with success=False

    Raises:
        UnsupportedAlgorithmError: If the selector is unknown
    """
    algorithm_id = parse_algorithm(algorithm)
    search = ALGORITHMS[algorithm_id]
    logger.debug("Running %s on %s problem", algorithm_id.value, problem.type)
    return search(problem, config or SearchConfig())
