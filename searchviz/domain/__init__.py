"""Framework-agnostic search engine: problem model, algorithms and results."""

from .engine import ALGORITHMS, UnsupportedAlgorithmError, get_algorithm, parse_algorithm, run_algorithm
from .types import (
    ALGORITHM_NAMES,
    AlgorithmId,
    CellCoord,
    GraphEdge,
    GraphNode,
    GraphProblem,
    GridCell,
    GridProblem,
    Problem,
    SearchConfig,
    SearchResult,
    SearchStep,
    goal_id,
    grid_cell_to_id,
    id_to_grid_cell,
    start_id,
)
from .validation import InvalidProblemError, validate_problem

__all__ = [
    "ALGORITHMS",
    "ALGORITHM_NAMES",
    "AlgorithmId",
    "CellCoord",
    "GraphEdge",
    "GraphNode",
    "GraphProblem",
    "GridCell",
    "GridProblem",
    "InvalidProblemError",
    "Problem",
    "SearchConfig",
    "SearchResult",
    "SearchStep",
    "UnsupportedAlgorithmError",
    "get_algorithm",
    "goal_id",
    "grid_cell_to_id",
    "id_to_grid_cell",
    "parse_algorithm",
    "run_algorithm",
    "start_id",
    "validate_problem",
]
