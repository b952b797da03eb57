"""Core type definitions for the search visualizer engine."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Literal, Mapping, Optional, Tuple, Union

# Node states for visualization
NodeState = Literal[
    "unvisited", "frontier", "visited", "current",
    "path", "start", "goal", "obstacle"
]

ProblemType = Literal["grid", "graph"]


class AlgorithmId(str, Enum):
    """Closed set of supported search algorithms."""
    BFS = "bfs"
    DFS = "dfs"
    UCS = "ucs"
    GREEDY = "greedy"
    ASTAR = "astar"
    HILL_CLIMBING = "hillClimbing"
    BEAM_SEARCH = "beamSearch"
    IDA_STAR = "idaStar"


ALGORITHM_NAMES: Dict[AlgorithmId, str] = {
    AlgorithmId.BFS: "Breadth-First Search",
    AlgorithmId.DFS: "Depth-First Search",
    AlgorithmId.UCS: "Uniform Cost Search",
    AlgorithmId.GREEDY: "Greedy Best-First",
    AlgorithmId.ASTAR: "A* Search",
    AlgorithmId.HILL_CLIMBING: "Hill Climbing",
    AlgorithmId.BEAM_SEARCH: "Beam Search",
    AlgorithmId.IDA_STAR: "IDA*",
}


def grid_cell_to_id(row: int, col: int) -> str:
    """Encode a grid coordinate as a node id."""
    return f"{row}-{col}"


def id_to_grid_cell(node_id: str) -> Optional[Tuple[int, int]]:
    """Decode a grid node id back to (row, col), or None if malformed."""
    parts = node_id.split("-")
    if len(parts) != 2:
        return None
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        return None


@dataclass(frozen=True)
class CellCoord:
    """Row/column position on a grid."""
    row: int
    col: int

    @property
    def node_id(self) -> str:
        return grid_cell_to_id(self.row, self.col)


@dataclass(frozen=True)
class GridCell:
    """A single cell of a grid problem."""
    row: int
    col: int
    is_obstacle: bool = False
    is_start: bool = False
    is_goal: bool = False
    weight: float = 1.0

    @property
    def node_id(self) -> str:
        return grid_cell_to_id(self.row, self.col)

    def is_passable(self) -> bool:
        """Check if this cell can be traversed."""
        return not self.is_obstacle


@dataclass(frozen=True)
class GridProblem:
    """Obstacle grid with optional diagonal movement."""
    rows: int
    cols: int
    cells: Tuple[GridCell, ...]
    start: CellCoord
    goal: CellCoord
    allow_diagonal: bool = False
    type: Literal["grid"] = field(default="grid", init=False)
    _lookup: Dict[str, GridCell] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        """Normalize cells to a tuple and index them by node id."""
        cells = tuple(self.cells)
        object.__setattr__(self, "cells", cells)
        object.__setattr__(self, "_lookup", {cell.node_id: cell for cell in cells})

    def get_cell(self, row: int, col: int) -> Optional[GridCell]:
        """Get the cell at (row, col), returns None if out of bounds."""
        return self._lookup.get(grid_cell_to_id(row, col))

    def get_cell_by_id(self, node_id: str) -> Optional[GridCell]:
        return self._lookup.get(node_id)

    def is_valid_coord(self, row: int, col: int) -> bool:
        """Check if coordinate is within grid bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(cell.node_id for cell in self.cells)


@dataclass(frozen=True)
class GraphNode:
    """A positioned node of a graph problem."""
    id: str
    x: float
    y: float
    label: Optional[str] = None
    is_start: bool = False
    is_goal: bool = False
    heuristic: Optional[float] = None


@dataclass(frozen=True)
class GraphEdge:
    """A weighted edge; direction only matters for directed graphs."""
    source: str
    target: str
    weight: float = 1.0


@dataclass(frozen=True)
class GraphProblem:
    """Arbitrary weighted node/edge graph."""
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    start_node_id: str
    goal_node_id: str
    is_directed: bool = False
    type: Literal["graph"] = field(default="graph", init=False)
    _lookup: Dict[str, GraphNode] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        nodes = tuple(self.nodes)
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "_lookup", {node.id: node for node in nodes})

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        """Get node by id, returns None if it does not exist."""
        return self._lookup.get(node_id)

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(node.id for node in self.nodes)


Problem = Union[GridProblem, GraphProblem]


def start_id(problem: Problem) -> str:
    """Resolve the start node id of a problem."""
    if isinstance(problem, GridProblem):
        return problem.start.node_id
    if isinstance(problem, GraphProblem):
        return problem.start_node_id
    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


def goal_id(problem: Problem) -> str:
    """Resolve the goal node id of a problem."""
    if isinstance(problem, GridProblem):
        return problem.goal.node_id
    if isinstance(problem, GraphProblem):
        return problem.goal_node_id
    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


@dataclass
class SearchConfig:
    """Tunable constants for the search engine."""
    beam_width: int = 2
    graph_heuristic_scale: float = 50.0  # pixels per unit of edge cost
    diagonal_cost: float = math.sqrt(2)
    memory_bytes_per_node: int = 100
    ida_memory_bytes_per_node: int = 50

    def __post_init__(self):
        if self.beam_width < 1:
            raise ValueError(f"Beam width must be at least 1, got {self.beam_width}")
        if self.graph_heuristic_scale <= 0:
            raise ValueError(
                f"Graph heuristic scale must be positive, got {self.graph_heuristic_scale}"
            )


@dataclass(frozen=True)
class SearchStep:
    """Immutable snapshot of the search state at one point of a run."""
    step_number: int
    current_node: str
    frontier: Tuple[str, ...]
    visited: Tuple[str, ...]
    parent_map: Mapping[str, str]
    g_values: Mapping[str, float]
    h_values: Mapping[str, float]
    f_values: Mapping[str, float]
    is_complete: bool = False
    found_goal: bool = False
    path: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class SearchResult:
    """Outcome of running one algorithm against one problem."""
    algorithm: AlgorithmId
    problem: Problem
    steps: Tuple[SearchStep, ...]
    nodes_visited: int
    execution_time_ms: float
    memory_usage_kb: int
    success: bool
    final_path: Optional[Tuple[str, ...]] = None
    path_cost: Optional[float] = None

    @property
    def path_length(self) -> Optional[int]:
        """Number of moves along the final path."""
        if self.final_path is None:
            return None
        return len(self.final_path) - 1

    @property
    def total_steps(self) -> int:
        return len(self.steps)
