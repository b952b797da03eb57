"""Problem factory for creating, editing, and randomizing grid and graph problems."""

import math
import random
from collections import deque
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..domain.neighbors import ALL_DIRECTIONS, ORTHOGONAL_DIRECTIONS
from ..domain.types import CellCoord, GraphEdge, GraphNode, GraphProblem, GridCell, GridProblem
from ..domain.validation import MAX_GRID_SIZE, MIN_GRID_SIZE

Coord = Tuple[int, int]


def build_grid(rows: int, cols: int, start: Coord, goal: Coord,
               obstacles: Iterable[Coord] = (), weights: Optional[Dict[Coord, float]] = None,
               allow_diagonal: bool = False) -> GridProblem:
    """
    Build a grid problem from obstacle and weight descriptions.

    Args:
        rows: Number of rows
        cols: Number of columns
        start: (row, col) of the start cell
        goal: (row, col) of the goal cell
        obstacles: Coordinates blocked for movement
        weights: Traversal weight per coordinate (default 1)
        allow_diagonal: Whether 8-directional movement is allowed

    Returns:
        GridProblem enumerating every cell in row-major order

    Raises:
        ValueError: If dimensions are out of range or start/goal is blocked
    """
    if not (MIN_GRID_SIZE <= rows <= MAX_GRID_SIZE and MIN_GRID_SIZE <= cols <= MAX_GRID_SIZE):
        raise ValueError(
            f"Grid dimensions must be within {MIN_GRID_SIZE}..{MAX_GRID_SIZE}, got {rows}x{cols}"
        )

    blocked = set(obstacles)
    if start in blocked or goal in blocked:
        raise ValueError("Start and goal cells cannot be obstacles")
    weights = weights or {}

    cells = []
    for row in range(rows):
        for col in range(cols):
            coord = (row, col)
            cells.append(GridCell(
                row=row,
                col=col,
                is_obstacle=coord in blocked,
                is_start=coord == start,
                is_goal=coord == goal,
                weight=float(weights.get(coord, 1.0)),
            ))

    return GridProblem(
        rows=rows,
        cols=cols,
        cells=tuple(cells),
        start=CellCoord(*start),
        goal=CellCoord(*goal),
        allow_diagonal=allow_diagonal,
    )


def create_empty_grid(rows: int, cols: int) -> GridProblem:
    """Create an obstacle-free grid with start top-left and goal bottom-right."""
    return build_grid(rows, cols, start=(0, 0), goal=(rows - 1, cols - 1))


def create_empty_graph() -> GraphProblem:
    """Create a graph with no nodes; start and goal are unset."""
    return GraphProblem(nodes=(), edges=(), start_node_id="", goal_node_id="")


# Grid editing

def _replace_cell(problem: GridProblem, row: int, col: int, **changes) -> GridProblem:
    if not problem.is_valid_coord(row, col):
        raise ValueError(f"Cell {(row, col)} is out of bounds")
    cells = tuple(
        replace(cell, **changes) if (cell.row, cell.col) == (row, col) else cell
        for cell in problem.cells
    )
    return replace(problem, cells=cells)


def set_obstacle(problem: GridProblem, row: int, col: int, is_obstacle: bool = True) -> GridProblem:
    """
    Toggle an obstacle on a cell.
    Start and goal cells are left untouched.
    """
    cell = problem.get_cell(row, col)
    if cell is None:
        raise ValueError(f"Cell {(row, col)} is out of bounds")
    if cell.is_start or cell.is_goal:
        return problem
    return _replace_cell(problem, row, col, is_obstacle=is_obstacle)


def set_weight(problem: GridProblem, row: int, col: int, weight: float) -> GridProblem:
    """Set the traversal weight of a cell (must be >= 1)."""
    if not math.isfinite(weight) or weight < 1:
        raise ValueError(f"Cell weight must be a finite number of at least 1, got {weight}")
    return _replace_cell(problem, row, col, weight=float(weight))


def set_grid_start(problem: GridProblem, row: int, col: int) -> GridProblem:
    """Move the start to (row, col), clearing any obstacle there."""
    return _move_endpoint(problem, row, col, "start")


def set_grid_goal(problem: GridProblem, row: int, col: int) -> GridProblem:
    """Move the goal to (row, col), clearing any obstacle there."""
    return _move_endpoint(problem, row, col, "goal")


def _move_endpoint(problem: GridProblem, row: int, col: int, role: str) -> GridProblem:
    if not problem.is_valid_coord(row, col):
        raise ValueError(f"Cell {(row, col)} is out of bounds")

    flag = "is_start" if role == "start" else "is_goal"
    cells = []
    for cell in problem.cells:
        if (cell.row, cell.col) == (row, col):
            cells.append(replace(cell, is_obstacle=False, **{flag: True}))
        elif getattr(cell, flag):
            cells.append(replace(cell, **{flag: False}))
        else:
            cells.append(cell)

    return replace(problem, cells=tuple(cells), **{role: CellCoord(row, col)})


def set_allow_diagonal(problem: GridProblem, allow_diagonal: bool) -> GridProblem:
    return replace(problem, allow_diagonal=allow_diagonal)


# Graph editing

def add_graph_node(problem: GraphProblem, node_id: str, x: float, y: float,
                   label: Optional[str] = None) -> GraphProblem:
    """Add a node; raises ValueError if the id is taken."""
    if problem.get_node(node_id) is not None:
        raise ValueError(f"Node {node_id!r} already exists")
    node = GraphNode(id=node_id, x=float(x), y=float(y), label=label)
    return replace(problem, nodes=problem.nodes + (node,))


def remove_graph_node(problem: GraphProblem, node_id: str) -> GraphProblem:
    """Remove a node together with its edges; unsets start/goal if they pointed at it."""
    nodes = tuple(node for node in problem.nodes if node.id != node_id)
    edges = tuple(edge for edge in problem.edges if node_id not in (edge.source, edge.target))
    return replace(
        problem,
        nodes=nodes,
        edges=edges,
        start_node_id="" if problem.start_node_id == node_id else problem.start_node_id,
        goal_node_id="" if problem.goal_node_id == node_id else problem.goal_node_id,
    )


def add_graph_edge(problem: GraphProblem, source: str, target: str,
                   weight: float = 1.0) -> GraphProblem:
    """
    Add a weighted edge between existing nodes.
    Raises ValueError for unknown endpoints, self-loops or weights below 1.
    """
    for endpoint in (source, target):
        if problem.get_node(endpoint) is None:
            raise ValueError(f"Node {endpoint!r} does not exist")
    if source == target:
        raise ValueError("Self-loops are not allowed")
    if not math.isfinite(weight) or weight < 1:
        raise ValueError(f"Edge weight must be a finite number of at least 1, got {weight}")
    edge = GraphEdge(source=source, target=target, weight=float(weight))
    return replace(problem, edges=problem.edges + (edge,))


def set_graph_start(problem: GraphProblem, node_id: str) -> GraphProblem:
    """Designate the start node and move the start flag onto it."""
    return _move_graph_endpoint(problem, node_id, "start")


def set_graph_goal(problem: GraphProblem, node_id: str) -> GraphProblem:
    """Designate the goal node and move the goal flag onto it."""
    return _move_graph_endpoint(problem, node_id, "goal")


def _move_graph_endpoint(problem: GraphProblem, node_id: str, role: str) -> GraphProblem:
    if problem.get_node(node_id) is None:
        raise ValueError(f"Node {node_id!r} does not exist")
    flag = "is_start" if role == "start" else "is_goal"
    nodes = tuple(replace(node, **{flag: node.id == node_id}) for node in problem.nodes)
    return replace(problem, nodes=nodes, **{f"{role}_node_id": node_id})


def set_directed(problem: GraphProblem, is_directed: bool) -> GraphProblem:
    return replace(problem, is_directed=is_directed)


# Reachability

def grid_path_exists(problem: GridProblem) -> bool:
    """Check if the goal is reachable from the start using flood fill."""
    start = (problem.start.row, problem.start.col)
    goal = (problem.goal.row, problem.goal.col)
    directions = ALL_DIRECTIONS if problem.allow_diagonal else ORTHOGONAL_DIRECTIONS

    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            return True
        for dr, dc in directions:
            neighbor = (current[0] + dr, current[1] + dc)
            if neighbor in visited:
                continue
            cell = problem.get_cell(*neighbor)
            if cell is not None and cell.is_passable():
                visited.add(neighbor)
                queue.append(neighbor)
    return False


# Random generation

def generate_random_grid(rows: int, cols: int, obstacle_density: float = 0.25,
                         seed: Optional[int] = None, allow_diagonal: bool = False,
                         max_attempts: int = 20) -> GridProblem:
    """
    Generate a grid with randomly scattered obstacles and a reachable goal.

    Args:
        rows: Number of rows
        cols: Number of columns
        obstacle_density: Fraction of non-endpoint cells blocked (0.0 to 0.9)
        seed: Random seed for reproducibility
        allow_diagonal: Whether 8-directional movement is allowed
        max_attempts: Layouts tried before falling back to an empty grid

    Returns:
        GridProblem with start top-left and goal bottom-right
    """
    if not (0.0 <= obstacle_density <= 0.9):
        raise ValueError(f"Density must be between 0.0 and 0.9, got {obstacle_density}")

    rng = random.Random(seed)
    start, goal = (0, 0), (rows - 1, cols - 1)
    free_cells = [(r, c) for r in range(rows) for c in range(cols) if (r, c) not in (start, goal)]
    wall_count = int(len(free_cells) * obstacle_density)

    for _ in range(max_attempts):
        obstacles = rng.sample(free_cells, wall_count)
        problem = build_grid(rows, cols, start, goal, obstacles, allow_diagonal=allow_diagonal)
        if grid_path_exists(problem):
            return problem

    return build_grid(rows, cols, start, goal, allow_diagonal=allow_diagonal)


def generate_maze_grid(rows: int, cols: int, seed: Optional[int] = None) -> GridProblem:
    """
    Generate a perfect maze using iterative recursive backtracking.
    Passages sit on even coordinates so every corridor is one cell wide.
    """
    rng = random.Random(seed)
    passages: Set[Coord] = {(0, 0)}
    stack = [(0, 0)]
    directions = [(0, 2), (2, 0), (0, -2), (-2, 0)]  # Move by 2 to keep walls between

    while stack:
        current = stack[-1]
        options = []
        for dr, dc in directions:
            nxt = (current[0] + dr, current[1] + dc)
            if 0 <= nxt[0] < rows and 0 <= nxt[1] < cols and nxt not in passages:
                options.append((nxt, (current[0] + dr // 2, current[1] + dc // 2)))

        if options:
            next_cell, wall_between = rng.choice(options)
            passages.add(next_cell)
            passages.add(wall_between)
            stack.append(next_cell)
        else:
            # Backtrack
            stack.pop()

    goal = max(passages, key=lambda coord: (coord[0] + coord[1], coord))
    obstacles = [(r, c) for r in range(rows) for c in range(cols) if (r, c) not in passages]
    return build_grid(rows, cols, (0, 0), goal, obstacles)


def generate_random_graph(node_count: int, extra_edges: int = 0, seed: Optional[int] = None,
                          width: float = 600.0, height: float = 400.0,
                          scale: float = 50.0, is_directed: bool = False) -> GraphProblem:
    """
    Generate a connected graph with nodes scattered over a canvas.

    A random spanning tree guarantees connectivity; extra_edges adds more.
    Edge weights are ceil(distance / scale), so the scaled Euclidean
    heuristic never overestimates on these graphs.
    """
    if node_count < 2:
        raise ValueError(f"A graph needs at least 2 nodes, got {node_count}")

    rng = random.Random(seed)
    nodes = [
        GraphNode(id=_node_name(i), x=round(rng.uniform(0, width), 1),
                  y=round(rng.uniform(0, height), 1), label=_node_name(i))
        for i in range(node_count)
    ]

    def weight(a: GraphNode, b: GraphNode) -> float:
        return float(max(1, math.ceil(math.hypot(a.x - b.x, a.y - b.y) / scale)))

    edges: List[GraphEdge] = []
    linked: Set[Tuple[str, str]] = set()
    order = list(range(node_count))
    rng.shuffle(order)
    for position in range(1, node_count):
        a = nodes[order[position]]
        b = nodes[order[rng.randrange(position)]]
        edges.append(GraphEdge(source=b.id, target=a.id, weight=weight(a, b)))
        linked.add(tuple(sorted((a.id, b.id))))

    max_edges = node_count * (node_count - 1) // 2
    while extra_edges > 0 and len(linked) < max_edges:
        a, b = rng.sample(nodes, 2)
        key = tuple(sorted((a.id, b.id)))
        if key in linked:
            continue
        linked.add(key)
        edges.append(GraphEdge(source=a.id, target=b.id, weight=weight(a, b)))
        extra_edges -= 1

    nodes[0] = replace(nodes[0], is_start=True)
    nodes[-1] = replace(nodes[-1], is_goal=True)
    return GraphProblem(
        nodes=tuple(nodes),
        edges=tuple(edges),
        start_node_id=nodes[0].id,
        goal_node_id=nodes[-1].id,
        is_directed=is_directed,
    )


def _node_name(index: int) -> str:
    """A, B, ..., Z, A1, B1, ..."""
    letter = chr(ord("A") + index % 26)
    return letter if index < 26 else f"{letter}{index // 26}"


def sample_graph() -> GraphProblem:
    """A small Romania-style road map for demos."""
    positions = {
        "Arad": (60, 120), "Zerind": (80, 50), "Oradea": (130, 10),
        "Sibiu": (200, 170), "Timisoara": (70, 250), "Lugoj": (160, 300),
        "Mehadia": (170, 360), "Drobeta": (160, 420), "Craiova": (300, 440),
        "Rimnicu": (250, 250), "Fagaras": (330, 175), "Pitesti": (380, 320),
        "Bucharest": (480, 380),
    }
    roads = [
        ("Arad", "Zerind", 2), ("Zerind", "Oradea", 2), ("Oradea", "Sibiu", 4),
        ("Arad", "Sibiu", 3), ("Arad", "Timisoara", 3), ("Timisoara", "Lugoj", 3),
        ("Lugoj", "Mehadia", 2), ("Mehadia", "Drobeta", 2), ("Drobeta", "Craiova", 3),
        ("Sibiu", "Rimnicu", 2), ("Sibiu", "Fagaras", 3), ("Rimnicu", "Craiova", 4),
        ("Rimnicu", "Pitesti", 3), ("Craiova", "Pitesti", 3), ("Fagaras", "Bucharest", 6),
        ("Pitesti", "Bucharest", 3),
    ]
    nodes = tuple(
        GraphNode(id=name, x=x, y=y, label=name,
                  is_start=name == "Arad", is_goal=name == "Bucharest")
        for name, (x, y) in positions.items()
    )
    edges = tuple(GraphEdge(source=a, target=b, weight=w) for a, b, w in roads)
    return GraphProblem(nodes=nodes, edges=edges, start_node_id="Arad", goal_node_id="Bucharest")
