"""Shared fixtures for the searchviz test suite."""

import pytest

from searchviz.utils.problem_factory import build_grid, create_empty_grid

from .helpers import make_graph


@pytest.fixture
def open_grid():
    """3x3 grid without obstacles, start (0,0), goal (2,2), 4-directional."""
    return create_empty_grid(3, 3)


@pytest.fixture
def diagonal_grid():
    """3x3 grid without obstacles with 8-directional movement."""
    return build_grid(3, 3, start=(0, 0), goal=(2, 2), allow_diagonal=True)


@pytest.fixture
def walled_grid():
    """3x3 grid whose goal (2,2) is cut off by obstacles at (1,2) and (2,1)."""
    return build_grid(3, 3, start=(0, 0), goal=(2, 2), obstacles=[(1, 2), (2, 1)])


@pytest.fixture
def triangle_graph():
    """A-B (5), B-C (1), A-C (10), undirected, start A, goal C."""
    return make_graph(
        {"A": (0, 0), "B": (100, 0), "C": (100, 100)},
        [("A", "B", 5), ("B", "C", 1), ("A", "C", 10)],
        start="A", goal="C",
    )


@pytest.fixture
def cyclic_graph():
    """
    Square A-B-C-D with a diagonal A-C. Every edge weight is at least the
    scaled Euclidean distance, so the graph heuristic stays admissible.
    Optimal A->C route is A-B-C with cost 4.
    """
    return make_graph(
        {"A": (0, 0), "B": (50, 0), "C": (50, 50), "D": (0, 50)},
        [("A", "B", 2), ("B", "C", 2), ("C", "D", 1), ("D", "A", 4), ("A", "C", 5)],
        start="A", goal="C",
    )
