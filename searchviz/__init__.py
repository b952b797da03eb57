"""Search Algorithm Visualizer - step-by-step playback of classical graph search.

This package implements BFS, DFS, UCS, Greedy Best-First, A*, Hill Climbing,
Beam Search and IDA* over obstacle grids and weighted graphs, recording every
expansion so runs can be replayed and compared.
"""

__version__ = "1.0.0"
__author__ = "Search Visualizer Demo"
