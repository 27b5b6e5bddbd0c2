"""
pathfind — shortest paths on a 4-connected grid with A* and a
Fibonacci-heap Dijkstra, replayed cell by cell on a display sink.
"""

__version__ = "0.1.0"
