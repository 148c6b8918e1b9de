"""Graph adapters - Implementations of graph-related ports.

Available implementations:
- OsmXmlReader: Reads map records from OSM XML
- DotGraphReader: Reads an exported annotated graph from DOT
- DijkstraRouteSolver: Finds fastest paths using Dijkstra's algorithm
"""

from .dijkstra_solver import DijkstraRouteSolver
from .dot_reader import DotGraphReader
from .osm_reader import OsmXmlReader

__all__ = ["OsmXmlReader", "DotGraphReader", "DijkstraRouteSolver"]
