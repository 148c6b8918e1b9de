"""Graph ports - Abstractions for record loading and routing.

These protocols define the contracts for graph operations: reading the
records a graph is built from and computing shortest paths on it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoGraph, GraphRecords, RouteResult, VertexId


class GraphSourcePort(Protocol):
    """Port for reading graph records from storage.

    Implementations: adapters/graph/osm_reader.py, adapters/graph/dot_reader.py

    A source turns one file into the records ingestion consumes. The
    returned records carry their ``format`` tag.
    """

    def read(self) -> GraphRecords:
        """Read and return the records.

        Raises:
            GraphError: If the file cannot be read or parsed.
        """
        ...


class RouteSolverPort(Protocol):
    """Port for route computation.

    Wraps: graph/dijkstra.py (shortest_path)
    """

    def solve(
        self,
        geo_graph: GeoGraph,
        source: VertexId,
        target: VertexId,
    ) -> RouteResult:
        """Find the fastest path between two vertices.

        Args:
            geo_graph: The road network.
            source: Departure vertex id.
            target: Arrival vertex id.

        Returns:
            RouteResult, FOUND or UNREACHABLE.
        """
        ...
