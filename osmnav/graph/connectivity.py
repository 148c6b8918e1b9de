"""Connected components of a road graph.

Connectivity ignores edge direction: a one-way segment still joins its
two endpoints. Components are discovered in vertex insertion order, so
among components of equal size the first discovered one is the largest.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import deque
from typing import AbstractSet, Dict, FrozenSet, Iterator, List, Optional, Tuple

from ..domain.models import GeoEdge, GeoGraph, GeoVertex, Graph, Vertex, VertexId

_logger = logging.getLogger(__name__)


def _bfs(graph: Graph, start: int, visited: List[bool]) -> List[int]:
    queue = deque([start])
    visited[start] = True
    component = [start]
    while queue:
        current = queue.popleft()
        for position in graph.incident(current):
            i, j = graph.endpoints(position)
            neighbour = j if i == current else i
            if not visited[neighbour]:
                visited[neighbour] = True
                component.append(neighbour)
                queue.append(neighbour)
    return component


def connected_components(graph: Graph) -> Iterator[FrozenSet[VertexId]]:
    """Yield every connected component, in discovery order."""
    visited = [False] * len(graph)
    for index in range(len(graph)):
        if visited[index]:
            continue
        yield frozenset(graph.id_at(i) for i in _bfs(graph, index, visited))


def largest_component(graph: Graph) -> FrozenSet[VertexId]:
    """Return the vertex ids of the largest connected component.

    An empty graph yields an empty set.
    """
    largest: FrozenSet[VertexId] = frozenset()
    classified = 0
    for component in connected_components(graph):
        classified += len(component)
        if len(component) > len(largest):
            largest = component
        # Nothing left can be larger
        if len(largest) >= len(graph) - classified:
            break
    return largest


def filter_to_component(
    geo_graph: GeoGraph, keep: AbstractSet[VertexId]
) -> Tuple[Graph, GeoGraph]:
    """Build a new pair holding only ``keep`` and the edges inside it.

    GeoVertices are copied, so marking the result leaves ``geo_graph``
    untouched.
    """
    source = geo_graph.graph
    vertices: Dict[VertexId, Vertex] = {
        vid: vertex for vid, vertex in source.vertices.items() if vid in keep
    }
    geo_vertices: Dict[VertexId, GeoVertex] = {
        vid: dataclasses.replace(geo_graph.vertex(vid)) for vid in vertices
    }

    edges = []
    geo_edges = []
    for geo_edge in geo_graph.edges:
        edge = geo_edge.edge
        if edge.from_id in keep and edge.to_id in keep:
            edges.append(edge)
            geo_edges.append(
                GeoEdge(
                    edge,
                    geo_vertices[edge.from_id],
                    geo_vertices[edge.to_id],
                    color=geo_edge.color,
                    penwidth=geo_edge.penwidth,
                )
            )

    graph = Graph(vertices, edges)
    return graph, GeoGraph(graph, geo_vertices, geo_edges, geo_graph.bounds)


def restrict_to_largest_component(
    geo_graph: GeoGraph, logger: Optional[logging.Logger] = None
) -> Tuple[Graph, GeoGraph]:
    """Keep only the largest connected component of ``geo_graph``."""
    log = logger or _logger
    keep = largest_component(geo_graph.graph)
    graph, filtered = filter_to_component(geo_graph, keep)
    log.info(
        "Restricted graph to largest component",
        extra={
            "vertices_before": len(geo_graph),
            "vertices_after": len(filtered),
            "edges_after": len(graph.edges),
        },
    )
    return graph, filtered
