"""Shortest-time routing using Dijkstra's algorithm.

Edge weights are travel times in minutes. Edges are traversable in both
directions unless ``enforce_one_way`` is set, in which case a one-way
edge can only be followed from ``from_id`` to ``to_id``.
"""

from __future__ import annotations

import heapq
import logging
import math
from typing import List, Optional, Tuple

from ..domain.errors import GraphError
from ..domain.models import Edge, GeoGraph, RouteResult, RouteStatus, VertexId
from .geomath import haversine_distance, require_coordinate

_logger = logging.getLogger(__name__)

# meters / (km/h) -> minutes
MINUTES_FACTOR = 0.06


def travel_time_minutes(distance_m: float, speed_kmh: float) -> float:
    return distance_m / speed_kmh * MINUTES_FACTOR


def edge_distance(geo_graph: GeoGraph, position: int) -> float:
    """Length of an edge, falling back to its endpoints when not recorded."""
    geo_edge = geo_graph.edges[position]
    if geo_edge.edge.distance_m is not None:
        return geo_edge.edge.distance_m
    v1, v2 = geo_edge.v1, geo_edge.v2
    return haversine_distance(
        require_coordinate(v1.lat, v1.id),
        require_coordinate(v1.lon, v1.id),
        require_coordinate(v2.lat, v2.id),
        require_coordinate(v2.lon, v2.id),
    )


def edge_time(geo_graph: GeoGraph, position: int) -> float:
    edge: Edge = geo_graph.edges[position].edge
    return travel_time_minutes(edge_distance(geo_graph, position), edge.speed)


def nearest_vertex(lat: float, lon: float, geo_graph: GeoGraph) -> VertexId:
    """Return the id of the vertex closest to (lat, lon).

    Ties go to the first vertex in iteration order.

    Raises:
        GraphError: If the graph has no vertices.
        MalformedCoordinateError: If a vertex has no usable coordinates.
    """
    best_id: Optional[VertexId] = None
    best_distance = math.inf
    for vertex_id, geo_vertex in geo_graph.vertices.items():
        distance = haversine_distance(
            lat,
            lon,
            require_coordinate(geo_vertex.lat, vertex_id),
            require_coordinate(geo_vertex.lon, vertex_id),
        )
        if best_id is None or distance < best_distance:
            best_id = vertex_id
            best_distance = distance
    if best_id is None:
        raise GraphError("Cannot look up nearest vertex in an empty graph")
    return best_id


def nearest_vertices(
    start: Tuple[float, float], end: Tuple[float, float], geo_graph: GeoGraph
) -> Tuple[VertexId, VertexId]:
    """Anchor a (lat, lon) start and end point onto the graph."""
    return (
        nearest_vertex(start[0], start[1], geo_graph),
        nearest_vertex(end[0], end[1], geo_graph),
    )


def shortest_path(
    source: VertexId,
    target: VertexId,
    geo_graph: GeoGraph,
    *,
    enforce_one_way: bool = False,
    logger: Optional[logging.Logger] = None,
) -> RouteResult:
    """Compute the fastest path between two vertices.

    Parameters
    ----------
    source:
        Identifier of the departure vertex.
    target:
        Identifier of the arrival vertex.
    geo_graph:
        Graph to route on.
    enforce_one_way:
        Only follow one-way edges in their nominal direction.
    logger:
        Logger receiving the search summary; defaults to the module logger.

    Returns
    -------
    RouteResult
        FOUND with the ordered path and its travel time in minutes, or
        UNREACHABLE with an empty path.

    Raises
    ------
    VertexNotFoundError
        If ``source`` or ``target`` is not in the graph.
    """
    log = logger or _logger
    graph = geo_graph.graph
    start = graph.index_of(source)
    end = graph.index_of(target)

    distances: List[float] = [math.inf] * len(graph)
    previous: List[int] = [-1] * len(graph)
    visited: List[bool] = [False] * len(graph)
    distances[start] = 0.0

    heap: List[Tuple[float, int]] = [(0.0, start)]
    found = False

    while heap:
        current_distance, u = heapq.heappop(heap)

        if visited[u]:
            continue
        visited[u] = True

        if u == end:
            found = True
            break

        for position in graph.incident(u):
            i, j = graph.endpoints(position)
            if i == u:
                v = j
            else:
                if enforce_one_way and graph.edges[position].one_way:
                    continue
                v = i
            if visited[v]:
                continue
            new_distance = current_distance + edge_time(geo_graph, position)
            if new_distance < distances[v]:
                distances[v] = new_distance
                previous[v] = u
                heapq.heappush(heap, (new_distance, v))

    log.debug(
        "Route search finished",
        extra={"source": source, "target": target, "found": found, "settled": sum(visited)},
    )
    if not found:
        return RouteResult.unreachable(source, target)

    path: List[VertexId] = []
    current = end
    while current != -1:
        path.append(graph.id_at(current))
        current = previous[current]
    path.reverse()

    return RouteResult(
        source=source,
        target=target,
        status=RouteStatus.FOUND,
        path=tuple(path),
        total_time_minutes=distances[end],
    )
