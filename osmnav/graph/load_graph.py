"""Graph construction from parsed map records.

Two record shapes are supported and the caller chooses between them by
the records' ``format`` tag:

- ``MapRecords``: OSM nodes and ways. Every way with an accepted
  ``highway`` tag contributes one edge per consecutive node pair, with
  its length computed by haversine.
- ``AnnotatedGraph``: a graph previously exported by this project. The
  vertices carry their positions, the edges their attributes, and no
  distance is recomputed.

Both builders return a ``(Graph, GeoGraph)`` pair that is only created
once every record has been processed.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..domain.errors import InvalidEdgeError, MalformedCoordinateError
from ..domain.models import (
    DEFAULT_SPEED_KMH,
    AnnotatedGraph,
    Bounds,
    Edge,
    GeoEdge,
    GeoGraph,
    GeoVertex,
    Graph,
    GraphRecords,
    InputFormat,
    MapNode,
    MapRecords,
    Vertex,
    VertexId,
)
from .geomath import haversine_distance

_logger = logging.getLogger(__name__)

KMH_PER_MPH = 1.609344
MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0

_SPEED_PATTERN = re.compile(r"\s*(\d+(?:\.\d+)?)\s*(mph)?", re.IGNORECASE)


def parse_speed(raw: Any, default: float = DEFAULT_SPEED_KMH) -> Tuple[float, bool]:
    """Resolve a ``maxspeed``-style value to km/h.

    The leading number is used; a ``mph`` unit is converted. Values such
    as ``"none"`` or ``"signals"`` and non-positive numbers resolve to
    ``default``.

    Returns:
        The speed and whether it was parsed from ``raw``.
    """
    if raw is None:
        return default, False
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return (float(raw), True) if raw > 0 else (default, False)

    match = _SPEED_PATTERN.match(str(raw).strip().strip('"'))
    if match is None:
        return default, False
    speed = float(match.group(1))
    if match.group(2):
        speed *= KMH_PER_MPH
    if speed <= 0:
        return default, False
    return speed, True


def parse_coordinate(
    raw: Any, vertex_id: Any = None, limit: Optional[float] = None
) -> float:
    """Parse a latitude or longitude.

    Args:
        raw: Value to parse.
        vertex_id: Vertex the value belongs to, for error reporting.
        limit: Largest accepted absolute value (90 for latitudes, 180 for
            longitudes); None accepts any finite value.

    Raises:
        MalformedCoordinateError: If ``raw`` is missing, not a number or
            out of range.
    """
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise MalformedCoordinateError(
            f"Vertex {vertex_id!r} has malformed coordinate {raw!r}",
            vertex_id=vertex_id,
            value=raw,
        ) from None
    if not math.isfinite(value) or (limit is not None and abs(value) > limit):
        raise MalformedCoordinateError(
            f"Vertex {vertex_id!r} has malformed coordinate {raw!r}",
            vertex_id=vertex_id,
            value=raw,
        )
    return value


def _unquote(raw: Any) -> str:
    return str(raw).strip().strip('"').strip()


def split_attribute(raw: Optional[str], expected: int) -> Optional[List[str]]:
    """Split a Graphviz ``"a,b!"`` style value into ``expected`` parts.

    Returns None when the value is absent or has the wrong arity.
    """
    if raw is None:
        return None
    text = _unquote(raw).rstrip("!")
    if not text:
        return None
    parts = [p.strip().rstrip("!") for p in text.split(",")]
    if len(parts) != expected:
        return None
    return parts


def build_from_map_records(
    records: MapRecords,
    highway_whitelist: Iterable[str],
    *,
    default_speed: float = DEFAULT_SPEED_KMH,
    strict_references: bool = True,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Graph, GeoGraph]:
    """Build a graph from OSM nodes and ways.

    Args:
        records: Parsed map records.
        highway_whitelist: ``highway`` values whose ways become edges.
        default_speed: Speed used when a way has no usable ``maxspeed``.
        strict_references: Raise on ways referencing unknown nodes
            instead of skipping the segment.
        logger: Logger to report progress to.

    Returns:
        The Graph and its GeoGraph view.

    Raises:
        InvalidEdgeError: If a way references a node absent from the records.
        MalformedCoordinateError: If a used node has unparseable coordinates.
    """
    log = logger or _logger
    whitelist = frozenset(highway_whitelist)
    nodes: Dict[str, MapNode] = {node.id: node for node in records.nodes}

    log.debug(
        "Building graph from map records",
        extra={"nodes": len(nodes), "ways": len(records.ways)},
    )

    vertices: Dict[VertexId, Vertex] = {}
    geo_vertices: Dict[VertexId, GeoVertex] = {}
    edges: List[Edge] = []
    geo_edges: List[GeoEdge] = []
    accepted_ways = 0

    def vertex_for(node: MapNode) -> GeoVertex:
        geo_vertex = geo_vertices.get(node.id)
        if geo_vertex is None:
            lat = parse_coordinate(node.lat, node.id, MAX_LATITUDE)
            lon = parse_coordinate(node.lon, node.id, MAX_LONGITUDE)
            geo_vertex = GeoVertex(id=node.id, lat=lat, lon=lon)
            geo_vertices[node.id] = geo_vertex
            vertices[node.id] = Vertex(node.id)
        return geo_vertex

    for way in records.ways:
        if not any(value in whitelist for value in way.tag_values("highway")):
            continue
        accepted_ways += 1

        speed = default_speed
        maxspeeds = way.tag_values("maxspeed")
        if maxspeeds:
            speed, parsed = parse_speed(maxspeeds[-1], default_speed)
            if not parsed:
                log.debug(
                    "Unusable maxspeed, using default",
                    extra={"way": way.id, "maxspeed": maxspeeds[-1]},
                )
        one_way = way.has_tag("oneway")

        for from_ref, to_ref in zip(way.node_refs, way.node_refs[1:]):
            from_node = nodes.get(from_ref)
            to_node = nodes.get(to_ref)
            if from_node is None or to_node is None:
                missing = from_ref if from_node is None else to_ref
                if strict_references:
                    raise InvalidEdgeError(
                        f"Way {way.id!r} references unknown node {missing!r}",
                        from_id=from_ref,
                        to_id=to_ref,
                        missing_id=missing,
                    )
                log.warning(
                    "Skipping segment with unknown node",
                    extra={"way": way.id, "node": missing},
                )
                continue

            v1 = vertex_for(from_node)
            v2 = vertex_for(to_node)
            edge = Edge(
                from_id=from_ref,
                to_id=to_ref,
                speed=speed,
                one_way=one_way,
                distance_m=haversine_distance(v1.lat, v1.lon, v2.lat, v2.lon),
            )
            edges.append(edge)
            geo_edges.append(GeoEdge(edge, v1, v2))

    bounds = records.bounds or Bounds.from_points(
        (v.lat, v.lon) for v in geo_vertices.values()
    )
    graph = Graph(vertices, edges)
    geo_graph = GeoGraph(graph, geo_vertices, geo_edges, bounds)

    log.info(
        "Graph built from map records",
        extra={
            "ways_accepted": accepted_ways,
            "vertices": len(graph),
            "edges": len(graph.edges),
        },
    )
    return graph, geo_graph


def _parse_bounds(bb: Optional[str], log: logging.Logger) -> Optional[Bounds]:
    parts = split_attribute(bb, 4)
    if parts is None:
        if bb is not None:
            log.warning("Ignoring malformed bounding box", extra={"bb": bb})
        return None
    try:
        min_lon, min_lat, max_lon, max_lat = (float(p) for p in parts)
    except ValueError:
        log.warning("Ignoring malformed bounding box", extra={"bb": bb})
        return None
    return Bounds(min_lon, min_lat, max_lon, max_lat)


def _parse_distance(raw: Optional[str], log: logging.Logger) -> Optional[float]:
    if raw is None:
        return None
    try:
        distance = float(_unquote(raw))
    except ValueError:
        log.warning("Ignoring malformed edge distance", extra={"distance": raw})
        return None
    return distance if distance >= 0 else None


def _pair(
    raw: Optional[str],
    vertex_id: VertexId,
    what: str,
    limits: Tuple[Optional[float], Optional[float]] = (None, None),
) -> Tuple[Optional[float], Optional[float]]:
    if raw is None:
        return None, None
    parts = split_attribute(raw, 2)
    if parts is None:
        raise MalformedCoordinateError(
            f"Vertex {vertex_id!r} has malformed {what} {raw!r}",
            vertex_id=vertex_id,
            value=raw,
        )
    return (
        parse_coordinate(parts[0], vertex_id, limits[0]),
        parse_coordinate(parts[1], vertex_id, limits[1]),
    )


def build_from_annotated(
    description: AnnotatedGraph,
    *,
    default_speed: float = DEFAULT_SPEED_KMH,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Graph, GeoGraph]:
    """Build a graph from a previously exported annotated description.

    Vertices without a ``comment`` get no geographic coordinate; any
    later distance or nearest-vertex computation on them fails with
    MalformedCoordinateError.

    Raises:
        InvalidEdgeError: If an edge references an undeclared vertex.
        MalformedCoordinateError: If ``comment`` or ``pos`` cannot be parsed.
    """
    log = logger or _logger
    log.debug(
        "Building graph from annotated description",
        extra={"nodes": len(description.nodes), "edges": len(description.edges)},
    )

    vertices: Dict[VertexId, Vertex] = {}
    geo_vertices: Dict[VertexId, GeoVertex] = {}
    for node in description.nodes:
        vid = _unquote(node.id)
        if vid in geo_vertices:
            continue
        lat, lon = _pair(node.comment, vid, "comment", (MAX_LATITUDE, MAX_LONGITUDE))
        # pos is written as "y,x"
        y, x = _pair(node.pos, vid, "pos")
        vertices[vid] = Vertex(vid)
        geo_vertices[vid] = GeoVertex(id=vid, lat=lat, lon=lon, x=x, y=y)

    edges: List[Edge] = []
    geo_edges: List[GeoEdge] = []
    for link in description.edges:
        from_id = _unquote(link.from_id)
        to_id = _unquote(link.to_id)
        for endpoint in (from_id, to_id):
            if endpoint not in geo_vertices:
                raise InvalidEdgeError(
                    f"Edge {from_id!r} -> {to_id!r} references unknown vertex {endpoint!r}",
                    from_id=from_id,
                    to_id=to_id,
                    missing_id=endpoint,
                )
        attributes: Mapping[str, Any] = link.attributes
        speed, _ = parse_speed(attributes.get("speed"), default_speed)
        edge = Edge(
            from_id=from_id,
            to_id=to_id,
            speed=speed,
            one_way="oneway" in attributes,
            distance_m=_parse_distance(attributes.get("distance"), log),
        )
        edges.append(edge)
        geo_edges.append(GeoEdge(edge, geo_vertices[from_id], geo_vertices[to_id]))

    bounds = _parse_bounds(description.bb, log) or Bounds.from_points(
        (v.lat, v.lon) for v in geo_vertices.values()
    )
    graph = Graph(vertices, edges)
    geo_graph = GeoGraph(graph, geo_vertices, geo_edges, bounds)

    log.info(
        "Graph built from annotated description",
        extra={"vertices": len(graph), "edges": len(graph.edges)},
    )
    return graph, geo_graph


def ingest(
    records: GraphRecords,
    *,
    highway_whitelist: Sequence[str] = (),
    default_speed: float = DEFAULT_SPEED_KMH,
    strict_references: bool = True,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Graph, GeoGraph]:
    """Build a graph from either record shape, dispatching on its format tag."""
    if records.format is InputFormat.MAP_RECORDS:
        assert isinstance(records, MapRecords)
        return build_from_map_records(
            records,
            highway_whitelist,
            default_speed=default_speed,
            strict_references=strict_references,
            logger=logger,
        )
    if records.format is InputFormat.ANNOTATED_GRAPH:
        assert isinstance(records, AnnotatedGraph)
        return build_from_annotated(
            records, default_speed=default_speed, logger=logger
        )
    raise ValueError(f"Unsupported input format: {records.format!r}")
