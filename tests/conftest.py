"""Shared builders for small road graphs."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence, Tuple

import pytest

from osmnav.config import reset_config
from osmnav.domain.models import (
    Bounds,
    Edge,
    GeoEdge,
    GeoGraph,
    GeoVertex,
    Graph,
    MapNode,
    MapRecords,
    MapWay,
    Vertex,
)

EdgeRow = Tuple  # (from, to, distance_m[, speed[, one_way]])


def make_geo_graph(
    coords: Dict[str, Tuple[Optional[float], Optional[float]]],
    edges: Iterable[EdgeRow] = (),
) -> GeoGraph:
    """Build a GeoGraph directly, with explicit edge distances."""
    geo_vertices = {vid: GeoVertex(id=vid, lat=lat, lon=lon) for vid, (lat, lon) in coords.items()}
    graph_edges = []
    geo_edges = []
    for row in edges:
        from_id, to_id, distance = row[:3]
        speed = row[3] if len(row) > 3 else 50.0
        one_way = row[4] if len(row) > 4 else False
        edge = Edge(from_id, to_id, speed=speed, one_way=one_way, distance_m=distance)
        graph_edges.append(edge)
        geo_edges.append(GeoEdge(edge, geo_vertices[from_id], geo_vertices[to_id]))
    graph = Graph({vid: Vertex(vid) for vid in coords}, graph_edges)
    bounds = Bounds.from_points(coords.values())
    return GeoGraph(graph, geo_vertices, geo_edges, bounds)


def make_records(
    coords: Dict[str, Tuple[float, float]],
    ways: Sequence[Tuple[Sequence[str], Dict[str, str]]],
) -> MapRecords:
    """Build MapRecords from node coordinates and (refs, tags) ways."""
    return MapRecords(
        nodes=tuple(MapNode(id=nid, lat=str(lat), lon=str(lon)) for nid, (lat, lon) in coords.items()),
        ways=tuple(
            MapWay(node_refs=tuple(refs), tags=tuple(tags.items()), id=f"w{i}")
            for i, (refs, tags) in enumerate(ways)
        ),
    )


@pytest.fixture
def line_records() -> MapRecords:
    """A(0,0) - B(0,1) - C(0,2) as one residential way, plus isolated D."""
    return make_records(
        {"A": (0.0, 0.0), "B": (0.0, 1.0), "C": (0.0, 2.0), "D": (5.0, 5.0)},
        [(["A", "B", "C"], {"highway": "residential"})],
    )


@pytest.fixture
def two_triangles() -> GeoGraph:
    coords = {
        "a1": (0.0, 0.0),
        "a2": (0.0, 0.01),
        "a3": (0.01, 0.0),
        "b1": (1.0, 1.0),
        "b2": (1.0, 1.01),
        "b3": (1.01, 1.0),
    }
    edges = [
        ("a1", "a2", 1000.0),
        ("a2", "a3", 1000.0),
        ("a3", "a1", 1000.0),
        ("b1", "b2", 1000.0),
        ("b2", "b3", 1000.0),
        ("b3", "b1", 1000.0),
    ]
    return make_geo_graph(coords, edges)


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def build_geo_graph():
    return make_geo_graph


@pytest.fixture
def build_records():
    return make_records
