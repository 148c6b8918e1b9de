import pytest

from osmnav.domain.errors import GraphError, InvalidEdgeError, VertexNotFoundError
from osmnav.domain.models import (
    Bounds,
    Edge,
    GeoGraph,
    GeoVertex,
    Graph,
    InputFormat,
    GraphSource,
    RouteResult,
    RouteStatus,
    Vertex,
)


def test_graph_rejects_edge_to_unknown_vertex():
    vertices = {"A": Vertex("A"), "B": Vertex("B")}

    with pytest.raises(InvalidEdgeError) as excinfo:
        Graph(vertices, [Edge("A", "B"), Edge("B", "Z")])

    assert excinfo.value.missing_id == "Z"
    assert excinfo.value.from_id == "B"


def test_graph_keeps_insertion_order_and_indices():
    graph = Graph({vid: Vertex(vid) for vid in ["C", "A", "B"]}, [Edge("C", "A")])

    assert graph.ids == ("C", "A", "B")
    assert graph.index_of("A") == 1
    assert graph.id_at(2) == "B"
    assert len(graph) == 3
    assert "B" in graph and "Z" not in graph


def test_graph_accepts_integer_ids():
    graph = Graph({1: Vertex(1), 2: Vertex(2)}, [Edge(1, 2)])

    assert graph.neighbours(1) == [2]
    assert graph.neighbours(2) == [1]


def test_neighbours_ignore_direction_and_duplicates():
    graph = Graph(
        {vid: Vertex(vid) for vid in "ABC"},
        [Edge("A", "B", one_way=True), Edge("B", "A"), Edge("C", "B")],
    )

    assert graph.neighbours("B") == ["A", "C"]
    assert graph.incident(graph.index_of("B")) == (0, 1, 2)


def test_unknown_vertex_lookup_raises():
    graph = Graph({"A": Vertex("A")})

    with pytest.raises(VertexNotFoundError):
        graph.vertex("B")
    with pytest.raises(VertexNotFoundError):
        graph.index_of("B")


def test_vertex_mapping_is_read_only():
    graph = Graph({"A": Vertex("A")})

    with pytest.raises(TypeError):
        graph.vertices["B"] = Vertex("B")  # type: ignore[index]


def test_edge_validates_speed_and_distance():
    with pytest.raises(ValueError):
        Edge("A", "B", speed=0)
    with pytest.raises(ValueError):
        Edge("A", "B", distance_m=-1.0)


def test_geo_graph_requires_every_vertex():
    graph = Graph({"A": Vertex("A"), "B": Vertex("B")})

    with pytest.raises(GraphError):
        GeoGraph(graph, {"A": GeoVertex("A", 0.0, 0.0)}, [], Bounds(0, 0, 0, 0))


def test_geo_vertex_display_position_defaults_to_coordinates():
    vertex = GeoVertex("A", 48.1, -1.6)

    assert (vertex.x, vertex.y) == (48.1, -1.6)
    assert vertex.color == "black"


def test_bounds_scale_and_derivation():
    bounds = Bounds.from_points([(48.0, -1.7), (48.2, -1.6), (None, None)])

    assert bounds == Bounds(min_lon=-1.7, min_lat=48.0, max_lon=-1.6, max_lat=48.2)
    assert bounds.scale == pytest.approx(0.01)


def test_mark_route_only_marks_consecutive_edges(build_geo_graph):
    geo_graph = build_geo_graph(
        {"A": (0, 0), "B": (0, 1), "C": (0, 2)},
        [("A", "B", 10.0), ("B", "C", 10.0), ("A", "C", 30.0)],
    )

    marked = geo_graph.mark_route(["A", "B", "C"], color="red", penwidth=3)

    assert marked == 2
    assert [e.color for e in geo_graph.edges] == ["red", "red", "black"]
    assert all(v.color == "red" and v.width == 0.2 for v in geo_graph.vertices.values())

    geo_graph.clear_marks()
    assert {e.color for e in geo_graph.edges} == {"black"}
    assert {v.width for v in geo_graph.vertices.values()} == {0.1}


def test_mark_endpoints(build_geo_graph):
    geo_graph = build_geo_graph({"A": (0, 0), "B": (0, 1), "C": (0, 2)})

    geo_graph.mark_endpoints("A", "C", color="green", vertex_width=0.3)

    assert geo_graph.vertex("A").color == "green"
    assert geo_graph.vertex("B").color == "black"
    assert geo_graph.vertex("C").width == 0.3


def test_route_result_distinguishes_unreachable_from_trivial():
    unreachable = RouteResult.unreachable("A", "B")
    trivial = RouteResult("A", "A", status=RouteStatus.FOUND, path=("A",), total_time_minutes=0.0)

    assert unreachable.is_unreachable and not unreachable.is_found
    assert unreachable.path == ()
    assert trivial.is_found and trivial.num_stops == 1


@pytest.mark.parametrize(
    "name, expected",
    [
        ("map.osm", InputFormat.MAP_RECORDS),
        ("map.XML", InputFormat.MAP_RECORDS),
        ("graph.dot", InputFormat.ANNOTATED_GRAPH),
        ("graph.gv", InputFormat.ANNOTATED_GRAPH),
    ],
)
def test_input_format_from_suffix(name, expected):
    assert InputFormat.from_path(name) is expected
    assert GraphSource.from_path(name).format is expected


def test_input_format_rejects_unknown_suffix():
    with pytest.raises(ValueError):
        InputFormat.from_path("map.json")
