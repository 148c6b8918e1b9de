import pytest

from osmnav.adapters.graph import DotGraphReader
from osmnav.adapters.rendering import GraphvizExporter
from osmnav.config import RenderingConfig
from osmnav.domain.errors import RenderingError
from osmnav.graph.load_graph import build_from_annotated, build_from_map_records


@pytest.fixture
def exporter() -> GraphvizExporter:
    return GraphvizExporter(RenderingConfig())


def test_to_networkx_attributes(exporter, build_geo_graph):
    geo_graph = build_geo_graph(
        {"A": (48.1, -1.6), "B": (48.2, -1.7)},
        [("A", "B", 1200.0, 30.0, True)],
    )
    geo_graph.mark_route(["A", "B"])

    multigraph = exporter.to_networkx(geo_graph)

    node = multigraph.nodes["A"]
    assert node["shape"] == "point"
    assert node["comment"] == '"48.1,-1.6!"'
    assert node["pos"] == '"-1.6,48.1!"'
    assert node["color"] == "red"

    (_, _, attributes), = multigraph.edges(data=True)
    assert attributes["speed"] == "30.0"
    assert attributes["oneway"] == "true"
    assert attributes["distance"] == "1200.0"
    assert attributes["color"] == "red"
    assert multigraph.graph["graph"]["bb"] == '"-1.7,48.1,-1.6,48.2"'


def test_two_way_edge_has_no_oneway_attribute(exporter, build_geo_graph):
    geo_graph = build_geo_graph({"A": (0, 0), "B": (0, 1)}, [("A", "B", None)])

    (_, _, attributes), = exporter.to_networkx(geo_graph).edges(data=True)

    assert "oneway" not in attributes
    assert "distance" not in attributes


def test_path_without_suffix_raises(exporter, two_triangles, tmp_path):
    with pytest.raises(RenderingError) as excinfo:
        exporter.render(two_triangles, tmp_path / "graph")

    assert excinfo.value.renderer_type == "graphviz"


def test_dot_round_trip(exporter, line_records, tmp_path):
    graph, geo_graph = build_from_map_records(line_records, ["residential"])

    path = exporter.render(geo_graph, tmp_path / "graph.dot")
    reloaded, reloaded_geo = build_from_annotated(DotGraphReader(path).read())

    assert set(reloaded.ids) == set(graph.ids)
    assert reloaded_geo.vertex("B").lat == pytest.approx(0.0)
    assert reloaded_geo.vertex("B").lon == pytest.approx(1.0)
    edges = {(e.from_id, e.to_id): e for e in reloaded.edges}
    assert set(edges) == {("A", "B"), ("B", "C")}
    assert edges[("A", "B")].distance_m == pytest.approx(graph.edges[0].distance_m)
    assert edges[("A", "B")].speed == 50.0
