import random

import networkx as nx
import pytest

from osmnav.graph.connectivity import (
    connected_components,
    filter_to_component,
    largest_component,
    restrict_to_largest_component,
)
from osmnav.graph.load_graph import build_from_map_records


def test_isolated_component_is_dropped(build_records):
    records = build_records(
        {"A": (0.0, 0.0), "B": (0.0, 1.0), "C": (0.0, 2.0), "D": (5.0, 5.0), "E": (5.0, 5.1)},
        [
            (["A", "B", "C"], {"highway": "residential"}),
            (["D", "E"], {"highway": "residential"}),
        ],
    )
    _, geo_graph = build_from_map_records(records, ["residential"])

    graph, restricted = restrict_to_largest_component(geo_graph)

    assert set(graph.ids) == {"A", "B", "C"}
    assert len(graph.edges) == 2
    assert len(restricted) == 3


def test_equal_components_keep_the_first(two_triangles):
    largest = largest_component(two_triangles.graph)

    assert largest == frozenset({"a1", "a2", "a3"})


def test_components_are_listed_in_discovery_order(two_triangles):
    components = list(connected_components(two_triangles.graph))

    assert components == [frozenset({"a1", "a2", "a3"}), frozenset({"b1", "b2", "b3"})]


def test_empty_graph_has_empty_largest_component(build_geo_graph):
    geo_graph = build_geo_graph({})

    assert largest_component(geo_graph.graph) == frozenset()
    graph, restricted = restrict_to_largest_component(geo_graph)
    assert len(graph) == 0 and len(restricted) == 0


def test_one_way_edges_still_connect(build_geo_graph):
    geo_graph = build_geo_graph(
        {"A": (0, 0), "B": (0, 1), "C": (0, 2)},
        [("A", "B", 10.0, 50.0, True), ("C", "B", 10.0, 50.0, True)],
    )

    assert largest_component(geo_graph.graph) == frozenset("ABC")


def test_filtering_leaves_original_untouched(two_triangles):
    _, filtered = filter_to_component(two_triangles, {"a1", "a2", "a3"})

    filtered.mark_route(["a1", "a2"])

    assert two_triangles.vertex("a1").color == "black"
    assert {e.color for e in two_triangles.edges} == {"black"}
    assert len(two_triangles) == 6
    assert len(filtered.edges) == 3


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_largest_component_matches_networkx(build_geo_graph, seed):
    rng = random.Random(seed)
    ids = [f"v{i}" for i in range(30)]
    coords = {vid: (rng.uniform(0, 1), rng.uniform(0, 1)) for vid in ids}
    pairs = [tuple(rng.sample(ids, 2)) for _ in range(25)]
    geo_graph = build_geo_graph(coords, [(a, b, 100.0) for a, b in pairs])

    reference = nx.Graph()
    reference.add_nodes_from(ids)
    reference.add_edges_from(pairs)
    expected_size = max(len(c) for c in nx.connected_components(reference))

    largest = largest_component(geo_graph.graph)

    assert len(largest) == expected_size
    assert any(largest == frozenset(c) for c in nx.connected_components(reference))
