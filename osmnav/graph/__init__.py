"""Graph algorithms for the road network.

This subpackage builds an in-memory graph from parsed map records,
restricts it to its largest connected component and runs shortest-time
routing on top of it.
"""

from .connectivity import (
    connected_components,
    filter_to_component,
    largest_component,
    restrict_to_largest_component,
)
from .dijkstra import (
    nearest_vertex,
    nearest_vertices,
    shortest_path,
    travel_time_minutes,
)
from .geomath import EARTH_RADIUS_M, haversine_distance
from .load_graph import build_from_annotated, build_from_map_records, ingest

__all__ = [
    "EARTH_RADIUS_M",
    "haversine_distance",
    "build_from_map_records",
    "build_from_annotated",
    "ingest",
    "connected_components",
    "largest_component",
    "filter_to_component",
    "restrict_to_largest_component",
    "nearest_vertex",
    "nearest_vertices",
    "shortest_path",
    "travel_time_minutes",
]
