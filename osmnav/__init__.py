"""Top-level package for OSM simple navigation.

This package turns OpenStreetMap extracts (or graphs it exported
earlier) into a routable road graph, keeps its largest connected
component and answers fastest-route queries between two coordinates.
"""

__version__ = "0.1.0"
