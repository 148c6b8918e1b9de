"""Rendering port - Abstraction for graph export and visualization.

This protocol defines the contract for rendering an annotated graph,
allowing different implementations (Graphviz, Folium) to be used.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoGraph


class GraphRendererPort(Protocol):
    """Port for graph rendering.

    Implementations: adapters/rendering/graphviz_exporter.py,
    adapters/rendering/folium_adapter.py

    Renderers draw every vertex and edge using its presentation state
    (``color``, ``width``, ``penwidth``).
    """

    def render(self, geo_graph: GeoGraph, output_path: Path) -> Path:
        """Render the graph and save it to file.

        Args:
            geo_graph: The annotated graph.
            output_path: Where to save the output.

        Returns:
            Path to the generated file.
        """
        ...
