"""Rendering adapters - Implementations of GraphRendererPort.

Available implementations:
- GraphvizExporter: DOT export and Graphviz layouts (png, pdf, svg...)
- FoliumMapRenderer: Folium-based interactive map rendering
"""

from .folium_adapter import FoliumMapRenderer
from .graphviz_exporter import GraphvizExporter

__all__ = ["GraphvizExporter", "FoliumMapRenderer"]
