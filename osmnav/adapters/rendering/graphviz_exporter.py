"""Graphviz exporter adapter.

Writes a GeoGraph as a Graphviz graph through networkx's pydot bridge.
The DOT output keeps every attribute ingestion needs to rebuild the
graph (``comment``, ``pos``, ``bb``, ``speed``, ``oneway``,
``distance``), so an exported ``.dot`` file can be loaded again with
DotGraphReader. Other suffixes (``png``, ``pdf``, ``svg``...) are laid
out by the configured Graphviz program.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import networkx as nx

from ...config import RenderingConfig, get_config
from ...domain.errors import RenderingError
from ...domain.models import GeoGraph

RAW_FORMATS = {"dot", "gv"}


def _quoted(value: Any) -> str:
    return f'"{value}"'


@dataclass
class GraphvizExporter:
    """Graphviz renderer for annotated graphs.

    Attributes:
        config: Rendering configuration (layout program)
    """

    config: RenderingConfig = field(default_factory=lambda: get_config().rendering)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def to_networkx(self, geo_graph: GeoGraph) -> nx.MultiDiGraph:
        """Convert the graph and its presentation state to networkx."""
        bounds = geo_graph.bounds
        graph_attributes: Dict[str, str] = {
            "truecolor": "true",
            "margin": "0",
            "outputorder": "nodesfirst",
            "bb": _quoted(
                f"{bounds.min_lon},{bounds.min_lat},{bounds.max_lon},{bounds.max_lat}"
            ),
        }
        if geo_graph.scale > 0:
            graph_attributes["inputscale"] = str(geo_graph.scale)

        multigraph = nx.MultiDiGraph()
        multigraph.graph["graph"] = graph_attributes

        for vertex_id, geo_vertex in geo_graph.vertices.items():
            attributes: Dict[str, str] = {
                "shape": "point",
                "color": geo_vertex.color,
                "width": str(geo_vertex.width),
            }
            if geo_vertex.has_coordinates:
                attributes["comment"] = _quoted(f"{geo_vertex.lat},{geo_vertex.lon}!")
            if geo_vertex.x is not None and geo_vertex.y is not None:
                attributes["pos"] = _quoted(f"{geo_vertex.y},{geo_vertex.x}!")
            multigraph.add_node(str(vertex_id), **attributes)

        for geo_edge in geo_graph.edges:
            edge = geo_edge.edge
            attributes = {
                "arrowhead": "none",
                "color": geo_edge.color,
                "penwidth": str(geo_edge.penwidth),
                "speed": str(edge.speed),
            }
            if edge.one_way:
                attributes["oneway"] = "true"
            if edge.distance_m is not None:
                attributes["distance"] = str(edge.distance_m)
            multigraph.add_edge(str(edge.from_id), str(edge.to_id), **attributes)

        return multigraph

    def render(self, geo_graph: GeoGraph, output_path: Path) -> Path:
        """Export the graph; the format follows the file suffix.

        Raises:
            RenderingError: If export or layout fails.
        """
        output_path = Path(output_path)
        fmt = output_path.suffix.lstrip(".").lower()
        if not fmt:
            raise RenderingError(
                "Output path has no suffix to infer a format from",
                output_path=str(output_path),
                renderer_type="graphviz",
            )

        self._logger.info(
            "Exporting graph",
            extra={
                "vertices": len(geo_graph),
                "edges": len(geo_graph.edges),
                "output_path": str(output_path),
                "output_format": fmt,
            },
        )

        try:
            dot = nx.nx_pydot.to_pydot(self.to_networkx(geo_graph))
            output_path.parent.mkdir(parents=True, exist_ok=True)
            if fmt in RAW_FORMATS:
                dot.write(str(output_path), format="raw")
            else:
                dot.write(str(output_path), prog=self.config.layout_program, format=fmt)
        except Exception as e:
            self._logger.error(
                "Graph export failed",
                extra={"error": str(e), "output_path": str(output_path)},
            )
            raise RenderingError(
                f"Graph export failed: {e}",
                output_path=str(output_path),
                renderer_type="graphviz",
                cause=e,
            )

        return output_path
