"""Folium map renderer adapter.

Draws every edge of a GeoGraph as a polyline on an interactive HTML map
using the edge's presentation colour and width. Vertices that were
marked (start/end points, route stops) get a circle marker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from ...domain.errors import RenderingError
from ...domain.models import DEFAULT_COLOR, GeoGraph


@dataclass
class FoliumMapRenderer:
    """Folium-based interactive map renderer.

    Attributes:
        zoom_start: Initial zoom level before fitting to the bounds
    """

    zoom_start: int = 14
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def render(self, geo_graph: GeoGraph, output_path: Path) -> Path:
        """Render the graph on a map and save it to an HTML file.

        Raises:
            RenderingError: If the graph has no coordinates or rendering fails.
        """
        output_path = Path(output_path)
        located = [v for v in geo_graph.vertices.values() if v.has_coordinates]
        if not located:
            raise RenderingError(
                "Cannot render a graph without coordinates",
                output_path=str(output_path),
                renderer_type="folium",
            )

        self._logger.info(
            "Rendering graph map",
            extra={
                "vertices": len(geo_graph),
                "edges": len(geo_graph.edges),
                "output_path": str(output_path),
            },
        )

        try:
            import folium

            center_lat = sum(v.lat for v in located) / len(located)
            center_lon = sum(v.lon for v in located) / len(located)
            m = folium.Map(
                location=[center_lat, center_lon],
                zoom_start=self.zoom_start,
                control_scale=True,
            )

            for geo_edge in geo_graph.edges:
                if not (geo_edge.v1.has_coordinates and geo_edge.v2.has_coordinates):
                    continue
                folium.PolyLine(
                    locations=[
                        (geo_edge.v1.lat, geo_edge.v1.lon),
                        (geo_edge.v2.lat, geo_edge.v2.lon),
                    ],
                    color=geo_edge.color,
                    weight=geo_edge.penwidth,
                    opacity=0.8,
                ).add_to(m)

            for geo_vertex in located:
                if geo_vertex.color == DEFAULT_COLOR:
                    continue
                folium.CircleMarker(
                    location=(geo_vertex.lat, geo_vertex.lon),
                    radius=4,
                    color=geo_vertex.color,
                    fill=True,
                    tooltip=str(geo_vertex.id),
                ).add_to(m)

            corners: List[Tuple[float, float]] = [
                (min(v.lat for v in located), min(v.lon for v in located)),
                (max(v.lat for v in located), max(v.lon for v in located)),
            ]
            m.fit_bounds(corners)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            m.save(str(output_path))

            self._logger.info(
                "Map rendered successfully",
                extra={"output_path": str(output_path)},
            )
            return output_path

        except ImportError as e:
            raise RenderingError(
                "Folium not installed",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )
        except Exception as e:
            self._logger.error(
                "Map rendering failed",
                extra={"error": str(e), "output_path": str(output_path)},
            )
            raise RenderingError(
                f"Map rendering failed: {e}",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )
