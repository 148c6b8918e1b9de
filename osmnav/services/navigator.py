"""Navigator service - Main orchestrator.

Wires a graph source, ingestion, component filtering, routing and
rendering together. The service holds the currently loaded GeoGraph and
annotates it in place (route and endpoint marks) before rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Tuple

from ..config import IngestionConfig, RenderingConfig, get_config
from ..domain.errors import ConfigurationError, GraphError
from ..domain.models import (
    GeoGraph,
    GraphRecords,
    GraphSource,
    InputFormat,
    RouteResult,
    VertexId,
)
from ..graph.connectivity import restrict_to_largest_component
from ..graph.dijkstra import nearest_vertices
from ..graph.load_graph import ingest
from ..ports.graph import GraphSourcePort, RouteSolverPort
from ..ports.rendering import GraphRendererPort

Coordinate = Tuple[float, float]
SourceFactory = Callable[[Path], GraphSourcePort]


@dataclass
class NavigatorService:
    """Main service for loading a road network and routing on it.

    Attributes:
        route_solver: Computes fastest paths
        readers: Graph source factory per input format
        renderer: Optional renderer used by export()
        ingestion: Graph construction settings
        rendering: Route annotation settings
        logger: Logger handed to ingestion and filtering (module logger if None)
    """

    route_solver: RouteSolverPort
    readers: Mapping[InputFormat, SourceFactory]
    renderer: Optional[GraphRendererPort] = None
    ingestion: IngestionConfig = field(default_factory=lambda: get_config().ingestion)
    rendering: RenderingConfig = field(default_factory=lambda: get_config().rendering)
    logger: Optional[logging.Logger] = field(default=None, repr=False)

    _geo_graph: Optional[GeoGraph] = field(default=None, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = self.logger or logging.getLogger(__name__)

    @property
    def geo_graph(self) -> GeoGraph:
        """The currently loaded graph.

        Raises:
            GraphError: If nothing has been loaded yet.
        """
        if self._geo_graph is None:
            raise GraphError("No graph loaded")
        return self._geo_graph

    def load(self, source: GraphSource) -> GeoGraph:
        """Read, build and (optionally) filter the graph stored at ``source``.

        Raises:
            ConfigurationError: If no reader handles the source format.
            GraphError: If the file cannot be read.
            InvalidEdgeError: If an edge references an unknown vertex.
            MalformedCoordinateError: If a vertex has unusable coordinates.
        """
        factory = self.readers.get(source.format)
        if factory is None:
            raise ConfigurationError(
                f"No reader registered for {source.format.name}",
                setting_name="readers",
            )
        self._logger.info(
            "Loading graph",
            extra={"path": str(source.path), "input_format": source.format.name},
        )
        return self.load_records(factory(source.path).read())

    def load_records(self, records: GraphRecords) -> GeoGraph:
        """Build the graph from records that were already parsed."""
        _, geo_graph = ingest(
            records,
            highway_whitelist=self.ingestion.highway_whitelist,
            default_speed=self.ingestion.default_speed_kmh,
            strict_references=self.ingestion.strict_references,
            logger=self._logger,
        )
        if self.ingestion.restrict_to_largest_component:
            _, geo_graph = restrict_to_largest_component(geo_graph, logger=self._logger)

        self._geo_graph = geo_graph
        return geo_graph

    def vertex_listing(self) -> List[Tuple[VertexId, Optional[float], Optional[float]]]:
        """Id, latitude and longitude of every vertex."""
        return [(v.id, v.lat, v.lon) for v in self.geo_graph.vertices.values()]

    def mark_vertices(self, start: VertexId, end: VertexId) -> None:
        self.geo_graph.mark_endpoints(
            start,
            end,
            color=self.rendering.route_color,
            vertex_width=self.rendering.marked_vertex_width,
        )

    def mark_nearest(self, start: Coordinate, end: Coordinate) -> Tuple[VertexId, VertexId]:
        """Mark the vertices closest to two (lat, lon) points and return their ids."""
        start_id, end_id = nearest_vertices(start, end, self.geo_graph)
        self.mark_vertices(start_id, end_id)
        return start_id, end_id

    def route(self, start: Coordinate, end: Coordinate) -> RouteResult:
        """Fastest route between two (lat, lon) points.

        Both points are anchored to their nearest vertex. A found route
        is marked on the graph.
        """
        geo_graph = self.geo_graph
        start_id, end_id = nearest_vertices(start, end, geo_graph)
        self._logger.debug(
            "Anchored coordinates",
            extra={"start": start, "end": end, "source": start_id, "target": end_id},
        )

        route = self.route_solver.solve(geo_graph, start_id, end_id)
        if route.is_found:
            geo_graph.mark_route(
                route.path,
                color=self.rendering.route_color,
                penwidth=self.rendering.route_penwidth,
                vertex_width=self.rendering.marked_vertex_width,
            )
            self._logger.info(
                "Route marked",
                extra={
                    "stops": route.num_stops,
                    "time_minutes": round(route.total_time_minutes, 3),
                },
            )
        return route

    def export(self, output_path: Path) -> Path:
        """Render the loaded graph with its current marks.

        Raises:
            ConfigurationError: If no renderer is configured.
            RenderingError: If rendering fails.
        """
        if self.renderer is None:
            raise ConfigurationError("No renderer configured", setting_name="renderer")
        return self.renderer.render(self.geo_graph, Path(output_path))
