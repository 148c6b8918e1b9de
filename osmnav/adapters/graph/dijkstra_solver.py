"""Dijkstra Route Solver adapter.

This adapter wraps graph/dijkstra.py and adds:
- One-way enforcement from configuration
- Logging
- A raising variant for callers that treat no route as an error
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...domain.errors import NoRouteFoundError
from ...domain.models import GeoGraph, RouteResult, VertexId
from ...graph.dijkstra import shortest_path


@dataclass
class DijkstraRouteSolver:
    """Route solver using Dijkstra's shortest path algorithm.

    Attributes:
        enforce_one_way: Follow one-way edges only in their nominal direction
        logger: Logger for solver and search events (module logger if None)
    """

    enforce_one_way: bool = False
    logger: Optional[logging.Logger] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = self.logger or logging.getLogger(__name__)

    def solve(
        self,
        geo_graph: GeoGraph,
        source: VertexId,
        target: VertexId,
    ) -> RouteResult:
        """Find the fastest path between two vertices.

        Returns:
            RouteResult, UNREACHABLE when the vertices are not connected.

        Raises:
            VertexNotFoundError: If source or target is not in the graph.
        """
        self._logger.debug(
            "Solving route",
            extra={
                "source": source,
                "target": target,
                "enforce_one_way": self.enforce_one_way,
            },
        )

        route = shortest_path(
            source,
            target,
            geo_graph,
            enforce_one_way=self.enforce_one_way,
            logger=self._logger,
        )

        if route.is_unreachable:
            self._logger.warning(
                "No route found",
                extra={"source": source, "target": target},
            )
        else:
            self._logger.info(
                "Route found",
                extra={
                    "source": source,
                    "target": target,
                    "stops": route.num_stops,
                    "time_minutes": route.total_time_minutes,
                },
            )
        return route

    def solve_or_raise(
        self,
        geo_graph: GeoGraph,
        source: VertexId,
        target: VertexId,
    ) -> RouteResult:
        """Like solve(), but raises instead of returning UNREACHABLE.

        Raises:
            NoRouteFoundError: If no path exists.
        """
        route = self.solve(geo_graph, source, target)
        if route.is_unreachable:
            raise NoRouteFoundError(
                f"No path from {source!r} to {target!r}",
                source=source,
                target=target,
            )
        return route
