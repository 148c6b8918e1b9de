"""Typed domain errors for OSM navigation.

All errors inherit from NavigationError and can optionally wrap a root
cause exception for debugging. An unreachable destination is not an
error: it is reported through RouteResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class NavigationError(Exception):
    """Base error for the navigation domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class InvalidEdgeError(NavigationError):
    """An edge references a vertex id absent from the graph.

    Attributes:
        from_id: Nominal start of the offending edge
        to_id: Nominal end of the offending edge
        missing_id: The endpoint that could not be resolved
    """

    from_id: Any = None
    to_id: Any = None
    missing_id: Any = None


@dataclass
class MalformedCoordinateError(NavigationError):
    """A vertex lacks a usable latitude/longitude.

    Attributes:
        vertex_id: Vertex whose coordinate is unusable (if known)
        value: The raw value that failed to parse
    """

    vertex_id: Any = None
    value: Any = None


@dataclass
class VertexNotFoundError(NavigationError):
    """Vertex id not found in the graph.

    Attributes:
        vertex_id: The id that was not found
    """

    vertex_id: Any = None


@dataclass
class GraphError(NavigationError):
    """Graph loading or data integrity error.

    Attributes:
        file_path: Path to the graph data file if relevant
    """

    file_path: Optional[str] = None


@dataclass
class NoRouteFoundError(NavigationError):
    """No path exists between the requested vertices.

    Attributes:
        source: Source vertex id
        target: Target vertex id
    """

    source: Any = None
    target: Any = None


@dataclass
class ConfigurationError(NavigationError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""


@dataclass
class RenderingError(NavigationError):
    """Graph export or map rendering failed.

    Attributes:
        output_path: Path where rendering was attempted
        renderer_type: Type of renderer that failed
    """

    output_path: Optional[str] = None
    renderer_type: str = ""
