"""Domain layer - Core graph models and errors.

This module contains the graph models, record types and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    GraphError,
    InvalidEdgeError,
    MalformedCoordinateError,
    NavigationError,
    NoRouteFoundError,
    RenderingError,
    VertexNotFoundError,
)
from .models import (
    DEFAULT_SPEED_KMH,
    AnnotatedEdge,
    AnnotatedGraph,
    AnnotatedNode,
    Bounds,
    Edge,
    GeoEdge,
    GeoGraph,
    GeoVertex,
    Graph,
    GraphRecords,
    GraphSource,
    InputFormat,
    MapNode,
    MapRecords,
    MapWay,
    RouteResult,
    RouteStatus,
    Vertex,
    VertexId,
)

__all__ = [
    # Models
    "DEFAULT_SPEED_KMH",
    "Vertex",
    "VertexId",
    "Edge",
    "Graph",
    "GeoVertex",
    "GeoEdge",
    "GeoGraph",
    "Bounds",
    "RouteResult",
    "RouteStatus",
    "InputFormat",
    "GraphSource",
    "GraphRecords",
    "MapNode",
    "MapWay",
    "MapRecords",
    "AnnotatedNode",
    "AnnotatedEdge",
    "AnnotatedGraph",
    # Errors
    "NavigationError",
    "InvalidEdgeError",
    "MalformedCoordinateError",
    "VertexNotFoundError",
    "GraphError",
    "NoRouteFoundError",
    "ConfigurationError",
    "RenderingError",
]
