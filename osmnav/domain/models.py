"""Domain models for OSM navigation.

Value types are frozen dataclasses with slots. The two graph containers
are plain classes: ``Graph`` is an index arena built once and never
mutated, ``GeoGraph`` adds coordinates and the presentation state that
callers change to annotate a route before rendering.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from types import MappingProxyType
from typing import (
    ClassVar,
    Dict,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .errors import GraphError, InvalidEdgeError, VertexNotFoundError

VertexId = Hashable

DEFAULT_SPEED_KMH = 50.0
DEFAULT_COLOR = "black"
DEFAULT_VERTEX_WIDTH = 0.1
DEFAULT_EDGE_PENWIDTH = 2.0


class InputFormat(Enum):
    """Shape of the records a graph is built from."""

    MAP_RECORDS = auto()
    ANNOTATED_GRAPH = auto()

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "InputFormat":
        """Infer the format from a file suffix (``osm``/``xml``, ``dot``/``gv``)."""
        suffix = Path(path).suffix.lower().lstrip(".")
        if suffix in {"osm", "xml"}:
            return cls.MAP_RECORDS
        if suffix in {"dot", "gv"}:
            return cls.ANNOTATED_GRAPH
        raise ValueError(f"Unrecognized graph file type: {suffix or str(path)!r}")


class RouteStatus(Enum):
    FOUND = auto()
    UNREACHABLE = auto()


@dataclass(frozen=True, slots=True)
class Vertex:
    id: VertexId


@dataclass(frozen=True, slots=True)
class Edge:
    """A road segment between two vertices.

    Attributes:
        from_id: Nominal start vertex
        to_id: Nominal end vertex
        speed: Maximum speed in km/h
        one_way: Whether the segment is tagged one-way
        distance_m: Length in meters, None when the input carried none
    """

    from_id: VertexId
    to_id: VertexId
    speed: float = DEFAULT_SPEED_KMH
    one_way: bool = False
    distance_m: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.speed > 0:
            raise ValueError(f"Edge speed must be positive, got {self.speed}")
        if self.distance_m is not None and not self.distance_m >= 0:
            raise ValueError(
                f"Edge distance must be non-negative, got {self.distance_m}"
            )


@dataclass(frozen=True, slots=True)
class Bounds:
    """Bounding box of a map, used for display scaling only."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def scale(self) -> float:
        return abs(min(self.max_lon - self.min_lon, self.max_lat - self.min_lat)) / 10.0

    @classmethod
    def from_points(cls, points: Iterable[Tuple[Optional[float], Optional[float]]]) -> "Bounds":
        """Derive bounds from (lat, lon) pairs, skipping unknown coordinates."""
        lats: List[float] = []
        lons: List[float] = []
        for lat, lon in points:
            if lat is None or lon is None:
                continue
            lats.append(lat)
            lons.append(lon)
        if not lats:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(min(lons), min(lats), max(lons), max(lats))


@dataclass(slots=True)
class GeoVertex:
    """A vertex with geographic and display coordinates.

    ``color`` and ``width`` are rendering hints only.
    """

    id: VertexId
    lat: Optional[float]
    lon: Optional[float]
    x: Optional[float] = None
    y: Optional[float] = None
    color: str = DEFAULT_COLOR
    width: float = DEFAULT_VERTEX_WIDTH

    def __post_init__(self) -> None:
        if self.x is None:
            self.x = self.lat
        if self.y is None:
            self.y = self.lon

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass(slots=True, eq=False)
class GeoEdge:
    edge: Edge
    v1: GeoVertex
    v2: GeoVertex
    color: str = DEFAULT_COLOR
    penwidth: float = DEFAULT_EDGE_PENWIDTH


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Result of a shortest-path query.

    Attributes:
        source: Source vertex id
        target: Target vertex id
        status: FOUND or UNREACHABLE
        path: Ordered vertex ids from source to target (empty if unreachable)
        total_time_minutes: Travel time along the path (inf if unreachable)
    """

    source: VertexId
    target: VertexId
    status: RouteStatus
    path: Tuple[VertexId, ...] = ()
    total_time_minutes: float = math.inf

    @classmethod
    def unreachable(cls, source: VertexId, target: VertexId) -> "RouteResult":
        return cls(source=source, target=target, status=RouteStatus.UNREACHABLE)

    @property
    def is_found(self) -> bool:
        return self.status is RouteStatus.FOUND

    @property
    def is_unreachable(self) -> bool:
        return self.status is RouteStatus.UNREACHABLE

    @property
    def num_stops(self) -> int:
        return len(self.path)


class Graph:
    """Immutable road graph stored as an index arena.

    Vertices keep the insertion order of the mapping they were built
    from; that order defines their index. Each index has the tuple of
    positions (into ``edges``) of the edges incident to it, regardless
    of edge direction.

    Raises:
        InvalidEdgeError: If an edge endpoint is not a known vertex.
    """

    __slots__ = ("_vertices", "_ids", "_index", "_edges", "_endpoints", "_incident")

    def __init__(self, vertices: Mapping[VertexId, Vertex], edges: Iterable[Edge] = ()) -> None:
        self._vertices: Dict[VertexId, Vertex] = dict(vertices)
        for key, vertex in self._vertices.items():
            if key != vertex.id:
                raise GraphError(f"Vertex keyed {key!r} carries id {vertex.id!r}")

        self._ids: Tuple[VertexId, ...] = tuple(self._vertices)
        self._index: Dict[VertexId, int] = {vid: i for i, vid in enumerate(self._ids)}
        self._edges: Tuple[Edge, ...] = tuple(edges)

        incident: List[List[int]] = [[] for _ in self._ids]
        endpoints: List[Tuple[int, int]] = []
        for position, edge in enumerate(self._edges):
            for endpoint in (edge.from_id, edge.to_id):
                if endpoint not in self._index:
                    raise InvalidEdgeError(
                        f"Edge {edge.from_id!r} -> {edge.to_id!r} references unknown vertex {endpoint!r}",
                        from_id=edge.from_id,
                        to_id=edge.to_id,
                        missing_id=endpoint,
                    )
            i = self._index[edge.from_id]
            j = self._index[edge.to_id]
            endpoints.append((i, j))
            incident[i].append(position)
            if j != i:
                incident[j].append(position)

        self._endpoints: Tuple[Tuple[int, int], ...] = tuple(endpoints)
        self._incident: Tuple[Tuple[int, ...], ...] = tuple(tuple(p) for p in incident)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._index

    def __iter__(self) -> Iterator[VertexId]:
        return iter(self._ids)

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._ids)}, edges={len(self._edges)})"

    @property
    def vertices(self) -> Mapping[VertexId, Vertex]:
        return MappingProxyType(self._vertices)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def ids(self) -> Tuple[VertexId, ...]:
        return self._ids

    def vertex(self, vertex_id: VertexId) -> Vertex:
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise VertexNotFoundError(
                f"Vertex not in graph: {vertex_id!r}", vertex_id=vertex_id
            ) from None

    def index_of(self, vertex_id: VertexId) -> int:
        try:
            return self._index[vertex_id]
        except KeyError:
            raise VertexNotFoundError(
                f"Vertex not in graph: {vertex_id!r}", vertex_id=vertex_id
            ) from None

    def id_at(self, index: int) -> VertexId:
        return self._ids[index]

    def incident(self, index: int) -> Tuple[int, ...]:
        """Positions of the edges touching the vertex at ``index``."""
        return self._incident[index]

    def endpoints(self, position: int) -> Tuple[int, int]:
        """Vertex indices (from, to) of the edge at ``position``."""
        return self._endpoints[position]

    def neighbours(self, vertex_id: VertexId) -> List[VertexId]:
        """Ids adjacent to ``vertex_id`` ignoring edge direction."""
        index = self.index_of(vertex_id)
        result: List[VertexId] = []
        seen = set()
        for position in self._incident[index]:
            i, j = self._endpoints[position]
            other = j if i == index else i
            if other not in seen:
                seen.add(other)
                result.append(self._ids[other])
        return result


class GeoGraph:
    """Geo-annotated view of a Graph.

    Owns the Graph, one GeoVertex per vertex, one GeoEdge per edge (in
    the same order as ``graph.edges``) and the map bounds.
    """

    __slots__ = ("graph", "_vertices", "_edges", "bounds")

    def __init__(
        self,
        graph: Graph,
        vertices: Mapping[VertexId, GeoVertex],
        edges: Iterable[GeoEdge],
        bounds: Bounds,
    ) -> None:
        missing = [vid for vid in graph.ids if vid not in vertices]
        if missing:
            raise GraphError(f"Geo view lacks vertices: {missing[:5]!r}")

        self.graph = graph
        self._vertices: Dict[VertexId, GeoVertex] = {vid: vertices[vid] for vid in graph.ids}
        self._edges: Tuple[GeoEdge, ...] = tuple(edges)
        if len(self._edges) != len(graph.edges):
            raise GraphError(
                f"Geo view has {len(self._edges)} edges, graph has {len(graph.edges)}"
            )
        self.bounds = bounds

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._vertices

    def __repr__(self) -> str:
        return f"GeoGraph(vertices={len(self._vertices)}, edges={len(self._edges)})"

    @property
    def vertices(self) -> Mapping[VertexId, GeoVertex]:
        return MappingProxyType(self._vertices)

    @property
    def edges(self) -> Tuple[GeoEdge, ...]:
        return self._edges

    @property
    def scale(self) -> float:
        return self.bounds.scale

    def vertex(self, vertex_id: VertexId) -> GeoVertex:
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise VertexNotFoundError(
                f"Vertex not in graph: {vertex_id!r}", vertex_id=vertex_id
            ) from None

    def mark_route(
        self,
        path: Sequence[VertexId],
        color: str = "red",
        penwidth: float = 3.0,
        vertex_width: float = 0.2,
    ) -> int:
        """Recolour the vertices of ``path`` and the edges joining consecutive ones.

        Returns:
            Number of edges marked.
        """
        for vertex_id in path:
            geo_vertex = self.vertex(vertex_id)
            geo_vertex.color = color
            geo_vertex.width = vertex_width

        hops = {frozenset(pair) for pair in zip(path, path[1:])}
        marked = 0
        for geo_edge in self._edges:
            if frozenset((geo_edge.v1.id, geo_edge.v2.id)) in hops:
                geo_edge.color = color
                geo_edge.penwidth = penwidth
                marked += 1
        return marked

    def mark_endpoints(
        self,
        start: VertexId,
        end: VertexId,
        color: str = "red",
        vertex_width: float = 0.2,
    ) -> None:
        for vertex_id in (start, end):
            geo_vertex = self.vertex(vertex_id)
            geo_vertex.color = color
            geo_vertex.width = vertex_width

    def clear_marks(self) -> None:
        for geo_vertex in self._vertices.values():
            geo_vertex.color = DEFAULT_COLOR
            geo_vertex.width = DEFAULT_VERTEX_WIDTH
        for geo_edge in self._edges:
            geo_edge.color = DEFAULT_COLOR
            geo_edge.penwidth = DEFAULT_EDGE_PENWIDTH


# Records produced by readers and consumed by ingestion


@dataclass(frozen=True, slots=True)
class MapNode:
    id: str
    lat: Union[str, float, None]
    lon: Union[str, float, None]


@dataclass(frozen=True, slots=True)
class MapWay:
    """An OSM way: ordered node references plus key/value tags."""

    node_refs: Tuple[str, ...]
    tags: Tuple[Tuple[str, str], ...] = ()
    id: str = ""

    def tag_values(self, key: str) -> List[str]:
        return [v for k, v in self.tags if k == key]

    def has_tag(self, key: str) -> bool:
        return any(k == key for k, _ in self.tags)


@dataclass(frozen=True, slots=True)
class MapRecords:
    format: ClassVar[InputFormat] = InputFormat.MAP_RECORDS

    nodes: Tuple[MapNode, ...] = ()
    ways: Tuple[MapWay, ...] = ()
    bounds: Optional[Bounds] = None


@dataclass(frozen=True, slots=True)
class AnnotatedNode:
    """A vertex of a previously exported graph.

    Attributes:
        id: Vertex id
        pos: Display position encoded as ``"y,x!"``
        comment: Geographic position encoded as ``"lat,lon!"``
    """

    id: str
    pos: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AnnotatedEdge:
    from_id: str
    to_id: str
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AnnotatedGraph:
    format: ClassVar[InputFormat] = InputFormat.ANNOTATED_GRAPH

    nodes: Tuple[AnnotatedNode, ...] = ()
    edges: Tuple[AnnotatedEdge, ...] = ()
    bb: Optional[str] = None


GraphRecords = Union[MapRecords, AnnotatedGraph]


@dataclass(frozen=True, slots=True)
class GraphSource:
    """A graph file together with the caller-selected format."""

    path: Path
    format: InputFormat

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "GraphSource":
        return cls(path=Path(path), format=InputFormat.from_path(path))
