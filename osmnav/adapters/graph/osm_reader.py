"""OpenStreetMap XML reader adapter.

Reads the ``bounds``, ``node`` and ``way`` elements of an OSM extract
into MapRecords. Attribute values are kept as strings; turning them into
numbers is left to ingestion so that malformed coordinates are reported
only for nodes that end up in the graph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree

from ...domain.errors import GraphError
from ...domain.models import Bounds, MapNode, MapRecords, MapWay


@dataclass
class OsmXmlReader:
    """Graph source backed by an ``.osm`` / ``.xml`` file.

    Attributes:
        path: Location of the OSM extract
    """

    path: Path
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self._logger = logging.getLogger(__name__)

    def read(self) -> MapRecords:
        """Parse the file into map records.

        Raises:
            GraphError: If the file cannot be read or is not valid XML.
        """
        self._logger.debug("Reading OSM file", extra={"path": str(self.path)})
        try:
            root = ElementTree.parse(self.path).getroot()
        except (OSError, ElementTree.ParseError) as e:
            raise GraphError(
                f"Failed to read OSM file: {e}",
                file_path=str(self.path),
                cause=e,
            )

        bounds: Optional[Bounds] = None
        for element in root.findall("bounds"):
            bounds = self._parse_bounds(element)

        nodes = tuple(
            MapNode(id=element.get("id", ""), lat=element.get("lat"), lon=element.get("lon"))
            for element in root.findall("node")
            if element.get("id")
        )

        ways = tuple(self._parse_way(element) for element in root.findall("way"))

        self._logger.info(
            "OSM file read",
            extra={"path": str(self.path), "nodes": len(nodes), "ways": len(ways)},
        )
        return MapRecords(nodes=nodes, ways=ways, bounds=bounds)

    def _parse_way(self, element: ElementTree.Element) -> MapWay:
        # An nd without ref keeps its slot as "", so ingestion never joins
        # the nodes on either side of it
        node_refs = tuple(nd.get("ref", "") for nd in element.findall("nd"))
        if "" in node_refs:
            self._logger.warning(
                "Way has node reference without ref",
                extra={"way": element.get("id", "")},
            )
        return MapWay(
            node_refs=node_refs,
            tags=tuple(
                (tag.get("k", ""), tag.get("v", "")) for tag in element.findall("tag")
            ),
            id=element.get("id", ""),
        )

    def _parse_bounds(self, element: ElementTree.Element) -> Optional[Bounds]:
        try:
            return Bounds(
                min_lon=float(element.get("minlon", "")),
                min_lat=float(element.get("minlat", "")),
                max_lon=float(element.get("maxlon", "")),
                max_lat=float(element.get("maxlat", "")),
            )
        except ValueError:
            self._logger.warning(
                "Ignoring malformed bounds element",
                extra={"attributes": dict(element.attrib)},
            )
            return None
