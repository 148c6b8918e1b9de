"""Graphviz DOT reader adapter.

Reads a graph previously written by GraphvizExporter, or laid out by
Graphviz itself, back into an AnnotatedGraph. The file is parsed with
pydot and converted through networkx's pydot bridge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import networkx as nx
import pydot

from ...domain.errors import GraphError
from ...domain.models import AnnotatedEdge, AnnotatedGraph, AnnotatedNode

# Added by networkx to multigraph edges, not part of the export
_INTERNAL_EDGE_KEYS = {"key"}


def graph_attributes(dot: pydot.Dot) -> Dict[str, Any]:
    """Graph-level attributes from both ``graph [...]`` and ``a=b;`` statements.

    Later ``graph [...]`` statements override earlier ones; top-level
    assignments override all of them.
    """
    attributes: Dict[str, Any] = {}
    defaults = dot.get_graph_defaults() or []
    if isinstance(defaults, dict):
        defaults = [defaults]
    for statement in defaults:
        attributes.update(statement)
    attributes.update(dot.get_attributes())
    return attributes


@dataclass
class DotGraphReader:
    """Graph source backed by a ``.dot`` / ``.gv`` file.

    Attributes:
        path: Location of the exported graph
    """

    path: Path
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self._logger = logging.getLogger(__name__)

    def read(self) -> AnnotatedGraph:
        """Parse the file into an annotated description.

        Raises:
            GraphError: If the file cannot be read or parsed.
        """
        self._logger.debug("Reading DOT file", extra={"path": str(self.path)})
        try:
            graphs = pydot.graph_from_dot_file(str(self.path))
        except Exception as e:
            raise GraphError(
                f"Failed to read DOT file: {e}",
                file_path=str(self.path),
                cause=e,
            )
        if not graphs:
            raise GraphError(
                "Failed to read DOT file: no graph found",
                file_path=str(self.path),
            )

        dot = graphs[0]
        multigraph = nx.nx_pydot.from_pydot(dot)

        nodes = tuple(
            AnnotatedNode(
                id=str(node_id),
                pos=attributes.get("pos"),
                comment=attributes.get("comment"),
            )
            for node_id, attributes in multigraph.nodes(data=True)
        )
        edges = tuple(
            AnnotatedEdge(
                from_id=str(u),
                to_id=str(v),
                attributes={
                    k: val for k, val in attributes.items() if k not in _INTERNAL_EDGE_KEYS
                },
            )
            for u, v, attributes in multigraph.edges(data=True)
        )
        bb = graph_attributes(dot).get("bb")

        self._logger.info(
            "DOT file read",
            extra={"path": str(self.path), "nodes": len(nodes), "edges": len(edges)},
        )
        return AnnotatedGraph(nodes=nodes, edges=edges, bb=bb)
