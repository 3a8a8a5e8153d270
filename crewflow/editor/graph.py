"""In-memory flow graph with referential invariants.

Nodes and edges live in insertion-ordered dicts keyed by id, with an
outgoing/incoming adjacency index alongside. The graph is not assumed to be
acyclic: loop bodies routinely point back at their loop node.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import pydantic

from crewflow.editor.history import GraphSnapshot
from crewflow.editor.rules import BRANCH_HANDLES, classify
from crewflow.errors import ValidationError
from crewflow.models.flow import Flow, FlowEdge, FlowNode, NodeData, Position
from crewflow.utils.identifiers import generate_edge_id

logger = logging.getLogger(__name__)

# camelCase alias -> attribute name for node payload fields
_DATA_ALIASES = {
    field.alias: name
    for name, field in NodeData.model_fields.items()
    if field.alias
}


class GraphModel:
    """Mutable node/edge store for one flow.

    Mutations are synchronous and never touch storage. Rejected edits raise
    `ValidationError` and leave the graph exactly as it was.
    """

    def __init__(
        self,
        nodes: Iterable[FlowNode] | None = None,
        edges: Iterable[FlowEdge] | None = None,
    ) -> None:
        self._nodes: dict[str, FlowNode] = {}
        self._edges: dict[str, FlowEdge] = {}
        self._outgoing: dict[str, list[str]] = {}
        self._incoming: dict[str, list[str]] = {}
        self._selected_id: str | None = None

        for node in nodes or ():
            self.add_node(node)
        for edge in edges or ():
            self.add_edge(edge)

    @classmethod
    def from_flow(cls, flow: Flow) -> GraphModel:
        """Build a graph from a flow record, validating every edge."""
        return cls(
            (node.model_copy(deep=True) for node in flow.nodes),
            (edge.model_copy(deep=True) for edge in flow.edges),
        )

    # -- queries --

    @property
    def nodes(self) -> list[FlowNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[FlowEdge]:
        return list(self._edges.values())

    def find_node(self, node_id: str) -> FlowNode | None:
        return self._nodes.get(node_id)

    def find_edge(self, edge_id: str) -> FlowEdge | None:
        return self._edges.get(edge_id)

    def outgoing(self, node_id: str) -> list[FlowEdge]:
        """Edges leaving a node, in insertion order."""
        return [self._edges[eid] for eid in self._outgoing.get(node_id, ())]

    def incoming(self, node_id: str) -> list[FlowEdge]:
        """Edges entering a node, in insertion order."""
        return [self._edges[eid] for eid in self._incoming.get(node_id, ())]

    def incident_edges(self, node_id: str) -> list[FlowEdge]:
        """Every edge touching a node; a self-loop is listed once."""
        seen = dict.fromkeys(self._outgoing.get(node_id, ()))
        seen.update(dict.fromkeys(self._incoming.get(node_id, ())))
        return [self._edges[eid] for eid in seen]

    def search(self, query: str) -> list[FlowNode]:
        """Nodes whose label or description contains `query` (case-insensitive).

        An empty query matches every node.
        """
        needle = query.strip().lower()
        if not needle:
            return self.nodes
        return [
            node
            for node in self._nodes.values()
            if needle in node.label.lower()
            or needle in (node.data.description or "").lower()
        ]

    # -- selection --

    @property
    def selected_node(self) -> FlowNode | None:
        if self._selected_id is None:
            return None
        return self._nodes.get(self._selected_id)

    def select(self, node_id: str | None) -> FlowNode | None:
        """Select a node by id, or clear the selection with None."""
        if node_id is not None and node_id not in self._nodes:
            raise ValidationError(f"cannot select unknown node: {node_id}")
        self._selected_id = node_id
        return self.selected_node

    # -- node mutations --

    def add_node(self, node: FlowNode) -> FlowNode:
        if node.id in self._nodes:
            raise ValidationError(f"duplicate node id: {node.id}")
        self._nodes[node.id] = node
        self._outgoing[node.id] = []
        self._incoming[node.id] = []
        return node

    def remove_node(self, node_id: str) -> FlowNode | None:
        """Remove a node and every edge incident to it.

        Removing an unknown id is a no-op and returns None.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return None

        for edge in self.incident_edges(node_id):
            self._unlink_edge(edge)

        del self._nodes[node_id]
        del self._outgoing[node_id]
        del self._incoming[node_id]

        if self._selected_id == node_id:
            self._selected_id = None
        return node

    def update_node_position(self, node_id: str, position: Position) -> FlowNode:
        node = self._require_node(node_id)
        node.position = position.model_copy()
        return node

    def update_node(
        self,
        node_id: str,
        label: str | None = None,
        data: dict[str, Any] | None = None,
        parent_node_id: str | None = None,
    ) -> FlowNode:
        """Edit a node's fields in place.

        `data` is merged into the existing payload; keys may use either the
        attribute names or their camelCase aliases.
        """
        node = self._require_node(node_id)

        new_data = node.data
        if data:
            merged = node.data.model_dump(exclude_none=True)
            for key, value in data.items():
                merged[_DATA_ALIASES.get(key, key)] = value
            try:
                new_data = NodeData.model_validate(merged)
            except pydantic.ValidationError as exc:
                raise ValidationError(f"invalid data for node {node_id}: {exc}") from exc

        if parent_node_id is not None and parent_node_id not in self._nodes:
            raise ValidationError(f"unknown parent node: {parent_node_id}")

        node.data = new_data
        if label is not None:
            node.label = label
        if parent_node_id is not None:
            node.parent_node_id = parent_node_id
        return node

    # -- edge mutations --

    def add_edge(self, edge: FlowEdge) -> FlowEdge:
        """Insert an edge after checking endpoints and handle uniqueness.

        The stored edge's kind is always re-derived from its source node
        and handle, whatever the caller supplied.
        """
        if edge.id in self._edges:
            raise ValidationError(f"duplicate edge id: {edge.id}")

        source = self._nodes.get(edge.source)
        if source is None:
            raise ValidationError(f"edge {edge.id} references unknown source node: {edge.source}")
        if edge.target not in self._nodes:
            raise ValidationError(f"edge {edge.id} references unknown target node: {edge.target}")

        handles = BRANCH_HANDLES.get(source.type, {})
        if edge.source_handle in handles:
            for existing in self.outgoing(source.id):
                if existing.source_handle == edge.source_handle:
                    raise ValidationError(
                        f"{source.type.value} node {source.id} already has an "
                        f"outgoing '{edge.source_handle}' edge ({existing.id})"
                    )

        kind = classify(source.type, edge.source_handle)
        if kind != edge.kind:
            logger.debug("edge %s kind %s re-derived as %s", edge.id, edge.kind.value, kind.value)
            edge = FlowEdge(
                id=edge.id,
                source=edge.source,
                target=edge.target,
                source_handle=edge.source_handle,
                kind=kind,
                label=edge.label,
            )

        self._edges[edge.id] = edge
        self._outgoing[edge.source].append(edge.id)
        self._incoming[edge.target].append(edge.id)
        return edge

    def connect(
        self,
        source: str,
        target: str,
        source_handle: str | None = None,
        label: str | None = None,
    ) -> FlowEdge:
        """Create an edge between two nodes with a derived kind."""
        source_node = self._nodes.get(source)
        if source_node is None:
            raise ValidationError(f"cannot connect from unknown node: {source}")

        edge = FlowEdge(
            id=generate_edge_id(),
            source=source,
            target=target,
            source_handle=source_handle,
            kind=classify(source_node.type, source_handle),
            label=label,
        )
        return self.add_edge(edge)

    def remove_edge(self, edge_id: str) -> FlowEdge | None:
        """Remove an edge; unknown ids are a no-op returning None."""
        edge = self._edges.get(edge_id)
        if edge is None:
            return None
        self._unlink_edge(edge)
        return edge

    # -- snapshots --

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot.capture(self._nodes.values(), self._edges.values())

    def restore(self, snapshot: GraphSnapshot) -> None:
        """Replace the whole graph with a copy of `snapshot`."""
        restored = GraphModel(
            (node.model_copy(deep=True) for node in snapshot.nodes),
            (edge.model_copy(deep=True) for edge in snapshot.edges),
        )
        self._nodes = restored._nodes
        self._edges = restored._edges
        self._outgoing = restored._outgoing
        self._incoming = restored._incoming
        if self._selected_id not in self._nodes:
            self._selected_id = None

    # -- internals --

    def _require_node(self, node_id: str) -> FlowNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise ValidationError(f"unknown node: {node_id}")
        return node

    def _unlink_edge(self, edge: FlowEdge) -> None:
        del self._edges[edge.id]
        self._outgoing[edge.source].remove(edge.id)
        self._incoming[edge.target].remove(edge.id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"GraphModel(nodes={len(self._nodes)}, edges={len(self._edges)})"
