"""Editing session over one flow.

Wires the graph, connection rules, history and layout together. Every
user-level edit that changes the graph's structure (add, delete, duplicate,
connect, reorganize) pushes exactly one post-edit snapshot. Drags and field
edits change the graph in place without a history entry.
"""

from __future__ import annotations

import logging
from typing import Any

from crewflow.editor.graph import GraphModel
from crewflow.editor.history import GraphSnapshot, HistoryStack
from crewflow.editor.layout import organize_layout
from crewflow.editor.serializer import commit
from crewflow.models.flow import Flow, FlowEdge, FlowNode, NodeData, NodeType, Position
from crewflow.utils.identifiers import generate_node_id

logger = logging.getLogger(__name__)

DEFAULT_POSITION = Position(x=400, y=300)
DUPLICATE_OFFSET = 50


def create_node(node_type: NodeType | str, x: float, y: float) -> FlowNode:
    """Build a fresh node of `node_type` with a default label and description."""
    node_type = NodeType(node_type)
    readable = node_type.value.replace("_", " ")
    return FlowNode(
        id=generate_node_id(),
        type=node_type,
        label=readable[:1].upper() + readable[1:],
        data=NodeData(description=f"New {readable} node"),
        position=Position(x=x, y=y),
    )


class FlowEditor:
    """Interactive editor state for a single flow."""

    def __init__(self, flow: Flow, history_limit: int | None = None) -> None:
        self.flow = flow
        self.graph = GraphModel.from_flow(flow)
        self.history = HistoryStack(limit=history_limit)
        self.history.push(self.graph.snapshot())

    # -- structural edits (one history entry each) --

    def add_node(
        self,
        node_type: NodeType | str,
        position: Position | None = None,
    ) -> FlowNode:
        position = position or DEFAULT_POSITION
        node = self.graph.add_node(create_node(node_type, position.x, position.y))
        self._record()
        logger.debug("added %s node %s", node.type.value, node.id)
        return node

    def delete_node(self, node_id: str | None = None) -> FlowNode | None:
        """Delete a node (the selected one by default) and its edges.

        Deleting nothing records no history.
        """
        if node_id is None:
            selected = self.graph.selected_node
            if selected is None:
                return None
            node_id = selected.id

        removed = self.graph.remove_node(node_id)
        if removed is not None:
            self._record()
            logger.debug("deleted %s node %s", removed.type.value, removed.id)
        return removed

    def duplicate_node(self, node_id: str | None = None) -> FlowNode | None:
        """Copy a node (the selected one by default) under a new id, offset diagonally.

        Edges are not copied.
        """
        source = self.graph.find_node(node_id) if node_id else self.graph.selected_node
        if source is None:
            return None

        copy = source.model_copy(
            update={
                "id": generate_node_id(),
                "position": Position(
                    x=source.position.x + DUPLICATE_OFFSET,
                    y=source.position.y + DUPLICATE_OFFSET,
                ),
            },
            deep=True,
        )
        self.graph.add_node(copy)
        self._record()
        return copy

    def connect(
        self,
        source: str,
        target: str,
        source_handle: str | None = None,
        label: str | None = None,
    ) -> FlowEdge:
        """Connect two nodes; a rejected connection records no history."""
        edge = self.graph.connect(source, target, source_handle=source_handle, label=label)
        self._record()
        return edge

    def organize_layout(self) -> list[FlowNode]:
        """Rearrange every node on the type-grouped grid."""
        arranged = organize_layout(self.graph.nodes)
        for node in arranged:
            self.graph.update_node_position(node.id, node.position)
        self._record()
        return self.graph.nodes

    # -- in-place edits (no history entry) --

    def move_node(self, node_id: str, position: Position) -> FlowNode:
        return self.graph.update_node_position(node_id, position)

    def update_node(
        self,
        node_id: str,
        label: str | None = None,
        data: dict[str, Any] | None = None,
        parent_node_id: str | None = None,
    ) -> FlowNode:
        return self.graph.update_node(
            node_id, label=label, data=data, parent_node_id=parent_node_id
        )

    def select(self, node_id: str | None) -> FlowNode | None:
        return self.graph.select(node_id)

    # -- history --

    def undo(self) -> bool:
        """Restore the previous snapshot. Returns False at the oldest entry."""
        return self._restore(self.history.undo())

    def redo(self) -> bool:
        """Restore the next snapshot. Returns False at the newest entry."""
        return self._restore(self.history.redo())

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # -- output --

    def commit(self) -> Flow:
        """The flow record carrying the current graph, ready for saving."""
        return commit(self.flow, self.graph)

    def _record(self) -> None:
        self.history.push(self.graph.snapshot())

    def _restore(self, snapshot: GraphSnapshot | None) -> bool:
        if snapshot is None:
            return False
        self.graph.restore(snapshot)
        return True

    def __repr__(self) -> str:
        return f"FlowEditor(flow_id={self.flow.id!r}, graph={self.graph!r}, history={self.history!r})"
