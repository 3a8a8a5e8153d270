"""Linear undo/redo history over full graph snapshots.

Snapshots are complete (nodes, edges) copies rather than deltas; flows are
small enough that this stays cheap.
"""

from dataclasses import dataclass

from crewflow.models.flow import FlowEdge, FlowNode


@dataclass(frozen=True)
class GraphSnapshot:
    """An immutable copy of a graph's nodes and edges."""

    nodes: tuple[FlowNode, ...] = ()
    edges: tuple[FlowEdge, ...] = ()

    @classmethod
    def capture(cls, nodes, edges) -> "GraphSnapshot":
        """Deep-copy the given nodes and edges into a snapshot."""
        return cls(
            nodes=tuple(node.model_copy(deep=True) for node in nodes),
            edges=tuple(edge.model_copy(deep=True) for edge in edges),
        )

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    @property
    def edge_ids(self) -> list[str]:
        return [edge.id for edge in self.edges]


class HistoryStack:
    """Ordered snapshot list with a cursor.

    Undo and redo past either end are no-ops that return None, so repeated
    shortcut presses are always safe.
    """

    def __init__(self, limit: int | None = None) -> None:
        """
        Args:
            limit: maximum number of snapshots kept. The oldest entries are
                dropped once exceeded. None keeps everything.
        """
        if limit is not None and limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._entries: list[GraphSnapshot] = []
        self._index = -1

    def push(self, snapshot: GraphSnapshot) -> None:
        """Append a snapshot, discarding any abandoned redo branch."""
        if self._index < len(self._entries) - 1:
            del self._entries[self._index + 1:]

        self._entries.append(snapshot)
        self._index += 1

        if self.limit is not None and len(self._entries) > self.limit:
            overflow = len(self._entries) - self.limit
            del self._entries[:overflow]
            self._index -= overflow

    def undo(self) -> GraphSnapshot | None:
        """Step back one entry and return it, or None at the first entry."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> GraphSnapshot | None:
        """Step forward one entry and return it, or None at the last entry."""
        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def index(self) -> int:
        """Position of the current entry (-1 when empty)."""
        return self._index

    @property
    def current(self) -> GraphSnapshot | None:
        if self._index < 0:
            return None
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HistoryStack(index={self._index}, size={len(self._entries)})"
