"""Connection rules: the single source of truth for edge semantics.

An edge's kind is derived from the type of its source node and the output
handle it leaves from. Nothing else assigns a kind.
"""

from crewflow.models.flow import EdgeKind, NodeType

# output handles of branching node types, and the kind each one produces
BRANCH_HANDLES: dict[NodeType, dict[str, EdgeKind]] = {
    NodeType.condition: {
        "true": EdgeKind.success,
        "false": EdgeKind.failure,
    },
    NodeType.human_approval: {
        "approved": EdgeKind.approval,
        "rejected": EdgeKind.rejection,
    },
}


def classify(source_type: NodeType | str, source_handle: str | None) -> EdgeKind:
    """Derive the kind of an edge leaving `source_type` through `source_handle`.

    Any combination outside the branch table yields `EdgeKind.default`.
    """
    handles = BRANCH_HANDLES.get(NodeType(source_type))
    if handles is None or source_handle is None:
        return EdgeKind.default
    return handles.get(source_handle, EdgeKind.default)


def is_animated(kind: EdgeKind) -> bool:
    """Non-default edges are drawn animated."""
    return kind != EdgeKind.default


def is_branching(node_type: NodeType | str) -> bool:
    """Whether outgoing edges of this node type are unique per handle."""
    return NodeType(node_type) in BRANCH_HANDLES
