"""Flow graph editor core: graph, rules, history, approvals, layout and lifecycle."""

from crewflow.editor.approval import approve, can_run, pending_approvals, request_approval
from crewflow.editor.graph import GraphModel
from crewflow.editor.history import GraphSnapshot, HistoryStack
from crewflow.editor.layout import organize_layout
from crewflow.editor.lifecycle import FlowLifecycle
from crewflow.editor.rules import BRANCH_HANDLES, classify, is_animated, is_branching
from crewflow.editor.serializer import (
    PersistedFlow,
    commit,
    export_filename,
    export_json,
    from_persisted,
    import_json,
    to_persisted,
)
from crewflow.editor.session import FlowEditor, create_node

__all__ = [
    # Graph
    "GraphModel",
    "classify",
    "is_animated",
    "is_branching",
    "BRANCH_HANDLES",
    # History
    "GraphSnapshot",
    "HistoryStack",
    # Approvals
    "pending_approvals",
    "can_run",
    "approve",
    "request_approval",
    # Layout
    "organize_layout",
    # Serialization
    "PersistedFlow",
    "to_persisted",
    "from_persisted",
    "export_json",
    "import_json",
    "export_filename",
    "commit",
    # Session and lifecycle
    "FlowEditor",
    "create_node",
    "FlowLifecycle",
]
