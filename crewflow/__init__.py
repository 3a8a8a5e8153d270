"""crewflow - flow graph editor core for AI-agent crews and automation flows."""

from crewflow.models.flow import (
    EdgeKind,
    Flow,
    FlowEdge,
    FlowNode,
    FlowStatus,
    InterventionPoint,
    NodeData,
    NodeType,
    Position,
)
from crewflow.errors import (
    ApprovalPendingError,
    ExecutionError,
    FlowError,
    OperationInProgressError,
    PersistenceError,
    TemplateNotFoundError,
    ValidationError,
)
from crewflow.editor.graph import GraphModel
from crewflow.editor.history import HistoryStack
from crewflow.editor.lifecycle import FlowLifecycle
from crewflow.editor.session import FlowEditor
from crewflow.templates import TEMPLATES, create_empty_flow, create_flow_from_template

__all__ = [
    # Data models
    "Flow",
    "FlowNode",
    "FlowEdge",
    "NodeData",
    "NodeType",
    "EdgeKind",
    "FlowStatus",
    "Position",
    "InterventionPoint",
    # Errors
    "FlowError",
    "ValidationError",
    "ApprovalPendingError",
    "PersistenceError",
    "ExecutionError",
    "OperationInProgressError",
    "TemplateNotFoundError",
    # Editor core
    "GraphModel",
    "HistoryStack",
    "FlowEditor",
    "FlowLifecycle",
    # Templates
    "TEMPLATES",
    "create_flow_from_template",
    "create_empty_flow",
]
