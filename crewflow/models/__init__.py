"""Core data models for crewflow."""

from crewflow.models.flow import (
    ApprovalOutcome,
    DataStorage,
    EdgeKind,
    Flow,
    FlowEdge,
    FlowNode,
    FlowStatus,
    InterventionKind,
    InterventionPoint,
    InterventionStatus,
    NodeData,
    NodeType,
    Position,
)

__all__ = [
    # Graph
    "FlowNode",
    "FlowEdge",
    "NodeData",
    "NodeType",
    "EdgeKind",
    "Position",
    # Flow record
    "Flow",
    "FlowStatus",
    "DataStorage",
    # Human intervention
    "InterventionPoint",
    "InterventionKind",
    "InterventionStatus",
    "ApprovalOutcome",
]
