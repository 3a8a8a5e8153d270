"""Data models for flows, their graph and human intervention points.

Attribute names are snake_case; the persisted record uses the dashboard's
camelCase keys through field aliases. Both spellings are accepted on input.
"""

from enum import Enum
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeType(str, Enum):
    """Types of vertices a flow graph can contain."""

    task = "task"
    condition = "condition"
    loop = "loop"
    parallel = "parallel"
    sequence = "sequence"
    event = "event"
    human_approval = "human_approval"
    data_operation = "data_operation"


class EdgeKind(str, Enum):
    """Semantic kind of an edge, derived from its source node and handle."""

    default = "default"
    conditional = "conditional"
    success = "success"
    failure = "failure"
    approval = "approval"
    rejection = "rejection"


class FlowStatus(str, Enum):
    """Lifecycle status of a flow."""

    idle = "idle"
    running = "running"
    completed = "completed"
    error = "error"


class InterventionKind(str, Enum):
    approval = "approval"
    input = "input"


class InterventionStatus(str, Enum):
    pending = "pending"
    completed = "completed"


class ApprovalOutcome(str, Enum):
    approved = "approved"
    rejected = "rejected"


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class Position(_Record):
    """Canvas coordinates, used only by layout and rendering."""

    x: float = 0.0
    y: float = 0.0


class NodeData(_Record):
    """Type-specific payload of a node.

    Every field is optional and exclusivity per node type is not enforced,
    so a payload written by one node type survives a type change untouched.
    """

    description: str | None = None
    condition: str | None = None  # condition nodes
    iterations: int | None = None  # loop nodes
    task_ids: list[str] | None = Field(default=None, alias="taskIds")  # task nodes
    agent_id: str | None = Field(default=None, alias="agentId")  # task nodes
    requires_approval: bool | None = Field(default=None, alias="requiresApproval")
    approver: str | None = None  # user or role that can approve
    data_source: str | None = Field(default=None, alias="dataSource")
    data_operation: Literal["read", "write", "update", "delete"] | None = Field(
        default=None, alias="dataOperation"
    )


class FlowNode(_Record):
    """A vertex in the flow graph."""

    id: str
    type: NodeType
    label: str
    data: NodeData = Field(default_factory=NodeData)
    position: Position = Field(default_factory=Position)
    parent_node_id: str | None = Field(default=None, alias="parentNodeId")


class FlowEdge(_Record):
    """A directed connection between two nodes.

    `animated` is cosmetic and always follows `kind`.
    """

    id: str
    source: str
    target: str
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    kind: EdgeKind = Field(default=EdgeKind.default, alias="type")
    label: str | None = None
    animated: bool = False

    @model_validator(mode="after")
    def derive_animated(self) -> Self:
        self.animated = self.kind != EdgeKind.default
        return self


class InterventionPoint(_Record):
    """A human-in-the-loop checkpoint attached to a node."""

    node_id: str = Field(alias="nodeId")
    kind: InterventionKind = Field(default=InterventionKind.approval, alias="type")
    status: InterventionStatus = InterventionStatus.pending
    outcome: ApprovalOutcome | None = None  # set once the checkpoint is resolved


class DataStorage(_Record):
    """Where a flow keeps the data its operations read and write."""

    type: Literal["local", "external"] = "local"
    connection: str | None = None


class Flow(_Record):
    """The persisted automation workflow record."""

    id: str
    name: str
    description: str | None = None
    crew_id: str | None = Field(default=None, alias="crewId")
    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)
    created_at: str = Field(alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    last_run: str | None = Field(default=None, alias="lastRun")
    status: FlowStatus = FlowStatus.idle
    human_intervention_points: list[InterventionPoint] | None = Field(
        default=None, alias="humanInterventionPoints"
    )
    data_storage: DataStorage | None = Field(default=None, alias="dataStorage")
