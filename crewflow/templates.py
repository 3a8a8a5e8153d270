"""Starter templates for new flows.

Template edges are created through `GraphModel.connect`, so branch kinds
come from the connection rules like any edge drawn by hand.
"""

from collections.abc import Callable
from dataclasses import dataclass

from crewflow.editor.approval import request_approval
from crewflow.editor.graph import GraphModel
from crewflow.errors import TemplateNotFoundError
from crewflow.models.flow import Flow, FlowNode, FlowStatus, NodeData, NodeType, Position
from crewflow.utils.identifiers import generate_flow_id, generate_node_id, utc_timestamp

DEFAULT_CREW_ID = "default-crew"


@dataclass(frozen=True)
class FlowTemplate:
    """Catalogue entry describing a template."""

    id: str
    name: str
    description: str
    tags: tuple[str, ...]
    node_count: int


TEMPLATES: tuple[FlowTemplate, ...] = (
    FlowTemplate(
        "sequential-workflow", "Sequential Workflow",
        "A simple linear workflow with sequential execution of tasks",
        ("beginner", "sequential"), 4,
    ),
    FlowTemplate(
        "conditional-branching", "Conditional Branching",
        "A workflow with decision points and multiple execution paths",
        ("intermediate", "conditional"), 5,
    ),
    FlowTemplate(
        "parallel-processing", "Parallel Processing",
        "Execute multiple tasks simultaneously and then combine results",
        ("advanced", "parallel"), 7,
    ),
    FlowTemplate(
        "approval-workflow", "Human Approval Workflow",
        "Workflow that requires human approval at critical steps",
        ("intermediate", "approval"), 5,
    ),
    FlowTemplate(
        "data-processing", "Data Processing Pipeline",
        "Extract, transform, and load data in a multi-stage pipeline",
        ("advanced", "data"), 7,
    ),
    FlowTemplate(
        "recurring-task", "Recurring Task",
        "Execute tasks on a schedule with loop control",
        ("intermediate", "automation"), 3,
    ),
    FlowTemplate(
        "basic", "Basic Flow",
        "A simple workflow template",
        ("beginner",), 2,
    ),
)


def _node(
    graph: GraphModel,
    node_type: NodeType,
    label: str,
    description: str,
    x: float,
    y: float,
    **data,
) -> str:
    node = FlowNode(
        id=generate_node_id(),
        type=node_type,
        label=label,
        data=NodeData(description=description, **data),
        position=Position(x=x, y=y),
    )
    graph.add_node(node)
    return node.id


def _start(graph: GraphModel, x: float = 250, y: float = 50) -> str:
    return _node(graph, NodeType.event, "Start", "Starting point of the workflow", x, y)


def _end(graph: GraphModel, x: float = 250, y: float = 350) -> str:
    return _node(graph, NodeType.event, "End", "Workflow completed", x, y)


def _chain(graph: GraphModel, *node_ids: str) -> None:
    for source, target in zip(node_ids, node_ids[1:]):
        graph.connect(source, target)


def _sequential(graph: GraphModel) -> Flow:
    _chain(
        graph,
        _start(graph),
        _node(graph, NodeType.task, "Process Data", "Process incoming data", 250, 150),
        _node(graph, NodeType.task, "Generate Report", "Create a summary report", 250, 250),
        _end(graph),
    )
    return _flow(graph, "Sequential Workflow", "A simple workflow with sequential steps")


def _conditional(graph: GraphModel) -> Flow:
    start = _start(graph)
    check = _node(
        graph, NodeType.condition, "Check Condition", "Evaluate a condition", 250, 150,
        condition="result > 0",
    )
    success = _node(graph, NodeType.task, "Success Path", "Execute when condition is true", 100, 250)
    failure = _node(graph, NodeType.task, "Failure Path", "Execute when condition is false", 400, 250)
    end = _end(graph)

    graph.connect(start, check)
    graph.connect(check, success, source_handle="true")
    graph.connect(check, failure, source_handle="false")
    graph.connect(success, end)
    graph.connect(failure, end)
    return _flow(graph, "Conditional Workflow", "A workflow with conditional branching")


def _parallel(graph: GraphModel) -> Flow:
    start = _start(graph)
    split = _node(graph, NodeType.parallel, "Split Tasks", "Execute tasks in parallel", 250, 150)
    tasks = [
        _node(graph, NodeType.task, f"Task {i}", f"Parallel task {i}", x, 250)
        for i, x in enumerate((100, 250, 400), start=1)
    ]
    combine = _node(
        graph, NodeType.sequence, "Combine Results", "Combine results from parallel tasks", 250, 350
    )
    end = _end(graph, y=450)

    graph.connect(start, split)
    for task in tasks:
        graph.connect(split, task)
        graph.connect(task, combine)
    graph.connect(combine, end)
    return _flow(graph, "Parallel Processing Workflow", "A workflow with parallel task execution")


def _approval(graph: GraphModel) -> Flow:
    start = _start(graph)
    prepare = _node(graph, NodeType.task, "Prepare Document", "Create document for approval", 250, 150)
    gate = _node(
        graph, NodeType.human_approval, "Human Approval", "Requires human approval", 250, 250,
        requires_approval=True, approver="admin",
    )
    approved = _node(graph, NodeType.task, "Document Approved", "Process approved document", 100, 350)
    rejected = _node(graph, NodeType.task, "Document Rejected", "Handle document rejection", 400, 350)

    _chain(graph, start, prepare, gate)
    graph.connect(gate, approved, source_handle="approved")
    graph.connect(gate, rejected, source_handle="rejected")
    flow = _flow(graph, "Approval Workflow", "A workflow with human approval steps")
    return request_approval(flow, gate)


def _data_processing(graph: GraphModel) -> Flow:
    _chain(
        graph,
        _start(graph),
        _node(
            graph, NodeType.data_operation, "Extract", "Read raw records from the source", 250, 150,
            data_source="source", data_operation="read",
        ),
        _node(graph, NodeType.task, "Clean", "Remove invalid and duplicate records", 250, 250),
        _node(graph, NodeType.task, "Transform", "Reshape records for the destination", 250, 350),
        _node(graph, NodeType.task, "Validate", "Check transformed records", 250, 450),
        _node(
            graph, NodeType.data_operation, "Load", "Write records to the destination", 250, 550,
            data_source="destination", data_operation="write",
        ),
        _end(graph, y=650),
    )
    return _flow(graph, "Data Processing Pipeline", "Extract, transform, and load data")


def _recurring(graph: GraphModel) -> Flow:
    trigger = _node(graph, NodeType.event, "Schedule", "Scheduled trigger", 250, 50)
    loop = _node(
        graph, NodeType.loop, "Repeat", "Repeat the task a fixed number of times", 250, 150,
        iterations=5,
    )
    task = _node(graph, NodeType.task, "Recurring Task", "Task executed on every iteration", 250, 250)

    graph.connect(trigger, loop)
    graph.connect(loop, task)
    graph.connect(task, loop, label="next iteration")
    return _flow(graph, "Recurring Task", "Execute tasks on a schedule with loop control")


def _basic(graph: GraphModel) -> Flow:
    _chain(graph, _start(graph), _end(graph, y=150))
    return _flow(graph, "Basic Flow", "A simple workflow template")


def _flow(graph: GraphModel, name: str, description: str) -> Flow:
    return Flow(
        id=generate_flow_id(),
        name=name,
        description=description,
        crew_id=DEFAULT_CREW_ID,
        nodes=graph.nodes,
        edges=graph.edges,
        created_at=utc_timestamp(),
        status=FlowStatus.idle,
    )


_BUILDERS: dict[str, Callable[[GraphModel], Flow]] = {
    "sequential-workflow": _sequential,
    "conditional-branching": _conditional,
    "parallel-processing": _parallel,
    "approval-workflow": _approval,
    "data-processing": _data_processing,
    "recurring-task": _recurring,
    "basic": _basic,
}


def get_template(template_id: str) -> FlowTemplate:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise TemplateNotFoundError(f"unknown flow template: {template_id}")


def create_flow_from_template(template_id: str, crew_id: str = DEFAULT_CREW_ID) -> Flow:
    """Build a new idle flow from a catalogue template."""
    builder = _BUILDERS.get(template_id)
    if builder is None:
        raise TemplateNotFoundError(f"unknown flow template: {template_id}")
    flow = builder(GraphModel())
    return flow.model_copy(update={"crew_id": crew_id})


def create_empty_flow(name: str, crew_id: str = DEFAULT_CREW_ID, description: str | None = None) -> Flow:
    """Build a new idle flow with no nodes."""
    return Flow(
        id=generate_flow_id(),
        name=name,
        description=description,
        crew_id=crew_id,
        created_at=utc_timestamp(),
    )
