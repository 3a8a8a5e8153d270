"""Tests for model validation and field aliases."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from crewflow.models.flow import (
    EdgeKind,
    Flow,
    FlowEdge,
    FlowNode,
    FlowStatus,
    InterventionKind,
    InterventionPoint,
    NodeData,
    NodeType,
)


class TestFlowNode:
    """Test node payload parsing."""

    def test_accepts_camel_case_payload(self):
        node = FlowNode.model_validate({
            "id": "node-1",
            "type": "task",
            "label": "Research",
            "data": {"taskIds": ["t1"], "agentId": "agent-7"},
            "position": {"x": 10, "y": 20},
            "parentNodeId": "group-1",
        })
        assert node.type == NodeType.task
        assert node.data.task_ids == ["t1"]
        assert node.data.agent_id == "agent-7"
        assert node.parent_node_id == "group-1"

    def test_accepts_attribute_names(self):
        data = NodeData(requires_approval=True, approver="admin", data_source="crm")
        assert data.requires_approval is True
        assert data.data_source == "crm"

    def test_rejects_unknown_node_type(self):
        with pytest.raises(PydanticValidationError):
            FlowNode(id="n", type="subflow", label="Sub")

    def test_rejects_unknown_data_operation(self):
        with pytest.raises(PydanticValidationError):
            NodeData(data_operation="truncate")

    def test_rejects_unknown_fields(self):
        with pytest.raises(PydanticValidationError):
            FlowNode(id="n", type="task", label="T", colour="red")

    def test_defaults(self):
        node = FlowNode(id="n", type=NodeType.loop, label="Loop")
        assert node.data == NodeData()
        assert node.position.x == 0
        assert node.parent_node_id is None


class TestFlowEdge:
    """Test edge kind parsing and the derived animation flag."""

    def test_kind_read_from_type_key(self):
        edge = FlowEdge.model_validate({
            "id": "e1", "source": "a", "target": "b",
            "sourceHandle": "true", "type": "success",
        })
        assert edge.kind == EdgeKind.success
        assert edge.source_handle == "true"

    def test_animated_follows_kind(self):
        """A stale animated flag is corrected from the kind."""
        edge = FlowEdge.model_validate({
            "id": "e1", "source": "a", "target": "b", "type": "default", "animated": True,
        })
        assert edge.animated is False

        edge = FlowEdge(id="e2", source="a", target="b", kind=EdgeKind.rejection)
        assert edge.animated is True

    def test_default_kind(self):
        edge = FlowEdge(id="e1", source="a", target="b")
        assert edge.kind == EdgeKind.default
        assert edge.animated is False


class TestFlow:
    """Test the flow record."""

    def test_minimal_flow(self):
        flow = Flow(id="f1", name="Flow", created_at="2024-01-01T00:00:00+00:00")
        assert flow.status == FlowStatus.idle
        assert flow.nodes == []
        assert flow.edges == []
        assert flow.human_intervention_points is None

    def test_requires_created_at(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            Flow(id="f1", name="Flow")
        assert "createdAt" in str(exc_info.value)

    def test_rejects_unknown_status(self):
        with pytest.raises(PydanticValidationError):
            Flow(id="f1", name="Flow", created_at="now", status="paused")

    def test_intervention_point_aliases(self):
        point = InterventionPoint.model_validate({"nodeId": "n1", "type": "input", "status": "pending"})
        assert point.node_id == "n1"
        assert point.kind == InterventionKind.input
        assert point.outcome is None
