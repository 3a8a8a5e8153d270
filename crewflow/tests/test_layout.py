"""Tests for the grid auto-layout."""

from crewflow.editor.layout import organize_layout
from crewflow.models.flow import FlowNode, NodeType, Position


def _node(node_id: str, node_type: NodeType, x: float = 7, y: float = 3) -> FlowNode:
    return FlowNode(id=node_id, type=node_type, label=node_id, position=Position(x=x, y=y))


def _positions(nodes: list[FlowNode]) -> dict[str, tuple[float, float]]:
    return {node.id: (node.position.x, node.position.y) for node in nodes}


class TestOrganizeLayout:
    """Test grid placement by type group."""

    def test_empty(self):
        assert organize_layout([]) == []

    def test_single_group_grid(self):
        """Three columns per row, 250 apart; rows 150 apart."""
        nodes = [_node(f"t{i}", NodeType.task) for i in range(5)]

        positions = _positions(organize_layout(nodes))

        assert positions == {
            "t0": (100, 50),
            "t1": (350, 50),
            "t2": (600, 50),
            "t3": (100, 200),
            "t4": (350, 200),
        }

    def test_groups_follow_first_seen_order(self):
        nodes = [
            _node("e1", NodeType.event),
            _node("t1", NodeType.task),
            _node("e2", NodeType.event),
            _node("c1", NodeType.condition),
            _node("t2", NodeType.task),
        ]

        arranged = organize_layout(nodes)

        assert [n.id for n in arranged] == ["e1", "e2", "t1", "t2", "c1"]
        positions = _positions(arranged)
        # one row of events, then 100 gap
        assert positions["e1"] == (100, 50)
        assert positions["e2"] == (350, 50)
        assert positions["t1"] == (100, 300)
        assert positions["t2"] == (350, 300)
        assert positions["c1"] == (100, 550)

    def test_multi_row_group_advances_by_row_count(self):
        nodes = [_node(f"t{i}", NodeType.task) for i in range(4)] + [_node("loop", NodeType.loop)]

        positions = _positions(organize_layout(nodes))

        # two task rows: 50 + 2 * 150 + 100
        assert positions["loop"] == (100, 450)

    def test_does_not_mutate_input(self):
        nodes = [_node("a", NodeType.task)]
        organize_layout(nodes)
        assert nodes[0].position == Position(x=7, y=3)

    def test_only_positions_change(self):
        node = _node("a", NodeType.task)
        arranged = organize_layout([node])[0]
        assert arranged.model_dump(exclude={"position"}) == node.model_dump(exclude={"position"})

    def test_idempotent(self):
        nodes = [
            _node("t1", NodeType.task),
            _node("h1", NodeType.human_approval),
            _node("t2", NodeType.task),
            _node("d1", NodeType.data_operation),
            _node("t3", NodeType.task),
            _node("t4", NodeType.task),
        ]

        once = organize_layout(nodes)
        twice = organize_layout(once)

        assert twice == once

    def test_deterministic_for_same_input(self):
        nodes = [_node("a", NodeType.task), _node("b", NodeType.event)]
        assert organize_layout(nodes) == organize_layout(nodes)
