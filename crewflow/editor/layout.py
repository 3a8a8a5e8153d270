"""Deterministic grid auto-layout.

Nodes are grouped by type in first-seen order and each group is laid out
on a three-column grid below the previous one.
"""

import math

from crewflow.models.flow import FlowNode, Position

NODES_PER_ROW = 3
X_ORIGIN = 100
Y_ORIGIN = 50
X_SPACING = 250
Y_SPACING = 150
GROUP_GAP = 100


def organize_layout(nodes: list[FlowNode]) -> list[FlowNode]:
    """Return repositioned copies of `nodes`, grouped by type.

    The input list is not modified. Order is preserved within each group
    and groups follow the order their type first appears, so calling this
    again on its own output changes nothing.
    """
    groups: dict[str, list[FlowNode]] = {}
    for node in nodes:
        groups.setdefault(node.type, []).append(node)

    arranged: list[FlowNode] = []
    current_y = Y_ORIGIN
    for group in groups.values():
        for index, node in enumerate(group):
            row, col = divmod(index, NODES_PER_ROW)
            position = Position(
                x=X_ORIGIN + col * X_SPACING,
                y=current_y + row * Y_SPACING,
            )
            arranged.append(node.model_copy(update={"position": position}, deep=True))

        rows = math.ceil(len(group) / NODES_PER_ROW)
        current_y += rows * Y_SPACING + GROUP_GAP

    return arranged
