"""Human-approval gating for flow launches.

A flow may only run once every approval checkpoint on a `human_approval`
node has been resolved.
"""

from crewflow.models.flow import (
    ApprovalOutcome,
    Flow,
    InterventionKind,
    InterventionPoint,
    InterventionStatus,
    NodeType,
)


def pending_approvals(flow: Flow) -> set[str]:
    """Ids of human_approval nodes whose approval checkpoint is still pending."""
    approval_nodes = {
        node.id for node in flow.nodes if node.type == NodeType.human_approval
    }
    return {
        point.node_id
        for point in flow.human_intervention_points or ()
        if point.kind == InterventionKind.approval
        and point.status == InterventionStatus.pending
        and point.node_id in approval_nodes
    }


def can_run(flow: Flow) -> bool:
    return not pending_approvals(flow)


def approve(flow: Flow, node_id: str, approved: bool) -> Flow:
    """Resolve the checkpoints of `node_id` and return the updated flow.

    The status becomes `completed` whether the step was approved or
    rejected; the decision itself is kept in `outcome`. A node without a
    checkpoint leaves the flow unchanged.
    """
    points = flow.human_intervention_points or []
    if not any(point.node_id == node_id for point in points):
        return flow

    outcome = ApprovalOutcome.approved if approved else ApprovalOutcome.rejected
    updated = [
        point.model_copy(update={"status": InterventionStatus.completed, "outcome": outcome})
        if point.node_id == node_id
        else point.model_copy()
        for point in points
    ]
    return flow.model_copy(update={"human_intervention_points": updated}, deep=True)


def request_approval(
    flow: Flow,
    node_id: str,
    kind: InterventionKind = InterventionKind.approval,
) -> Flow:
    """Attach a pending checkpoint to a node, unless one is already pending."""
    points = [point.model_copy() for point in flow.human_intervention_points or ()]
    for point in points:
        if (
            point.node_id == node_id
            and point.kind == kind
            and point.status == InterventionStatus.pending
        ):
            return flow

    points.append(InterventionPoint(node_id=node_id, kind=kind))
    return flow.model_copy(update={"human_intervention_points": points}, deep=True)
