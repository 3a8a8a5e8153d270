"""Flow lifecycle: status state machine around save, run and approval.

    idle ──run()──> running ──(executor side channel)──> completed | error

save() is allowed from any state and never changes the status. run() is
gated on approvals. Saves and runs are mutually exclusive per operation
kind: triggering one while the same kind is in flight is rejected, and the
in-flight flag is always cleared afterwards, whatever the outcome.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from crewflow.adapters.notifier import Notification
from crewflow.editor import approval
from crewflow.editor.serializer import commit, to_persisted
from crewflow.errors import (
    ApprovalPendingError,
    ExecutionError,
    FlowError,
    OperationInProgressError,
    PersistenceError,
)
from crewflow.models.flow import Flow, FlowStatus
from crewflow.utils.identifiers import utc_timestamp

if TYPE_CHECKING:
    from crewflow.adapters.executor import Executor
    from crewflow.adapters.notifier import Notifier
    from crewflow.adapters.persistence import FlowStore
    from crewflow.editor.graph import GraphModel

logger = logging.getLogger(__name__)


class FlowLifecycle:
    """Coordinates saving and launching one flow.

    Usage:
        lifecycle = FlowLifecycle(flow, store, executor, graph=editor.graph)
        await lifecycle.save()
        await lifecycle.run()
    """

    def __init__(
        self,
        flow: Flow,
        store: FlowStore,
        executor: Executor,
        notifier: Notifier | None = None,
        graph: GraphModel | None = None,
    ) -> None:
        """
        Args:
            flow: the flow record being edited
            store: persistence collaborator
            executor: execution collaborator
            notifier: optional observer told about every outcome
            graph: live graph of an editing session; when given, its nodes
                and edges are committed into the flow on save and run
        """
        self._flow = flow
        self.store = store
        self.executor = executor
        self.notifier = notifier
        self.graph = graph
        self._saving = False
        self._running = False

    @classmethod
    async def open(
        cls,
        flow_id: str,
        store: FlowStore,
        executor: Executor,
        notifier: Notifier | None = None,
    ) -> FlowLifecycle:
        """Load a flow from `store` and wrap it in a lifecycle."""
        flow = await store.load(flow_id)
        return cls(flow, store, executor, notifier)

    @property
    def flow(self) -> Flow:
        return self._flow

    @property
    def status(self) -> FlowStatus:
        return self._flow.status

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def is_running(self) -> bool:
        return self._running

    def pending_approvals(self) -> set[str]:
        return approval.pending_approvals(self._prepared())

    def can_run(self) -> bool:
        return approval.can_run(self._prepared())

    async def save(self) -> Flow:
        """Persist the flow with a bumped `updated_at`.

        On failure the in-memory flow is left exactly as before.
        """
        if self._saving:
            raise OperationInProgressError("save")

        self._saving = True
        try:
            updated = self._prepared()
            await self._persist(updated, "save")
            self._flow = updated
            self._notify("save", True, "Your flow has been saved successfully.")
            return updated
        finally:
            self._saving = False

    async def run(self) -> Flow:
        """Launch the flow if no approvals are pending.

        Raises:
            ApprovalPendingError: before any state change, when human
                approval steps are still unresolved.
            OperationInProgressError: when a run is already being launched.
            ExecutionError: when the executor could not launch the flow; the
                previous status is kept.
        """
        if self._running:
            raise OperationInProgressError("run")

        prepared = self._prepared()
        pending = approval.pending_approvals(prepared)
        if pending:
            error = ApprovalPendingError(pending)
            self._notify("run", False, str(error))
            raise error

        self._running = True
        try:
            launched = prepared.model_copy(
                update={"status": FlowStatus.running, "last_run": utc_timestamp()}
            )
            try:
                await self.executor.launch(to_persisted(launched))
            except Exception as exc:
                logger.error("failed to start flow %s: %s", launched.id, exc)
                self._notify("run", False, str(exc))
                if isinstance(exc, FlowError):
                    raise
                raise ExecutionError(f"failed to start flow {launched.id}: {exc}") from exc

            self._flow = launched
            logger.info("flow %s started", launched.id)
            self._notify("run", True, "Your flow is now running.")
            return launched
        finally:
            self._running = False

    async def approve(self, node_id: str, approved: bool) -> Flow:
        """Resolve a human approval step and persist the result.

        A node without a checkpoint is a no-op and nothing is saved.
        """
        if self._saving:
            raise OperationInProgressError("save")

        updated = approval.approve(self._flow, node_id, approved)
        if updated is self._flow:
            return self._flow

        self._saving = True
        try:
            await self._persist(updated, "approve")
            self._flow = updated
            verdict = "approved" if approved else "rejected"
            self._notify("approve", True, f"The human approval step has been {verdict}.")
            return updated
        finally:
            self._saving = False

    def _prepared(self) -> Flow:
        """The flow carrying the live graph, if any, with a fresh `updated_at`."""
        if self.graph is not None:
            return commit(self._flow, self.graph)
        return self._flow.model_copy(update={"updated_at": utc_timestamp()}, deep=True)

    async def _persist(self, flow: Flow, operation: str) -> None:
        try:
            await self.store.save(flow)
        except Exception as exc:
            logger.error("%s failed for flow %s: %s", operation, flow.id, exc)
            self._notify(operation, False, str(exc))
            if isinstance(exc, PersistenceError):
                raise
            raise PersistenceError(f"failed to save flow {flow.id}: {exc}") from exc

    def _notify(self, operation: str, success: bool, message: str) -> None:
        if self.notifier is None:
            return
        self.notifier.notify(Notification(
            operation=operation,
            flow_id=self._flow.id,
            success=success,
            message=message,
        ))

    def __repr__(self) -> str:
        return f"FlowLifecycle(flow_id={self._flow.id!r}, status={self.status.value})"
