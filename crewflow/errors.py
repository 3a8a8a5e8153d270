"""Exceptions raised by the flow editor core.

Every error surfaces to the caller so the UI layer can notify the user.
Undo/redo at the history bounds are deliberately not errors.
"""


class FlowError(Exception):
    """Base class for all crewflow errors."""


class ValidationError(FlowError, ValueError):
    """A graph edit was rejected; the graph is left unchanged.

    Raised for connections to unknown endpoints, duplicate ids, and a
    second edge on an already used condition/approval handle.
    """


class ApprovalPendingError(FlowError):
    """A run was requested while human approvals are still pending."""

    def __init__(self, node_ids: set[str] | frozenset[str]) -> None:
        self.node_ids = frozenset(node_ids)
        listed = ", ".join(sorted(self.node_ids))
        super().__init__(
            f"flow has pending approval steps that must be resolved before running: {listed}"
        )


class PersistenceError(FlowError):
    """The persistence collaborator failed to save or load a flow."""


class ExecutionError(FlowError):
    """The executor collaborator failed to launch a flow."""


class OperationInProgressError(FlowError):
    """A save or run was triggered while the same operation is in flight."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} already in progress")


class TemplateNotFoundError(FlowError, KeyError):
    """No flow template is registered under the requested id."""

    def __str__(self) -> str:
        return Exception.__str__(self)
