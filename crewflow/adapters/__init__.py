"""Collaborator adapters: persistence, execution and notification."""

from crewflow.adapters.executor import Executor, HttpExecutor, RecordingExecutor
from crewflow.adapters.notifier import ListNotifier, LoggingNotifier, Notification, Notifier
from crewflow.adapters.persistence import (
    FileFlowStore,
    FlowStore,
    HttpFlowStore,
    InMemoryFlowStore,
)
from crewflow.config import Settings


def store_from_settings(settings: Settings, remote: bool = False) -> FlowStore:
    """Build the configured store: the REST API when `remote`, else the flow directory."""
    if remote:
        return HttpFlowStore(settings.api_url, timeout=settings.http_timeout)
    return FileFlowStore(settings.store_dir)


def executor_from_settings(settings: Settings) -> Executor:
    return HttpExecutor(settings.api_url, timeout=settings.http_timeout)


__all__ = [
    # Persistence
    "FlowStore",
    "InMemoryFlowStore",
    "FileFlowStore",
    "HttpFlowStore",
    # Execution
    "Executor",
    "RecordingExecutor",
    "HttpExecutor",
    # Notification
    "Notification",
    "Notifier",
    "ListNotifier",
    "LoggingNotifier",
    # Factories
    "store_from_settings",
    "executor_from_settings",
]
