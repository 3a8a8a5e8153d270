"""Executors: the collaborator that actually runs a launched flow.

Launching is fire-and-forget from the editor's point of view. A run's
eventual completion or failure is reported back on a separate channel.
"""

from __future__ import annotations

from typing import Protocol

import httpx

from crewflow.editor.serializer import PersistedFlow
from crewflow.errors import ExecutionError


class Executor(Protocol):
    """Protocol for handing a committed flow to the execution engine."""

    async def launch(self, record: PersistedFlow) -> None:
        ...


class RecordingExecutor:
    """Keeps every launched record in a list."""

    def __init__(self) -> None:
        self.launched: list[PersistedFlow] = []

    async def launch(self, record: PersistedFlow) -> None:
        self.launched.append(record)

    def clear(self) -> None:
        self.launched.clear()


class HttpExecutor:
    """Posts launched flows to the execution API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def launch(self, record: PersistedFlow) -> None:
        flow_id = record["id"]
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(f"/api/flows/{flow_id}/run", json=record)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ExecutionError(
                f"executor rejected flow {flow_id}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise ExecutionError(
                f"failed to connect to executor at {self.base_url}: {exc}"
            ) from exc
