"""Flow stores: the persistence collaborator behind save() and load()."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

import httpx

from crewflow.editor.serializer import export_json, from_persisted, import_json, to_persisted
from crewflow.errors import PersistenceError, ValidationError
from crewflow.models.flow import Flow

logger = logging.getLogger(__name__)


class FlowStore(Protocol):
    """Protocol for saving and loading flows.

    Implementations raise `PersistenceError` on failure and never retry.
    """

    async def save(self, flow: Flow) -> None:
        ...

    async def load(self, flow_id: str) -> Flow:
        ...


class InMemoryFlowStore:
    """Keeps persisted records in a dict, keyed by flow id."""

    def __init__(self) -> None:
        self.records: dict[str, dict] = {}

    async def save(self, flow: Flow) -> None:
        self.records[flow.id] = to_persisted(flow)

    async def load(self, flow_id: str) -> Flow:
        record = self.records.get(flow_id)
        if record is None:
            raise PersistenceError(f"flow not found: {flow_id}")
        return from_persisted(record)

    def clear(self) -> None:
        self.records.clear()


class FileFlowStore:
    """Writes each flow as a JSON export document in a directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, flow_id: str) -> Path:
        if not flow_id or "/" in flow_id or "\\" in flow_id or flow_id in {".", ".."}:
            raise PersistenceError(f"flow id cannot be used as a file name: {flow_id!r}")
        return self.directory / f"{flow_id}.json"

    async def save(self, flow: Flow) -> None:
        path = self.path_for(flow.id)
        try:
            await asyncio.to_thread(path.write_text, export_json(flow), "utf-8")
        except OSError as exc:
            raise PersistenceError(f"failed to write {path}: {exc}") from exc
        logger.debug("wrote flow %s to %s", flow.id, path)

    async def load(self, flow_id: str) -> Flow:
        path = self.path_for(flow_id)
        try:
            text = await asyncio.to_thread(path.read_text, "utf-8")
        except FileNotFoundError as exc:
            raise PersistenceError(f"flow not found: {flow_id}") from exc
        except OSError as exc:
            raise PersistenceError(f"failed to read {path}: {exc}") from exc

        try:
            return import_json(text)
        except ValidationError as exc:
            raise PersistenceError(f"stored flow {flow_id} is invalid: {exc}") from exc

    def list_ids(self) -> list[str]:
        """Ids of every flow stored in the directory."""
        return sorted(path.stem for path in self.directory.glob("*.json"))


class HttpFlowStore:
    """Saves and loads flows through the dashboard's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: base URL of the API server
            timeout: HTTP request timeout in seconds
            transport: optional httpx transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def save(self, flow: Flow) -> None:
        try:
            async with self._client() as client:
                response = await client.put(f"/api/flows/{flow.id}", json=to_persisted(flow))
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PersistenceError(
                f"server rejected flow {flow.id}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise PersistenceError(
                f"failed to connect to server at {self.base_url}: {exc}"
            ) from exc

    async def load(self, flow_id: str) -> Flow:
        try:
            async with self._client() as client:
                response = await client.get(f"/api/flows/{flow_id}")
                if response.status_code == 404:
                    raise PersistenceError(f"flow not found: {flow_id}")
                response.raise_for_status()
                record = response.json()
        except httpx.HTTPStatusError as exc:
            raise PersistenceError(
                f"failed to load flow {flow_id}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise PersistenceError(
                f"failed to connect to server at {self.base_url}: {exc}"
            ) from exc
        except ValueError as exc:
            raise PersistenceError(f"server returned invalid JSON for flow {flow_id}") from exc

        try:
            return from_persisted(record)
        except ValidationError as exc:
            raise PersistenceError(f"server returned an invalid flow {flow_id}: {exc}") from exc
