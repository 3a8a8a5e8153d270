"""Tests for the store, executor and notifier adapters."""

import json
import logging

import httpx
import pytest

from crewflow.adapters import executor_from_settings, store_from_settings
from crewflow.adapters.executor import HttpExecutor, RecordingExecutor
from crewflow.adapters.notifier import ListNotifier, LoggingNotifier, Notification
from crewflow.adapters.persistence import FileFlowStore, HttpFlowStore, InMemoryFlowStore
from crewflow.config import Settings
from crewflow.editor.serializer import to_persisted
from crewflow.errors import ExecutionError, PersistenceError
from crewflow.templates import create_flow_from_template

API_URL = "http://dashboard.test"


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


class TestInMemoryFlowStore:
    @pytest.mark.asyncio
    async def test_save_and_load(self):
        store = InMemoryFlowStore()
        flow = create_flow_from_template("conditional-branching")

        await store.save(flow)
        loaded = await store.load(flow.id)

        assert loaded.model_dump() == flow.model_dump()
        assert store.records[flow.id]["crewId"] == flow.crew_id

    @pytest.mark.asyncio
    async def test_load_missing(self):
        with pytest.raises(PersistenceError, match="not found"):
            await InMemoryFlowStore().load("missing")

    @pytest.mark.asyncio
    async def test_clear(self):
        store = InMemoryFlowStore()
        await store.save(create_flow_from_template("basic"))
        store.clear()
        assert store.records == {}


class TestFileFlowStore:
    """Test the directory-backed store."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, tmp_path):
        store = FileFlowStore(tmp_path / "flows")
        flow = create_flow_from_template("approval-workflow")

        await store.save(flow)
        loaded = await store.load(flow.id)

        assert loaded.model_dump() == flow.model_dump()
        assert store.list_ids() == [flow.id]

    @pytest.mark.asyncio
    async def test_file_is_export_document(self, tmp_path):
        store = FileFlowStore(tmp_path)
        flow = create_flow_from_template("basic")

        await store.save(flow)

        record = json.loads(store.path_for(flow.id).read_text(encoding="utf-8"))
        assert record == to_persisted(flow)

    @pytest.mark.asyncio
    async def test_load_missing(self, tmp_path):
        with pytest.raises(PersistenceError, match="not found"):
            await FileFlowStore(tmp_path).load("missing")

    @pytest.mark.asyncio
    async def test_load_corrupt_file(self, tmp_path):
        store = FileFlowStore(tmp_path)
        store.path_for("broken").write_text("{not json", encoding="utf-8")

        with pytest.raises(PersistenceError, match="invalid"):
            await store.load("broken")

    @pytest.mark.parametrize("flow_id", ["", ".", "..", "a/b", "a\\b"])
    def test_unsafe_ids_rejected(self, tmp_path, flow_id):
        with pytest.raises(PersistenceError):
            FileFlowStore(tmp_path).path_for(flow_id)


class TestHttpFlowStore:
    """Test the REST-backed store against a mock transport."""

    @pytest.mark.asyncio
    async def test_save_puts_record(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        store = HttpFlowStore(API_URL, transport=httpx.MockTransport(handler))
        flow = create_flow_from_template("basic")

        await store.save(flow)

        assert seen[0].method == "PUT"
        assert seen[0].url.path == f"/api/flows/{flow.id}"
        assert json.loads(seen[0].content) == to_persisted(flow)

    @pytest.mark.asyncio
    async def test_load_returns_flow(self):
        flow = create_flow_from_template("sequential-workflow")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=to_persisted(flow))

        store = HttpFlowStore(API_URL, transport=httpx.MockTransport(handler))
        loaded = await store.load(flow.id)

        assert loaded.model_dump() == flow.model_dump()

    @pytest.mark.asyncio
    async def test_load_not_found(self):
        store = HttpFlowStore(
            API_URL, transport=httpx.MockTransport(lambda request: httpx.Response(404))
        )
        with pytest.raises(PersistenceError, match="not found"):
            await store.load("missing")

    @pytest.mark.asyncio
    async def test_server_error(self):
        store = HttpFlowStore(
            API_URL, transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )
        with pytest.raises(PersistenceError, match="HTTP 500"):
            await store.save(create_flow_from_template("basic"))

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        store = HttpFlowStore(
            API_URL, transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(PersistenceError, match="invalid JSON"):
            await store.load("f1")

    @pytest.mark.asyncio
    async def test_invalid_flow(self):
        store = HttpFlowStore(
            API_URL, transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "f1"}))
        )
        with pytest.raises(PersistenceError, match="invalid flow"):
            await store.load("f1")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        store = HttpFlowStore(API_URL, transport=httpx.MockTransport(_refuse))
        with pytest.raises(PersistenceError, match="failed to connect"):
            await store.save(create_flow_from_template("basic"))


class TestExecutors:
    """Test the executor adapters."""

    @pytest.mark.asyncio
    async def test_recording_executor(self):
        executor = RecordingExecutor()
        record = to_persisted(create_flow_from_template("basic"))

        await executor.launch(record)

        assert executor.launched == [record]
        executor.clear()
        assert executor.launched == []

    @pytest.mark.asyncio
    async def test_http_executor_posts_run(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"accepted": True})

        executor = HttpExecutor(API_URL + "/", transport=httpx.MockTransport(handler))
        record = to_persisted(create_flow_from_template("basic"))

        await executor.launch(record)

        assert seen[0].method == "POST"
        assert seen[0].url.path == f"/api/flows/{record['id']}/run"

    @pytest.mark.asyncio
    async def test_http_executor_rejected(self):
        executor = HttpExecutor(
            API_URL, transport=httpx.MockTransport(lambda request: httpx.Response(409))
        )
        with pytest.raises(ExecutionError, match="HTTP 409"):
            await executor.launch(to_persisted(create_flow_from_template("basic")))

    @pytest.mark.asyncio
    async def test_http_executor_unreachable(self):
        executor = HttpExecutor(API_URL, transport=httpx.MockTransport(_refuse))
        with pytest.raises(ExecutionError, match="failed to connect"):
            await executor.launch(to_persisted(create_flow_from_template("basic")))


class TestFactories:
    """Test building adapters from settings."""

    def test_local_store(self, tmp_path):
        store = store_from_settings(Settings(store_dir=tmp_path / "flows"))

        assert isinstance(store, FileFlowStore)
        assert store.directory == tmp_path / "flows"
        assert store.directory.is_dir()

    def test_remote_store_and_executor(self):
        settings = Settings(api_url=API_URL, http_timeout=3.0)

        store = store_from_settings(settings, remote=True)
        executor = executor_from_settings(settings)

        assert isinstance(store, HttpFlowStore)
        assert (store.base_url, store.timeout) == (API_URL, 3.0)
        assert isinstance(executor, HttpExecutor)
        assert executor.base_url == API_URL


class TestNotifiers:
    def test_list_notifier(self):
        notifier = ListNotifier()
        notification = Notification("save", "f1", True, "saved")

        notifier.notify(notification)

        assert notifier.notifications == [notification]

    def test_logging_notifier_levels(self, caplog):
        notifier = LoggingNotifier()

        with caplog.at_level(logging.INFO, logger="crewflow"):
            notifier.notify(Notification("save", "f1", True, "saved"))
            notifier.notify(Notification("run", "f1", False, "executor offline"))

        assert [record.levelno for record in caplog.records] == [logging.INFO, logging.WARNING]
        assert "run failed for flow f1: executor offline" in caplog.records[1].getMessage()
