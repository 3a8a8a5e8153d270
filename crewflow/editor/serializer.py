"""Conversion between in-memory flows and the persisted/exported record.

The persisted record is a plain JSON-ready dict with the dashboard's
camelCase keys. Optional fields that are unset are omitted rather than
written as null, and nothing present is dropped on the way back.
"""

import json
import re
from typing import Any

import pydantic

from crewflow.editor.graph import GraphModel
from crewflow.errors import ValidationError
from crewflow.models.flow import Flow
from crewflow.utils.identifiers import utc_timestamp

PersistedFlow = dict[str, Any]


def to_persisted(flow: Flow) -> PersistedFlow:
    """Convert a flow into its persisted record."""
    return flow.model_dump(mode="json", by_alias=True, exclude_none=True)


def from_persisted(record: PersistedFlow) -> Flow:
    """Rebuild a flow from a persisted record.

    The graph is checked the same way interactive edits are: unknown edge
    endpoints, duplicate ids or duplicate branch handles are rejected.
    """
    try:
        flow = Flow.model_validate(record)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"invalid flow record: {exc}") from exc

    graph = GraphModel.from_flow(flow)
    return flow.model_copy(update={"nodes": graph.nodes, "edges": graph.edges})


def export_json(flow: Flow, indent: int | None = 2) -> str:
    """Serialize a flow to the JSON interchange format."""
    return json.dumps(to_persisted(flow), indent=indent)


def import_json(text: str | bytes) -> Flow:
    """Parse a flow previously written by `export_json`."""
    try:
        record = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"flow export is not valid JSON: {exc}") from exc
    if not isinstance(record, dict):
        raise ValidationError("flow export must be a JSON object")
    return from_persisted(record)


def export_filename(flow: Flow) -> str:
    """Default download name for an exported flow."""
    stem = re.sub(r"\s", "_", flow.name)
    return f"{stem}_flow.json"


def commit(flow: Flow, graph: GraphModel) -> Flow:
    """Return `flow` carrying the graph's current nodes and edges.

    `updated_at` is bumped; everything else is carried over unchanged.
    """
    return flow.model_copy(
        update={
            "nodes": [node.model_copy(deep=True) for node in graph.nodes],
            "edges": [edge.model_copy(deep=True) for edge in graph.edges],
            "updated_at": utc_timestamp(),
        },
        deep=True,
    )
