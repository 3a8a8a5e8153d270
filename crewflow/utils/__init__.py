"""Utility functions for crewflow."""

from crewflow.utils.identifiers import (
    generate_flow_id,
    generate_node_id,
    generate_edge_id,
    utc_timestamp,
)

__all__ = [
    "generate_flow_id",
    "generate_node_id",
    "generate_edge_id",
    "utc_timestamp",
]
