"""Observability package."""
from vectorstore_nodes.observability.logging import (
    setup_logging,
    with_node_context,
)

__all__ = ["setup_logging", "with_node_context"]
