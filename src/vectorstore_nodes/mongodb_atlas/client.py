"""
MongoDB client resolution.

Nodes must not share a single MongoClient, so clients are cached per node ID
in a MongoClientRegistry. A cached client is reused for every invocation of
its node until the entry is cleared; the registry never closes clients.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Iterator, Optional

from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.database import Database

from node_sdk import NodeExecutionContext, NodeOperationError
from vectorstore_nodes.config import get_settings
from vectorstore_nodes.credentials import MongoDbCredentialData
from vectorstore_nodes.mongodb_atlas.parameters import MONGODB_CREDENTIALS

logger = logging.getLogger(__name__)


class MongoClientRegistry:
    """
    Keyed registry of live MongoClient handles.

    Entries are created on first use and live until clear() drops them.
    At most one client is held per node ID.
    """

    def __init__(self) -> None:
        self._clients: Dict[str, MongoClient] = {}
        self._lock = threading.Lock()

    def get(self, node_id: str) -> Optional[MongoClient]:
        """Get the cached client for a node, if any."""
        return self._clients.get(node_id)

    def get_or_create(self, node_id: str, factory: Callable[[], MongoClient]) -> MongoClient:
        """
        Return the cached client for node_id, building it with factory on
        first use.
        """
        client = self._clients.get(node_id)
        if client is not None:
            return client

        with self._lock:
            client = self._clients.get(node_id)
            if client is None:
                client = factory()
                self._clients[node_id] = client
                logger.debug(f"Created MongoDB client for node {node_id}")
        return client

    def clear(self, node_id: Optional[str] = None) -> None:
        """
        Drop the cached client of one node, or of all nodes.

        Dropped clients are not closed.
        """
        with self._lock:
            if node_id is None:
                self._clients.clear()
            else:
                self._clients.pop(node_id, None)

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._clients

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._clients))


# Global registry instance
MONGO_CLIENTS = MongoClientRegistry()


def get_mongo_credentials(context: NodeExecutionContext) -> MongoDbCredentialData:
    """Read and validate the mongoDb credentials of the node."""
    credentials = context.get_credentials(MONGODB_CREDENTIALS)
    try:
        return MongoDbCredentialData.model_validate(credentials or {})
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise NodeOperationError(
            f"Invalid MongoDB credentials: {fields or e}",
            node=context.get_node(),
            description="The credentials need a connection string and a database name",
        ) from e


def get_mongo_client(
    context: NodeExecutionContext,
    registry: Optional[MongoClientRegistry] = None,
) -> MongoClient:
    """
    Get the MongoClient of the node, creating and caching it on first use.

    Args:
        context: Execution context of the node
        registry: Registry to use (defaults to the process-wide MONGO_CLIENTS)
    """
    registry = MONGO_CLIENTS if registry is None else registry
    node_id = context.get_node().id

    def connect() -> MongoClient:
        credentials = get_mongo_credentials(context)
        return MongoClient(
            credentials.connection_string,
            appname=get_settings().mongo_app_name,
        )

    return registry.get_or_create(node_id, connect)


def get_database(
    context: NodeExecutionContext,
    registry: Optional[MongoClientRegistry] = None,
) -> Database:
    """Get the database configured in the node's credentials."""
    client = get_mongo_client(context, registry)
    credentials = get_mongo_credentials(context)
    return client[credentials.database]
