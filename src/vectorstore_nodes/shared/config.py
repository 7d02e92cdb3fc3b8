"""
Configuration object that turns the generic VectorStoreNode into a concrete
vector store node.

A concrete node supplies its metadata, the parameter fields it adds per
operation mode, and two strategies:

- get_vector_store_client(context, filter, embeddings, item_index) returns a
  query-capable LangChain VectorStore
- populate_vector_store(context, embeddings, documents, item_index) persists a
  batch of documents

prepare_insert(context, item_index) is optional and runs once per item before
any batch of an insert is persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_core.vectorstores import VectorStore

from node_sdk import NodeExecutionContext


SUPPORTED_OPERATION_MODES = ("load", "insert", "retrieve", "update", "retrieve-as-tool")


class VectorStoreClientFactory(Protocol):
    def __call__(
        self,
        context: NodeExecutionContext,
        filter: Optional[Dict[str, Any]],
        embeddings: Embeddings,
        item_index: int,
    ) -> VectorStore: ...


class VectorStorePopulator(Protocol):
    def __call__(
        self,
        context: NodeExecutionContext,
        embeddings: Embeddings,
        documents: List[Document],
        item_index: int,
    ) -> None: ...


class InsertPreparer(Protocol):
    def __call__(self, context: NodeExecutionContext, item_index: int) -> None: ...


@dataclass(frozen=True)
class VectorStoreNodeMeta:
    """Display metadata and capabilities of a vector store node."""

    display_name: str
    name: str
    description: str
    icon: str = "file:icon.svg"
    docs_url: Optional[str] = None
    # Guidance attached to wrapped backend failures
    error_description: Optional[str] = None
    credentials: List[Dict[str, Any]] = field(default_factory=list)
    operation_modes: List[str] = field(
        default_factory=lambda: ["load", "insert", "retrieve", "retrieve-as-tool"]
    )

    def __post_init__(self) -> None:
        unknown = [m for m in self.operation_modes if m not in SUPPORTED_OPERATION_MODES]
        if unknown:
            raise ValueError(f"Unsupported operation modes: {', '.join(unknown)}")


@dataclass(frozen=True)
class VectorStoreNodeConfig:
    """Everything a concrete vector store contributes to the generic node."""

    meta: VectorStoreNodeMeta
    get_vector_store_client: VectorStoreClientFactory
    populate_vector_store: VectorStorePopulator
    # Runs for every item before the first document of an insert is written
    prepare_insert: Optional[InsertPreparer] = None
    shared_fields: List[Dict[str, Any]] = field(default_factory=list)
    insert_fields: List[Dict[str, Any]] = field(default_factory=list)
    load_fields: List[Dict[str, Any]] = field(default_factory=list)
    retrieve_fields: List[Dict[str, Any]] = field(default_factory=list)
    update_fields: List[Dict[str, Any]] = field(default_factory=list)
    # e.g. {"list_search": {"getCollections": get_collections}}
    methods: Dict[str, Dict[str, Callable[..., Any]]] = field(default_factory=dict)
