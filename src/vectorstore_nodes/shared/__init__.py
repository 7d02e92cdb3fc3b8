"""Building blocks shared by vector store nodes."""
from vectorstore_nodes.shared.config import (
    SUPPORTED_OPERATION_MODES,
    InsertPreparer,
    VectorStoreClientFactory,
    VectorStoreNodeConfig,
    VectorStoreNodeMeta,
    VectorStorePopulator,
)
from vectorstore_nodes.shared.documents import DocumentProcessor, process_document, serialize_document
from vectorstore_nodes.shared.fields import get_metadata_filters_values, metadata_filter_field
from vectorstore_nodes.shared.vector_store_node import VectorStoreNode

__all__ = [
    "SUPPORTED_OPERATION_MODES",
    "DocumentProcessor",
    "InsertPreparer",
    "VectorStoreClientFactory",
    "VectorStoreNode",
    "VectorStoreNodeConfig",
    "VectorStoreNodeMeta",
    "VectorStorePopulator",
    "get_metadata_filters_values",
    "metadata_filter_field",
    "process_document",
    "serialize_document",
]
