"""
MongoDB Atlas Vector Store node.

Stores and retrieves text/embedding pairs in a MongoDB Atlas collection that
has an Atlas Vector Search index. Vector storage and similarity queries are
delegated to langchain-mongodb; this module resolves the collection, checks
the search index and maps the node fields onto the store.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from pymongo.collection import Collection
from pymongo.database import Database

from node_sdk import NodeExecutionContext, NodeOperationError, NodeParameterTypeEnum
from vectorstore_nodes.mongodb_atlas.atlas_search import AtlasVectorSearch, build_pre_filter
from vectorstore_nodes.mongodb_atlas.client import get_database
from vectorstore_nodes.mongodb_atlas.collections import get_collections
from vectorstore_nodes.mongodb_atlas.parameters import (
    EMBEDDING_NAME,
    METADATA_FIELD_NAME,
    MONGODB_COLLECTION_NAME,
    MONGODB_CREDENTIALS,
    NAMESPACE_METADATA_KEY,
    VECTOR_INDEX_NAME,
    get_clear_namespace,
    get_collection_name,
    get_embedding_field_name,
    get_metadata_field_name,
    get_namespace,
    get_vector_index_name,
)
from vectorstore_nodes.observability import with_node_context
from vectorstore_nodes.shared import (
    VectorStoreNode,
    VectorStoreNodeConfig,
    VectorStoreNodeMeta,
    metadata_filter_field,
)

logger = logging.getLogger(__name__)

CONNECTION_ERROR_DESCRIPTION = "Please check your MongoDB Atlas connection details"
INDEX_ERROR_DESCRIPTION = "Please check that the index exists in your collection"


# ==================== Fields ====================

mongo_collection_field: Dict[str, Any] = {
    "name": MONGODB_COLLECTION_NAME,
    "display_name": "MongoDB Collection",
    "type": NodeParameterTypeEnum.RESOURCE_LOCATOR,
    "description": "The collection to store and search the documents in",
    "default": {"mode": "list", "value": ""},
    "required": True,
    "modes": [
        {
            "display_name": "From List",
            "name": "list",
            "type": "list",
            "type_options": {"searchListMethod": "getCollections"},
        },
        {
            "display_name": "Name",
            "name": "name",
            "type": "string",
        },
    ],
}

vector_index_name_field: Dict[str, Any] = {
    "name": VECTOR_INDEX_NAME,
    "display_name": "Vector Index Name",
    "type": NodeParameterTypeEnum.STRING,
    "default": "",
    "required": True,
    "description": "The name of the Atlas Vector Search index of the collection",
}

embedding_field: Dict[str, Any] = {
    "name": EMBEDDING_NAME,
    "display_name": "Embedding",
    "type": NodeParameterTypeEnum.STRING,
    "default": "embedding",
    "required": True,
    "description": "The field with the embedding array",
}

metadata_field: Dict[str, Any] = {
    "name": METADATA_FIELD_NAME,
    "display_name": "Metadata Field",
    "type": NodeParameterTypeEnum.STRING,
    "default": "text",
    "required": True,
    "description": "The text field of the raw data",
}

namespace_field: Dict[str, Any] = {
    "name": "namespace",
    "display_name": "Namespace",
    "type": NodeParameterTypeEnum.STRING,
    "default": "",
    "description": "Logical partition for documents. Uses the metadata.namespace field for filtering.",
}

clear_namespace_field: Dict[str, Any] = {
    "name": "clearNamespace",
    "display_name": "Clear Namespace",
    "type": NodeParameterTypeEnum.BOOLEAN,
    "default": False,
    "description": "Whether to clear documents in the namespace before inserting new data",
}

shared_fields: List[Dict[str, Any]] = [
    mongo_collection_field,
    embedding_field,
    metadata_field,
    vector_index_name_field,
]

retrieve_fields: List[Dict[str, Any]] = [
    {
        "name": "options",
        "display_name": "Options",
        "type": NodeParameterTypeEnum.COLLECTION,
        "placeholder": "Add Option",
        "default": {},
        "options": [namespace_field, metadata_filter_field],
    },
]

insert_fields: List[Dict[str, Any]] = [
    {
        "name": "options",
        "display_name": "Options",
        "type": NodeParameterTypeEnum.COLLECTION,
        "placeholder": "Add Option",
        "default": {},
        "options": [clear_namespace_field, namespace_field],
    },
]


# ==================== Strategies ====================

@dataclass(frozen=True)
class AtlasCollectionConfig:
    """Collection, index and field mapping resolved for one item."""

    collection_name: str
    index_name: str
    embedding_key: str
    text_key: str
    namespace: str = ""

    @classmethod
    def from_context(cls, context: NodeExecutionContext, item_index: int) -> "AtlasCollectionConfig":
        config = cls(
            collection_name=get_collection_name(context, item_index),
            index_name=get_vector_index_name(context, item_index),
            embedding_key=get_embedding_field_name(context, item_index),
            text_key=get_metadata_field_name(context, item_index),
            namespace=get_namespace(context, item_index),
        )
        missing = [
            label for label, value in (
                ("MongoDB Collection", config.collection_name),
                ("Vector Index Name", config.index_name),
                ("Embedding", config.embedding_key),
                ("Metadata Field", config.text_key),
            )
            if not value
        ]
        if missing:
            raise NodeOperationError(
                f"Missing required parameter: {', '.join(missing)}",
                node=context.get_node(),
                item_index=item_index,
                description="Please check the node configuration",
            )
        return config

    def store_kwargs(self) -> Dict[str, Any]:
        return {
            "index_name": self.index_name,
            "text_key": self.text_key,
            "embedding_key": self.embedding_key,
        }


def _wrap_error(context: NodeExecutionContext, error: Exception, item_index: int) -> NodeOperationError:
    return NodeOperationError(
        f"Error: {error}",
        node=context.get_node(),
        item_index=item_index,
        description=CONNECTION_ERROR_DESCRIPTION,
    )


def _log_extra(context: NodeExecutionContext, item_index: int) -> Dict[str, Any]:
    node = context.get_node()
    return with_node_context(node_id=node.id, node_name=node.name, item_index=item_index)


def ensure_collection(db: Database, collection_name: str) -> Collection:
    """Get a collection, creating it first when the database lacks it."""
    if not db.list_collection_names(filter={"name": collection_name}):
        db.create_collection(collection_name)
        logger.info(f"Created collection {collection_name}")
    return db[collection_name]


def search_index_exists(collection: Collection, index_name: str) -> bool:
    """Check the Atlas Search indexes of a collection for index_name."""
    return any(index.get("name") == index_name for index in collection.list_search_indexes())


def get_vector_store_client(
    context: NodeExecutionContext,
    filter: Optional[Dict[str, Any]],
    embeddings: Embeddings,
    item_index: int,
) -> AtlasVectorSearch:
    """
    Build a query-capable store for the item.

    Raises:
        NodeOperationError: configuration problems, a missing search index,
            or any driver failure
    """
    try:
        config = AtlasCollectionConfig.from_context(context, item_index)
        db = get_database(context)
        collection = db[config.collection_name]

        if not search_index_exists(collection, config.index_name):
            raise NodeOperationError(
                f"Index {config.index_name} not found",
                node=context.get_node(),
                item_index=item_index,
                description=INDEX_ERROR_DESCRIPTION,
            )

        return AtlasVectorSearch(
            collection,
            embeddings,
            pre_filter=build_pre_filter(config.namespace, filter),
            **config.store_kwargs(),
        )

    except NodeOperationError:
        raise
    except Exception as e:
        logger.error(f"Failed to open vector store: {e}", extra=_log_extra(context, item_index))
        raise _wrap_error(context, e, item_index) from e


def clear_namespace(context: NodeExecutionContext, item_index: int) -> None:
    """Delete the documents of the item's namespace when clearNamespace is set."""
    try:
        if not get_clear_namespace(context, item_index):
            return
        config = AtlasCollectionConfig.from_context(context, item_index)
        if not config.namespace:
            return

        db = get_database(context)
        collection = ensure_collection(db, config.collection_name)
        result = collection.delete_many({NAMESPACE_METADATA_KEY: config.namespace})
        logger.info(
            f"Cleared {result.deleted_count} documents from namespace {config.namespace}",
            extra=_log_extra(context, item_index),
        )

    except NodeOperationError:
        raise
    except Exception as e:
        raise _wrap_error(context, e, item_index) from e


def populate_vector_store(
    context: NodeExecutionContext,
    embeddings: Embeddings,
    documents: List[Document],
    item_index: int,
) -> None:
    """
    Embed and insert a batch of documents, creating the collection if needed.

    Raises:
        NodeOperationError: configuration problems or any driver failure
    """
    try:
        config = AtlasCollectionConfig.from_context(context, item_index)
        db = get_database(context)
        collection = ensure_collection(db, config.collection_name)

        if config.namespace:
            documents = [
                Document(
                    page_content=document.page_content,
                    metadata={**document.metadata, NAMESPACE_METADATA_KEY: config.namespace},
                    id=document.id,
                )
                for document in documents
            ]

        AtlasVectorSearch.from_documents(
            documents,
            embeddings,
            collection=collection,
            **config.store_kwargs(),
        )
        logger.debug(
            f"Wrote {len(documents)} documents to {config.collection_name}",
            extra=_log_extra(context, item_index),
        )

    except NodeOperationError:
        raise
    except Exception as e:
        logger.error(f"Failed to insert documents: {e}", extra=_log_extra(context, item_index))
        raise _wrap_error(context, e, item_index) from e


# ==================== Node ====================

MONGODB_ATLAS_CONFIG = VectorStoreNodeConfig(
    meta=VectorStoreNodeMeta(
        display_name="MongoDB Atlas Vector Store",
        name="vectorStoreMongoDBAtlas",
        description="Work with your data in MongoDB Atlas Vector Store",
        icon="file:mongodb.svg",
        docs_url="https://www.mongodb.com/docs/atlas/atlas-vector-search/vector-search-overview/",
        error_description=CONNECTION_ERROR_DESCRIPTION,
        credentials=[{"name": MONGODB_CREDENTIALS, "required": True}],
        operation_modes=["load", "insert", "retrieve", "update", "retrieve-as-tool"],
    ),
    get_vector_store_client=get_vector_store_client,
    populate_vector_store=populate_vector_store,
    prepare_insert=clear_namespace,
    shared_fields=shared_fields,
    insert_fields=insert_fields,
    load_fields=retrieve_fields,
    retrieve_fields=retrieve_fields,
    methods={"list_search": {"getCollections": get_collections}},
)


def create_mongodb_atlas_node() -> VectorStoreNode:
    """Create a MongoDB Atlas Vector Store node instance."""
    return VectorStoreNode(MONGODB_ATLAS_CONFIG)
