"""
Credential and parameter names used by the MongoDB Atlas vector store node,
and accessors that read them for an item.
"""
from node_sdk import NodeExecutionContext, NodeOperationError

MONGODB_CREDENTIALS = "mongoDb"
MONGODB_COLLECTION_NAME = "mongoCollection"
VECTOR_INDEX_NAME = "vectorIndexName"
EMBEDDING_NAME = "embedding"
METADATA_FIELD_NAME = "metadata_field"
NAMESPACE_OPTION = "options.namespace"
CLEAR_NAMESPACE_OPTION = "options.clearNamespace"

# Metadata key used to partition documents into namespaces
NAMESPACE_METADATA_KEY = "namespace"


def _get_string_parameter(context: NodeExecutionContext, name: str, item_index: int) -> str:
    value = context.get_node_parameter(name, item_index, "", extract_value=True)
    if not isinstance(value, str):
        raise NodeOperationError(
            f"Parameter '{name}' must be a string, got {type(value).__name__}",
            node=context.get_node(),
            item_index=item_index,
            description="Please check the node configuration",
        )
    return value


def get_collection_name(context: NodeExecutionContext, item_index: int) -> str:
    """Get the MongoDB collection name for the item."""
    return _get_string_parameter(context, MONGODB_COLLECTION_NAME, item_index)


def get_vector_index_name(context: NodeExecutionContext, item_index: int) -> str:
    """Get the Atlas vector search index name for the item."""
    return _get_string_parameter(context, VECTOR_INDEX_NAME, item_index)


def get_embedding_field_name(context: NodeExecutionContext, item_index: int) -> str:
    """Get the name of the field holding the embedding array."""
    return _get_string_parameter(context, EMBEDDING_NAME, item_index)


def get_metadata_field_name(context: NodeExecutionContext, item_index: int) -> str:
    """Get the name of the field holding the raw text."""
    return _get_string_parameter(context, METADATA_FIELD_NAME, item_index)


def get_namespace(context: NodeExecutionContext, item_index: int) -> str:
    """Get the optional namespace; empty string when unset."""
    return _get_string_parameter(context, NAMESPACE_OPTION, item_index).strip()


def get_clear_namespace(context: NodeExecutionContext, item_index: int) -> bool:
    """Get whether the namespace is emptied before inserting."""
    value = context.get_node_parameter(CLEAR_NAMESPACE_OPTION, item_index, False)
    if not isinstance(value, bool):
        raise NodeOperationError(
            f"Parameter '{CLEAR_NAMESPACE_OPTION}' must be a boolean, got {type(value).__name__}",
            node=context.get_node(),
            item_index=item_index,
            description="Please check the node configuration",
        )
    return value
