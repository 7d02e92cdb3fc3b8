"""MongoDB Atlas Vector Store node."""
from vectorstore_nodes.mongodb_atlas.atlas_search import AtlasVectorSearch, build_pre_filter
from vectorstore_nodes.mongodb_atlas.client import (
    MONGO_CLIENTS,
    MongoClientRegistry,
    get_database,
    get_mongo_client,
)
from vectorstore_nodes.mongodb_atlas.collections import get_collections
from vectorstore_nodes.mongodb_atlas.node import (
    MONGODB_ATLAS_CONFIG,
    create_mongodb_atlas_node,
    get_vector_store_client,
    populate_vector_store,
)

__all__ = [
    "MONGODB_ATLAS_CONFIG",
    "MONGO_CLIENTS",
    "AtlasVectorSearch",
    "MongoClientRegistry",
    "build_pre_filter",
    "create_mongodb_atlas_node",
    "get_collections",
    "get_database",
    "get_mongo_client",
    "get_vector_store_client",
    "populate_vector_store",
]
