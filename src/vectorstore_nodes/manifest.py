"""
Vector Store Node Pack Manifest - Registration function for entry-points.
"""
from typing import Callable, Dict, Tuple

from node_sdk import BaseNode, NodePackManifest
from vectorstore_nodes import __version__
from vectorstore_nodes.credentials import CREDENTIAL_TYPES
from vectorstore_nodes.mongodb_atlas import MONGODB_ATLAS_CONFIG, create_mongodb_atlas_node


# Node factories by type
NODE_FACTORIES: Dict[str, Callable[[], BaseNode]] = {
    MONGODB_ATLAS_CONFIG.meta.name: create_mongodb_atlas_node,
}


MANIFEST = NodePackManifest(
    name="vectorstore",
    version=__version__,
    description="Vector store nodes backed by MongoDB Atlas Vector Search",
    author="avidflow",
    license="MIT",
    nodes=list(NODE_FACTORIES),
    credentials=list(CREDENTIAL_TYPES),
    entry_point="vectorstore_nodes.manifest",
)


def register_nodes() -> Tuple[NodePackManifest, Dict[str, Callable[[], BaseNode]]]:
    """
    Entry point function for node pack discovery.

    Returns tuple of (manifest, node_factories).
    """
    return MANIFEST, NODE_FACTORIES


__all__ = [
    "MANIFEST",
    "NODE_FACTORIES",
    "register_nodes",
]
