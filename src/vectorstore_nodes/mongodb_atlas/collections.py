"""
List-search callback that fills the collection picker of the node.
"""
import logging
from typing import Any, Dict, List

from node_sdk import NodeExecutionContext, NodeOperationError
from vectorstore_nodes.mongodb_atlas.client import get_database

logger = logging.getLogger(__name__)


def get_collections(context: NodeExecutionContext) -> Dict[str, List[Dict[str, Any]]]:
    """
    List the collections of the configured database.

    Returns:
        {"results": [{"name": <collection>, "value": <collection>}, ...]}
    """
    try:
        db = get_database(context)
        collections = db.list_collections()

        results = [
            {"name": collection["name"], "value": collection["name"]}
            for collection in collections
        ]
        logger.debug(f"Listed {len(results)} collections")
        return {"results": results}

    except Exception as e:
        raise NodeOperationError(
            f"Error: {e}",
            node=context.get_node(),
            description="Please check your MongoDB Atlas connection details",
        ) from e
