"""
Parameter definitions shared by vector store nodes, plus helpers that read
them back from the execution context.
"""
from typing import Any, Dict, List, Optional

from node_sdk import NodeExecutionContext, NodeParameterTypeEnum


OPERATION_MODE_OPTIONS: Dict[str, Dict[str, str]] = {
    "load": {
        "name": "Get Many",
        "description": "Get many ranked documents from vector store for query",
        "action": "Get ranked documents from vector store",
    },
    "insert": {
        "name": "Insert Documents",
        "description": "Insert documents into vector store",
        "action": "Add documents to vector store",
    },
    "retrieve": {
        "name": "Retrieve Documents (As Vector Store for Chain/Tool)",
        "description": "Retrieve documents from vector store to be used as vector store with AI nodes",
        "action": "Retrieve documents for Chain/Tool as Vector Store",
    },
    "retrieve-as-tool": {
        "name": "Retrieve Documents (As Tool for AI Agent)",
        "description": "Retrieve documents from vector store to be used as tool with AI nodes",
        "action": "Retrieve documents for AI Agent as Tool",
    },
    "update": {
        "name": "Update Documents",
        "description": "Update documents in vector store by ID",
        "action": "Update vector store documents",
    },
}


metadata_filter_field: Dict[str, Any] = {
    "name": "metadata",
    "display_name": "Metadata Filter",
    "type": NodeParameterTypeEnum.FIXED_COLLECTION,
    "description": "Metadata to filter the document by",
    "placeholder": "Add filter field",
    "type_options": {"multipleValues": True},
    "default": {},
    "options": [
        {
            "name": "metadataValues",
            "display_name": "Fields to Set",
            "values": [
                {
                    "name": "name",
                    "display_name": "Name",
                    "type": NodeParameterTypeEnum.STRING,
                    "default": "",
                    "required": True,
                },
                {
                    "name": "value",
                    "display_name": "Value",
                    "type": NodeParameterTypeEnum.STRING,
                    "default": "",
                },
            ],
        }
    ],
}


def build_mode_field(operation_modes: List[str]) -> Dict[str, Any]:
    """Build the 'mode' selector limited to the modes a node supports."""
    return {
        "name": "mode",
        "display_name": "Operation Mode",
        "type": NodeParameterTypeEnum.OPTIONS,
        "default": operation_modes[0] if operation_modes else "retrieve",
        "options": [
            {"value": mode, **OPERATION_MODE_OPTIONS[mode]}
            for mode in operation_modes
            if mode in OPERATION_MODE_OPTIONS
        ],
    }


def show_for_modes(fields: List[Dict[str, Any]], modes: List[str]) -> List[Dict[str, Any]]:
    """Return copies of fields that are only displayed for the given modes."""
    shown = []
    for field in fields:
        field = dict(field)
        display_options = dict(field.get("display_options") or {})
        show = dict(display_options.get("show") or {})
        show["mode"] = modes
        display_options["show"] = show
        field["display_options"] = display_options
        shown.append(field)
    return shown


def get_metadata_filters_values(
    context: NodeExecutionContext,
    item_index: int,
) -> Optional[Dict[str, Any]]:
    """
    Collapse the metadata filter rows into a {name: value} mapping.

    Returns None when no filter rows are configured.
    """
    options = context.get_node_parameter("options", item_index, {}) or {}
    metadata = options.get("metadata") or {}
    rows = metadata.get("metadataValues") or []
    if not rows:
        return None

    filters: Dict[str, Any] = {}
    for row in rows:
        name = row.get("name")
        if name:
            filters[name] = row.get("value")
    return filters or None
