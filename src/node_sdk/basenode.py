"""
BaseNode - Abstract base class for Python node implementations.

Nodes receive a NodeExecutionContext from the host and implement either
execute() (main-connection nodes) or supply_data() (sub-nodes that hand an
object such as a vector store or a tool to a consuming node).

execute() and supply_data() are synchronous; hosts call them from worker threads.
"""

from __future__ import annotations

import logging
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field


# ==============================================================================
# NodeParameterType
# ==============================================================================

NodeParameterType = Literal[
    "string", "number", "boolean", "options", "multiOptions",
    "color", "json", "collection", "fixedCollection", "dateTime", "node",
    "resourceLocator", "notice", "array", "code",
]


class NodeParameterTypeEnum(str, Enum):
    """Enum version for convenience."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTIONS = "options"
    MULTI_OPTIONS = "multiOptions"
    JSON = "json"
    COLLECTION = "collection"
    FIXED_COLLECTION = "fixedCollection"
    DATE_TIME = "dateTime"
    COLOR = "color"
    NODE = "node"
    RESOURCE_LOCATOR = "resourceLocator"
    NOTICE = "notice"
    ARRAY = "array"
    CODE = "code"


class ConnectionType(str, Enum):
    """Typed connections a node can consume or provide."""
    MAIN = "main"
    AI_DOCUMENT = "ai_document"
    AI_EMBEDDING = "ai_embedding"
    AI_VECTOR_STORE = "ai_vectorStore"
    AI_TOOL = "ai_tool"


# ==============================================================================
# NodeParameter / NodeCredential - Pydantic models for definitions
# ==============================================================================

class NodeParameter(BaseModel):
    """
    A single parameter in the node's properties.

    Can be used both as Pydantic model and as dict in properties.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Parameter key (internal name)")
    display_name: str = Field(..., alias="displayName", description="Human-readable label")
    type: NodeParameterType = Field(..., description="Parameter type")
    default: Any = Field(None, description="Default value")
    required: bool = Field(False, description="Is parameter required?")
    description: Optional[str] = Field(None, description="Help text")
    placeholder: Optional[str] = Field(None, description="Input placeholder")
    options: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Options for options/multiOptions/collection types"
    )
    display_options: Optional[Dict[str, Any]] = Field(
        None,
        alias="displayOptions",
        description="Conditional visibility"
    )


class NodeCredential(BaseModel):
    """Credential requirement definition."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Credential type name")
    required: bool = Field(True, description="Is credential required?")
    display_name: Optional[str] = Field(None, alias="displayName")


# ==============================================================================
# Execution data
# ==============================================================================

class NodeExecutionData(TypedDict, total=False):
    """
    Single item of execution output data.

    Format: {"json": {...}, "binary": {...}, "pairedItem": {"item": 0}}
    """
    json: Dict[str, Any]
    binary: Optional[Dict[str, Any]]
    pairedItem: Optional[Dict[str, int]]


@dataclass(frozen=True)
class NodeInfo:
    """Identity of the node instance being executed."""
    id: str
    name: str
    type: str = ""


@dataclass
class SupplyData:
    """
    Object handed from a sub-node to the node consuming its output connection.

    `close` is called by the host once the consumer is done with `response`.
    """
    response: Any
    close: Optional[Callable[[], None]] = None


# ==============================================================================
# Errors
# ==============================================================================

class NodeOperationError(Exception):
    """
    Error during node operation.

    Carries the failing node, the index of the item being processed and an
    optional description with remediation guidance for the user.
    """

    def __init__(
        self,
        message: str,
        node: Optional[NodeInfo] = None,
        item_index: Optional[int] = None,
        description: Optional[str] = None,
    ) -> None:
        self.message = message
        self.node = node
        self.item_index = item_index
        self.description = description
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for host error output."""
        result: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.node is not None:
            result["node"] = self.node.name
        if self.item_index is not None:
            result["itemIndex"] = self.item_index
        if self.description:
            result["description"] = self.description
        return result


# ==============================================================================
# NodeExecutionContext - Runtime context for node execution
# ==============================================================================

class NodeExecutionContext:
    """
    Runtime context provided to nodes during execution.

    Provides access to:
    - Node identity
    - Parameters (with dot notation and resource locator unwrapping)
    - Credentials
    - Input data, including typed AI connections
    """

    def __init__(
        self,
        node: NodeInfo,
        parameters: Dict[str, Any],
        credentials: Optional[Dict[str, Dict[str, Any]]] = None,
        input_data: Optional[List[Dict[str, Any]]] = None,
        connections: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._node = node
        self._parameters = parameters
        self._credentials = credentials or {}
        self._input_data = input_data or []
        self._connections = connections or {}

    def get_node(self) -> NodeInfo:
        """Get the identity of the executing node."""
        return self._node

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
        extract_value: bool = False,
    ) -> Any:
        """
        Get parameter value.

        Args:
            name: Parameter name, dot notation allowed ('options.namespace')
            item_index: Index of item (for expression resolution)
            default: Default if not set
            extract_value: Unwrap resource locator values to their 'value'
        """
        value = self._get_nested_parameter(name, default)
        if extract_value and isinstance(value, dict) and "value" in value:
            value = value["value"]
        return value

    def _get_nested_parameter(self, name: str, default: Any = None) -> Any:
        current: Any = self._parameters
        for key in name.split("."):
            if key.isdigit() and isinstance(current, list):
                index = int(key)
                if 0 <= index < len(current):
                    current = current[index]
                    continue
                return default
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def get_credentials(self, name: str) -> Dict[str, Any]:
        """Get credentials by type name."""
        if name not in self._credentials:
            raise NodeOperationError(
                f"Credentials '{name}' not found",
                node=self._node,
                description="Please configure the credentials for this node",
            )
        return self._credentials[name]

    def get_input_data(self) -> List[Dict[str, Any]]:
        """Get input items."""
        return self._input_data

    def get_input_connection_data(
        self,
        connection_type: str,
        item_index: int = 0,
    ) -> Any:
        """Get the object supplied by the sub-node on a typed connection."""
        key = ConnectionType(connection_type).value
        if key not in self._connections:
            raise NodeOperationError(
                f"No node connected to required input '{key}'",
                node=self._node,
                item_index=item_index,
            )
        return self._connections[key]


# ==============================================================================
# BaseNode - Abstract base class
# ==============================================================================

class BaseNode(ABC):
    """
    Abstract base class for all Python node implementations.

    Nodes define:
    - type: Unique identifier
    - version: Node version number
    - description: Node metadata dict
    - properties: Parameters and credentials

    and implement execute() and/or supply_data().
    """

    type: str = "base"
    version: int = 1

    description: Dict[str, Any] = {
        "displayName": "Base Node",
        "name": "base",
        "description": "",
        "group": [],
        "version": 1,
        "inputs": ["main"],
        "outputs": ["main"],
    }

    properties: Dict[str, Any] = {
        "parameters": [],
        "credentials": [],
    }

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"node.{self.type}")
        self._context: Optional[NodeExecutionContext] = None

    def execute(self) -> List[List[NodeExecutionData]]:
        """
        Execute node operation.

        Returns:
            Outer list is output branches, inner list the items in a branch.
        """
        raise NotImplementedError("This node does not support execute functionality")

    def supply_data(self, item_index: int = 0) -> SupplyData:
        """Provide an object on the node's typed output connection."""
        raise NotImplementedError("This node does not support supply_data functionality")

    # ==== Context Management ====

    def set_context(self, context: NodeExecutionContext) -> None:
        """Set the execution context."""
        self._context = context

    @property
    def context(self) -> NodeExecutionContext:
        if self._context is None:
            raise NodeOperationError("No context set")
        return self._context

    # ==== Helper methods for subclasses ====

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
        extract_value: bool = False,
    ) -> Any:
        """Get parameter value from the current context."""
        if self._context is None:
            return default
        return self._context.get_node_parameter(name, item_index, default, extract_value)

    def get_credentials(self, name: str) -> Dict[str, Any]:
        """Get credentials by type name."""
        return self.context.get_credentials(name)

    def get_input_data(self) -> List[Dict[str, Any]]:
        """Get input items from previous node."""
        if self._context is None:
            return []
        return self._context.get_input_data()

    @classmethod
    def get_definition(cls) -> Dict[str, Any]:
        """Get full node definition for registration."""
        return {
            "type": cls.type,
            "version": cls.version,
            "description": cls.description,
            "properties": cls.properties,
        }


__all__ = [
    "BaseNode",
    "ConnectionType",
    "NodeExecutionContext",
    "NodeExecutionData",
    "NodeInfo",
    "NodeParameter",
    "NodeCredential",
    "NodeParameterType",
    "NodeParameterTypeEnum",
    "NodeOperationError",
    "SupplyData",
]
