"""
Node SDK - Minimal Python node execution semantics.

This package provides the contract between a workflow host and its nodes:
- NodeExecutionContext: Runtime context for a node
- BaseNode: Abstract base class for node implementations
- BaseCredential: Credential type definitions
- NodePackManifest: Metadata published through the node pack entry point

All nodes execute synchronously.
"""

from .basenode import (
    BaseNode,
    ConnectionType,
    NodeExecutionContext,
    NodeExecutionData,
    NodeInfo,
    NodeParameter,
    NodeCredential,
    NodeParameterType,
    NodeParameterTypeEnum,
    NodeOperationError,
    SupplyData,
)
from .credentials import BaseCredential
from .manifest import NODE_PACK_ENTRY_POINT, NodePackManifest

__all__ = [
    # Context
    "NodeExecutionContext",
    "NodeExecutionData",
    "NodeInfo",
    "ConnectionType",
    "SupplyData",
    # Base classes
    "BaseNode",
    "BaseCredential",
    "NodeParameter",
    "NodeCredential",
    "NodeParameterType",
    "NodeParameterTypeEnum",
    # Errors
    "NodeOperationError",
    # Packs
    "NODE_PACK_ENTRY_POINT",
    "NodePackManifest",
]
