"""
Credential types shipped with the vector store node pack.
"""
from typing import Dict, Type

from node_sdk import BaseCredential

from .mongo_db import MongoDbCredential, MongoDbCredentialData

CREDENTIAL_TYPES: Dict[str, Type[BaseCredential]] = {
    MongoDbCredential.name: MongoDbCredential,
}

__all__ = [
    "CREDENTIAL_TYPES",
    "MongoDbCredential",
    "MongoDbCredentialData",
]
