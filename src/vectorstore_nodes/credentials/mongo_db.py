"""
MongoDB credential for Atlas vector search.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from node_sdk import BaseCredential


class MongoDbCredentialData(BaseModel):
    """Validated shape of stored mongoDb credential data."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    connection_string: str = Field(..., alias="connectionString")
    database: str = Field(...)

    @field_validator("connection_string", "database")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class MongoDbCredential(BaseCredential):
    """MongoDB connection string credential"""

    name = "mongoDb"
    display_name = "MongoDB"
    documentation_url = "https://www.mongodb.com/docs/manual/reference/connection-string/"

    properties = [
        {
            "name": "connectionString",
            "displayName": "Connection String",
            "type": "string",
            "default": "",
            "required": True,
            "type_options": {"password": True},
            "placeholder": "mongodb+srv://<username>:<password>@cluster0.example.mongodb.net",
            "description": "The MongoDB Atlas connection string, including user and password",
        },
        {
            "name": "database",
            "displayName": "Database",
            "type": "string",
            "default": "",
            "required": True,
            "description": "Database to use",
        },
    ]

    # Keep credential tests short; node operations use driver defaults
    test_timeout_ms = 5000

    def test(self) -> Dict[str, Any]:
        """
        Test the MongoDB connection by pinging the server.

        Returns:
            Dictionary with test results
        """
        validation = self.validate()
        if not validation["valid"]:
            return {
                "success": False,
                "message": validation["message"]
            }

        client = None
        try:
            data = MongoDbCredentialData.model_validate(self.data)
            client = MongoClient(
                data.connection_string,
                serverSelectionTimeoutMS=self.test_timeout_ms,
            )
            client.admin.command("ping")
            collections = client[data.database].list_collection_names()

            return {
                "success": True,
                "message": f"Connection successful! Database '{data.database}' has {len(collections)} collections."
            }

        except PyMongoError as e:
            return {
                "success": False,
                "message": f"Connection failed: {str(e)}"
            }
        except ValueError as e:
            return {
                "success": False,
                "message": f"Invalid credential data: {str(e)}"
            }
        finally:
            if client is not None:
                client.close()
