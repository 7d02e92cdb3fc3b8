"""Tests for the mongoDb credential."""
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError
from pymongo.errors import ServerSelectionTimeoutError

from vectorstore_nodes.credentials import CREDENTIAL_TYPES, MongoDbCredential, MongoDbCredentialData


class TestMongoDbCredentialData:
    """Test credential data validation."""

    def test_parses_stored_shape(self):
        data = MongoDbCredentialData.model_validate({
            "connectionString": " mongodb+srv://cluster0.example.mongodb.net ",
            "database": "vectors",
        })

        assert data.connection_string == "mongodb+srv://cluster0.example.mongodb.net"
        assert data.database == "vectors"

    @pytest.mark.parametrize("payload", [
        {"database": "vectors"},
        {"connectionString": "mongodb://localhost", "database": "   "},
    ])
    def test_rejects_missing_values(self, payload):
        with pytest.raises(ValidationError):
            MongoDbCredentialData.model_validate(payload)


class TestMongoDbCredential:
    """Test MongoDbCredential."""

    def test_registered(self):
        assert CREDENTIAL_TYPES["mongoDb"] is MongoDbCredential

    def test_definition(self):
        definition = MongoDbCredential.get_definition()

        assert definition["name"] == "mongoDb"
        properties = {prop["name"]: prop for prop in definition["properties"]}
        assert properties["connectionString"]["type_options"] == {"password": True}
        assert properties["database"]["required"] is True

    def test_validate_reports_missing_fields(self):
        result = MongoDbCredential({"database": "vectors"}).validate()

        assert result["valid"] is False
        assert "connectionString" in result["message"]

    @patch("vectorstore_nodes.credentials.mongo_db.MongoClient")
    def test_connection_success(self, mock_client_cls, mongo_credentials):
        client = MagicMock()
        client.__getitem__.return_value.list_collection_names.return_value = ["docs", "chunks"]
        mock_client_cls.return_value = client

        result = MongoDbCredential(mongo_credentials).test()

        assert result["success"] is True
        assert "2 collections" in result["message"]
        client.admin.command.assert_called_once_with("ping")
        client.close.assert_called_once()

    @patch("vectorstore_nodes.credentials.mongo_db.MongoClient")
    def test_connection_failure(self, mock_client_cls, mongo_credentials):
        client = MagicMock()
        client.admin.command.side_effect = ServerSelectionTimeoutError("timed out")
        mock_client_cls.return_value = client

        result = MongoDbCredential(mongo_credentials).test()

        assert result["success"] is False
        assert "timed out" in result["message"]
        client.close.assert_called_once()

    @patch("vectorstore_nodes.credentials.mongo_db.MongoClient")
    def test_missing_fields_skip_connection(self, mock_client_cls):
        result = MongoDbCredential({}).test()

        assert result["success"] is False
        mock_client_cls.assert_not_called()
