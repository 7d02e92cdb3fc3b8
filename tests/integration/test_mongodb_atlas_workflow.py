"""End-to-end node runs against a mocked MongoDB Atlas deployment."""
from unittest.mock import patch

import pytest
from langchain_core.documents import Document
from pymongo.errors import OperationFailure

from node_sdk import NodeOperationError
from vectorstore_nodes.mongodb_atlas import MONGO_CLIENTS, create_mongodb_atlas_node


ATLAS_SEARCH = "vectorstore_nodes.mongodb_atlas.node.AtlasVectorSearch"


@pytest.fixture
def node_for(make_context, node_parameters, embeddings):
    def _node_for(mode, documents=None, input_data=None, **parameters):
        node = create_mongodb_atlas_node()
        connections = {"ai_embedding": embeddings}
        if documents is not None:
            connections["ai_document"] = documents
        node.set_context(make_context(
            parameters={**node_parameters, "mode": mode, **parameters},
            connections=connections,
            input_data=input_data,
        ))
        return node

    return _node_for


class TestInsertWorkflow:
    """Insert documents into a namespace."""

    @patch(ATLAS_SEARCH)
    def test_insert_into_cleared_namespace(
        self, mock_store_cls, node_for, mongo_client_cls, mongo_db, mongo_collection, embeddings
    ):
        mongo_db.list_collection_names.return_value = []
        documents = [
            Document(page_content="Atlas Vector Search indexes embeddings"),
            Document(page_content="Namespaces partition a collection"),
        ]
        node = node_for(
            "insert",
            documents=documents,
            options={"namespace": "tenant-a", "clearNamespace": True},
        )

        [items] = node.execute()

        mongo_collection.delete_many.assert_called_once_with({"namespace": "tenant-a"})
        mongo_db.create_collection.assert_called_with("docs")
        inserted = mock_store_cls.from_documents.call_args.args[0]
        assert [doc.metadata for doc in inserted] == [{"namespace": "tenant-a"}] * 2
        assert [item["json"]["pageContent"] for item in items] == [doc.page_content for doc in documents]
        assert mongo_client_cls.call_count == 1
        assert "node-1" in MONGO_CLIENTS

    @patch(ATLAS_SEARCH)
    def test_clear_happens_once_across_batches(
        self, mock_store_cls, node_for, mongo_client_cls, mongo_collection
    ):
        documents = [Document(page_content=str(i)) for i in range(3)]
        node = node_for(
            "insert",
            documents=documents,
            embeddingBatchSize=1,
            options={"namespace": "tenant-a", "clearNamespace": True},
        )

        node.execute()

        assert mongo_collection.delete_many.call_count == 1
        assert mock_store_cls.from_documents.call_count == 3


class TestLoadWorkflow:
    """Search documents with filters."""

    @patch(ATLAS_SEARCH)
    def test_load_with_namespace_filter(self, mock_store_cls, node_for, mongo_client_cls):
        store = mock_store_cls.return_value
        store.similarity_search_with_score.return_value = [
            (Document(page_content="Namespaces partition a collection", metadata={"namespace": "tenant-a"}), 0.87),
        ]
        node = node_for("load", prompt="what is a namespace?", topK=3, options={"namespace": "tenant-a"})

        [items] = node.execute()

        store.similarity_search_with_score.assert_called_once_with("what is a namespace?", k=3)
        assert mock_store_cls.call_args.kwargs["pre_filter"] == {"namespace": {"$eq": "tenant-a"}}
        assert items == [{
            "json": {
                "document": {
                    "pageContent": "Namespaces partition a collection",
                    "metadata": {"namespace": "tenant-a"},
                },
                "score": 0.87,
            },
            "pairedItem": {"item": 0},
        }]

    def test_load_fails_without_index(self, node_for, mongo_client_cls, mongo_collection):
        mongo_collection.list_search_indexes.return_value = []
        node = node_for("load", prompt="anything")

        with pytest.raises(NodeOperationError, match="Index vector_index not found"):
            node.execute()

    def test_vector_search_failure_is_node_error(self, node_for, mongo_client_cls, mongo_collection):
        mongo_collection.aggregate.side_effect = OperationFailure("$vectorSearch failed")
        node = node_for("load", prompt="anything")

        with pytest.raises(NodeOperationError) as exc_info:
            node.execute()

        error = exc_info.value
        assert error.message == "Error: $vectorSearch failed"
        assert error.item_index == 0
        assert error.description == "Please check your MongoDB Atlas connection details"


class TestRetrieveWorkflow:
    """Supply the store to a chain."""

    @patch(ATLAS_SEARCH)
    def test_retrieve_reuses_client(self, mock_store_cls, node_for, mongo_client_cls):
        node_for("retrieve").supply_data(0)
        node_for("retrieve").supply_data(0)

        assert mongo_client_cls.call_count == 1
