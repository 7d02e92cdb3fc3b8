"""Tests for the pre-filtered Atlas vector search store."""
from unittest.mock import MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from vectorstore_nodes.mongodb_atlas.atlas_search import AtlasVectorSearch, build_pre_filter


class TestBuildPreFilter:
    """Test build_pre_filter."""

    def test_nothing_to_filter(self):
        assert build_pre_filter() is None
        assert build_pre_filter("", {}) is None

    def test_namespace_only(self):
        assert build_pre_filter("tenant-a") == {"namespace": {"$eq": "tenant-a"}}

    def test_single_metadata_value(self):
        assert build_pre_filter(None, {"lang": "en"}) == {"lang": {"$eq": "en"}}

    def test_clauses_are_and_joined(self):
        assert build_pre_filter("tenant-a", {"lang": "en", "year": "2024"}) == {
            "$and": [
                {"namespace": {"$eq": "tenant-a"}},
                {"lang": {"$eq": "en"}},
                {"year": {"$eq": "2024"}},
            ]
        }


class TestAtlasVectorSearch:
    """Test that every search path applies the bound pre_filter."""

    TENANT_FILTER = {"namespace": {"$eq": "tenant-a"}}

    @pytest.fixture
    def collection(self):
        collection = MagicMock()
        collection.aggregate.return_value = []
        return collection

    @pytest.fixture
    def store(self, collection):
        return AtlasVectorSearch(
            collection,
            DeterministicFakeEmbedding(size=8),
            pre_filter=self.TENANT_FILTER,
            index_name="vector_index",
            auto_create_index=False,
        )

    @staticmethod
    def sent_filter(collection):
        pipeline = collection.aggregate.call_args.args[0]
        return pipeline[0]["$vectorSearch"].get("filter")

    def test_similarity_search(self, store, collection):
        store.similarity_search("hello", k=2)

        assert self.sent_filter(collection) == self.TENANT_FILTER

    def test_similarity_search_by_vector(self, store, collection):
        store.similarity_search_by_vector([0.1] * 8, k=2)

        assert self.sent_filter(collection) == self.TENANT_FILTER

    def test_max_marginal_relevance_search(self, store, collection):
        store.max_marginal_relevance_search("hello", k=2, fetch_k=5)

        assert self.sent_filter(collection) == self.TENANT_FILTER

    def test_mmr_retriever(self, store, collection):
        """Test a retriever built on the store keeps the namespace."""
        store.as_retriever(search_type="mmr", search_kwargs={"k": 2}).invoke("hello")

        assert self.sent_filter(collection) == self.TENANT_FILTER

    def test_explicit_filter_wins(self, store, collection):
        store.similarity_search_with_score("hello", k=2, pre_filter={"lang": {"$eq": "en"}})

        assert self.sent_filter(collection) == {"lang": {"$eq": "en"}}

    def test_no_bound_filter(self, collection):
        store = AtlasVectorSearch(
            collection, DeterministicFakeEmbedding(size=8), auto_create_index=False
        )

        store.similarity_search("hello")

        assert self.sent_filter(collection) is None
