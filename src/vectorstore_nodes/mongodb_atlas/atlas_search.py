"""
MongoDB Atlas vector search store with a bound pre-filter.

The node resolves namespace and metadata filters once per item, while the
consumers of the store (chains, agents, the retriever tool) call the plain
LangChain search methods. AtlasVectorSearch keeps the filter on the store so
every search applies it.
"""
from typing import Any, Dict, List, Optional, Tuple, Union

from langchain_core.documents import Document
from langchain_mongodb import MongoDBAtlasVectorSearch


def build_pre_filter(
    namespace: Optional[str] = None,
    filter: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Build an Atlas $vectorSearch filter from a namespace and metadata values.

    Examples:
        >>> build_pre_filter("docs")
        {'namespace': {'$eq': 'docs'}}
        >>> build_pre_filter("docs", {"lang": "en"})
        {'$and': [{'namespace': {'$eq': 'docs'}}, {'lang': {'$eq': 'en'}}]}
    """
    clauses: List[Dict[str, Any]] = []
    if namespace:
        clauses.append({"namespace": {"$eq": namespace}})
    for key, value in (filter or {}).items():
        clauses.append({key: {"$eq": value}})

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class AtlasVectorSearch(MongoDBAtlasVectorSearch):
    """MongoDBAtlasVectorSearch that applies a default pre_filter."""

    def __init__(self, *args: Any, pre_filter: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.pre_filter = pre_filter

    def _similarity_search_with_score(
        self,
        query_vector: Union[List[float], str],
        k: int = 4,
        pre_filter: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> List[Tuple[Document, float]]:
        # Text, vector and MMR searches all run through here.
        if pre_filter is None:
            pre_filter = self.pre_filter
        return super()._similarity_search_with_score(query_vector, k=k, pre_filter=pre_filter, **kwargs)
