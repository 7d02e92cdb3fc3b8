"""Helpers for documents arriving on the ai_document connection."""
from typing import Any, Dict, List, Protocol, Sequence, Union, runtime_checkable

from langchain_core.documents import Document


@runtime_checkable
class DocumentProcessor(Protocol):
    """Document loader that turns one input item into documents."""

    def process_item(self, item: Dict[str, Any], item_index: int) -> List[Document]: ...


DocumentInput = Union[DocumentProcessor, Sequence[Document]]


def process_document(
    document_input: DocumentInput,
    item: Dict[str, Any],
    item_index: int,
) -> List[Document]:
    """
    Get the documents for an input item.

    Loaders build documents from the item. A static list of documents is
    used as-is for every item.
    """
    if isinstance(document_input, DocumentProcessor):
        return list(document_input.process_item(item, item_index))
    if isinstance(document_input, Document):
        return [document_input]
    return list(document_input)


def serialize_document(document: Document, include_metadata: bool = True) -> Dict[str, Any]:
    return {
        "pageContent": document.page_content,
        "metadata": dict(document.metadata) if include_metadata else {},
    }
