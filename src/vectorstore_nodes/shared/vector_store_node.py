"""
Generic vector store node.

Operation modes:
- load: similarity search for a prompt, one output item per hit
- insert: embed and store documents from the ai_document connection
- update: replace a single document by ID
- retrieve: supply the vector store to a chain or agent
- retrieve-as-tool: supply a search tool to an AI agent

The storage backend is not hard-coded: a VectorStoreNodeConfig provides the
strategies that build a store and persist documents.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

from langchain_core.embeddings import Embeddings
from langchain_core.tools import Tool
from langchain_core.vectorstores import VectorStore

from node_sdk import (
    BaseNode,
    ConnectionType,
    NodeExecutionData,
    NodeOperationError,
    NodeParameterTypeEnum,
    SupplyData,
)
from vectorstore_nodes.config import get_settings
from vectorstore_nodes.observability import with_node_context
from vectorstore_nodes.shared.config import VectorStoreNodeConfig
from vectorstore_nodes.shared.documents import process_document, serialize_document
from vectorstore_nodes.shared.fields import (
    build_mode_field,
    get_metadata_filters_values,
    show_for_modes,
)


class VectorStoreNode(BaseNode):
    """Vector store node assembled from a VectorStoreNodeConfig."""

    version = 1

    def __init__(self, config: VectorStoreNodeConfig) -> None:
        self.config = config
        self.type = config.meta.name
        self.description = self._build_description()
        self.properties = self._build_properties()
        super().__init__()

    # ==================== Definition ====================

    def _build_description(self) -> Dict[str, Any]:
        meta = self.config.meta
        return {
            "displayName": meta.display_name,
            "name": meta.name,
            "icon": meta.icon,
            "group": ["transform"],
            "description": meta.description,
            "version": self.version,
            "documentationUrl": meta.docs_url,
            "credentials": meta.credentials,
            "operationModes": list(meta.operation_modes),
            "usableAsTool": "retrieve-as-tool" in meta.operation_modes,
            "inputs": [
                {"name": ConnectionType.MAIN.value, "type": "main", "required": False},
                {"name": ConnectionType.AI_DOCUMENT.value, "type": "ai_document", "required": False},
                {"name": ConnectionType.AI_EMBEDDING.value, "type": "ai_embedding", "required": True},
            ],
            "outputs": [
                {"name": ConnectionType.MAIN.value, "type": "main", "required": False},
                {"name": ConnectionType.AI_VECTOR_STORE.value, "type": "ai_vectorStore", "required": False},
                {"name": ConnectionType.AI_TOOL.value, "type": "ai_tool", "required": False},
            ],
        }

    def _build_properties(self) -> Dict[str, Any]:
        config = self.config
        settings = get_settings()

        parameters: List[Dict[str, Any]] = [build_mode_field(config.meta.operation_modes)]
        parameters += show_for_modes([
            {
                "name": "toolName",
                "type": NodeParameterTypeEnum.STRING,
                "display_name": "Name",
                "default": "",
                "required": True,
                "description": "Name of the vector store",
                "placeholder": "e.g. company_knowledge_base",
            },
            {
                "name": "toolDescription",
                "type": NodeParameterTypeEnum.STRING,
                "display_name": "Description",
                "default": "",
                "required": True,
                "type_options": {"rows": 2},
                "description": "Explain to the LLM what this tool does",
            },
        ], ["retrieve-as-tool"])
        parameters += config.shared_fields
        parameters += show_for_modes([
            {
                "name": "embeddingBatchSize",
                "type": NodeParameterTypeEnum.NUMBER,
                "display_name": "Embedding Batch Size",
                "default": settings.default_embedding_batch_size,
                "description": "Number of documents to embed in a single batch",
            },
        ], ["insert"])
        parameters += show_for_modes(config.insert_fields, ["insert"])
        parameters += show_for_modes([
            {
                "name": "prompt",
                "type": NodeParameterTypeEnum.STRING,
                "display_name": "Prompt",
                "default": "",
                "required": True,
                "description": "Search prompt to retrieve matching documents from the vector store using similarity-based ranking",
            },
        ], ["load"])
        parameters += show_for_modes([
            {
                "name": "topK",
                "type": NodeParameterTypeEnum.NUMBER,
                "display_name": "Limit",
                "default": settings.default_top_k,
                "description": "Number of top results to fetch from vector store",
            },
            {
                "name": "includeDocumentMetadata",
                "type": NodeParameterTypeEnum.BOOLEAN,
                "display_name": "Include Metadata",
                "default": True,
                "description": "Whether or not to include document metadata",
            },
        ], ["load", "retrieve-as-tool"])
        parameters += show_for_modes(config.load_fields, ["load"])
        parameters += show_for_modes(config.retrieve_fields, ["retrieve", "retrieve-as-tool"])
        if "update" in config.meta.operation_modes:
            parameters += show_for_modes([
                {
                    "name": "id",
                    "type": NodeParameterTypeEnum.STRING,
                    "display_name": "ID",
                    "default": "",
                    "required": True,
                    "description": "ID of an embedding entry",
                },
            ], ["update"])
            parameters += show_for_modes(config.update_fields, ["update"])

        return {
            "parameters": parameters,
            "credentials": config.meta.credentials,
        }

    def get_definition(self) -> Dict[str, Any]:
        """Get full node definition for registration."""
        return {
            "type": self.type,
            "version": self.version,
            "description": self.description,
            "properties": self.properties,
            "methods": {
                group: sorted(functions)
                for group, functions in self.config.methods.items()
            },
        }

    @property
    def methods(self) -> Dict[str, Dict[str, Any]]:
        """Load-options and list-search callbacks exposed to the host UI."""
        return self.config.methods

    # ==================== Execution ====================

    def _get_mode(self) -> str:
        mode = self.get_node_parameter("mode", 0, "retrieve")
        if mode not in self.config.meta.operation_modes:
            raise NodeOperationError(
                f'Operation mode "{mode}" is not supported by {self.config.meta.display_name}',
                node=self.context.get_node(),
            )
        return mode

    def _get_embeddings(self, item_index: int) -> Embeddings:
        return self.context.get_input_connection_data(ConnectionType.AI_EMBEDDING, item_index)

    def _get_vector_store(self, embeddings: Embeddings, item_index: int, use_filter: bool = True) -> VectorStore:
        filter = get_metadata_filters_values(self.context, item_index) if use_filter else None
        return self.config.get_vector_store_client(self.context, filter, embeddings, item_index)

    def _log_extra(self, mode: str, item_index: int | None = None) -> Dict[str, Any]:
        node = self.context.get_node()
        return with_node_context(node_id=node.id, node_name=node.name, item_index=item_index, mode=mode)

    def _wrap_error(self, error: Exception, mode: str, item_index: int) -> NodeOperationError:
        self.logger.error(f"Vector store {mode} failed: {error}", extra=self._log_extra(mode, item_index))
        return NodeOperationError(
            f"Error: {error}",
            node=self.context.get_node(),
            item_index=item_index,
            description=self.config.meta.error_description,
        )

    def execute(self) -> List[List[NodeExecutionData]]:
        """Execute load, insert or update for every input item."""
        mode = self._get_mode()

        if mode == "load":
            return [self._load()]
        if mode == "insert":
            return [self._insert()]
        if mode == "update":
            return [self._update()]

        raise NodeOperationError(
            'Only the "load", "update" and "insert" operation modes are supported with execute',
            node=self.context.get_node(),
        )

    def supply_data(self, item_index: int = 0) -> SupplyData:
        """Supply a vector store or a retriever tool to the consuming node."""
        mode = self._get_mode()

        if mode == "retrieve":
            embeddings = self._get_embeddings(item_index)
            vector_store = self._get_vector_store(embeddings, item_index)
            self.logger.info("Supplying vector store", extra=self._log_extra(mode, item_index))
            return SupplyData(response=vector_store)

        if mode == "retrieve-as-tool":
            return SupplyData(response=self._build_tool(item_index))

        raise NodeOperationError(
            'Only the "retrieve" and "retrieve-as-tool" operation modes are supported to supply data',
            node=self.context.get_node(),
        )

    def _load(self) -> List[NodeExecutionData]:
        results: List[NodeExecutionData] = []
        items = self.get_input_data()

        for item_index, _ in enumerate(items):
            prompt = self.get_node_parameter("prompt", item_index, "")
            top_k = int(self.get_node_parameter("topK", item_index, get_settings().default_top_k))
            include_metadata = bool(self.get_node_parameter("includeDocumentMetadata", item_index, True))

            embeddings = self._get_embeddings(item_index)
            vector_store = self._get_vector_store(embeddings, item_index)
            try:
                hits = vector_store.similarity_search_with_score(prompt, k=top_k)
            except NodeOperationError:
                raise
            except Exception as e:
                raise self._wrap_error(e, "load", item_index) from e

            for document, score in hits:
                results.append({
                    "json": {
                        "document": serialize_document(document, include_metadata),
                        "score": score,
                    },
                    "pairedItem": {"item": item_index},
                })

            self.logger.info(
                f"Found {len(hits)} documents",
                extra=self._log_extra("load", item_index),
            )

        return results

    def _insert(self) -> List[NodeExecutionData]:
        results: List[NodeExecutionData] = []
        items = self.get_input_data()
        document_input = self.context.get_input_connection_data(ConnectionType.AI_DOCUMENT, 0)
        embeddings = self._get_embeddings(0)
        batch_size = int(self.get_node_parameter(
            "embeddingBatchSize", 0, get_settings().default_embedding_batch_size
        ))
        if batch_size <= 0:
            raise NodeOperationError(
                "Embedding Batch Size must be a positive number",
                node=self.context.get_node(),
            )

        if self.config.prepare_insert is not None:
            for item_index in range(len(items)):
                self.config.prepare_insert(self.context, item_index)

        for item_index, item in enumerate(items):
            documents = process_document(document_input, item, item_index)
            if not documents:
                continue

            for document in documents:
                results.append({
                    "json": serialize_document(document),
                    "pairedItem": {"item": item_index},
                })

            for start in range(0, len(documents), batch_size):
                self.config.populate_vector_store(
                    self.context,
                    embeddings,
                    documents[start:start + batch_size],
                    item_index,
                )

            self.logger.info(
                f"Inserted {len(documents)} documents",
                extra=self._log_extra("insert", item_index),
            )

        return results

    def _update(self) -> List[NodeExecutionData]:
        results: List[NodeExecutionData] = []
        items = self.get_input_data()
        document_input = self.context.get_input_connection_data(ConnectionType.AI_DOCUMENT, 0)

        for item_index, item in enumerate(items):
            document_id = self.get_node_parameter("id", item_index, "", extract_value=True)
            documents = process_document(document_input, item, item_index)

            if len(documents) != 1:
                raise NodeOperationError(
                    "Single document per item expected",
                    node=self.context.get_node(),
                    item_index=item_index,
                )

            embeddings = self._get_embeddings(item_index)
            vector_store = self._get_vector_store(embeddings, item_index, use_filter=False)
            try:
                vector_store.add_documents(documents, ids=[document_id])
            except NodeOperationError:
                raise
            except Exception as e:
                raise self._wrap_error(e, "update", item_index) from e

            results.append({
                "json": serialize_document(documents[0]),
                "pairedItem": {"item": item_index},
            })

        return results

    def _build_tool(self, item_index: int) -> Tool:
        node = self.context.get_node()
        name = self.get_node_parameter("toolName", item_index, "")
        description = self.get_node_parameter("toolDescription", item_index, "")
        if not name:
            raise NodeOperationError(
                "Tool name is required",
                node=node,
                item_index=item_index,
                description="Set a name so the agent can refer to this vector store",
            )

        top_k = int(self.get_node_parameter("topK", item_index, get_settings().default_top_k))
        include_metadata = bool(self.get_node_parameter("includeDocumentMetadata", item_index, True))
        embeddings = self._get_embeddings(item_index)
        vector_store = self._get_vector_store(embeddings, item_index)
        log_extra = self._log_extra("retrieve-as-tool", item_index)

        def search(query: str) -> str:
            try:
                documents = vector_store.similarity_search(query, k=top_k)
            except NodeOperationError:
                raise
            except Exception as e:
                raise self._wrap_error(e, "retrieve-as-tool", item_index) from e
            self.logger.info(f"Tool '{name}' returned {len(documents)} documents", extra=log_extra)
            return json.dumps(
                [serialize_document(document, include_metadata) for document in documents],
                default=str,
            )

        return Tool(name=name, description=description, func=search)
