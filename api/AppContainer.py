# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-15
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Any, Optional

from chat.ChatModel import ChatModel
from chat.OpenAIChat import OpenAIChat
from chunking.DocChunker import DocChunker
from config.Config import Config
from embedding.DocEmbedder import DocEmbedder
from embedding.EmbeddingFunction import EmbeddingFunction
from extractor.DocTextExtractor import DocTextExtractor
from services.DocAnswerService import DocAnswerService
from services.DocChatService import DocChatService
from services.DocDocumentService import DocDocumentService
from services.DocHealthService import DocHealthService
from services.DocIngestService import DocIngestService
from services.DocRetrievalService import DocRetrievalService
from utility.logging_utils import get_class_logger
from vectorstore.ChromaDocVectorStore import ChromaDocVectorStore
from vectorstore.DocVectorStore import DocVectorStore
from vectorstore.InMemoryDocVectorStore import InMemoryDocVectorStore


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.

    Infrastructure (embedder, chat model, store) can be injected, which is how
    tests run the full wiring without network access.
    """

    def __init__(
            self,
            cfg: Optional[Config] = None,
            *,
            embedder: Optional[EmbeddingFunction] = None,
            chat_model: Optional[ChatModel] = None,
            store: Optional[DocVectorStore] = None,
            logger: Any = None,
    ) -> None:
        self.logger = logger or get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Building AppContainer: %s", self.cfg.summary())

        # Core infrastructure
        self.embedder = embedder or DocEmbedder(cfg=self.cfg)
        self.chat_model = chat_model or OpenAIChat(cfg=self.cfg)
        self.store = store or self._build_store()

        # Infrastructure for ingestion pipeline
        self.extractor = DocTextExtractor()
        self.chunker = DocChunker(chunk_size=self.cfg.chunk_size, overlap=self.cfg.chunk_overlap)

        self.ingest_service = DocIngestService(
            extractor=self.extractor,
            chunker=self.chunker,
            embedder=self.embedder,
            store=self.store,
            concurrency=self.cfg.ingest_concurrency,
        )

        # Query side
        self.retrieval_service = DocRetrievalService(
            embedder=self.embedder,
            store=self.store,
            default_k=self.cfg.top_k,
        )
        self.answer_service = DocAnswerService(cfg=self.cfg, chat_model=self.chat_model)
        self.chat_service = DocChatService(
            retrieval_service=self.retrieval_service,
            answer_service=self.answer_service,
            default_k=self.cfg.top_k,
        )

        self.document_service = DocDocumentService(store=self.store)

        self.health_service = DocHealthService(
            store=self.store,
            embedder=self.embedder,
            chat_model=self.chat_model,
            chat_model_name=self.answer_service.model,
        )

    def _build_store(self) -> DocVectorStore:
        if self.cfg.vector_backend == "memory":
            return InMemoryDocVectorStore()
        return ChromaDocVectorStore(cfg=self.cfg)
