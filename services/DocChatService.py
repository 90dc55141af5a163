# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-27
# Updated: 2026-10-14
# Description: DocChatService.py
# -----------------------------------------------------------------------------
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from chunking.DocChunk import DocChunk
from services.DocAnswerService import DocAnswerService
from services.DocRetrievalService import DocRetrievalService
from utility.errors import RagError
from utility.logging_utils import get_class_logger

NO_DOCUMENTS_MESSAGE = (
    "Sorry, I couldn't find any relevant document content to answer your question. "
    "Please upload some PDF files first."
)
STREAM_ERROR_MESSAGE = "Stream error"


class DocChatService:
    """
    Chat Service:
        - retrieves relevant chunks using DocRetrievalService
        - generates an answer (whole or streamed) using DocAnswerService
        - returns answer + source citations

    Stateless: every question is answered on its own, with no memory of earlier turns.
    """

    def __init__(
        self,
        *,
        retrieval_service: DocRetrievalService,
        answer_service: DocAnswerService,
        default_k: int = 4,
        logger: logging.Logger | None = None,
    ) -> None:
        self.retrieval_service = retrieval_service
        self.answer_service = answer_service
        self.default_k = default_k
        self.logger = logger or get_class_logger(self.__class__)
        self.logger.info(
            "DocChatService initialised (retrieval=%s answer=%s)",
            type(retrieval_service).__name__,
            type(answer_service).__name__,
        )

    @staticmethod
    def to_sources(chunks: Sequence[DocChunk]) -> List[Dict[str, Any]]:
        """Citation payload: `content` holds the excerpt, `source` the filename."""
        return [{"content": c.excerpt(), "source": c.source} for c in chunks]

    @staticmethod
    def _clean_question(question: str) -> str:
        q = (question or "").strip()
        if not q:
            raise ValueError("question must not be empty")
        return q

    async def _retrieve_chunks(self, question: str, owner_id: Optional[str], k: Optional[int]) -> List[DocChunk]:
        hits = await self.retrieval_service.retrieve(
            question, k=self.default_k if k is None else k, owner_id=owner_id
        )
        return [h.chunk for h in hits]

    async def ask(
        self,
        question: str,
        owner_id: Optional[str] = None,
        k: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
            Returns:
            {
                "answer": str,
                "sources": [ {content, source}, ... ],
            }
        """
        q = self._clean_question(question)
        self.logger.info("ask: owner_id=%s question=%r (start)", owner_id, q[:120])

        chunks = await self._retrieve_chunks(q, owner_id, k)
        if not chunks:
            self.logger.info("ask: no relevant documents (done)")
            return {"answer": NO_DOCUMENTS_MESSAGE, "sources": []}

        answer = await self.answer_service.generate(q, chunks)

        self.logger.info("ask: answer_chars=%d sources=%d (done)", len(answer), len(chunks))
        return {"answer": answer, "sources": self.to_sources(chunks)}

    async def ask_stream(
        self,
        question: str,
        owner_id: Optional[str] = None,
        k: Optional[int] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Event sequence:
            {"content": fragment}*  then  {"sources": [...], "done": True}
        or, on failure, a terminal {"error": message} (possibly after some fragments).
        """
        q = self._clean_question(question)
        self.logger.info("ask_stream: owner_id=%s question=%r (start)", owner_id, q[:120])

        fragments = 0
        try:
            chunks = await self._retrieve_chunks(q, owner_id, k)
            if not chunks:
                self.logger.info("ask_stream: no relevant documents (done)")
                yield {"content": NO_DOCUMENTS_MESSAGE}
                yield {"sources": [], "done": True}
                return

            async with aclosing(self.answer_service.generate_stream(q, chunks)) as stream:
                async for fragment in stream:
                    fragments += 1
                    yield {"content": fragment}
        except Exception as e:
            self.logger.error(
                "ask_stream: failed after %d fragments: %s", fragments, e, exc_info=True
            )
            message = e.public_message if isinstance(e, RagError) else STREAM_ERROR_MESSAGE
            yield {"error": message}
            return

        self.logger.info("ask_stream: fragments=%d sources=%d (done)", fragments, len(chunks))
        yield {"sources": self.to_sources(chunks), "done": True}
