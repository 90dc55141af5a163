# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-13
# Description: DocRetrievalService
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, List, Optional

from embedding.EmbeddingFunction import EmbeddingFunction
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorStore import DocVectorStore, RetrievedChunk


@dataclass
class DocRetrievalService:
    """
    Top-k retrieval over the vector index with best-effort owner filtering.

    The index is queried without an owner filter; results are filtered afterwards.
    When the filter removes every hit, the unfiltered hits are returned instead:
    some grounding content is preferred over none, since owner tags may be stale.
    """

    embedder: EmbeddingFunction
    store: DocVectorStore
    default_k: int = 4
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    async def retrieve(
        self,
        question: str,
        k: Optional[int] = None,
        owner_id: Optional[str] = None,
    ) -> List[RetrievedChunk]:
        k = self.default_k if k is None else k
        self.logger.info("retrieve: query=%r k=%d owner_id=%s (start)", question[:120], k, owner_id)

        vector = await self.embedder.embed(question)
        results = (await self.store.query(vector, k))[:k]
        self.logger.info("retrieve: %d unfiltered hits", len(results))

        if not owner_id or not results:
            return results

        filtered = [r for r in results if r.chunk.metadata.get("ownerId") == owner_id]
        self.logger.info("retrieve: %d hits after owner filter (owner_id=%s)", len(filtered), owner_id)

        if not filtered:
            self.logger.warning(
                "retrieve: owner filter removed all %d hits for owner_id=%s; returning unfiltered hits",
                len(results),
                owner_id,
            )
            return results

        return filtered
