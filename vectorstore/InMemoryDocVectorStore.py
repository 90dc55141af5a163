# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-13
# Description: InMemoryDocVectorStore
# -----------------------------------------------------------------------------
from typing import Any, List, Sequence

import numpy as np

from chunking.DocChunk import DocChunk
from embedding.EmbeddingRecord import EmbeddingRecord
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorStore import DocVectorStore, RetrievedChunk


class InMemoryDocVectorStore(DocVectorStore):
    """
    Process-local index using cosine similarity over numpy arrays.
    Used for local development (RAG_VECTOR_BACKEND=memory) and tests.
    """

    def __init__(self, logger: Any = None) -> None:
        self.logger = logger or get_class_logger(self.__class__)
        self._records: List[EmbeddingRecord] = []

    async def test_connection(self) -> bool:
        return True

    async def count(self) -> int:
        return len(self._records)

    async def insert(self, records: Sequence[EmbeddingRecord]) -> None:
        self._records.extend(records)
        self.logger.info("Inserted %d records (total=%d)", len(records), len(self._records))

    async def query(self, vector: Sequence[float], k: int) -> List[RetrievedChunk]:
        if not self._records or k <= 0:
            return []

        q = np.asarray(vector, dtype=np.float32)
        matrix = np.vstack([r.vector for r in self._records]).astype(np.float32)

        norms = np.linalg.norm(matrix, axis=1) * (np.linalg.norm(q) + 1e-12) + 1e-12
        scores = (matrix @ q) / norms

        # stable sort keeps insertion order for equal scores
        order = np.argsort(-scores, kind="stable")[:k]
        return [
            RetrievedChunk(
                chunk=DocChunk(
                    text=self._records[i].text,
                    metadata=dict(self._records[i].metadata),
                    chunk_id=self._records[i].record_id,
                ),
                score=float(scores[i]),
            )
            for i in order
        ]

    async def has_document(self, owner_id: str, content_hash: str) -> bool:
        return any(
            r.metadata.get("ownerId") == owner_id and r.metadata.get("contentHash") == content_hash
            for r in self._records
        )

    async def delete_where(self, owner_id: str) -> int:
        before = len(self._records)
        self._records = [r for r in self._records if r.metadata.get("ownerId") != owner_id]
        deleted = before - len(self._records)
        self.logger.info("Deleted %d records for ownerId '%s'", deleted, owner_id)
        return deleted
