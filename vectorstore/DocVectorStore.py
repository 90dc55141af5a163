# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-10-12
# Description: DocVectorStore
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from typing import List, Protocol, Sequence, runtime_checkable

from chunking.DocChunk import DocChunk
from embedding.EmbeddingRecord import EmbeddingRecord


@dataclass
class RetrievedChunk:
    """A chunk returned by a similarity query, higher score = more similar."""
    chunk: DocChunk
    score: float


@runtime_checkable
class DocVectorStore(Protocol):
    async def test_connection(self) -> bool:
        ...

    async def count(self) -> int:
        ...

    async def insert(self, records: Sequence[EmbeddingRecord]) -> None:
        ...

    async def query(self, vector: Sequence[float], k: int) -> List[RetrievedChunk]:
        ...

    async def has_document(self, owner_id: str, content_hash: str) -> bool:
        ...

    async def delete_where(self, owner_id: str) -> int:
        ...
