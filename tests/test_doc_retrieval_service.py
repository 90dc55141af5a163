# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-16
# Description: test_doc_retrieval_service.py
# -----------------------------------------------------------------------------
import numpy as np
import pytest

from embedding.EmbeddingRecord import EmbeddingRecord
from services.DocRetrievalService import DocRetrievalService
from utility.errors import EmbeddingError
from vectorstore.InMemoryDocVectorStore import InMemoryDocVectorStore

from conftest import FakeEmbedder


def _record(i: int, owner: str, vector) -> EmbeddingRecord:
    return EmbeddingRecord(
        record_id=f"r{i}",
        vector=np.asarray(vector, dtype=np.float32),
        text=f"chunk {i}",
        metadata={"source": f"doc{i}.pdf", "ownerId": owner},
    )


class StaticEmbedder:
    def __init__(self, vector):
        self.vector = vector

    async def embed(self, text):
        return list(self.vector)

    async def embed_batch(self, texts):
        return [list(self.vector) for _ in texts]


@pytest.mark.asyncio
async def test_never_returns_more_than_k():
    store = InMemoryDocVectorStore()
    await store.insert([_record(i, "alice", [1.0, i / 10.0]) for i in range(10)])
    svc = DocRetrievalService(embedder=StaticEmbedder([1.0, 0.0]), store=store)

    for k in (1, 3, 4, 10, 20):
        hits = await svc.retrieve("anything", k=k)
        assert len(hits) == min(k, 10)
        scores = [h.score for h in hits]
        assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_owner_filter_keeps_only_owner_hits():
    store = InMemoryDocVectorStore()
    await store.insert([
        _record(0, "alice", [1.0, 0.0]),
        _record(1, "bob", [0.9, 0.1]),
        _record(2, "alice", [0.8, 0.2]),
    ])
    svc = DocRetrievalService(embedder=StaticEmbedder([1.0, 0.0]), store=store)

    hits = await svc.retrieve("q", k=3, owner_id="alice")

    assert [h.chunk.chunk_id for h in hits] == ["r0", "r2"]


@pytest.mark.asyncio
async def test_owner_filter_falls_back_to_unfiltered_hits():
    store = InMemoryDocVectorStore()
    await store.insert([_record(0, "alice", [1.0, 0.0]), _record(1, "alice", [0.0, 1.0])])
    svc = DocRetrievalService(embedder=StaticEmbedder([1.0, 0.0]), store=store)

    hits = await svc.retrieve("q", k=2, owner_id="mallory")

    assert [h.chunk.owner_id for h in hits] == ["alice", "alice"]


@pytest.mark.asyncio
async def test_empty_index_returns_nothing():
    svc = DocRetrievalService(embedder=FakeEmbedder(), store=InMemoryDocVectorStore())
    assert await svc.retrieve("what is the warranty?", k=4, owner_id="alice") == []


@pytest.mark.asyncio
async def test_equal_scores_keep_insertion_order():
    store = InMemoryDocVectorStore()
    await store.insert([_record(i, "alice", [1.0, 0.0]) for i in range(5)])
    svc = DocRetrievalService(embedder=StaticEmbedder([1.0, 0.0]), store=store)

    hits = await svc.retrieve("q", k=3)
    assert [h.chunk.chunk_id for h in hits] == ["r0", "r1", "r2"]


@pytest.mark.asyncio
async def test_embedding_errors_propagate():
    store = InMemoryDocVectorStore()
    await store.insert([_record(0, "alice", [1.0, 0.0])])
    svc = DocRetrievalService(embedder=FakeEmbedder(fail=True), store=store)

    with pytest.raises(EmbeddingError):
        await svc.retrieve("q")
