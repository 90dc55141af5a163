# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-10-19
# Description: ChromaDocVectorStore
# -----------------------------------------------------------------------------
import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

import chromadb
from chromadb import ClientAPI
from chromadb.api.models.Collection import Collection

from chunking.DocChunk import DocChunk
from config.Config import Config
from embedding.EmbeddingRecord import EmbeddingRecord
from utility.errors import VectorIndexError
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorStore import DocVectorStore, RetrievedChunk

# metadata key holding the insertion sequence, used to order equal-score hits
SEQ_KEY = "seq"


@dataclass
class ChromaDocVectorStore(DocVectorStore):
    cfg: Config
    client: Any = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.collection_name = self.cfg.collection_name
        self.timeout_s = self.cfg.request_timeout_s

        if self.client is None:
            self.client = self._build_client()

        # one collection per embedding model keeps vector dimensionality uniform
        self.collection: Collection = self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine", "embedding_model": self.cfg.embedding_model},
        )
        self.logger.info(
            "Chroma collection ready: '%s' (mode=%s)",
            self.collection_name,
            self.cfg.chroma_mode,
        )

    def _build_client(self) -> ClientAPI:
        mode = self.cfg.chroma_mode
        self.logger.info("Initialising Chroma client (mode=%s)", mode)

        if mode == "cloud":
            return chromadb.CloudClient(
                tenant=self.cfg.chroma_tenant,
                database=self.cfg.chroma_database,
                api_key=self.cfg.chroma_api_key,
            )
        if mode == "http":
            return chromadb.HttpClient(host=self.cfg.chroma_host, port=self.cfg.chroma_port)
        return chromadb.PersistentClient(path=self.cfg.chroma_path)

    async def _call(self, op: str, fn: Callable[..., Any], **kwargs: Any) -> Any:
        """Run a blocking Chroma call off the event loop, bounded by the request timeout."""
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, **kwargs), timeout=self.timeout_s)
        except Exception as e:
            self.logger.error(
                "Chroma %s failed on collection '%s': %s",
                op,
                self.collection_name,
                e,
                exc_info=True,
            )
            raise VectorIndexError() from e

    async def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma and our collection?
        """
        try:
            await self.count()
            return True
        except VectorIndexError:
            return False

    async def count(self) -> int:
        return await self._call("count", self.collection.count)

    async def insert(self, records: Sequence[EmbeddingRecord]) -> None:
        if not records:
            return

        ids: List[str] = []
        documents: List[str] = []
        embeddings: List[List[float]] = []
        metadatas: List[Dict[str, Any]] = []

        base_seq = time.time_ns()
        for i, rec in enumerate(records):
            vec = rec.vector
            if hasattr(vec, "tolist"):
                vec = vec.tolist()

            ids.append(rec.record_id)
            documents.append(rec.text)
            embeddings.append(vec)
            metadatas.append({**rec.metadata, SEQ_KEY: base_seq + i})

        await self._call(
            "add",
            self.collection.add,
            ids=ids,
            documents=documents,
            embeddings=embeddings,
            metadatas=metadatas,
        )
        self.logger.info(
            "Inserted %d records into Chroma collection '%s'",
            len(records),
            self.collection_name,
        )

    async def query(self, vector: Sequence[float], k: int) -> List[RetrievedChunk]:
        """
        Top-k hits by cosine similarity, best first.

        Equal scores are ordered by insertion `seq`, but only among the hits the HNSW
        index returns. When ties straddle the k boundary the index decides which of
        them make the cut, so earliest-inserted is not guaranteed there.
        """
        total = await self.count() if k > 0 else 0
        if total == 0:
            return []

        vec = vector.tolist() if hasattr(vector, "tolist") else list(vector)
        self.logger.debug("Querying Chroma collection '%s' (k=%d)", self.collection_name, k)

        res: Dict[str, Any] = await self._call(
            "query",
            self.collection.query,
            query_embeddings=[vec],
            n_results=min(k, total),
            include=["documents", "metadatas", "distances"],
        )

        hits = self._to_hits(res)
        self.logger.info(
            "Chroma search complete: returned %d results (requested %d)", len(hits), k
        )
        return hits[:k]

    @staticmethod
    def _to_hits(res: Dict[str, Any]) -> List[RetrievedChunk]:
        """
        Convert a Chroma query response (list-of-lists per query) into ordered hits.
        Cosine distance -> similarity = 1 - distance.
        """
        ids0 = (res.get("ids") or [[]])[0] or []
        docs0 = (res.get("documents") or [[]])[0] or []
        metas0 = (res.get("metadatas") or [[]])[0] or []
        dists0 = (res.get("distances") or [[]])[0] or []

        scored = []
        for i, chunk_id in enumerate(ids0):
            md = dict(metas0[i] or {}) if i < len(metas0) else {}
            seq = md.pop(SEQ_KEY, 0)
            dist = dists0[i] if i < len(dists0) else None
            score = 1.0 - float(dist) if dist is not None else 0.0
            chunk = DocChunk(text=docs0[i] or "", metadata=md, chunk_id=chunk_id)
            scored.append((score, seq, chunk))

        # highest similarity first, earliest insert wins ties
        scored.sort(key=lambda t: (-t[0], t[1]))
        return [RetrievedChunk(chunk=c, score=s) for s, _, c in scored]

    async def has_document(self, owner_id: str, content_hash: str) -> bool:
        res: Dict[str, Any] = await self._call(
            "get",
            self.collection.get,
            where={"$and": [{"ownerId": owner_id}, {"contentHash": content_hash}]},
            limit=1,
            include=[],
        )
        return bool(res.get("ids"))

    async def delete_where(self, owner_id: str) -> int:
        """
        Delete all records whose metadata ownerId equals owner_id.
        Returns the number deleted; 0 when nothing matches. Safe to retry.
        """
        self.logger.info(
            "Deleting all records for ownerId '%s' from collection '%s'",
            owner_id,
            self.collection_name,
        )

        # 1) Fetch ids only
        res: Dict[str, Any] = await self._call(
            "get",
            self.collection.get,
            where={"ownerId": owner_id},
            include=[],
        )

        ids: List[str] = res.get("ids", []) or []
        if not ids:
            self.logger.info("No records found for ownerId '%s'", owner_id)
            return 0

        # 2) Chroma requires unique ids; preserve order while de-duplicating
        unique_ids = list(dict.fromkeys(ids))

        # 3) Delete those specific ids
        await self._call("delete", self.collection.delete, ids=unique_ids)

        self.logger.info(
            "Deleted %d records for ownerId '%s' from collection '%s'",
            len(unique_ids),
            owner_id,
            self.collection_name,
        )
        return len(unique_ids)
