# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-21
# Updated: 2026-10-19
# Description: DocIngestService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import asyncio
import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from chunking.DocChunk import DocChunk
from chunking.DocChunker import DocChunker
from embedding.EmbeddingFunction import EmbeddingFunction
from embedding.EmbeddingRecord import EmbeddingRecord
from extractor.DocTextExtractor import DocTextExtractor
from utility.errors import EmbeddingError, ExtractionError
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorStore import DocVectorStore

UploadedFile = Tuple[bytes, str]  # (raw bytes, original filename)


def doc_type_for(filename: str) -> str:
    suffix = Path(filename).suffix.lower().lstrip(".")
    return suffix or "pdf"


class DocIngestService:
    """
    Owns the ingest/index pipeline for one upload batch:
      - extract text
      - chunk and tag with owner / timestamp / content hash
      - embed
      - insert into vector store (one batch, only after every file succeeded)
    """

    def __init__(
        self,
        *,
        extractor: DocTextExtractor,
        chunker: DocChunker,
        embedder: EmbeddingFunction,
        store: DocVectorStore,
        concurrency: int = 1,
        logger: logging.Logger | None = None,
    ) -> None:
        self.extractor = extractor
        self.chunker = chunker
        self.embedder = embedder
        self.store = store
        self.concurrency = max(1, concurrency)
        self.logger = logger or get_class_logger(self.__class__)

    async def ingest(self, files: Sequence[UploadedFile], owner_id: str) -> Dict[str, int]:
        if not files:
            raise ValueError("No files to ingest")

        self.logger.info(
            "ingest: owner_id=%s files=%d concurrency=%d (start)",
            owner_id,
            len(files),
            self.concurrency,
        )

        created_at = datetime.now(timezone.utc).isoformat()
        unique = self._dedupe(files)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(data: bytes, filename: str, content_hash: str) -> List[EmbeddingRecord]:
            async with semaphore:
                return await self._prepare_file(
                    data, filename, owner_id=owner_id, created_at=created_at, content_hash=content_hash
                )

        tasks = [asyncio.ensure_future(_bounded(d, f, h)) for d, f, h in unique]
        try:
            per_file = await asyncio.gather(*tasks)
        except Exception:
            for t in tasks:
                t.cancel()
            # settle the rest so no task error goes unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        # gather keeps input order, so documents and their chunks stay in order
        records = [r for file_records in per_file for r in file_records]
        if records:
            await self.store.insert(records)

        self.logger.info(
            "ingest: owner_id=%s files=%d chunks=%d (done)", owner_id, len(files), len(records)
        )
        return {"chunkCount": len(records)}

    def _dedupe(self, files: Sequence[UploadedFile]) -> List[Tuple[bytes, str, str]]:
        """Drop byte-identical files within one batch (first filename wins)."""
        seen: Dict[str, str] = {}
        out: List[Tuple[bytes, str, str]] = []
        for data, filename in files:
            content_hash = hashlib.sha256(data).hexdigest()
            if content_hash in seen:
                self.logger.info(
                    "ingest: skipping %r, identical to %r in the same batch", filename, seen[content_hash]
                )
                continue
            seen[content_hash] = filename
            out.append((data, filename, content_hash))
        return out

    async def _prepare_file(
        self,
        data: bytes,
        filename: str,
        *,
        owner_id: str,
        created_at: str,
        content_hash: str,
    ) -> List[EmbeddingRecord]:
        if await self.store.has_document(owner_id, content_hash):
            self.logger.info(
                "ingest: %r already indexed for owner_id=%s (hash=%s...), skipping",
                filename,
                owner_id,
                content_hash[:16],
            )
            return []

        try:
            # CPU-bound parsing stays off the event loop
            text = await asyncio.to_thread(self.extractor.extract, data, filename)
        except ExtractionError as e:
            self.logger.error("ingest: extraction failed for %r: %s", filename, e)
            raise ExtractionError(f"Failed to process {filename}: {e}") from e

        chunks: List[DocChunk] = self.chunker.chunk_document(
            text,
            source=filename,
            doc_type=doc_type_for(filename),
            doc_metadata={
                "ownerId": owner_id,
                "createdAt": created_at,
                "contentHash": content_hash,
            },
        )
        if not chunks:
            raise ExtractionError(f"Failed to process {filename}: no text chunks produced")

        vectors = await self.embedder.embed_batch([c.text for c in chunks])
        if len(vectors) != len(chunks):
            raise EmbeddingError(
                f"Embedding count mismatch for {filename}: {len(vectors)} != {len(chunks)}"
            )

        self.logger.info("ingest: prepared %r -> %d chunks", filename, len(chunks))
        return [EmbeddingRecord.from_chunk(c, v) for c, v in zip(chunks, vectors)]
