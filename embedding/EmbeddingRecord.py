# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-10-12
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np

from chunking.DocChunk import DocChunk

@dataclass
class EmbeddingRecord:
    """Embedding vector + original chunk text + searchable metadata."""
    record_id: str
    vector: np.ndarray
    text: str
    metadata: Dict[str, Any]

    @classmethod
    def from_chunk(cls, chunk: DocChunk, vector: Sequence[float]) -> "EmbeddingRecord":
        return cls(
            record_id=chunk.chunk_id,
            vector=np.asarray(vector, dtype=np.float32),
            text=chunk.text,
            metadata=chunk.to_metadata(),
        )
