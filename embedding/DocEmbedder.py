# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-10-12
# Description: DocEmbedder
# -----------------------------------------------------------------------------
import asyncio
from typing import List, Sequence

import numpy as np
from openai import AsyncOpenAI

from config.Config import Config
from utility.errors import EmbeddingError
from utility.logging_utils import get_class_logger


class DocEmbedder:
    """
    EmbeddingFunction backed by an OpenAI-compatible /embeddings endpoint
    (OpenRouter by default).
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: AsyncOpenAI | None = None,
            normalize: bool = True,
            logger=None,
    ):
        self.cfg = cfg
        self.batch_size = cfg.embed_batch_size
        self.max_attempts = cfg.embed_max_attempts
        self.normalize = normalize
        self.logger = logger or get_class_logger(self.__class__)

        self.client = client or AsyncOpenAI(
            api_key=cfg.openai_api_key,
            base_url=cfg.openai_base_url,
            timeout=cfg.request_timeout_s,
            max_retries=0,
        )
        self.model = cfg.embedding_model
        self.logger.info(
            "Embedder initialised (model=%s, batch=%d, attempts=%d)",
            self.model, self.batch_size, self.max_attempts,
        )

    async def embed(self, text: str) -> List[float]:
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed texts in provider-sized batches; output order matches input order."""
        out: List[List[float]] = []
        for i in range(0, len(texts), self.batch_size):
            batch = list(texts[i:i + self.batch_size])
            arr = await self._embed_batch(batch)
            out.extend(arr.tolist())
        return out

    async def _embed_batch(self, texts: List[str]) -> np.ndarray:
        delay = 0.8
        for attempt in range(1, self.max_attempts + 1):
            try:
                resp = await self.client.embeddings.create(model=self.model, input=texts)

                data = sorted(resp.data, key=lambda d: d.index)
                if len(data) != len(texts):
                    raise ValueError(f"expected {len(texts)} embeddings, got {len(data)}")

                arr = np.asarray([d.embedding for d in data], dtype=np.float32)

                # Normalize vectors (cosine-friendly)
                if self.normalize:
                    norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
                    arr = arr / norms
                return arr

            except Exception as e:
                self.logger.warning(
                    "Embedding batch failed (attempt %d/%d): %s", attempt, self.max_attempts, e
                )
                if attempt == self.max_attempts:
                    raise EmbeddingError() from e
                await asyncio.sleep(delay)
                delay *= 1.7  # backoff

        # Unreachable and include for type checkers
        raise EmbeddingError()

