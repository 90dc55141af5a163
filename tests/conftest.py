# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-10-16
# Description: conftest.py
# -----------------------------------------------------------------------------

import hashlib
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional

import fitz
import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.Config import Config  # noqa: E402
from utility.errors import EmbeddingError  # noqa: E402
from vectorstore.InMemoryDocVectorStore import InMemoryDocVectorStore  # noqa: E402

EMBED_DIM = 64


class FakeEmbedder:
    """Deterministic bag-of-words embedding: each word lands in a hashed bucket."""

    def __init__(self, dim: int = EMBED_DIM, fail: bool = False):
        self.dim = dim
        self.fail = fail
        self.calls: List[List[str]] = []

    def _vector(self, text: str) -> List[float]:
        vec = np.zeros(self.dim, dtype=np.float32)
        for word in re.findall(r"\w+", text.lower()):
            bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % self.dim
            vec[bucket] += 1.0
        norm = np.linalg.norm(vec)
        if norm == 0:
            vec[0] = 1.0
            norm = 1.0
        return (vec / norm).tolist()

    async def embed(self, text: str) -> List[float]:
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.fail:
            raise EmbeddingError()
        return [self._vector(t) for t in texts]


class ScriptedChatModel:
    """
    Chat model stub.
    failures: model -> "setup" (fails before the first fragment) or "mid" (fails after one fragment).
    Records every model called, the prompts it saw and which streams were closed.
    """

    def __init__(
        self,
        answers: Optional[Dict[str, str]] = None,
        failures: Optional[Dict[str, str]] = None,
        default_answer: str = "The device must be cleaned daily.",
    ):
        self.answers = answers or {}
        self.failures = failures or {}
        self.default_answer = default_answer
        self.calls: List[str] = []
        self.prompts: List[str] = []
        self.closed: List[str] = []

    def answer_for(self, model: str) -> str:
        return self.answers.get(model, self.default_answer)

    @staticmethod
    def fragments_of(text: str) -> List[str]:
        return re.findall(r"\S+\s*", text)

    async def complete(self, messages, *, model, temperature, max_tokens) -> str:
        self.calls.append(model)
        self.prompts.append(messages[-1]["content"])
        if self.failures.get(model):
            raise RuntimeError(f"{model} unavailable")
        return self.answer_for(model)

    async def stream(self, messages, *, model, temperature, max_tokens):
        self.calls.append(model)
        self.prompts.append(messages[-1]["content"])
        mode = self.failures.get(model)
        try:
            if mode == "setup":
                raise RuntimeError(f"{model} unavailable")
            for i, fragment in enumerate(self.fragments_of(self.answer_for(model))):
                if mode == "mid" and i == 1:
                    raise RuntimeError(f"{model} connection reset")
                yield fragment
        finally:
            self.closed.append(model)

    async def healthcheck(self, model) -> bool:
        return not self.failures.get(model)


def build_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def cfg() -> Config:
    return Config(openai_api_key="test-key", vector_backend="memory")


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def chat_model() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture
def store() -> InMemoryDocVectorStore:
    return InMemoryDocVectorStore()


@pytest.fixture
def make_pdf():
    return build_pdf
