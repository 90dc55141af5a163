# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-22
# Updated: 2026-10-16
# Description: test_openrouter_integration.py
# -----------------------------------------------------------------------------
import os
from dataclasses import replace

import pytest

from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from embedding.DocEmbedder import DocEmbedder
from services.DocAnswerService import DocAnswerService
from chunking.DocChunk import DocChunk


def _skip_if_missing_prereqs():
    missing = [name for name in Config.OPENAI_ENV_VARS if not os.getenv(name)]
    if missing:
        pytest.skip(f"Missing env vars for OpenRouter: {', '.join(missing)}")


def _live_cfg() -> Config:
    return replace(Config.from_env(), vector_backend="memory")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_live_embedding_roundtrip():
    _skip_if_missing_prereqs()
    embedder = DocEmbedder(_live_cfg())

    vectors = await embedder.embed_batch(["pump maintenance", "battery replacement"])

    assert len(vectors) == 2
    assert len(vectors[0]) == len(vectors[1]) > 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_live_streamed_answer():
    """
    Integration test:
      - stream an answer from the configured chat model
      - verify fragments arrive and form a non-empty answer
    """
    _skip_if_missing_prereqs()
    cfg = _live_cfg()
    svc = DocAnswerService(cfg=cfg, chat_model=OpenAIChat(cfg=cfg))
    chunks = [DocChunk(text="The intake filter must be cleaned every week.", metadata={"source": "manual.pdf"})]

    fragments = [f async for f in svc.generate_stream("How often is the filter cleaned?", chunks)]

    assert fragments
    assert "".join(fragments).strip()
