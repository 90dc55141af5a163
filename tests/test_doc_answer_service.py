# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-13
# Updated: 2026-10-16
# Description: test_doc_answer_service.py
# -----------------------------------------------------------------------------
from dataclasses import replace

import pytest

from chunking.DocChunk import DocChunk
from config.Config import DEFAULT_CHAT_MODEL, DEFAULT_FALLBACK_MODEL
from services.DocAnswerService import NO_ANSWER_MESSAGE, DocAnswerService
from utility.errors import GenerationError

from conftest import ScriptedChatModel

PRIMARY = DEFAULT_CHAT_MODEL
FALLBACK = DEFAULT_FALLBACK_MODEL

CHUNKS = [
    DocChunk(text="Clean the filter every week.", metadata={"source": "a.pdf"}),
    DocChunk(text="Replace the battery yearly.", metadata={"source": "b.pdf"}),
]


async def _collect(agen):
    return [fragment async for fragment in agen]


def test_embedding_model_is_replaced_by_default_chat_model(cfg):
    svc = DocAnswerService(
        cfg=replace(cfg, chat_model="openai/text-embedding-3-small"),
        chat_model=ScriptedChatModel(),
    )
    assert svc.model == DEFAULT_CHAT_MODEL
    assert svc.resolve_model("") == DEFAULT_CHAT_MODEL
    assert svc.resolve_model("meta/llama-3-70b") == "meta/llama-3-70b"


def test_prompt_numbers_context_blocks():
    prompt = DocAnswerService.build_prompt("How often do I clean it?", CHUNKS)

    assert "[1] Clean the filter every week." in prompt
    assert "[2] Replace the battery yearly." in prompt
    assert "User question: How often do I clean it?" in prompt
    assert prompt.index("[1]") < prompt.index("[2]") < prompt.index("User question")


@pytest.mark.asyncio
async def test_generate_uses_primary_model(cfg):
    model = ScriptedChatModel(answers={PRIMARY: "Weekly."})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    assert await svc.generate("q", CHUNKS) == "Weekly."
    assert model.calls == [PRIMARY]


@pytest.mark.asyncio
async def test_generate_falls_back_once(cfg):
    model = ScriptedChatModel(answers={FALLBACK: "From fallback."}, failures={PRIMARY: "setup"})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    assert await svc.generate("q", CHUNKS) == "From fallback."
    assert model.calls == [PRIMARY, FALLBACK]


@pytest.mark.asyncio
async def test_generate_raises_when_both_models_fail(cfg):
    model = ScriptedChatModel(failures={PRIMARY: "setup", FALLBACK: "setup"})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    with pytest.raises(GenerationError):
        await svc.generate("q", CHUNKS)
    assert model.calls == [PRIMARY, FALLBACK]


@pytest.mark.asyncio
async def test_generate_empty_completion_gives_fixed_message(cfg):
    svc = DocAnswerService(cfg=cfg, chat_model=ScriptedChatModel(answers={PRIMARY: ""}))
    assert await svc.generate("q", CHUNKS) == NO_ANSWER_MESSAGE


@pytest.mark.asyncio
async def test_stream_yields_primary_fragments(cfg):
    model = ScriptedChatModel(answers={PRIMARY: "Clean it weekly."})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    fragments = await _collect(svc.generate_stream("q", CHUNKS))

    assert fragments == ["Clean ", "it ", "weekly."]
    assert "".join(fragments) == "Clean it weekly."
    assert model.closed == [PRIMARY]


@pytest.mark.asyncio
async def test_stream_falls_back_when_primary_fails_before_first_fragment(cfg):
    model = ScriptedChatModel(answers={FALLBACK: "Fallback answer here."}, failures={PRIMARY: "setup"})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    fragments = await _collect(svc.generate_stream("q", CHUNKS))

    assert "".join(fragments) == "Fallback answer here."
    assert model.calls == [PRIMARY, FALLBACK]


@pytest.mark.asyncio
async def test_stream_fallback_after_partial_output_keeps_earlier_fragments(cfg):
    model = ScriptedChatModel(
        answers={PRIMARY: "Primary partial answer.", FALLBACK: "Fallback answer."},
        failures={PRIMARY: "mid"},
    )
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    fragments = await _collect(svc.generate_stream("q", CHUNKS))

    assert fragments == ["Primary ", "Fallback ", "answer."]
    # same prompt for both attempts
    assert model.prompts[0] == model.prompts[1]


@pytest.mark.asyncio
async def test_stream_raises_when_fallback_also_fails(cfg):
    model = ScriptedChatModel(failures={PRIMARY: "setup", FALLBACK: "mid"})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    with pytest.raises(GenerationError):
        await _collect(svc.generate_stream("q", CHUNKS))
    assert model.calls == [PRIMARY, FALLBACK]


@pytest.mark.asyncio
async def test_no_fallback_when_primary_is_fallback(cfg):
    model = ScriptedChatModel(failures={FALLBACK: "setup"})
    svc = DocAnswerService(cfg=replace(cfg, chat_model=FALLBACK), chat_model=model)

    with pytest.raises(GenerationError):
        await _collect(svc.generate_stream("q", CHUNKS))
    assert model.calls == [FALLBACK]


@pytest.mark.asyncio
async def test_closing_stream_early_closes_upstream(cfg):
    model = ScriptedChatModel(answers={PRIMARY: "one two three four five"})
    svc = DocAnswerService(cfg=cfg, chat_model=model)

    stream = svc.generate_stream("q", CHUNKS)
    first = await stream.__anext__()
    await stream.aclose()

    assert first == "one "
    assert model.closed == [PRIMARY]
    assert model.calls == [PRIMARY]
