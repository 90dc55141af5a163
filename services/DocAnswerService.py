# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-13
# Description: DocAnswerService.py
# -----------------------------------------------------------------------------
import logging
from contextlib import aclosing
from typing import AsyncIterator, List, Sequence

from chat.ChatModel import ChatModel, Message
from chunking.DocChunk import DocChunk
from config.Config import Config, DEFAULT_CHAT_MODEL
from utility.errors import GenerationError
from utility.logging_utils import get_class_logger

NO_ANSWER_MESSAGE = "Sorry, I could not generate an answer."

PROMPT_TEMPLATE = (
    "You are a helpful assistant. Answer the user's question based on the "
    "document excerpts provided below.\n\n"
    "Document excerpts:\n"
    "{context}\n\n"
    "Please note:\n"
    "1. If the excerpts contain the answer, answer in detail using them.\n"
    "2. If the excerpts are related to the question but incomplete, supplement them "
    "with general knowledge, and state clearly which parts come from the documents "
    "and which parts are supplemented.\n"
    "3. If the excerpts are unrelated to the question, you may answer from general "
    "knowledge, but tell the user that the documents do not contain relevant "
    "information.\n\n"
    "User question: {question}\n\n"
    "Answer:"
)


class DocAnswerService:
    """
    Answer generator:
        - builds a graduated-grounding prompt from retrieved chunks
        - calls the primary chat model, whole or streamed
        - on failure makes exactly one attempt with the fallback model
    """

    def __init__(
        self,
        *,
        cfg: Config,
        chat_model: ChatModel,
        logger: logging.Logger | None = None,
    ) -> None:
        self.chat_model = chat_model
        self.temperature = cfg.temperature
        self.max_tokens = cfg.max_tokens
        self.logger = logger or get_class_logger(self.__class__)

        self.model = self.resolve_model(cfg.chat_model)
        self.fallback_model = cfg.fallback_chat_model

        self.logger.info(
            "DocAnswerService initialised (model=%s, fallback=%s)",
            self.model,
            self.fallback_model,
        )

    def resolve_model(self, configured: str) -> str:
        """
        Embedding model ids are not chat models; swap in the default chat model
        instead of failing. This is a diagnostic, not an error.
        """
        name = (configured or "").strip()
        if not name:
            return DEFAULT_CHAT_MODEL
        if "embedding" in name.lower():
            self.logger.warning(
                "Configuration warning: chat model is set to an embedding model (%s); "
                "switching to %s",
                name,
                DEFAULT_CHAT_MODEL,
            )
            return DEFAULT_CHAT_MODEL
        return name

    @staticmethod
    def build_prompt(question: str, chunks: Sequence[DocChunk]) -> str:
        context = "\n\n".join(f"[{i}] {c.text}" for i, c in enumerate(chunks, start=1))
        return PROMPT_TEMPLATE.format(context=context, question=question)

    def _messages(self, question: str, chunks: Sequence[DocChunk]) -> List[Message]:
        prompt = self.build_prompt(question, chunks)
        self.logger.debug("prompt_chars=%d chunks=%d", len(prompt), len(chunks))
        return [{"role": "user", "content": prompt}]

    def _has_fallback(self) -> bool:
        return self.model != self.fallback_model

    async def generate(self, question: str, chunks: Sequence[DocChunk]) -> str:
        messages = self._messages(question, chunks)

        self.logger.info("generate: model=%s (start)", self.model)
        try:
            answer = await self._complete(messages, self.model)
        except Exception as e:
            self.logger.error("generate: model=%s failed: %s", self.model, e, exc_info=True)
            if not self._has_fallback():
                raise GenerationError() from e

            self.logger.info("generate: falling back to %s", self.fallback_model)
            try:
                answer = await self._complete(messages, self.fallback_model)
            except Exception as fe:
                self.logger.error(
                    "generate: fallback model=%s failed: %s", self.fallback_model, fe, exc_info=True
                )
                raise GenerationError() from fe

        self.logger.info("generate: answer_chars=%d (done)", len(answer))
        return answer or NO_ANSWER_MESSAGE

    async def _complete(self, messages: List[Message], model: str) -> str:
        return await self.chat_model.complete(
            messages,
            model=model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    async def generate_stream(self, question: str, chunks: Sequence[DocChunk]) -> AsyncIterator[str]:
        """
        Yields answer fragments as they arrive.

        Fragments already yielded by a failed primary attempt are not retracted; the
        fallback answer continues after them. Closing this generator early closes the
        upstream stream.
        """
        messages = self._messages(question, chunks)

        self.logger.info("generate_stream: model=%s (start)", self.model)
        emitted = 0
        try:
            async with aclosing(self._stream(messages, self.model)) as fragments:
                async for fragment in fragments:
                    emitted += 1
                    yield fragment
            self.logger.info("generate_stream: model=%s fragments=%d (done)", self.model, emitted)
            return
        except Exception as e:
            self.logger.error(
                "generate_stream: model=%s failed after %d fragments: %s",
                self.model,
                emitted,
                e,
                exc_info=True,
            )
            if not self._has_fallback():
                raise GenerationError() from e

        self.logger.info("generate_stream: falling back to %s", self.fallback_model)
        fallback_emitted = 0
        try:
            async with aclosing(self._stream(messages, self.fallback_model)) as fragments:
                async for fragment in fragments:
                    fallback_emitted += 1
                    yield fragment
        except Exception as fe:
            self.logger.error(
                "generate_stream: fallback model=%s failed: %s", self.fallback_model, fe, exc_info=True
            )
            raise GenerationError() from fe

        self.logger.info(
            "generate_stream: fallback model=%s fragments=%d (done)", self.fallback_model, fallback_emitted
        )

    async def _stream(self, messages: List[Message], model: str) -> AsyncIterator[str]:
        upstream = self.chat_model.stream(
            messages,
            model=model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        async with aclosing(upstream) as fragments:
            async for fragment in fragments:
                if fragment:
                    yield fragment
