# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-22
# Updated: 2026-10-13
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

from openai import AsyncOpenAI

from chat.ChatModel import ChatModel, Message
from config.Config import Config
from utility.logging_utils import get_class_logger


@dataclass
class OpenAIChat(ChatModel):
    """
        Chat wrapper for any OpenAI-compatible endpoint (OpenRouter by default).

        The model name is chosen per call so the caller can switch to a fallback
        model without building a second client.
    """

    cfg: Config
    client: Optional[AsyncOpenAI] = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if self.client is None:
            self.client = AsyncOpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=self.cfg.openai_base_url,
                timeout=self.cfg.request_timeout_s,
                max_retries=0,
            )

        self.logger.info("OpenAIChat initialised (base_url=%s)", self.cfg.openai_base_url)

    @staticmethod
    def _params(
            messages: List[Message],
            model: str,
            temperature: float,
            max_tokens: int,
            extra_params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if extra_params:
            params.update(extra_params)
        return params

    # Standard chat call
    async def complete(
            self,
            messages: List[Message],
            *,
            model: str,
            temperature: float = 0.7,
            max_tokens: int = 2000,
    ) -> str:
        params = self._params(messages, model, temperature, max_tokens)

        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s", model, temperature, max_tokens
        )

        resp = await self.client.chat.completions.create(**params)

        self.logger.debug("Raw ChatCompletion response: %r", resp)
        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))

        return resp.choices[0].message.content or ""

    # Streaming chat call
    async def stream(
            self,
            messages: List[Message],
            *,
            model: str,
            temperature: float = 0.7,
            max_tokens: int = 2000,
    ) -> AsyncIterator[str]:
        params = self._params(messages, model, temperature, max_tokens, {"stream": True})

        self.logger.debug(
            "Chat stream request: model=%s temp=%s max_tokens=%s", model, temperature, max_tokens
        )

        stream = await self.client.chat.completions.create(**params)
        try:
            async for event in stream:
                if not event.choices:
                    continue
                delta = event.choices[0].delta
                content = getattr(delta, "content", None) if delta else None
                if content:
                    yield content
        finally:
            # runs on normal end, on error, and when the consumer closes us early
            await stream.close()

    async def healthcheck(self, model: str) -> bool:
        try:
            await self.complete(
                [{"role": "user", "content": "ping"}], model=model, temperature=0.0, max_tokens=5
            )
            return True
        except Exception as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False
