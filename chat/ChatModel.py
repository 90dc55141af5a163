# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-13
# Description: ChatModel
# -----------------------------------------------------------------------------
from typing import AsyncIterator, Dict, List, Protocol, runtime_checkable

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}


@runtime_checkable
class ChatModel(Protocol):
    """
    Upstream language model. `stream` must be an async generator so that closing it
    releases the underlying connection.
    """

    async def complete(
            self,
            messages: List[Message],
            *,
            model: str,
            temperature: float,
            max_tokens: int,
    ) -> str:
        ...

    def stream(
            self,
            messages: List[Message],
            *,
            model: str,
            temperature: float,
            max_tokens: int,
    ) -> AsyncIterator[str]:
        ...
