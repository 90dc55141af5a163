# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: EmbeddingFunction
# -----------------------------------------------------------------------------

from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class EmbeddingFunction(Protocol):
    """
    Maps text to fixed-length vectors.
    Implementations raise EmbeddingError on any upstream failure.
    """

    async def embed(self, text: str) -> List[float]:
        ...

    async def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        ...
