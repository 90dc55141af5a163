# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-10
# Updated: 2026-10-19
# Description: DocChunk
# -----------------------------------------------------------------------------
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

EXCERPT_CHARS = 200


@dataclass
class DocChunk:
    """
    A bounded-size segment of one document's extracted text.
    `metadata` always carries `source` and, once ingested, `ownerId` and `createdAt`.
    """

    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    chunk_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def source(self) -> Optional[str]:
        return self.metadata.get("source")

    @property
    def owner_id(self) -> Optional[str]:
        return self.metadata.get("ownerId")

    def to_metadata(self) -> Dict[str, Any]:
        """
        Flat metadata dict suitable for Chroma storage (scalar values only, None dropped).
        """
        return {
            k: v
            for k, v in self.metadata.items()
            if v is not None and isinstance(v, (str, int, float, bool))
        }

    def excerpt(self, n: int = EXCERPT_CHARS) -> str:
        """First n characters followed by an ellipsis marker, as shown in citations."""
        return self.text[:n] + "..."
