# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: errors.py
# -----------------------------------------------------------------------------
from typing import Optional


class RagError(Exception):
    """
    Base class for pipeline failures.
    `status_code` is a hint for the HTTP layer; `public_message` is what
    callers may show to users (the chained cause is logged, never exposed).
    """

    status_code: int = 500
    public_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)


class ExtractionError(RagError):
    """Document bytes could not be parsed, or produced no usable text."""

    status_code = 422
    public_message = "Failed to extract text from document"


class EmbeddingError(RagError):
    """Upstream embedding provider failed (timeout, quota, bad payload)."""

    status_code = 502
    public_message = "Failed to embed text"


class VectorIndexError(RagError):
    """Vector index transport or storage failure."""

    status_code = 502
    public_message = "Failed to access the document index"


class GenerationError(RagError):
    """Both the primary and the fallback chat model failed."""

    status_code = 502
    public_message = "Failed to generate answer"


class ConfigurationError(RagError):
    """Invalid configuration detected at start-up."""

    status_code = 500
    public_message = "Invalid configuration"
