# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-10-19
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv, find_dotenv

from utility.errors import ConfigurationError

DEFAULT_CHAT_MODEL = "anthropic/claude-3.5-sonnet"
DEFAULT_FALLBACK_MODEL = "openai/gpt-3.5-turbo"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_FRONTEND_URL = "http://localhost:3000"

VECTOR_BACKENDS = ("chroma", "memory")
CHROMA_MODES = ("persistent", "http", "cloud")


def _env(env: Mapping[str, str], name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (env.get(name) or default).strip()


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    v = _env(env, name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ConfigurationError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    v = _env(env, name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise ConfigurationError(f"Env var {name} must be a float, got {v!r}") from e


@dataclass(frozen=True)
class Config:
    # OpenAI-compatible provider (OpenRouter by default) for chat + embeddings
    openai_api_key: str
    openai_base_url: str = DEFAULT_BASE_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    fallback_chat_model: str = DEFAULT_FALLBACK_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    embed_batch_size: int = 64
    embed_max_attempts: int = 1

    # Chunking / retrieval / generation
    chunk_size: int = 1000
    chunk_overlap: int = 200
    top_k: int = 4
    temperature: float = 0.7
    max_tokens: int = 2000
    request_timeout_s: float = 60.0
    ingest_concurrency: int = 1

    # Vector index
    vector_backend: str = "chroma"
    chroma_mode: str = "persistent"
    chroma_path: str = "./chroma"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""
    collection_name: str = "documents"

    # HTTP
    frontend_url: str = DEFAULT_FRONTEND_URL

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "openai_api_key": "OPENROUTER_API_KEY",
        "openai_base_url": "OPENROUTER_BASE_URL",
        "chat_model": "OPENROUTER_MODEL",
        "fallback_chat_model": "RAG_FALLBACK_MODEL",
        "embedding_model": "OPENROUTER_EMBEDDING_MODEL",
        "embed_batch_size": "RAG_EMBED_BATCH_SIZE",
        "embed_max_attempts": "RAG_EMBED_MAX_ATTEMPTS",

        "chunk_size": "RAG_CHUNK_SIZE",
        "chunk_overlap": "RAG_CHUNK_OVERLAP",
        "top_k": "RAG_TOP_K",
        "temperature": "RAG_TEMPERATURE",
        "max_tokens": "RAG_MAX_TOKENS",
        "request_timeout_s": "RAG_REQUEST_TIMEOUT_S",
        "ingest_concurrency": "RAG_INGEST_CONCURRENCY",

        "vector_backend": "RAG_VECTOR_BACKEND",
        "chroma_mode": "CHROMA_MODE",
        "chroma_path": "CHROMA_PATH",
        "chroma_host": "CHROMA_HOST",
        "chroma_port": "CHROMA_PORT",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "collection_name": "RAG_COLLECTION",

        "frontend_url": "RAG_FRONTEND_URL",
    }

    # Convenient *groups* for use in tests / health checks
    OPENAI_ENV_VARS = (
        "OPENROUTER_API_KEY",
    )

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build Config object from environment variables.
        A .env file is loaded first when reading the process environment.
        """
        if env is None:
            load_dotenv(find_dotenv(usecwd=True), override=False)
            env = os.environ

        kwargs: Dict[str, Any] = {}
        for f in fields(Config):
            env_name = Config.ENV_VARS[f.name]
            if f.type in (int, "int"):
                kwargs[f.name] = _env_int(env, env_name, f.default)
            elif f.type in (float, "float"):
                kwargs[f.name] = _env_float(env, env_name, f.default)
            elif f.name == "openai_api_key":
                kwargs[f.name] = _env(env, env_name)
            else:
                kwargs[f.name] = _env(env, env_name, f.default)
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast on missing or contradictory settings.
        """
        if not self.openai_api_key:
            raise ConfigurationError(
                f"Missing required environment variables: {[self.ENV_VARS['openai_api_key']]}"
            )

        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be > 0, got {self.chunk_size}")
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError(
                f"chunk_overlap ({self.chunk_overlap}) must be >= 0 and < chunk_size ({self.chunk_size})"
            )
        if self.top_k < 1:
            raise ConfigurationError(f"top_k must be >= 1, got {self.top_k}")
        if self.embed_batch_size < 1 or self.embed_max_attempts < 1 or self.ingest_concurrency < 1:
            raise ConfigurationError(
                "embed_batch_size, embed_max_attempts and ingest_concurrency must all be >= 1"
            )
        if self.vector_backend not in VECTOR_BACKENDS:
            raise ConfigurationError(
                f"vector_backend must be one of {VECTOR_BACKENDS}, got {self.vector_backend!r}"
            )
        if self.chroma_mode not in CHROMA_MODES:
            raise ConfigurationError(
                f"chroma_mode must be one of {CHROMA_MODES}, got {self.chroma_mode!r}"
            )
        if self.vector_backend == "chroma" and self.chroma_mode == "cloud":
            missing = [
                self.ENV_VARS[k]
                for k in ("chroma_api_key", "chroma_tenant", "chroma_database")
                if not getattr(self, k)
            ]
            if missing:
                raise ConfigurationError(f"Missing required environment variables: {missing}")

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url,
            "chat_model": self.chat_model,
            "fallback_chat_model": self.fallback_chat_model,
            "embedding_model": self.embedding_model,
            "chunk_size": self.chunk_size,
            "chunk_overlap": self.chunk_overlap,
            "top_k": self.top_k,
            "vector_backend": self.vector_backend,
            "chroma_mode": self.chroma_mode,
            "collection_name": self.collection_name,
            "frontend_url": self.frontend_url,
        }

