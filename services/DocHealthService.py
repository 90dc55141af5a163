# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-15
# Description: DocHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, Optional

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from embedding.EmbeddingFunction import EmbeddingFunction
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorStore import DocVectorStore


@dataclass
class DocHealthService:
    """
    Runs smoke tests against the vector index, the embedding endpoint
    and (optionally) the chat endpoint.
    Returns DeepHealthResponse for API layer
    """

    store: DocVectorStore
    embedder: EmbeddingFunction
    chat_model: Any = None
    chat_model_name: Optional[str] = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    async def run_all(self, run_chat: bool = False) -> Dict[str, bool]:
        self.logger.info("Starting smoke test suite (run_chat=%s)", run_chat)
        results: Dict[str, bool] = {}

        results["vector_index"] = await self.store.test_connection()
        self._log_result("vector_index", results["vector_index"])

        try:
            vec = await self.embedder.embed("healthcheck")
            results["embedding"] = len(vec) > 0
        except Exception as e:
            self.logger.exception("Embedding smoke test raised an exception: %s", e)
            results["embedding"] = False
        self._log_result("embedding", results["embedding"])

        if run_chat and self.chat_model is not None and hasattr(self.chat_model, "healthcheck"):
            results["chat"] = await self.chat_model.healthcheck(self.chat_model_name)
            self._log_result("chat", results["chat"])

        return results

    async def deep_health(self, run_chat: bool = False) -> DeepHealthResponse:
        results = await self.run_all(run_chat=run_chat)

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        chunk_count = await self.store.count() if results.get("vector_index") else 0

        return DeepHealthResponse(
            status="ok" if failed == 0 else "error",
            results=results,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
            chunk_count=chunk_count,
        )

    def _log_result(self, name: str, ok: bool) -> None:
        if ok:
            self.logger.info("%s: PASSED", name)
        else:
            self.logger.error("%s: FAILED", name)
