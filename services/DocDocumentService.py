# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-22
# Updated: 2026-10-14
# Description: DocDocumentService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict

from utility.logging_utils import get_class_logger
from vectorstore.DocVectorStore import DocVectorStore


class DocDocumentService:
    """
    Document facade used by FastAPI
    - purge every indexed chunk owned by one user
    """

    def __init__(self,
                 *,
                 store: DocVectorStore,
                 logger: logging.Logger | None = None, ) -> None:
        self.store = store
        self.logger = logger or get_class_logger(self.__class__)

        self.logger.info("DocDocumentService initialised successfully (store=%s)", type(store).__name__)

    async def purge(self, owner_id: str) -> Dict[str, Any]:
        """Idempotent: purging an owner with nothing indexed still succeeds."""
        self.logger.info("purge: owner_id='%s' (start)", owner_id)
        try:
            deleted = await self.store.delete_where(owner_id)
        except Exception as e:
            self.logger.error("purge: owner_id='%s' -> failed: %s", owner_id, e, exc_info=True)
            raise
        self.logger.info("purge: owner_id='%s' deleted=%d (done)", owner_id, deleted)
        return {"success": True}
