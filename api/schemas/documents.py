# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-22
# Updated: 2026-10-15
# Description: documents.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class UploadDocumentsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    documents_created: int = Field(..., alias="documentsCreated")
    files: List[str]


class DeleteDocumentsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field("default-user", alias="userId")


class DeleteDocumentsResponse(BaseModel):
    success: bool
    message: str
