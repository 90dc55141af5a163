# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-28
# Updated: 2026-10-19
# Description: api/schemas/chat.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatSource(BaseModel):
    content: str  # excerpt of the chunk text
    source: Optional[str] = None


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    sources: Optional[List[ChatSource]] = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = ""
    user_id: str = Field("default-user", alias="userId")
    stream: bool = False
    # None defers to the service default (RAG_TOP_K)
    k: Optional[int] = Field(None, ge=1, le=20)

    # Accepted for client compatibility; answers are generated per question
    history: Optional[List[ConversationTurn]] = None


class ChatResponse(BaseModel):
    answer: str
    sources: List[ChatSource] = Field(default_factory=list)
