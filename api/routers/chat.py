# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-28
# Updated: 2026-10-19
# Description: chat.py
# -----------------------------------------------------------------------------
import logging
from typing import Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from api.dependencies import get_chat_service
from api.schemas.chat import ChatRequest, ChatResponse, ChatSource
from services.DocChatService import DocChatService
from utility.sse import sse_stream

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


@router.post("", response_model=None)
async def post_chat(
        req: ChatRequest,
        svc: DocChatService = Depends(get_chat_service),
) -> Union[ChatResponse, StreamingResponse]:
    question = (req.question or "").strip()
    if not question:
        raise HTTPException(status_code=400, detail="Question is required")

    logger.info(
        "POST /chat (start) user_id='%s' question_len=%d k=%s stream=%s history=%d",
        req.user_id,
        len(question),
        req.k,
        req.stream,
        len(req.history or []),
    )

    if req.stream:
        events = svc.ask_stream(question, owner_id=req.user_id, k=req.k)
        return StreamingResponse(sse_stream(events), media_type="text/event-stream", headers=SSE_HEADERS)

    out = await svc.ask(question, owner_id=req.user_id, k=req.k)
    sources = [ChatSource(**s) for s in out["sources"]]

    logger.info("POST /chat (done) answer_len=%d sources=%d", len(out["answer"]), len(sources))
    return ChatResponse(answer=out["answer"], sources=sources)
