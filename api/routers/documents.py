# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-23
# Updated: 2026-10-15
# Description: documents.py
# -----------------------------------------------------------------------------
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from api.dependencies import get_document_service, get_ingest_service
from api.schemas.documents import (
    DeleteDocumentsRequest,
    DeleteDocumentsResponse,
    UploadDocumentsResponse,
)
from services.DocDocumentService import DocDocumentService
from services.DocIngestService import DocIngestService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])

MAX_FILES = 5
MAX_FILE_BYTES = 10 * 1024 * 1024
ALLOWED_SUFFIXES = (".pdf", ".txt", ".md")


def _check_file(upload: UploadFile, data: bytes) -> None:
    name = upload.filename or ""
    if Path(name).suffix.lower() not in ALLOWED_SUFFIXES and upload.content_type != "application/pdf":
        logger.warning("POST /upload -> 400 (unsupported type) filename='%s'", name)
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {name}")
    if len(data) > MAX_FILE_BYTES:
        logger.warning("POST /upload -> 400 (too large) filename='%s' bytes=%d", name, len(data))
        raise HTTPException(status_code=400, detail=f"File too large: {name}")


@router.post("/upload", response_model=UploadDocumentsResponse)
async def post_upload(
        files: Optional[List[UploadFile]] = File(None),
        user_id: str = Form("default-user", alias="userId"),
        svc: DocIngestService = Depends(get_ingest_service),
) -> UploadDocumentsResponse:
    logger.info("POST /upload (start) user_id='%s' files=%d", user_id, len(files or []))

    if not files:
        logger.warning("POST /upload -> 400 (no files)")
        raise HTTPException(status_code=400, detail="No files uploaded")
    if len(files) > MAX_FILES:
        logger.warning("POST /upload -> 400 (too many files) files=%d", len(files))
        raise HTTPException(status_code=400, detail=f"At most {MAX_FILES} files per upload")

    payload = []
    for f in files:
        data = await f.read()
        _check_file(f, data)
        payload.append((data, f.filename or "document.pdf"))

    # RagError subclasses are mapped to status codes by the app-level handler
    out = await svc.ingest(payload, owner_id=user_id or "default-user")

    names = [name for _, name in payload]
    resp = UploadDocumentsResponse(
        success=True,
        message=f"Successfully processed {len(files)} file(s)",
        documentsCreated=out["chunkCount"],
        files=names,
    )
    logger.info("POST /upload (done) user_id='%s' chunks=%d", user_id, resp.documents_created)
    return resp


@router.delete("/documents", response_model=DeleteDocumentsResponse)
async def delete_documents(
        req: Optional[DeleteDocumentsRequest] = None,
        svc: DocDocumentService = Depends(get_document_service),
) -> DeleteDocumentsResponse:
    user_id = (req.user_id if req else "") or "default-user"
    logger.info("DELETE /documents (start) user_id='%s'", user_id)

    out = await svc.purge(user_id)

    logger.info("DELETE /documents (done) user_id='%s'", user_id)
    return DeleteDocumentsResponse(
        success=out["success"],
        message="All documents deleted successfully",
    )
