# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-19
# Description: main.py
# -----------------------------------------------------------------------------
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import chat, documents, health
from config.Config import DEFAULT_FRONTEND_URL, Config
from utility.errors import ConfigurationError, ExtractionError, RagError
from utility.logging_utils import get_logger

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = get_logger("api")


def frontend_origin() -> str:
    """CORS origin from Config; the default origin when the config is not complete yet."""
    try:
        return Config.from_env().frontend_url
    except ConfigurationError as exc:
        logger.warning("Config incomplete at startup (%s); CORS origin=%s", exc, DEFAULT_FRONTEND_URL)
        return DEFAULT_FRONTEND_URL


app = FastAPI(title="Document RAG Chat API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_origin()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RagError)
async def rag_error_handler(request: Request, exc: RagError) -> JSONResponse:
    # causes are logged where raised; extraction messages name the file and are safe to return
    logger.warning("%s %s -> %d (%s)", request.method, request.url.path, exc.status_code, type(exc).__name__)
    detail = str(exc) if isinstance(exc, ExtractionError) else exc.public_message
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


app.include_router(health.router, prefix="/api")
app.include_router(documents.router, prefix="/api")
app.include_router(chat.router, prefix="/api")
