# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-07
# Updated: 2026-10-19
# Description: logging_utils.py
# -----------------------------------------------------------------------------
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

import colorlog

BASE_LOGGER_NAME = "doc_rag_llm"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DATE_FMT = "%Y-%m-%d %H:%M:%S"


def _console_handler() -> logging.Handler:
    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt=(
                "%(log_color)s%(asctime)s [%(levelname)s] "
                "%(name)s:%(lineno)d:%(reset)s %(message_log_color)s%(message)s"
            ),
            datefmt=DATE_FMT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
            secondary_log_colors={
                "message": {
                    "WARNING": "yellow",
                    "ERROR": "light_red",
                    "CRITICAL": "red",
                }
            },
        )
    )
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s", datefmt=DATE_FMT)
    )
    return handler


def configure_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """
    (Re)attach handlers to the `doc_rag_llm` namespace logger.

    Every logger handed out below is a child that propagates here, so handlers live
    in one place. `level` defaults to RAG_LOG_LEVEL and `log_file` to RAG_LOG_FILE;
    the rotating file log is only added when a path is set.
    """
    base = logging.getLogger(BASE_LOGGER_NAME)
    for handler in list(base.handlers):
        base.removeHandler(handler)
        handler.close()

    base.addHandler(_console_handler())

    path = os.getenv("RAG_LOG_FILE", "") if log_file is None else log_file
    if path:
        base.addHandler(_file_handler(Path(path)))

    level_name = (level or os.getenv("RAG_LOG_LEVEL", "INFO")).upper()
    base.setLevel(getattr(logging, level_name, logging.INFO))
    # uvicorn/basicConfig own the root logger
    base.propagate = False
    return base


def _namespaced(suffix: str | None) -> logging.Logger:
    if not logging.getLogger(BASE_LOGGER_NAME).handlers:
        configure_logging()
    return logging.getLogger(f"{BASE_LOGGER_NAME}.{suffix}" if suffix else BASE_LOGGER_NAME)


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger without a class name, e.g. doc_rag_llm.api."""
    return _namespaced(name)


def get_class_logger(cls: type) -> logging.Logger:
    """
    Returns a logger whose name includes module + class, e.g.:

      doc_rag_llm.services.DocChatService.DocChatService
      doc_rag_llm.vectorstore.ChromaDocVectorStore.ChromaDocVectorStore
    """
    module = getattr(cls, "__module__", "unknown_module")
    classname = getattr(cls, "__name__", "UnknownClass")
    return _namespaced(f"{module}.{classname}")
