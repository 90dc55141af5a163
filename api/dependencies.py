# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-19
# Description: dependencies.py
# -----------------------------------------------------------------------------
from functools import lru_cache

from fastapi import Depends

from api.AppContainer import AppContainer
from services.DocChatService import DocChatService
from services.DocDocumentService import DocDocumentService
from services.DocHealthService import DocHealthService
from services.DocIngestService import DocIngestService


@lru_cache
def get_container() -> AppContainer:
    # built on first request so importing the app needs no credentials
    return AppContainer()

def get_ingest_service(container: AppContainer = Depends(get_container)) -> DocIngestService:
    # use the singleton service from the container
    return container.ingest_service

def get_chat_service(container: AppContainer = Depends(get_container)) -> DocChatService:
    # use the singleton service from the container
    return container.chat_service

def get_document_service(container: AppContainer = Depends(get_container)) -> DocDocumentService:
    return container.document_service

def get_health_service(container: AppContainer = Depends(get_container)) -> DocHealthService:
    return container.health_service
