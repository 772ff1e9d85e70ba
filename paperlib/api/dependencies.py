"""
Shared service instances for route handlers.

Each provider is cached so the process holds one gateway, one store and one
of each library. Tests replace them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from paperlib.catalog.library import AppLibrary
from paperlib.ingest.service import IngestService
from paperlib.knowledge.library import KnowledgeLibrary
from paperlib.llm.gateway import InferenceGateway
from paperlib.storage import RecordStore, SQLiteRecordStore


@lru_cache
def get_gateway() -> InferenceGateway:
    return InferenceGateway()


@lru_cache
def get_store() -> RecordStore:
    return SQLiteRecordStore()


@lru_cache
def get_app_library() -> AppLibrary:
    return AppLibrary(get_store())


@lru_cache
def get_knowledge_library() -> KnowledgeLibrary:
    return KnowledgeLibrary(get_store())


def get_ingest_service(
    gateway: InferenceGateway = Depends(get_gateway),
    apps: AppLibrary = Depends(get_app_library),
    knowledge: KnowledgeLibrary = Depends(get_knowledge_library),
) -> IngestService:
    return IngestService(gateway, apps, knowledge)
