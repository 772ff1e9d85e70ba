"""Knowledge library endpoints: book ingest and insight browsing."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from paperlib.api.dependencies import get_ingest_service, get_knowledge_library
from paperlib.api.models import BookUploadRequest
from paperlib.ingest.service import IngestService
from paperlib.knowledge.library import KnowledgeLibrary

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.post("/books", status_code=201)
def upload_book(
    request: BookUploadRequest,
    service: IngestService = Depends(get_ingest_service),
) -> dict[str, Any]:
    """Parse a book and extract its insights (AI when the gateway is online)."""
    result = service.ingest_book(request.filename, request.content, request.options())
    return {
        "book": result.book.model_dump(mode="json", by_alias=True, exclude={"content"}),
        "insights": len(result.insights),
        "usedAi": result.used_ai,
    }


@router.get("/insights")
def list_insights(
    gate: int | None = Query(None, ge=1, le=64),
    line: int | None = Query(None, ge=1, le=6),
    concept: str | None = Query(None, max_length=100),
    q: str | None = Query(None, max_length=200),
    library: KnowledgeLibrary = Depends(get_knowledge_library),
) -> list[dict[str, Any]]:
    insights = library.filtered(gate=gate, line=line, concept=concept, query=q)
    return [insight.to_record() for insight in insights]


@router.get("/gates")
def list_gates(library: KnowledgeLibrary = Depends(get_knowledge_library)) -> list[int]:
    return library.gates()


@router.get("/concepts")
def list_concepts(library: KnowledgeLibrary = Depends(get_knowledge_library)) -> list[str]:
    return library.concepts()


@router.get("/stats")
def knowledge_stats(library: KnowledgeLibrary = Depends(get_knowledge_library)) -> dict[str, int]:
    return library.stats()


@router.get("/export")
def export_knowledge(
    library: KnowledgeLibrary = Depends(get_knowledge_library),
) -> dict[str, Any]:
    return library.export()


@router.post("/import")
def import_knowledge(
    bundle: dict[str, Any] = Body(...),
    library: KnowledgeLibrary = Depends(get_knowledge_library),
) -> dict[str, int]:
    if not library.import_bundle(bundle):
        raise HTTPException(status_code=400, detail="Invalid export bundle")
    return {"books": len(library.books), "insights": len(library.insights)}


@router.delete("")
def clear_knowledge(library: KnowledgeLibrary = Depends(get_knowledge_library)) -> Response:
    library.clear()
    return Response(status_code=204)
