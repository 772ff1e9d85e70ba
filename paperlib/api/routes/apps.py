"""
App catalog endpoints.

Ingest single files or zip archives, then list, filter, search, edit,
delete, export and import catalog entries.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from paperlib.api.dependencies import get_app_library, get_ingest_service
from paperlib.api.models import AnalyzeFileRequest, ArchiveUploadRequest, UpdateAppRequest
from paperlib.catalog.library import AppLibrary
from paperlib.ingest.service import IngestService
from paperlib.observability.logging import get_logger

router = APIRouter(prefix="/api/apps", tags=["apps"])
logger = get_logger(__name__)


@router.post("", status_code=201)
def analyze_file(
    request: AnalyzeFileRequest,
    service: IngestService = Depends(get_ingest_service),
) -> dict[str, Any]:
    """Analyse one file and add it to the catalog."""
    analysis = service.ingest_file(
        request.filename, request.content, use_ai=request.use_ai, deep=request.deep
    )
    if analysis is None:
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {request.filename}")
    return analysis.to_record()


@router.post("/archive", status_code=201)
def upload_archive(
    request: ArchiveUploadRequest,
    service: IngestService = Depends(get_ingest_service),
) -> dict[str, Any]:
    analyses = service.ingest_upload(
        request.filename, request.payload(), use_ai=request.use_ai, deep=request.deep
    )
    return {"added": len(analyses), "apps": [a.to_record() for a in analyses]}


@router.get("")
def list_apps(
    energy: str = Query("all"),
    q: str | None = Query(None, max_length=200),
    library: AppLibrary = Depends(get_app_library),
) -> list[dict[str, Any]]:
    """Catalog entries filtered by energy ("all" for every entry) and search text."""
    apps = library.filter(energy)
    if q:
        matching = {app.id for app in library.search(q)}
        apps = [app for app in apps if app.id in matching]
    return [app.to_record() for app in apps]


@router.get("/stats")
def app_stats(library: AppLibrary = Depends(get_app_library)) -> dict[str, int]:
    return library.stats()


@router.get("/export")
def export_apps(library: AppLibrary = Depends(get_app_library)) -> dict[str, Any]:
    return library.export()


@router.post("/import")
def import_apps(
    bundle: dict[str, Any] = Body(...),
    library: AppLibrary = Depends(get_app_library),
) -> dict[str, Any]:
    if not library.import_bundle(bundle):
        raise HTTPException(status_code=400, detail="Invalid export bundle")
    logger.info("Imported %d apps", len(library.apps))
    return {"imported": len(library.apps)}


@router.get("/{app_id}")
def get_app(app_id: str, library: AppLibrary = Depends(get_app_library)) -> dict[str, Any]:
    app = library.get(app_id)
    if app is None:
        raise HTTPException(status_code=404, detail="App not found")
    return app.to_record()


@router.patch("/{app_id}")
def update_app(
    app_id: str,
    request: UpdateAppRequest,
    library: AppLibrary = Depends(get_app_library),
) -> dict[str, Any]:
    try:
        updated = library.update(app_id, request.changes())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    if not updated:
        raise HTTPException(status_code=404, detail="App not found")
    return library.get(app_id).to_record()


@router.delete("/{app_id}")
def delete_app(app_id: str, library: AppLibrary = Depends(get_app_library)) -> Response:
    if not library.delete(app_id):
        raise HTTPException(status_code=404, detail="App not found")
    return Response(status_code=204)


@router.delete("")
def clear_apps(library: AppLibrary = Depends(get_app_library)) -> Response:
    library.clear()
    return Response(status_code=204)
