"""Ingest - uploads through parsing, classification and storage"""

from __future__ import annotations

from paperlib.ingest.service import BookIngestResult, IngestService

__all__ = ["BookIngestResult", "IngestService"]
