"""
Ingest controller: uploads in, catalog and knowledge records out.

    file / zip  → ContentParser → ClassificationPipeline → AppLibrary
    book text   → parse_book → KnowledgeLibrary → InsightExtractor → KnowledgeLibrary
"""

from __future__ import annotations

import io
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from paperlib.catalog.library import AppLibrary
from paperlib.classification.pipeline import ClassificationPipeline
from paperlib.config import LLM_STATUS_MAX_AGE
from paperlib.knowledge.books import parse_book
from paperlib.knowledge.extractor import InsightExtractor
from paperlib.knowledge.library import KnowledgeLibrary
from paperlib.llm.gateway import InferenceGateway
from paperlib.llm.prompts import ExtractionOptions
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter, log_event
from paperlib.parsing.content_parser import ContentParser, get_parser
from paperlib.storage.models import Analysis, Book, Insight

logger = get_logger(__name__)


@dataclass
class BookIngestResult:
    book: Book
    insights: list[Insight] = field(default_factory=list)
    used_ai: bool = False


class IngestService:
    """
    Runs uploads through parsing, classification and storage.

    Example:
        >>> service = IngestService(gateway, apps, knowledge)
        >>> service.ingest_upload("games.zip", data)
    """

    def __init__(
        self,
        gateway: InferenceGateway | None,
        apps: AppLibrary,
        knowledge: KnowledgeLibrary,
        parser: ContentParser | None = None,
        pipeline: ClassificationPipeline | None = None,
        extractor: InsightExtractor | None = None,
    ) -> None:
        self.gateway = gateway
        self.apps = apps
        self.knowledge = knowledge
        self.parser = parser or get_parser()
        self.pipeline = pipeline or ClassificationPipeline(gateway)
        self.extractor = extractor or InsightExtractor(gateway)

    def ingest_file(
        self, filename: str, content: str, use_ai: bool = True, deep: bool = False
    ) -> Analysis | None:
        """
        Parse, classify and store one file.

        Returns:
            The stored Analysis, or None when the extension is not supported
        """
        self._refresh_gateway(use_ai)
        return self._ingest_member(filename, content, use_ai, deep)

    def ingest_archive(
        self, filename: str, data: bytes, use_ai: bool = True, deep: bool = False
    ) -> list[Analysis]:
        """
        Ingest every supported member of a zip archive.

        Members are decoded as UTF-8 with replacement. A corrupt archive is
        logged and yields no entries; an unreadable member is logged and
        skipped. The gateway status is refreshed once per archive.
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as e:
            logger.error("Failed to read archive %s: %s", filename, e)
            counter("ingest.bad_archives")
            return []

        self._refresh_gateway(use_ai)

        results: list[Analysis] = []
        with archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                member = PurePosixPath(info.filename).name
                if not self.parser.is_valid(member):
                    continue
                try:
                    content = archive.read(info).decode("utf-8", errors="replace")
                except (zipfile.BadZipFile, zlib.error, RuntimeError) as e:
                    logger.warning("Skipping unreadable member %s in %s: %s", info.filename, filename, e)
                    counter("ingest.bad_members")
                    continue
                analysis = self._ingest_member(member, content, use_ai, deep)
                if analysis is not None:
                    results.append(analysis)

        log_event("ingest.archive", filename=filename, files=len(results))
        return results

    def ingest_upload(
        self, filename: str, data: bytes, use_ai: bool = True, deep: bool = False
    ) -> list[Analysis]:
        """Dispatch a raw upload: archives are unpacked, other files ingested directly."""
        if filename.lower().endswith(".zip"):
            return self.ingest_archive(filename, data, use_ai=use_ai, deep=deep)

        analysis = self.ingest_file(
            filename, data.decode("utf-8", errors="replace"), use_ai=use_ai, deep=deep
        )
        return [analysis] if analysis is not None else []

    def ingest_book(
        self,
        filename: str,
        content: str,
        options: ExtractionOptions = ExtractionOptions(),
    ) -> BookIngestResult:
        """
        Store a book and its insights.

        AI extraction runs when the gateway is online after a stale-status
        refresh; otherwise the heuristic extractor is used.
        """
        book = parse_book(filename, content)
        self.knowledge.add_book(book)

        used_ai = False
        if self.gateway is not None:
            used_ai = self.gateway.refresh_status(LLM_STATUS_MAX_AGE)

        if used_ai:
            insights = self.extractor.extract_ai(book, options)
        else:
            insights = self.extractor.extract_heuristic(book)

        self.knowledge.add_insights(insights)
        log_event(
            "ingest.book",
            title=book.title,
            words=book.word_count,
            insights=len(insights),
            used_ai=used_ai,
        )
        return BookIngestResult(book=book, insights=insights, used_ai=used_ai)

    def _refresh_gateway(self, use_ai: bool) -> None:
        if use_ai and self.gateway is not None:
            self.gateway.refresh_status(LLM_STATUS_MAX_AGE)

    def _ingest_member(
        self, filename: str, content: str, use_ai: bool, deep: bool
    ) -> Analysis | None:
        if not self.parser.is_valid(filename):
            logger.info("Skipping unsupported file: %s", filename)
            counter("ingest.skipped")
            return None

        parsed = self.parser.parse(filename, content)
        analysis = self.pipeline.analyze(parsed, use_ai=use_ai, deep=deep)
        self.apps.add(analysis)
        counter("ingest.files")
        return analysis
