"""
Knowledge library: books and their extracted insights.

Insights are indexed by gate number and by (lower-cased) concept. The
indexes are derived state: they are rebuilt on load and import and never
persisted.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from paperlib.config import EXPORT_VERSION, KNOWLEDGE_NAMESPACE
from paperlib.observability.logging import get_logger
from paperlib.storage import RecordStore
from paperlib.storage.models import Book, Insight

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class KnowledgeLibrary:
    def __init__(self, store: RecordStore, namespace: str = KNOWLEDGE_NAMESPACE) -> None:
        self.store = store
        self.namespace = namespace
        self.books: list[Book] = []
        self.insights: list[Insight] = []
        self.gate_index: dict[int, list[Insight]] = defaultdict(list)
        self.concept_index: dict[str, list[Insight]] = defaultdict(list)
        self.load()

    def load(self) -> None:
        saved = self.store.load(self.namespace)
        if not isinstance(saved, dict):
            return
        try:
            self.books = [Book.model_validate(b) for b in saved.get("books") or []]
            self.insights = [Insight.model_validate(i) for i in saved.get("insights") or []]
        except (ValidationError, TypeError) as e:
            logger.error("Failed to load knowledge: %s", e)
            self.books, self.insights = [], []

        self.rebuild_indexes()
        logger.info("Loaded %d books, %d insights", len(self.books), len(self.insights))

    def save(self) -> None:
        self.store.save(
            self.namespace,
            {
                "books": [book.to_record() for book in self.books],
                "insights": [insight.to_record() for insight in self.insights],
            },
        )

    def add_book(self, book: Book) -> str:
        book.id = uuid.uuid4().hex
        book.timestamp = _now()
        self.books.append(book)
        self.save()
        return book.id

    def add_insight(self, insight: Insight, persist: bool = True) -> str:
        """
        Append and index one insight.

        Args:
            insight: Record to store (id and timestamp are assigned here)
            persist: False when adding a batch; call save() afterwards
        """
        insight.id = uuid.uuid4().hex
        insight.timestamp = _now()
        self.insights.append(insight)
        self._index(insight)
        if persist:
            self.save()
        return insight.id

    def add_insights(self, insights: list[Insight]) -> list[str]:
        ids = [self.add_insight(insight, persist=False) for insight in insights]
        self.save()
        return ids

    def _index(self, insight: Insight) -> None:
        if insight.gate is not None:
            self.gate_index[insight.gate].append(insight)
        for concept in insight.concepts:
            self.concept_index[concept.lower()].append(insight)

    def rebuild_indexes(self) -> None:
        self.gate_index = defaultdict(list)
        self.concept_index = defaultdict(list)
        for insight in self.insights:
            self._index(insight)

    def by_gate(self, gate: int) -> list[Insight]:
        return list(self.gate_index.get(gate, []))

    def by_gate_line(self, gate: int, line: int | None = None) -> list[Insight]:
        insights = self.by_gate(gate)
        if line is None:
            return insights
        return [insight for insight in insights if insight.line == line]

    def by_concept(self, concept: str) -> list[Insight]:
        return list(self.concept_index.get(concept.lower(), []))

    def search(self, query: str) -> list[Insight]:
        """Case-insensitive match on text, book title or any concept."""
        if not query:
            return list(self.insights)

        lower = query.lower()
        return [
            insight
            for insight in self.insights
            if lower in insight.text.lower()
            or lower in (insight.book_title or "").lower()
            or any(lower in concept.lower() for concept in insight.concepts)
        ]

    def filtered(
        self,
        gate: int | None = None,
        line: int | None = None,
        concept: str | None = None,
        query: str | None = None,
    ) -> list[Insight]:
        """Intersect the gate/line, concept and text filters that are set."""
        if gate is not None:
            results = self.by_gate_line(gate, line)
        elif concept:
            results = self.by_concept(concept)
        else:
            results = list(self.insights)

        if gate is not None and concept:
            wanted = concept.lower()
            results = [i for i in results if wanted in (c.lower() for c in i.concepts)]
        if query:
            matching = {id(insight) for insight in self.search(query)}
            results = [insight for insight in results if id(insight) in matching]
        return results

    def gates(self) -> list[int]:
        return sorted(gate for gate, insights in self.gate_index.items() if insights)

    def concepts(self) -> list[str]:
        return sorted(concept for concept, insights in self.concept_index.items() if insights)

    def stats(self) -> dict[str, int]:
        return {
            "totalBooks": len(self.books),
            "totalInsights": len(self.insights),
            "totalGates": len(self.gates()),
            "totalConcepts": len(self.concepts()),
        }

    def clear(self) -> None:
        self.books = []
        self.insights = []
        self.rebuild_indexes()
        self.save()

    def export(self) -> dict[str, Any]:
        return {
            "version": EXPORT_VERSION,
            "timestamp": _now(),
            "stats": self.stats(),
            "books": [book.to_record() for book in self.books],
            "insights": [insight.to_record() for insight in self.insights],
        }

    def import_bundle(self, data: Any) -> bool:
        """
        Replace books and insights with a bundle's contents.

        Requires an ``insights`` list (``books`` is optional). Returns False,
        leaving state untouched, on a malformed bundle.
        """
        if not isinstance(data, dict) or not isinstance(data.get("insights"), list):
            return False
        try:
            books = [Book.model_validate(b) for b in data.get("books") or []]
            insights = [Insight.model_validate(i) for i in data["insights"]]
        except (ValidationError, TypeError) as e:
            logger.error("Failed to import knowledge: %s", e)
            return False

        self.books = books
        self.insights = insights
        self.rebuild_indexes()
        self.save()
        return True
