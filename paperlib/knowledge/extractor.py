"""
Insight extraction from long-form text.

Two paths:
- extract_ai(): split into word chunks, one completion per chunk, recover a
  JSON array of insights. A failing chunk contributes nothing; the batch
  always continues.
- extract_heuristic(): pattern matching only, for when the gateway is
  offline. Gate/Line references first, then sentences around quantum
  keywords. The two passes are concatenated without deduplication.
"""

from __future__ import annotations

import re

from paperlib.config import (
    CHUNK_MAX_WORDS,
    EXTRACTION_MAX_TOKENS,
    EXTRACTION_TEMPERATURE,
    GATE_CONTEXT_CHARS,
    MAX_SENTENCES_PER_KEYWORD,
)
from paperlib.contracts import validate_insight_items
from paperlib.knowledge.vocabulary import CONCEPT_PATTERNS, QUANTUM_KEYWORDS
from paperlib.llm.gateway import InferenceGateway
from paperlib.llm.json_recovery import find_json_array
from paperlib.llm.prompts import ExtractionOptions, build_extraction_prompt
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter, log_event
from paperlib.storage.models import Book, Insight, TextChunk, unique

logger = get_logger(__name__)

# "Gate 23", "gate 23, Line 4", "Gate 23. Line 4"
_GATE_RE = re.compile(r"Gate\s+(\d{1,2})(?!\d)(?:[,.\s]+Line\s+(\d)(?!\d))?", re.IGNORECASE)


def split_into_chunks(text: str, max_words: int = CHUNK_MAX_WORDS) -> list[TextChunk]:
    """
    Split on whitespace into contiguous chunks of at most ``max_words`` words.

    Joining the chunk texts with single spaces reproduces the normalised word
    sequence; there are ceil(words / max_words) chunks.
    """
    if max_words < 1:
        raise ValueError("max_words must be positive")

    words = text.split()
    return [
        TextChunk(
            index=index,
            text=" ".join(words[start : start + max_words]),
            word_count=len(words[start : start + max_words]),
        )
        for index, start in enumerate(range(0, len(words), max_words))
    ]


def extract_concepts(text: str, patterns: tuple[str, ...] = CONCEPT_PATTERNS) -> list[str]:
    """Concept vocabulary terms present in ``text``, in vocabulary order."""
    lower = text.lower()
    return [pattern for pattern in patterns if pattern in lower]


def _stamp(book: Book, **fields) -> Insight:
    return Insight(
        book_id=book.id,
        book_title=book.title,
        book_author=book.author,
        **fields,
    )


class InsightExtractor:
    """
    Extract Insight records from a parsed Book.

    Example:
        >>> extractor = InsightExtractor(gateway)
        >>> insights = extractor.extract(book)  # AI when online, heuristic otherwise
    """

    def __init__(self, gateway: InferenceGateway | None = None, max_words: int = CHUNK_MAX_WORDS):
        self.gateway = gateway
        self.max_words = max_words

    def extract(self, book: Book, options: ExtractionOptions = ExtractionOptions()) -> list[Insight]:
        """Use the AI path when the gateway reports online, else the heuristic one."""
        if self.gateway is not None and self.gateway.online:
            return self.extract_ai(book, options)
        logger.info("Using quick extraction for %s (gateway offline)", book.title)
        return self.extract_heuristic(book)

    def extract_ai(
        self, book: Book, options: ExtractionOptions = ExtractionOptions()
    ) -> list[Insight]:
        chunks = split_into_chunks(book.content, self.max_words)
        insights: list[Insight] = []

        for chunk in chunks:
            extracted = self.extract_from_chunk(chunk, book, options)
            insights.extend(extracted)

        log_event(
            "extraction.ai_complete",
            book=book.title,
            chunks=len(chunks),
            insights=len(insights),
        )
        return insights

    def extract_from_chunk(
        self, chunk: TextChunk, book: Book, options: ExtractionOptions = ExtractionOptions()
    ) -> list[Insight]:
        """Insights for one chunk; any failure yields an empty list."""
        if self.gateway is None:
            return []

        prompt = build_extraction_prompt(chunk.text, options)
        try:
            text = self.gateway.complete(
                prompt,
                max_tokens=EXTRACTION_MAX_TOKENS,
                temperature=EXTRACTION_TEMPERATURE,
            )
            items = find_json_array(text)
        except Exception as e:
            logger.warning("Failed to extract from chunk %d of %s: %s", chunk.index + 1, book.title, e)
            counter("extraction.chunk_failed")
            return []

        contracts = validate_insight_items(items)
        counter("extraction.chunk_succeeded")
        return [_stamp(book, **contract.model_dump()) for contract in contracts]

    def extract_heuristic(self, book: Book) -> list[Insight]:
        insights = self._gate_insights(book)
        insights.extend(self._keyword_insights(book))
        counter("extraction.heuristic")
        return insights

    def _gate_insights(self, book: Book) -> list[Insight]:
        text = book.content
        insights: list[Insight] = []

        for match in _GATE_RE.finditer(text):
            gate = int(match.group(1))
            if not 1 <= gate <= 64:
                continue

            line = int(match.group(2)) if match.group(2) else None
            if line is not None and not 1 <= line <= 6:
                line = None

            start = max(0, match.start() - GATE_CONTEXT_CHARS)
            context = text[start : match.start() + GATE_CONTEXT_CHARS].strip()
            insights.append(
                _stamp(
                    book,
                    text=context,
                    gate=gate,
                    line=line,
                    concepts=extract_concepts(context),
                )
            )
        return insights

    def _keyword_insights(self, book: Book) -> list[Insight]:
        text = book.content
        insights: list[Insight] = []

        for keyword in QUANTUM_KEYWORDS:
            sentence_re = re.compile(rf"[^.]*{re.escape(keyword)}[^.]*\.", re.IGNORECASE)
            for sentence in sentence_re.findall(text)[:MAX_SENTENCES_PER_KEYWORD]:
                sentence = sentence.strip()
                insights.append(
                    _stamp(
                        book,
                        text=sentence,
                        concepts=unique([keyword, *extract_concepts(sentence)]),
                    )
                )
        return insights
