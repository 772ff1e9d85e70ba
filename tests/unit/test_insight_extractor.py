"""
Unit tests for chunking and insight extraction.

The gateway is a MagicMock; AI paths are driven by canned completion text.
"""

from __future__ import annotations

import math
from unittest.mock import MagicMock

import pytest

from paperlib.knowledge.extractor import (
    InsightExtractor,
    extract_concepts,
    split_into_chunks,
)
from paperlib.llm.gateway import GatewayError, GatewayErrorKind
from paperlib.llm.prompts import ExtractionOptions, build_extraction_prompt
from paperlib.observability.telemetry import get_counter
from paperlib.storage.models import Book


def expected_chunk_count(word_count: int, max_words: int) -> int:
    return math.ceil(word_count / max_words)


def make_book(content: str) -> Book:
    return Book(id="book-1", filename="b.txt", title="The Book", author="Ann Author", content=content)


@pytest.fixture
def gateway() -> MagicMock:
    fake = MagicMock()
    fake.online = True
    return fake


class TestChunking:
    def test_round_trip_and_count(self):
        words = [f"w{i}" for i in range(7001)]
        text = "  ".join(words)

        chunks = split_into_chunks(text, 3000)

        assert len(chunks) == expected_chunk_count(7001, 3000) == 3
        assert [c.word_count for c in chunks] == [3000, 3000, 1001]
        assert [c.index for c in chunks] == [0, 1, 2]
        assert " ".join(c.text for c in chunks) == " ".join(words)

    def test_exact_multiple(self):
        chunks = split_into_chunks(" ".join(["x"] * 6000))
        assert len(chunks) == 2

    def test_empty_text_has_no_chunks(self):
        assert split_into_chunks("   ") == []

    def test_invalid_max_words(self):
        with pytest.raises(ValueError):
            split_into_chunks("a b", 0)


class TestConcepts:
    def test_vocabulary_order(self):
        assert extract_concepts("The Mind and the quantum FIELD") == ["quantum", "field", "mind"]


class TestHeuristicExtraction:
    def test_gate_and_line(self):
        book = make_book("In this passage Gate 23, Line 4 speaks of consciousness.")
        insights = InsightExtractor(None).extract_heuristic(book)

        gate_insights = [i for i in insights if i.gate is not None]
        assert len(gate_insights) == 1
        assert gate_insights[0].gate == 23
        assert gate_insights[0].line == 4
        assert "consciousness" in gate_insights[0].concepts
        assert gate_insights[0].book_id == "book-1"
        assert gate_insights[0].book_title == "The Book"
        assert gate_insights[0].book_author == "Ann Author"

    def test_gate_without_line(self):
        insights = InsightExtractor(None).extract_heuristic(make_book("See gate 7 for more."))
        assert [(i.gate, i.line) for i in insights] == [(7, None)]

    def test_out_of_range_gate_ignored(self):
        book = make_book("Gate 70 does not exist, nor does Gate 0 or Gate 100.")
        assert InsightExtractor(None).extract_heuristic(book) == []

    def test_out_of_range_line_dropped(self):
        insights = InsightExtractor(None).extract_heuristic(make_book("Gate 12 Line 9 here."))
        assert [(i.gate, i.line) for i in insights] == [(12, None)]

    def test_context_window(self):
        text = "a" * 300 + " Gate 5 " + "b" * 300
        (insight,) = InsightExtractor(None).extract_heuristic(make_book(text))
        assert insight.text.startswith("a")
        assert "Gate 5" in insight.text
        assert len(insight.text) <= 400

    def test_keyword_sentences(self):
        text = (
            "Superposition is strange. Another superposition appears. "
            "A third superposition. A fourth superposition. Unrelated sentence."
        )
        insights = InsightExtractor(None).extract_heuristic(make_book(text))

        assert len(insights) == 3
        assert insights[0].text == "Superposition is strange."
        assert insights[0].concepts[0] == "superposition"
        assert all(i.gate is None for i in insights)

    def test_gate_insights_come_before_keyword_insights(self):
        text = "Resonance builds. Gate 1 is creative."
        insights = InsightExtractor(None).extract_heuristic(make_book(text))
        assert insights[0].gate == 1
        assert insights[1].concepts[0] == "resonance"


class TestAIExtraction:
    def test_one_completion_per_chunk(self, gateway):
        gateway.complete.return_value = (
            '[{"text": "Insight", "gate": 23, "line": 4, "concepts": ["mind"], "dimension": "Evolution"}]'
        )
        book = make_book(" ".join(["word"] * 25))

        insights = InsightExtractor(gateway, max_words=10).extract_ai(book)

        assert gateway.complete.call_count == 3
        assert len(insights) == 3
        assert insights[0].gate == 23
        assert insights[0].dimension == "Evolution"
        assert insights[0].book_title == "The Book"
        assert gateway.complete.call_args.kwargs["max_tokens"] == 1000
        assert gateway.complete.call_args.kwargs["temperature"] == 0.2

    def test_failing_chunk_does_not_stop_batch(self, gateway):
        gateway.complete.side_effect = [
            '[{"text": "first"}]',
            GatewayError(GatewayErrorKind.HTTP_ERROR, "API error: 500", status_code=500),
            "no json here",
            '[{"text": "fourth"}]',
        ]
        book = make_book(" ".join(["word"] * 40))

        insights = InsightExtractor(gateway, max_words=10).extract_ai(book)

        assert [i.text for i in insights] == ["first", "fourth"]
        assert get_counter("extraction.chunk_failed") == 2

    def test_extract_uses_heuristic_when_offline(self, gateway):
        gateway.online = False
        insights = InsightExtractor(gateway).extract(make_book("Gate 23 Line 4."))

        gateway.complete.assert_not_called()
        assert insights[0].gate == 23

    def test_extract_uses_ai_when_online(self, gateway):
        gateway.complete.return_value = "[]"
        InsightExtractor(gateway).extract(make_book("some text"))
        gateway.complete.assert_called_once()


class TestExtractionPrompt:
    def test_all_instructions_by_default(self):
        prompt = build_extraction_prompt("body")
        assert "Gates (1-64)" in prompt
        assert "quantum mechanics concepts" in prompt
        assert "Movement, Evolution, Being, Design, Space" in prompt
        assert prompt.endswith("Text to analyze:\nbody")

    def test_options_disable_sections(self):
        options = ExtractionOptions(extract_gates=False, extract_quantum=False, extract_dimensions=False)
        prompt = build_extraction_prompt("body", options)
        assert "Gates (1-64)" not in prompt
        assert "quantum mechanics concepts" not in prompt
        assert "dimensional references" not in prompt

    def test_text_truncated(self):
        prompt = build_extraction_prompt("x" * 5000)
        assert prompt.endswith("x" * 2500)
        assert "x" * 2501 not in prompt
