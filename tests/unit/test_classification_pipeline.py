"""
Unit tests for ClassificationPipeline.

Tests the heuristic → AI → merge cascade and its fail-soft behaviour.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from paperlib.classification.heuristic import classify_quick
from paperlib.classification.pipeline import ClassificationPipeline
from paperlib.llm.gateway import GatewayError, GatewayErrorKind
from paperlib.observability.telemetry import get_counter
from paperlib.parsing.content_parser import ContentParser
from paperlib.storage.models import Analysis, Energy, ParsedFile


@pytest.fixture
def parsed() -> ParsedFile:
    content = "<title>Arcade Timer</title><script>// game timer with gentle sounds</script>"
    return ContentParser().parse("arcade.html", content)


@pytest.fixture
def gateway() -> MagicMock:
    fake = MagicMock()
    fake.online = True
    return fake


class TestHeuristicOnly:
    def test_use_ai_false(self, parsed, gateway):
        result = ClassificationPipeline(gateway).analyze(parsed, use_ai=False)

        gateway.complete.assert_not_called()
        assert isinstance(result, Analysis)
        assert result.name == "Arcade Timer"
        assert result.energy is Energy.ENERGETIC
        assert result.glyphs == classify_quick(parsed)
        assert result.tags == ["game", "timer"]
        assert result.description == ""
        assert result.best_for == ""
        assert get_counter("analysis.heuristic_only") == 1

    def test_no_gateway(self, parsed):
        result = ClassificationPipeline(None).analyze(parsed)
        assert result.energy is Energy.ENERGETIC

    def test_offline_gateway_is_not_called(self, parsed, gateway):
        gateway.online = False
        ClassificationPipeline(gateway).analyze(parsed)
        gateway.complete.assert_not_called()


class TestAIEnrichment:
    def test_merges_ai_fields(self, parsed, gateway):
        gateway.complete.return_value = (
            'Here you go: {"description": "A retro timer game.", "energy": "calm",'
            ' "tags": ["game", "arcade", " "], "bestFor": "Gamers"}'
        )

        result = ClassificationPipeline(gateway).analyze(parsed)

        assert result.description == "A retro timer game."
        assert result.energy is Energy.CALM
        assert result.best_for == "Gamers"
        assert result.tags == ["game", "timer", "arcade"]
        # Heuristic signature is kept verbatim
        assert result.glyphs.energy is Energy.ENERGETIC
        assert get_counter("analysis.ai_enriched") == 1

    def test_deep_mode_uses_larger_budget(self, parsed, gateway):
        gateway.complete.return_value = '{"energy": "spiral"}'

        ClassificationPipeline(gateway).analyze(parsed, deep=True)

        assert gateway.complete.call_args.kwargs["max_tokens"] == 400
        assert gateway.complete.call_args.kwargs["temperature"] == 0.3

    def test_unknown_ai_energy_becomes_focused(self, parsed, gateway):
        gateway.complete.return_value = '{"energy": "chaotic", "description": null}'

        result = ClassificationPipeline(gateway).analyze(parsed)

        assert result.energy is Energy.FOCUSED
        assert result.description == ""


class TestFailSoft:
    @pytest.mark.parametrize(
        "failure",
        [
            GatewayError(GatewayErrorKind.HTTP_ERROR, "API error: 500", status_code=500),
            GatewayError(GatewayErrorKind.TRANSPORT, "timed out"),
            GatewayError(GatewayErrorKind.OFFLINE, "offline"),
        ],
    )
    def test_gateway_failure_returns_heuristic_result(self, parsed, gateway, failure):
        gateway.complete.side_effect = failure
        pipeline = ClassificationPipeline(gateway)

        result = pipeline.analyze(parsed)
        heuristic = ClassificationPipeline(None).analyze(parsed)

        assert result == heuristic
        assert get_counter("analysis.ai_failed") == 1

    def test_unparsable_response_returns_heuristic_result(self, parsed, gateway):
        gateway.complete.return_value = "Sorry, I can't help with that."

        result = ClassificationPipeline(gateway).analyze(parsed)

        assert result.energy is Energy.ENERGETIC
        assert result.description == ""
        assert result.tags == ["game", "timer"]
