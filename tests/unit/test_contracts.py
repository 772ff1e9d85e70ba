"""Unit tests for the AI payload contracts."""

from __future__ import annotations

import pytest

from paperlib.contracts import (
    AIAnalysisContract,
    validate_analysis_payload,
    validate_insight_items,
)
from paperlib.llm.json_recovery import ResponseMalformed
from paperlib.storage.models import Energy


class TestAnalysisContract:
    def test_full_payload(self):
        contract = validate_analysis_payload(
            {
                "description": "Draws fractals.",
                "energy": " Spiral ",
                "tags": ["fractal", " art ", "", 3, "fractal"],
                "bestFor": "Artists",
                "extra": "ignored",
            }
        )
        assert contract.description == "Draws fractals."
        assert contract.energy is Energy.SPIRAL
        assert contract.tags == ["fractal", "art"]
        assert contract.best_for == "Artists"

    def test_missing_fields_default(self):
        contract = validate_analysis_payload({})
        assert contract == AIAnalysisContract()
        assert contract.energy is Energy.FOCUSED

    def test_non_list_tags_become_empty(self):
        assert validate_analysis_payload({"tags": "solo"}).tags == []

    def test_non_object_is_malformed(self):
        with pytest.raises(ResponseMalformed):
            validate_analysis_payload(["not", "an", "object"])

    def test_wrong_description_type_is_malformed(self):
        with pytest.raises(ResponseMalformed):
            validate_analysis_payload({"description": {"nested": True}})


class TestInsightContract:
    def test_valid_items(self):
        items = validate_insight_items(
            [
                {
                    "text": "  Gate 23 is about assimilation.  ",
                    "gate": 23,
                    "line": "4",
                    "concepts": ["mind"],
                    "dimension": "Evolution",
                }
            ]
        )
        assert len(items) == 1
        assert items[0].text == "Gate 23 is about assimilation."
        assert items[0].gate == 23
        assert items[0].line == 4
        assert items[0].dimension == "Evolution"

    def test_out_of_range_coordinates_become_none(self):
        (item,) = validate_insight_items([{"text": "x", "gate": 70, "line": 9}])
        assert item.gate is None
        assert item.line is None

    def test_boolean_gate_is_rejected(self):
        (item,) = validate_insight_items([{"text": "x", "gate": True}])
        assert item.gate is None

    def test_bad_items_dropped_individually(self):
        items = validate_insight_items(
            ["just a string", {"gate": 5}, {"text": "   "}, {"text": "kept"}]
        )
        assert [item.text for item in items] == ["kept"]

    def test_blank_dimension_is_none(self):
        (item,) = validate_insight_items([{"text": "x", "dimension": "  "}])
        assert item.dimension is None
