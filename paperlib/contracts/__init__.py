"""
Contracts for AI-produced payloads.

Completions are untrusted input. Every payload recovered from the gateway is
validated here into a typed result before the pipeline merges anything;
shape violations surface as ResponseMalformed.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from paperlib.contracts.enrichment import AIAnalysisContract, InsightContract
from paperlib.llm.json_recovery import ResponseMalformed
from paperlib.observability.logging import get_logger

logger = get_logger(__name__)


def validate_analysis_payload(payload: Any) -> AIAnalysisContract:
    """
    Validate a recovered JSON object as an AI analysis.

    Raises:
        ResponseMalformed: Payload is not an object or violates the contract
    """
    if not isinstance(payload, dict):
        raise ResponseMalformed(f"analysis payload must be an object, got {type(payload).__name__}")
    try:
        return AIAnalysisContract.model_validate(payload)
    except ValidationError as exc:
        raise ResponseMalformed(f"analysis payload doesn't match schema: {exc}") from exc


def validate_insight_items(items: list[Any]) -> list[InsightContract]:
    """
    Validate each element of a recovered insight array.

    Elements that are not objects or carry no text are dropped individually;
    one bad element never discards the rest of the array.
    """
    valid: list[InsightContract] = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            logger.debug("Dropping non-object insight at %d", position)
            continue
        try:
            valid.append(InsightContract.model_validate(item))
        except ValidationError as exc:
            logger.debug("Dropping invalid insight at %d: %s", position, exc.error_count())
    return valid


__all__ = [
    "AIAnalysisContract",
    "InsightContract",
    "validate_analysis_payload",
    "validate_insight_items",
]
