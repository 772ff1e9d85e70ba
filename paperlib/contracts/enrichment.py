"""
Pydantic contracts for gateway payloads.

Coercion rules live in validators so the pipeline receives a typed result:
- analysis: unknown energy becomes "focused", tags become stripped non-blank
  strings, missing text fields become ""
- insight: text is required; gate/line outside 1-64 / 1-6 become None
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paperlib.storage.models import Energy, unique


def _clean_strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return unique(item.strip() for item in value if isinstance(item, str) and item.strip())


def _bounded_int(value: Any, low: int, high: int) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and low <= value <= high:
        return value
    return None


class AIAnalysisContract(BaseModel):
    """Validated {description, energy, tags, bestFor} analysis."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: str = ""
    energy: Energy = Energy.FOCUSED
    tags: list[str] = Field(default_factory=list)
    best_for: str = Field(default="", alias="bestFor")

    @field_validator("description", "best_for", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("energy", mode="before")
    @classmethod
    def _known_energy(cls, value: Any) -> Energy:
        if isinstance(value, str):
            try:
                return Energy(value.strip().lower())
            except ValueError:
                pass
        return Energy.FOCUSED

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, value: Any) -> list[str]:
        return _clean_strings(value)


class InsightContract(BaseModel):
    """One element of an extraction array."""

    model_config = ConfigDict(extra="ignore")

    text: str = Field(min_length=1)
    gate: int | None = None
    line: int | None = None
    concepts: list[str] = Field(default_factory=list)
    dimension: str | None = None

    @field_validator("text", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("gate", mode="before")
    @classmethod
    def _gate_in_range(cls, value: Any) -> int | None:
        return _bounded_int(value, 1, 64)

    @field_validator("line", mode="before")
    @classmethod
    def _line_in_range(cls, value: Any) -> int | None:
        return _bounded_int(value, 1, 6)

    @field_validator("concepts", mode="before")
    @classmethod
    def _concept_list(cls, value: Any) -> list[str]:
        return _clean_strings(value)

    @field_validator("dimension", mode="before")
    @classmethod
    def _dimension_text(cls, value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
