"""
Domain models (Pydantic v2) for the Paper Library pipeline.

Models serialise with camelCase aliases so export bundles stay readable by
the browser edition of the tool, and accept either spelling on input.
Set-valued fields are duplicate-free sequences in first-seen order.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def unique(values) -> list[str]:
    """Deduplicate while keeping first-seen order."""
    return list(dict.fromkeys(values))


class FileType(str, Enum):
    HTML = "html"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    TYPESCRIPT = "typescript"
    CSS = "css"
    JSON = "json"
    MARKDOWN = "markdown"
    UNKNOWN = "unknown"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class Energy(str, Enum):
    """Top-level mood category of a catalog entry."""

    ENERGETIC = "energetic"
    FLOWING = "flowing"
    CALM = "calm"
    FOCUSED = "focused"
    SPIRAL = "spiral"


class Flow(str, Enum):
    STRAIGHT = "straight"
    WAVY = "wavy"
    SPIRAL = "spiral"


class Mood(str, Enum):
    ENERGETIC = "energetic"
    CONTEMPLATIVE = "contemplative"
    CREATIVE = "creative"
    SEARCHING = "searching"
    TRANSFORMATIVE = "transformative"


class Rhythm(str, Enum):
    CONTINUOUS = "continuous"
    PUNCTUATED = "punctuated"
    HESITANT = "hesitant"


class PaperModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_record(self) -> dict:
        """JSON-ready dict with camelCase keys (the stored/exported shape)."""
        return self.model_dump(mode="json", by_alias=True)


class ParsedFile(PaperModel):
    """Structured view of one source file. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    filename: str
    file_type: FileType = FileType.UNKNOWN
    name: str = ""
    keywords: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()
    complexity: Complexity = Complexity.SIMPLE
    dependencies: tuple[str, ...] = ()
    content: str = ""


class GlyphSignature(PaperModel):
    model_config = ConfigDict(frozen=True)

    energy: Energy = Energy.FOCUSED
    flow: Flow = Flow.STRAIGHT
    mood: Mood = Mood.ENERGETIC
    rhythm: Rhythm = Rhythm.CONTINUOUS


class Analysis(PaperModel):
    """Catalog entry for one analysed file."""

    model_config = ConfigDict(validate_assignment=True)

    id: str | None = None
    name: str = ""
    filename: str = ""
    file_type: FileType = FileType.UNKNOWN
    description: str = ""
    energy: Energy = Energy.FOCUSED
    glyphs: GlyphSignature = Field(default_factory=GlyphSignature)
    tags: list[str] = Field(default_factory=list)
    best_for: str = ""
    content: str = ""
    complexity: Complexity = Complexity.SIMPLE
    dependencies: list[str] = Field(default_factory=list)
    timestamp: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value):
        if value is None:
            return []
        return unique(value)

    @field_validator("description", "best_for", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class Book(PaperModel):
    id: str | None = None
    filename: str
    title: str
    author: str = "Unknown"
    word_count: int = 0
    content: str = ""
    timestamp: str | None = None


class Insight(PaperModel):
    """One extracted quote or derived sentence, optionally tied to a gate/line."""

    id: str | None = None
    text: str = Field(min_length=1)
    gate: int | None = Field(default=None, ge=1, le=64)
    line: int | None = Field(default=None, ge=1, le=6)
    concepts: list[str] = Field(default_factory=list)
    dimension: str | None = None
    book_id: str | None = None
    book_title: str | None = None
    book_author: str | None = None
    timestamp: str | None = None

    @field_validator("concepts", mode="before")
    @classmethod
    def _dedupe_concepts(cls, value):
        if value is None:
            return []
        return unique(value)


class TextChunk(BaseModel):
    """Word-bounded contiguous slice of a document."""

    model_config = ConfigDict(frozen=True)

    index: int
    text: str
    word_count: int
