"""Pydantic request models for the Paper Library API."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paperlib.llm.prompts import ExtractionOptions
from paperlib.storage.models import Energy

MAX_FILENAME_LENGTH = 255


class AnalyzeFileRequest(BaseModel):
    filename: str = Field(min_length=1, max_length=MAX_FILENAME_LENGTH)
    content: str
    use_ai: bool = True
    deep: bool = False


class ArchiveUploadRequest(BaseModel):
    """A zip archive as base64 text."""

    filename: str = Field(min_length=1, max_length=MAX_FILENAME_LENGTH)
    data: str
    use_ai: bool = True
    deep: bool = False

    @field_validator("data")
    @classmethod
    def validate_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("data must be base64-encoded") from e
        return v

    def payload(self) -> bytes:
        return base64.b64decode(self.data)


class UpdateAppRequest(BaseModel):
    """Editable catalog fields; omitted fields stay unchanged."""

    name: str | None = None
    description: str | None = None
    energy: Energy | None = None
    tags: list[str] | None = None
    best_for: str | None = Field(default=None, alias="bestFor")

    model_config = ConfigDict(populate_by_name=True)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class BookUploadRequest(BaseModel):
    filename: str = Field(min_length=1, max_length=MAX_FILENAME_LENGTH)
    content: str = Field(min_length=1)
    extract_gates: bool = True
    extract_quantum: bool = True
    extract_dimensions: bool = True

    def options(self) -> ExtractionOptions:
        return ExtractionOptions(
            extract_gates=self.extract_gates,
            extract_quantum=self.extract_quantum,
            extract_dimensions=self.extract_dimensions,
        )


class UpdateEndpointRequest(BaseModel):
    endpoint: str = Field(pattern=r"^https?://\S+$", max_length=2048)
