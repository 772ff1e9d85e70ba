"""
Recover JSON objects/arrays from free-form completion text.

Local models wrap JSON in prose, markdown fences, or leave trailing commas.
Candidates are located with a bracket-depth scanner that understands JSON
strings (braces inside string values do not end a candidate), then parsed
with a small set of repairs. Anything still unparsable is ResponseMalformed.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator
from typing import Any

from paperlib.observability.logging import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_PAIRS = {"{": "}", "[": "]"}


class ResponseMalformed(ValueError):
    """Completion text holds no recoverable JSON of the expected shape."""


def _scan_balanced(text: str, start: int) -> int | None:
    """
    Return the index closing the bracket opened at ``start``.

    Tracks nesting of both bracket kinds and skips over string literals
    (including escaped quotes). Returns None for mismatched or unterminated
    input.
    """
    stack: list[str] = []
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _PAIRS:
            stack.append(_PAIRS[char])
        elif char in ("}", "]"):
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return index
    return None


def iter_balanced(text: str, opener: str) -> Iterator[str]:
    """Yield balanced substrings starting at each ``opener``, in order."""
    position = text.find(opener)
    while position != -1:
        end = _scan_balanced(text, position)
        if end is not None:
            yield text[position : end + 1]
        position = text.find(opener, position + 1)


def _repair(candidate: str) -> str:
    repaired = _TRAILING_COMMA_RE.sub(r"\1", candidate)
    # Missing commas between fields split across lines
    repaired = re.sub(r'"\s*\n\s*"', '",\n"', repaired)
    repaired = re.sub(r"(\d+\.?\d*|true|false|null)\s*\n\s*\"", r'\1,\n"', repaired)
    repaired = re.sub(r'([}\]])\s*\n\s*"', r'\1,\n"', repaired)
    repaired = re.sub(r"\}\s*\n\s*\{", "},\n{", repaired)
    return repaired


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        repaired = _repair(candidate)
        if repaired == candidate:
            raise
        result = json.loads(repaired)
        logger.debug("JSON repair succeeded")
        return result


def _find(text: str, opener: str, expected: type, prefer: Callable[[Any], bool] | None = None) -> Any:
    if not text:
        raise ResponseMalformed("empty response")

    cleaned = _FENCE_RE.sub("", text).strip()
    fallback = None

    for candidate in iter_balanced(cleaned, opener):
        try:
            value = _loads(candidate)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping unparsable JSON candidate: %s", exc)
            continue
        if not isinstance(value, expected):
            continue
        if prefer is None or prefer(value):
            return value
        if fallback is None:
            fallback = value

    if fallback is not None:
        return fallback
    raise ResponseMalformed(
        f"no parsable JSON {expected.__name__} in response ({len(text)} chars)"
    )


def _holds_objects(value: list[Any]) -> bool:
    # Prose like "see [1]" parses as an array too
    return not value or any(isinstance(item, dict) for item in value)


def find_json_object(text: str) -> dict[str, Any]:
    """First balanced, parsable JSON object in ``text``."""
    return _find(text, "{", dict)


def find_json_array(text: str) -> list[Any]:
    """
    First balanced, parsable JSON array in ``text`` that is empty or holds
    objects; any other array is returned only when no such candidate exists.
    """
    return _find(text, "[", list, prefer=_holds_objects)
