"""
Rule-based parsing of source files into ParsedFile records.

Every extractor degrades to an empty/default value instead of raising, so a
file with nothing recognisable still parses (type "unknown", name from the
filename, no keywords). Nothing here performs I/O.
"""

from __future__ import annotations

import html
import re
from pathlib import PurePosixPath

from paperlib.config import COMPLEXITY_MODERATE_BELOW, COMPLEXITY_SIMPLE_BELOW
from paperlib.observability.logging import get_logger
from paperlib.parsing.vocabulary import (
    BRAND_GRADIENT_HEXES,
    DARK,
    DARK_LEADING_NIBBLES,
    EXTENSION_TYPES,
    GRADIENT_NAMED_COLORS,
    KEYWORD_VOCABULARY,
    LIGHT,
    LIGHT_LEADING_NIBBLES,
    PURPLE_GRADIENT,
)
from paperlib.storage.models import Complexity, FileType, ParsedFile, unique

logger = get_logger(__name__)

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_CLASS_RE = re.compile(r"\bclass\s+([A-Z][\w$]*)")
_FUNCTION_RE = re.compile(r"\bfunction\s+([A-Za-z_$][\w$]*)")
_COMPONENT_RE = re.compile(r"<([A-Z]\w*)")

_HTML_TAG_RE = re.compile(r"<[^>]+>")
_DECORATIVE_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[-_]+")

_GRADIENT_RE = re.compile(r"(?:linear|radial|conic)-gradient\(([^;]*)\)", re.IGNORECASE)
_SOLID_BACKGROUND_RE = re.compile(
    r"background(?:-color)?\s*:\s*#([0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b"
)

_ES_IMPORT_RE = re.compile(r"""\bimport\s+(?:[\w*${}\s,]+?\s+from\s+)?['"]([^'"\n]+)['"]""")
_REQUIRE_RE = re.compile(r"""\brequire\(\s*['"]([^'"\n]+)['"]\s*\)""")
_PY_IMPORT_RE = re.compile(
    r"^[ \t]*import[ \t]+([\w.]+(?:[ \t]+as[ \t]+\w+)?(?:[ \t]*,[ \t]*[\w.]+(?:[ \t]+as[ \t]+\w+)?)*)[ \t]*$",
    re.MULTILINE,
)
_PY_FROM_RE = re.compile(r"^[ \t]*from[ \t]+([\w.]+)[ \t]+import\b", re.MULTILINE)


def detect_file_type(filename: str) -> FileType:
    """Match the filename suffix against the ordered extension table."""
    lower = filename.lower()
    for suffix, file_type in EXTENSION_TYPES:
        if lower.endswith(suffix):
            return file_type
    return FileType.UNKNOWN


def is_valid(filename: str) -> bool:
    """True when the filename carries a supported extension."""
    return detect_file_type(filename) is not FileType.UNKNOWN


def sanitize_name(raw: str) -> str:
    """
    Turn a raw title/identifier into a display name.

    Strips HTML tags and decorative symbols (emoji, bullets, punctuation),
    turns hyphens/underscores into spaces and capitalises each word.
    """
    text = html.unescape(_HTML_TAG_RE.sub(" ", raw))
    text = _DECORATIVE_RE.sub(" ", text)
    text = _SEPARATOR_RE.sub(" ", text)
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


def filename_stem(filename: str) -> str:
    name = PurePosixPath(filename.replace("\\", "/")).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot and stem else name


def categorize_color(hex_value: str) -> str | None:
    """
    Bucket a hex color by leading-nibble heuristics.

    Approximate and order-sensitive: leading 0-2 is "dark" and e/f is "light"
    before any hue test, so e.g. "0af" reads as dark even though it is blue.
    Remaining colors go to the dominant channel of their first three nibbles
    (blue, green, red, then yellow for red == green > blue).
    """
    digits = hex_value.lower().lstrip("#")
    if len(digits) == 6:
        nibbles = digits[0] + digits[2] + digits[4]
    elif len(digits) == 3:
        nibbles = digits
    else:
        return None

    lead = digits[0]
    if lead in DARK_LEADING_NIBBLES:
        return DARK
    if lead in LIGHT_LEADING_NIBBLES:
        return LIGHT

    try:
        red, green, blue = (int(c, 16) for c in nibbles)
    except ValueError:
        return None

    if blue > red and blue > green:
        return "blue"
    if green > red and green > blue:
        return "green"
    if red > green and red > blue:
        return "red"
    if red == green and red > blue:
        return "yellow"
    return None


class ContentParser:
    """
    Parse raw file content + filename into an immutable ParsedFile.

    Example:
        >>> parser = ContentParser()
        >>> parsed = parser.parse("space-game.html", "<title>Space Game</title>")
        >>> parsed.file_type, parsed.name, parsed.keywords
        (<FileType.HTML: 'html'>, 'Space Game', ('game',))
    """

    def __init__(self, keyword_vocabulary: tuple[str, ...] = KEYWORD_VOCABULARY):
        self.keyword_vocabulary = keyword_vocabulary

    def is_valid(self, filename: str) -> bool:
        return is_valid(filename)

    def parse(self, filename: str, content: str) -> ParsedFile:
        """Build a ParsedFile. Never raises on odd content."""
        content = content or ""
        parsed = ParsedFile(
            filename=filename,
            file_type=detect_file_type(filename),
            name=self.extract_name(filename, content),
            keywords=self.extract_keywords(content),
            colors=self.detect_colors(content),
            complexity=self.assess_complexity(content),
            dependencies=self.extract_dependencies(content),
            content=content,
        )
        logger.debug(
            "Parsed %s: type=%s keywords=%d colors=%d complexity=%s deps=%d",
            filename,
            parsed.file_type.value,
            len(parsed.keywords),
            len(parsed.colors),
            parsed.complexity.value,
            len(parsed.dependencies),
        )
        return parsed

    def extract_name(self, filename: str, content: str) -> str:
        """First non-empty of <title>, <h1>, class name, function name, filename stem."""
        for pattern in (_TITLE_RE, _H1_RE, _CLASS_RE, _FUNCTION_RE):
            match = pattern.search(content)
            if match:
                name = sanitize_name(match.group(1))
                if name:
                    return name
        return sanitize_name(filename_stem(filename)) or filename

    def extract_keywords(self, content: str) -> tuple[str, ...]:
        lower = content.lower()
        return tuple(term for term in self.keyword_vocabulary if term in lower)

    def detect_colors(self, content: str) -> tuple[str, ...]:
        colors: list[str] = []

        for match in _GRADIENT_RE.finditer(content):
            body = match.group(1).lower()
            if any(brand in body for brand in BRAND_GRADIENT_HEXES):
                colors.append(PURPLE_GRADIENT)
            colors.extend(name for name in GRADIENT_NAMED_COLORS if name in body)

        for match in _SOLID_BACKGROUND_RE.finditer(content):
            category = categorize_color(match.group(1))
            if category:
                colors.append(category)

        return tuple(unique(colors))

    def complexity_score(self, content: str) -> float:
        """lines/100 + functions*2 + classes*3 + JSX-like components*2."""
        lines = len(content.split("\n"))
        functions = len(_FUNCTION_RE.findall(content))
        classes = len(_CLASS_RE.findall(content))
        components = len(_COMPONENT_RE.findall(content))
        return lines / 100 + functions * 2 + classes * 3 + components * 2

    def assess_complexity(self, content: str) -> Complexity:
        score = self.complexity_score(content)
        if score < COMPLEXITY_SIMPLE_BELOW:
            return Complexity.SIMPLE
        if score < COMPLEXITY_MODERATE_BELOW:
            return Complexity.MODERATE
        return Complexity.COMPLEX

    def extract_dependencies(self, content: str) -> tuple[str, ...]:
        """ES imports, CommonJS requires and Python imports, first-seen order."""
        found: list[str] = []
        found.extend(_ES_IMPORT_RE.findall(content))
        found.extend(_REQUIRE_RE.findall(content))
        for group in _PY_IMPORT_RE.findall(content):
            found.extend(part.split()[0] for part in group.split(",") if part.strip())
        found.extend(_PY_FROM_RE.findall(content))
        return tuple(unique(dep.strip() for dep in found if dep.strip()))


def get_parser() -> ContentParser:
    """Get or create the shared ContentParser."""
    global _parser_instance
    if _parser_instance is None:
        _parser_instance = ContentParser()
    return _parser_instance


_parser_instance: ContentParser | None = None
