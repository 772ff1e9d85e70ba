"""
Fixed lookup tables for content parsing.

These vocabularies are configuration data, not learned taxonomies. Keep them
verbatim; classification rules elsewhere test membership against them.
"""

from __future__ import annotations

from paperlib.storage.models import FileType

# Ordered suffix table: first match wins.
EXTENSION_TYPES: tuple[tuple[str, FileType], ...] = (
    (".html", FileType.HTML),
    (".jsx", FileType.JAVASCRIPT),
    (".js", FileType.JAVASCRIPT),
    (".py", FileType.PYTHON),
    (".tsx", FileType.TYPESCRIPT),
    (".ts", FileType.TYPESCRIPT),
    (".css", FileType.CSS),
    (".json", FileType.JSON),
    (".md", FileType.MARKDOWN),
)

KEYWORD_VOCABULARY: tuple[str, ...] = (
    "game",
    "simulation",
    "dashboard",
    "visualization",
    "animation",
    "particle",
    "physics",
    "music",
    "audio",
    "synth",
    "drawing",
    "canvas",
    "editor",
    "calculator",
    "timer",
    "clock",
    "todo",
    "tracker",
    "journal",
    "notes",
    "chat",
    "quiz",
    "puzzle",
    "generator",
    "fractal",
    "meditation",
    "breathing",
    "calm",
    "peaceful",
    "focus",
)

# Gradient bodies containing either of these hex values are the house purple gradient.
BRAND_GRADIENT_HEXES: tuple[str, ...] = ("#667eea", "#764ba2")
GRADIENT_NAMED_COLORS: tuple[str, ...] = ("blue", "green", "red")

PURPLE_GRADIENT = "purple-gradient"
DARK = "dark"
LIGHT = "light"

DARK_LEADING_NIBBLES: frozenset[str] = frozenset("012")
LIGHT_LEADING_NIBBLES: frozenset[str] = frozenset("ef")
