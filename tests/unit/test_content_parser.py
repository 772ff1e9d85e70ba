"""Unit tests for ContentParser and its module-level helpers."""

from __future__ import annotations

import pytest

from paperlib.parsing.content_parser import (
    ContentParser,
    categorize_color,
    detect_file_type,
    filename_stem,
    get_parser,
    is_valid,
    sanitize_name,
)
from paperlib.storage.models import Complexity, FileType


@pytest.fixture
def parser() -> ContentParser:
    return ContentParser()


class TestFileTypes:
    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("index.html", FileType.HTML),
            ("App.jsx", FileType.JAVASCRIPT),
            ("main.js", FileType.JAVASCRIPT),
            ("tool.py", FileType.PYTHON),
            ("View.TSX", FileType.TYPESCRIPT),
            ("types.ts", FileType.TYPESCRIPT),
            ("style.css", FileType.CSS),
            ("data.json", FileType.JSON),
            ("README.md", FileType.MARKDOWN),
            ("archive.zip", FileType.UNKNOWN),
            ("noextension", FileType.UNKNOWN),
        ],
    )
    def test_detect_file_type(self, filename, expected):
        assert detect_file_type(filename) is expected

    def test_is_valid_allowlist(self):
        assert is_valid("game.html")
        assert is_valid("notes.md")
        assert not is_valid("photo.png")
        assert not is_valid("bundle.zip")


class TestNames:
    def test_title_wins(self, parser):
        content = "<html><title>🚀 Space Game</title><h1>Other</h1></html>"
        assert parser.extract_name("x.html", content) == "Space Game"

    def test_h1_when_no_title(self, parser):
        content = "<body><h1><b>breathing</b> timer</h1></body>"
        assert parser.extract_name("x.html", content) == "Breathing Timer"

    def test_class_then_function(self, parser):
        assert parser.extract_name("a.js", "class ParticleWorld {}") == "ParticleWorld"
        assert parser.extract_name("a.js", "function draw_spiral() {}") == "Draw Spiral"

    def test_filename_stem_fallback(self, parser):
        assert parser.extract_name("dir/my-cool_app.js", "const x = 1;") == "My Cool App"

    def test_filename_stem(self):
        assert filename_stem("folder/sub/file.name.py") == "file.name"
        assert filename_stem(".hidden") == ".hidden"

    def test_sanitize_name_strips_symbols(self):
        assert sanitize_name("✨ fractal-explorer!! ✨") == "Fractal Explorer"
        assert sanitize_name("Tom &amp; Jerry") == "Tom Jerry"


class TestKeywordsAndColors:
    def test_keywords_in_vocabulary_order(self, parser):
        content = "A simple timer for your game with a Canvas."
        assert parser.extract_keywords(content) == ("game", "canvas", "timer")

    def test_brand_gradient_is_purple(self, parser):
        css = "body { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }"
        assert parser.detect_colors(css) == ("purple-gradient",)

    def test_named_colors_in_gradient(self, parser):
        css = "div { background: radial-gradient(circle, blue, green); }"
        assert parser.detect_colors(css) == ("blue", "green")

    def test_solid_backgrounds_are_categorised(self, parser):
        css = "a { background: #111111; } b { background-color: #f0f0f0; } c { background: #33cc33; }"
        assert parser.detect_colors(css) == ("dark", "light", "green")

    def test_colors_deduplicated(self, parser):
        css = "a { background: #000; } b { background: #101010; }"
        assert parser.detect_colors(css) == ("dark",)

    @pytest.mark.parametrize(
        "hex_value,expected",
        [
            ("#000000", "dark"),
            ("0af", "dark"),
            ("#ffffff", "light"),
            ("#e0e0e0", "light"),
            ("#3344cc", "blue"),
            ("#33cc44", "green"),
            ("#cc3344", "red"),
            ("#cccc33", "yellow"),
            ("#888888", None),
            ("#12345", None),
        ],
    )
    def test_categorize_color(self, hex_value, expected):
        assert categorize_color(hex_value) == expected


class TestComplexity:
    def test_fifty_plain_lines_is_simple(self, parser):
        content = "\n".join(["let x = 1;"] * 50)
        assert parser.complexity_score(content) == pytest.approx(0.5)
        assert parser.assess_complexity(content) is Complexity.SIMPLE

    def test_five_functions_is_moderate(self, parser):
        lines = ["let x = 1;"] * 45 + [f"function f{i}() {{}}" for i in range(5)]
        content = "\n".join(lines)
        assert parser.complexity_score(content) == pytest.approx(10.5)
        assert parser.assess_complexity(content) is Complexity.MODERATE

    def test_many_classes_is_complex(self, parser):
        content = "\n".join(f"class Widget{i} {{}}" for i in range(10))
        assert parser.assess_complexity(content) is Complexity.COMPLEX


class TestDependencies:
    def test_es_and_commonjs(self, parser):
        content = (
            "import React, { useState } from 'react';\n"
            'import "./styles.css";\n'
            "const fs = require('fs');\n"
            "import React from 'react';\n"
        )
        assert parser.extract_dependencies(content) == ("react", "./styles.css", "fs")

    def test_python_imports(self, parser):
        content = "import os, sys as system\nfrom collections import deque\nimport numpy as np\n"
        assert parser.extract_dependencies(content) == ("os", "sys", "numpy", "collections")


class TestParse:
    def test_parse_builds_immutable_record(self, parser):
        content = "<title>Particle Game</title><style>body{background:#ff0000}</style>"
        parsed = parser.parse("particles.html", content)

        assert parsed.file_type is FileType.HTML
        assert parsed.name == "Particle Game"
        assert parsed.keywords == ("game", "particle")
        assert parsed.content == content
        with pytest.raises(Exception):
            parsed.name = "changed"

    def test_parse_degrades_on_empty_content(self, parser):
        parsed = parser.parse("mystery.xyz", "")
        assert parsed.file_type is FileType.UNKNOWN
        assert parsed.name == "Mystery"
        assert parsed.keywords == ()
        assert parsed.complexity is Complexity.SIMPLE

    def test_get_parser_is_shared(self):
        assert get_parser() is get_parser()
