"""Prompt builders for code analysis and insight extraction."""

from __future__ import annotations

from dataclasses import dataclass

from paperlib.config import (
    ANALYSIS_DEEP_EXCERPT_CHARS,
    ANALYSIS_EXCERPT_CHARS,
    CHUNK_PROMPT_CHARS,
)
from paperlib.knowledge.vocabulary import DIMENSIONS
from paperlib.storage.models import ParsedFile

ANALYSIS_SCHEMA = """{
  "description": "brief description of what this code does (max 2 sentences)",
  "energy": "energetic|flowing|calm|focused|spiral",
  "tags": ["tag1", "tag2", "tag3"],
  "bestFor": "who would benefit most from this app"
}"""

ENERGY_GUIDE = """Energy meanings (5 consciousness dimensions):
- energetic: dynamic, intense, fast-paced, exciting (Movement/Individuality)
- flowing: adaptive, smooth, rhythmic, evolutionary (Evolution/Mind)
- calm: peaceful, gentle, meditative, grounded (Being/Body)
- focused: structured, precise, analytical, organized (Design/Ego)
- spiral: recursive, transformative, creative, dimensional (Space/Personality)"""

INSIGHT_SCHEMA = """[
  {
    "text": "the actual insight or quote",
    "gate": 23,
    "line": 4,
    "concepts": ["quantum mechanics", "wave function", "consciousness"],
    "dimension": "Evolution"
  }
]"""

GATES_INSTRUCTION = "- Look for references to Gates (1-64) and Lines (1-6) from Human Design\n"
QUANTUM_INSTRUCTION = (
    "- Extract quantum mechanics concepts: wave function, superposition, entanglement, "
    "collapse, interference, field theory, resonance\n"
)
DIMENSIONS_INSTRUCTION = f"- Identify dimensional references: {', '.join(DIMENSIONS)}\n"


@dataclass(frozen=True)
class ExtractionOptions:
    """Which optional instruction blocks go into an extraction prompt."""

    extract_gates: bool = True
    extract_quantum: bool = True
    extract_dimensions: bool = True


def analysis_excerpt_limit(deep: bool) -> int:
    return ANALYSIS_DEEP_EXCERPT_CHARS if deep else ANALYSIS_EXCERPT_CHARS


def build_analysis_prompt(parsed: ParsedFile, deep: bool = False) -> str:
    """Prompt asking for {description, energy, tags, bestFor} as bare JSON."""
    file_type = parsed.file_type.value
    snippet = parsed.content[: analysis_excerpt_limit(deep)]

    return f"""Analyze this {file_type} code and respond ONLY with valid JSON in this exact format:
{ANALYSIS_SCHEMA}

{ENERGY_GUIDE}

Code to analyze:
```{file_type}
{snippet}
```

Respond with ONLY the JSON object, no markdown, no explanation."""


def build_extraction_prompt(text: str, options: ExtractionOptions = ExtractionOptions()) -> str:
    """Prompt asking for a JSON array of insights from one chunk."""
    prompt = (
        "Analyze this text and extract key insights. Respond ONLY with a JSON array "
        f"of insights in this format:\n\n{INSIGHT_SCHEMA}\n\n"
    )

    if options.extract_gates:
        prompt += GATES_INSTRUCTION
    if options.extract_quantum:
        prompt += QUANTUM_INSTRUCTION
    if options.extract_dimensions:
        prompt += DIMENSIONS_INSTRUCTION

    prompt += f"\nText to analyze:\n{text[:CHUNK_PROMPT_CHARS]}"
    return prompt
