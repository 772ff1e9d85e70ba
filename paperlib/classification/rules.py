"""
Ordered rule tables for the heuristic glyph classifier.

Each glyph dimension is a RuleTable: an ordered tuple of rules plus a
default and a resolution strategy.

- "first": the first matching rule decides (energy). Order is the tie-break,
  so content that is both energetic and calm classifies as energetic.
- "last": every matching rule overrides the previous one (flow, mood,
  rhythm), so later rules win.

Tables are plain immutable data; pass a different GlyphRules into
classify_quick() to experiment without touching module state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from paperlib.storage.models import Complexity, Energy, Flow, Mood, ParsedFile, Rhythm


@dataclass(frozen=True)
class Evidence:
    """Lower-cased content plus the parsed signals rules test against."""

    content: str
    keywords: frozenset[str]
    colors: frozenset[str]
    complexity: Complexity

    @classmethod
    def from_parsed(cls, parsed: ParsedFile) -> Evidence:
        return cls(
            content=parsed.content.lower(),
            keywords=frozenset(parsed.keywords),
            colors=frozenset(parsed.colors),
            complexity=parsed.complexity,
        )


@dataclass(frozen=True)
class Rule:
    """A disjunction of triggers; any single hit matches."""

    value: str
    keywords: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()
    content: tuple[str, ...] = ()
    complexity: tuple[Complexity, ...] = ()

    def matches(self, evidence: Evidence) -> bool:
        return (
            any(k in evidence.keywords for k in self.keywords)
            or any(c in evidence.colors for c in self.colors)
            or evidence.complexity in self.complexity
            or any(s in evidence.content for s in self.content)
        )


@dataclass(frozen=True)
class RuleTable:
    rules: tuple[Rule, ...]
    default: str
    strategy: Literal["first", "last"] = "first"

    def resolve(self, evidence: Evidence) -> str:
        result = self.default
        for rule in self.rules:
            if rule.matches(evidence):
                if self.strategy == "first":
                    return rule.value
                result = rule.value
        return result


@dataclass(frozen=True)
class GlyphRules:
    energy: RuleTable
    flow: RuleTable
    mood: RuleTable
    rhythm: RuleTable


# Movement/Individuality
ENERGETIC_RULE = Rule(
    value=Energy.ENERGETIC.value,
    keywords=("game", "simulation"),
    complexity=(Complexity.COMPLEX,),
    colors=("red",),
    content=("particle", "animation", "dynamic", "intense", "burst", "explosive"),
)

# Evolution/Mind
FLOWING_RULE = Rule(
    value=Energy.FLOWING.value,
    content=("flow", "wave", "smooth", "rhythm", "adaptive", "evolution", "memory"),
    colors=("blue",),
)

# Being/Body
CALM_RULE = Rule(
    value=Energy.CALM.value,
    keywords=("meditation", "calm", "peaceful"),
    colors=("green", "light"),
    content=("gentle", "serene", "tranquil", "touch", "sensation"),
)

# Space/Personality
SPIRAL_RULE = Rule(
    value=Energy.SPIRAL.value,
    content=(
        "spiral",
        "recursive",
        "transform",
        "metamorph",
        "personality",
        "imagination",
        "creative",
        "generative",
        "self-referential",
        "fractal",
        "dimension",
    ),
)

ENERGY_TABLE = RuleTable(
    rules=(ENERGETIC_RULE, FLOWING_RULE, CALM_RULE, SPIRAL_RULE),
    default=Energy.FOCUSED.value,
    strategy="first",
)

FLOW_TABLE = RuleTable(
    rules=(
        Rule(value=Flow.WAVY.value, content=("curve", "wave")),
        Rule(value=Flow.SPIRAL.value, content=("spiral", "circular")),
    ),
    default=Flow.STRAIGHT.value,
    strategy="last",
)

MOOD_TABLE = RuleTable(
    rules=(
        Rule(value=Mood.CONTEMPLATIVE.value, content=("contemplat", "meditat")),
        Rule(value=Mood.CREATIVE.value, content=("creat", "art")),
        Rule(value=Mood.SEARCHING.value, content=("search", "explore")),
        Rule(value=Mood.TRANSFORMATIVE.value, content=("transform",)),
    ),
    default=Mood.ENERGETIC.value,
    strategy="last",
)

RHYTHM_TABLE = RuleTable(
    rules=(
        Rule(value=Rhythm.PUNCTUATED.value, content=("burst", "pulse")),
        Rule(value=Rhythm.HESITANT.value, content=("pause", "hesita")),
    ),
    default=Rhythm.CONTINUOUS.value,
    strategy="last",
)

DEFAULT_GLYPH_RULES = GlyphRules(
    energy=ENERGY_TABLE,
    flow=FLOW_TABLE,
    mood=MOOD_TABLE,
    rhythm=RHYTHM_TABLE,
)
