"""Quick glyph detection: pure rule evaluation, no AI and no I/O."""

from __future__ import annotations

from paperlib.classification.rules import DEFAULT_GLYPH_RULES, Evidence, GlyphRules
from paperlib.storage.models import Energy, Flow, GlyphSignature, Mood, ParsedFile, Rhythm

ENERGY_ICONS: dict[Energy, str] = {
    Energy.ENERGETIC: "⚡",
    Energy.FLOWING: "〰️",
    Energy.CALM: "🌊",
    Energy.FOCUSED: "🔥",
    Energy.SPIRAL: "🌀",
}

ENERGY_DESCRIPTIONS: dict[Energy, str] = {
    Energy.ENERGETIC: "Dynamic, intense, exciting (Movement/Individuality)",
    Energy.FLOWING: "Adaptive, smooth, rhythmic (Evolution/Mind)",
    Energy.CALM: "Peaceful, gentle, grounded (Being/Body)",
    Energy.FOCUSED: "Structured, precise, analytical (Design/Ego)",
    Energy.SPIRAL: "Recursive, transformative, creative (Space/Personality)",
}


def classify_quick(parsed: ParsedFile, rules: GlyphRules = DEFAULT_GLYPH_RULES) -> GlyphSignature:
    """
    Derive the glyph signature of a parsed file from the rule tables.

    Energy is first-match-wins; flow, mood and rhythm are last-match-wins.
    Deterministic: the same ParsedFile always yields the same signature.
    """
    evidence = Evidence.from_parsed(parsed)
    return GlyphSignature(
        energy=Energy(rules.energy.resolve(evidence)),
        flow=Flow(rules.flow.resolve(evidence)),
        mood=Mood(rules.mood.resolve(evidence)),
        rhythm=Rhythm(rules.rhythm.resolve(evidence)),
    )


def energy_icon(energy: Energy | str) -> str:
    try:
        return ENERGY_ICONS[Energy(energy)]
    except ValueError:
        return ENERGY_ICONS[Energy.FOCUSED]


def energy_description(energy: Energy | str) -> str:
    try:
        return ENERGY_DESCRIPTIONS[Energy(energy)]
    except ValueError:
        return "Balanced and versatile"
