"""Concept and quantum-keyword vocabularies for insight tagging (kept verbatim)."""

from __future__ import annotations

CONCEPT_PATTERNS: tuple[str, ...] = (
    "consciousness",
    "awareness",
    "quantum",
    "wave",
    "field",
    "resonance",
    "frequency",
    "energy",
    "dimension",
    "mind",
    "body",
    "spirit",
    "evolution",
    "transformation",
    "design",
)

QUANTUM_KEYWORDS: tuple[str, ...] = (
    "wave function",
    "superposition",
    "entanglement",
    "quantum field",
    "interference",
    "resonance",
    "frequency",
    "vibration",
    "collapse",
    "probability",
    "uncertainty",
    "coherence",
    "decoherence",
)

DIMENSIONS: tuple[str, ...] = ("Movement", "Evolution", "Being", "Design", "Space")
