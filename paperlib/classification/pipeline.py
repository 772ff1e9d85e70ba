"""
Code analysis orchestrator.

Implements the enrichment cascade:
    HeuristicClassifier (always) → InferenceGateway (optional) → merge

The heuristic signature is computed first and stored verbatim as ``glyphs``.
AI enrichment can only overwrite description, energy and bestFor and add
tags; any gateway or validation failure leaves the heuristic result as is.
"""

from __future__ import annotations

from paperlib.classification.heuristic import classify_quick
from paperlib.classification.rules import DEFAULT_GLYPH_RULES, GlyphRules
from paperlib.config import (
    ANALYSIS_DEEP_MAX_TOKENS,
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
)
from paperlib.contracts import AIAnalysisContract, validate_analysis_payload
from paperlib.llm.gateway import InferenceGateway
from paperlib.llm.json_recovery import find_json_object
from paperlib.llm.prompts import build_analysis_prompt
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter, log_event
from paperlib.storage.models import Analysis, ParsedFile

logger = get_logger(__name__)


class ClassificationPipeline:
    """
    Produce catalog Analysis records from parsed files.

    Example:
        >>> pipeline = ClassificationPipeline(gateway=None)
        >>> analysis = pipeline.analyze(parsed, use_ai=False)
        >>> analysis.energy, analysis.glyphs.flow
    """

    def __init__(
        self,
        gateway: InferenceGateway | None = None,
        rules: GlyphRules = DEFAULT_GLYPH_RULES,
    ) -> None:
        self.gateway = gateway
        self.rules = rules

    def analyze(self, parsed: ParsedFile, use_ai: bool = True, deep: bool = False) -> Analysis:
        """
        Classify a parsed file, enriching with AI when requested and available.

        Never raises for gateway problems: offline servers, HTTP errors and
        malformed responses all fall back to the heuristic-only result.
        """
        glyphs = classify_quick(parsed, self.rules)

        result = Analysis(
            name=parsed.name,
            filename=parsed.filename,
            file_type=parsed.file_type,
            description="",
            energy=glyphs.energy,
            glyphs=glyphs,
            tags=list(parsed.keywords),
            best_for="",
            content=parsed.content,
            complexity=parsed.complexity,
            dependencies=list(parsed.dependencies),
        )

        if not use_ai or self.gateway is None or not self.gateway.online:
            counter("analysis.heuristic_only")
            return result

        try:
            ai_analysis = self._analyze_with_ai(self.gateway, parsed, deep)
        except Exception as e:
            logger.warning("AI analysis failed for %s, using quick detection: %s", parsed.filename, e)
            counter("analysis.ai_failed")
            log_event("analysis.ai_failed", filename=parsed.filename, error=str(e))
            return result

        counter("analysis.ai_enriched")
        return self._merge(result, ai_analysis)

    @staticmethod
    def _analyze_with_ai(
        gateway: InferenceGateway, parsed: ParsedFile, deep: bool
    ) -> AIAnalysisContract:
        prompt = build_analysis_prompt(parsed, deep)
        max_tokens = ANALYSIS_DEEP_MAX_TOKENS if deep else ANALYSIS_MAX_TOKENS

        text = gateway.complete(prompt, max_tokens=max_tokens, temperature=ANALYSIS_TEMPERATURE)
        payload = find_json_object(text)
        return validate_analysis_payload(payload)

    @staticmethod
    def _merge(result: Analysis, ai: AIAnalysisContract) -> Analysis:
        """Overwrite AI-owned fields; tags are keywords first, then new AI tags."""
        return result.model_copy(
            update={
                "description": ai.description,
                "energy": ai.energy,
                "best_for": ai.best_for,
                "tags": list(dict.fromkeys([*result.tags, *ai.tags])),
            }
        )
