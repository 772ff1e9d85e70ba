"""Centralized configuration for Paper Library.

Typed constants for the inference gateway, analysis and extraction budgets,
storage, and logging. Environment variable overrides use safe defaults so
the service starts against a stock llamafile on localhost with no extra
configuration.
"""

from __future__ import annotations

import os
from pathlib import Path

# --- App ---
APP_VERSION: str = "1.0.0"
EXPORT_VERSION: str = "1.0"

# --- Inference gateway (OpenAI-compatible llamafile server) ---
LLM_ENDPOINT: str = os.getenv("PAPERLIB_LLM_ENDPOINT", "http://localhost:8080")
LLM_MODEL: str = os.getenv("PAPERLIB_LLM_MODEL", "gpt-3.5-turbo")
LLM_HEALTH_TIMEOUT: float = float(os.getenv("PAPERLIB_LLM_HEALTH_TIMEOUT", "2.0"))
# Bounds a single completion so a long generation cannot stall ingest.
LLM_TIMEOUT_SECONDS: float = float(os.getenv("PAPERLIB_LLM_TIMEOUT", "60.0"))
LLM_STATUS_MAX_AGE: float = float(os.getenv("PAPERLIB_LLM_STATUS_MAX_AGE", "10.0"))

# --- Code analysis ---
ANALYSIS_EXCERPT_CHARS: int = 2000
ANALYSIS_DEEP_EXCERPT_CHARS: int = 4000
ANALYSIS_MAX_TOKENS: int = 200
ANALYSIS_DEEP_MAX_TOKENS: int = 400
ANALYSIS_TEMPERATURE: float = 0.3

# --- Insight extraction ---
CHUNK_MAX_WORDS: int = 3000
CHUNK_PROMPT_CHARS: int = 2500
EXTRACTION_MAX_TOKENS: int = 1000
EXTRACTION_TEMPERATURE: float = 0.2
GATE_CONTEXT_CHARS: int = 200
MAX_SENTENCES_PER_KEYWORD: int = 3

# --- Complexity thresholds ---
COMPLEXITY_SIMPLE_BELOW: float = 10.0
COMPLEXITY_MODERATE_BELOW: float = 30.0

# --- Storage ---
DB_PATH: Path = Path(
    os.getenv("PAPERLIB_DB_PATH", str(Path(__file__).parent / "data" / "paperlib.db"))
)
DB_CONNECT_TIMEOUT: float = float(os.getenv("PAPERLIB_DB_CONNECT_TIMEOUT", "30.0"))
LIBRARY_NAMESPACE: str = "paperLibrary"
KNOWLEDGE_NAMESPACE: str = "paperKnowledge"

# --- API ---
API_HOST: str = os.getenv("PAPERLIB_HOST", "127.0.0.1")
API_PORT: int = int(os.getenv("PAPERLIB_PORT", "8000"))
