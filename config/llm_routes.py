from __future__ import annotations

import os


# Central routing for LLM use-cases. Edit here to change per-operation defaults.
# You can also override per-route model via env vars for quick testing.
#
# Keys are use_case identifiers consumed by services/llm_client.py
ROUTES: dict[str, dict] = {
    # Pulls candidate people out of gathered web evidence
    "connection_extraction": {
        "provider": os.getenv("LLM_EXTRACTION_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_EXTRACTION"),  # falls back to global OPENAI_MODEL
        "temperature": 0.3,
        "json": True,
        "operation": "connection_extraction",
    },
    # Strict-mode plausibility check for a single candidate
    "connection_validation": {
        "provider": os.getenv("LLM_VALIDATION_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_VALIDATION"),
        "temperature": 0,
        "json": True,
        "operation": "connection_validation",
    },
    # Batched career-alignment scoring
    "alignment_scoring": {
        "provider": os.getenv("LLM_SCORING_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_SCORING"),
        "temperature": 0.2,
        "json": True,
        "operation": "alignment_scoring",
    },
    "portfolio_synthesis": {
        "provider": os.getenv("LLM_PORTFOLIO_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_PORTFOLIO"),
        "temperature": 0.3,
        "json": True,
        "operation": "portfolio_synthesis",
    },
    # Warm-introduction drafts
    "introduction_templates": {
        "provider": os.getenv("LLM_TEMPLATES_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_TEMPLATES"),
        "temperature": 0.4,
        "json": True,
        "operation": "introduction_templates",
    },
}
