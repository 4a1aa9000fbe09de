from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None, default: str = "false") -> bool:
    return (value or default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Text generation
    openai_api_key: str | None
    openai_model: str
    llm_timeout_seconds: float

    # Evidence search
    search_provider: str  # linkup | google_cse
    linkup_api_key: str | None
    linkup_depth: str
    google_api_key: str | None
    google_cse_id: str | None
    google_search_url: str
    search_timeout_seconds: float
    max_retries: int

    # Discovery pipeline
    gather_concurrency: int
    default_search_depth: str
    max_connections: int
    discovery_cache_ttl_seconds: int
    validation_mode: str  # lenient | strict

    # Core/runtime
    run_env: str
    log_level: str
    api_host: str
    api_port: int

    # Logging/tracing
    llm_trace: bool = False
    llm_log_path: str = "logs/llm_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    search_provider = os.getenv("SEARCH_PROVIDER", "linkup").lower()
    validation_mode = os.getenv("VALIDATION_MODE", "lenient").lower()
    if validation_mode not in ("lenient", "strict"):
        raise RuntimeError("VALIDATION_MODE must be 'lenient' or 'strict'")
    default_depth = os.getenv("DEFAULT_SEARCH_DEPTH", "medium").lower()
    if default_depth not in ("shallow", "medium", "deep"):
        raise RuntimeError("DEFAULT_SEARCH_DEPTH must be one of: shallow, medium, deep")

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
        search_provider=search_provider,
        linkup_api_key=os.getenv("LINKUP_API_KEY"),
        linkup_depth=os.getenv("LINKUP_DEPTH", "standard"),
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        google_cse_id=os.getenv("GOOGLE_CSE_ID"),
        google_search_url=os.getenv("GOOGLE_SEARCH_URL", "https://www.googleapis.com/customsearch/v1"),
        search_timeout_seconds=float(os.getenv("SEARCH_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("MAX_RETRIES", "2")),
        gather_concurrency=int(os.getenv("GATHER_CONCURRENCY", "5")),
        default_search_depth=default_depth,
        max_connections=int(os.getenv("MAX_CONNECTIONS", "10")),
        # One hour, matching the HTTP-level cache of the product
        discovery_cache_ttl_seconds=int(os.getenv("DISCOVERY_CACHE_TTL_SECONDS", "3600")),
        validation_mode=validation_mode,
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=int(os.getenv("API_PORT", "8000")),
        llm_trace=_as_bool(os.getenv("LLM_TRACE")),
        llm_log_path=os.getenv("LLM_LOG_PATH", "logs/llm_calls.jsonl"),
    )
