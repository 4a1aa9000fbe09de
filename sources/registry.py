from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from config.settings import Settings, get_settings
from ports.search import EvidenceSearchPort


SearchFactory = Callable[[Settings], EvidenceSearchPort]

_REGISTRY: Dict[str, SearchFactory] = {}


def register(name: str, factory: SearchFactory) -> None:
    _REGISTRY[name] = factory


def get_search_backend(name: Optional[str] = None, settings: Optional[Settings] = None) -> EvidenceSearchPort:
    """Instantiate the backend registered under name (default: SEARCH_PROVIDER)."""
    settings = settings or get_settings()
    key = (name or settings.search_provider or "").lower()
    if key not in _REGISTRY:
        raise KeyError(f"Unknown search backend: {key}")
    return _REGISTRY[key](settings)


def available_backends() -> Dict[str, Any]:
    return dict(_REGISTRY)
