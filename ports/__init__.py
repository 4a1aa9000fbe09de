from .llm import TextGenerationPort
from .search import EvidenceSearchPort
from .cache import DiscoveryCachePort

__all__ = [
    "TextGenerationPort",
    "EvidenceSearchPort",
    "DiscoveryCachePort",
]
