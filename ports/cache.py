from __future__ import annotations

from typing import Optional, Protocol

from models.discovery import DiscoveryResponse


class DiscoveryCachePort(Protocol):
    def get(self, fingerprint: str) -> Optional[DiscoveryResponse]:
        ...

    def put(self, fingerprint: str, result: DiscoveryResponse) -> None:
        ...

    def evict(self, fingerprint: str) -> None:
        ...
