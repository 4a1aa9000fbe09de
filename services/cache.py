from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from models.contact import Contact, RequesterProfile
from models.discovery import DiscoveryResponse


def fingerprint(
    contact: Contact,
    requester: RequesterProfile,
    objective: Optional[str],
    depth: str,
) -> str:
    """Stable key over every input that can change the discovery result."""
    parts = [
        contact.name,
        contact.company,
        contact.position,
        contact.profile_link or "",
        requester.name,
        requester.title,
        objective or "",
        depth,
    ]
    # JSON array encoding keeps field boundaries unambiguous
    return hashlib.sha256(json.dumps(parts, ensure_ascii=False).encode("utf-8")).hexdigest()


class DiscoveryCache:
    """In-process TTL cache of discovery responses, safe across threads.

    An entry expires once now - inserted_at >= ttl_seconds and is evicted on
    the lookup that notices it. Payloads are copied on the way in and out.
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[DiscoveryResponse, float]] = {}
        self._lock = threading.Lock()

    def get(self, fingerprint: str) -> Optional[DiscoveryResponse]:
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                return None
            payload, inserted_at = entry
            if self._clock() - inserted_at >= self.ttl_seconds:
                del self._entries[fingerprint]
                return None
            return payload.model_copy(deep=True)

    def put(self, fingerprint: str, result: DiscoveryResponse) -> None:
        with self._lock:
            self._entries[fingerprint] = (result.model_copy(deep=True), self._clock())

    def evict(self, fingerprint: str) -> None:
        with self._lock:
            self._entries.pop(fingerprint, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
