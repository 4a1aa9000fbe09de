from __future__ import annotations

from typing import List, Optional, Protocol

from models.evidence import EvidenceItem


class EvidenceSearchPort(Protocol):
    """Web research capability. May raise per call; callers recover locally.

    company, when given, lets the backend recognize the company's own pages.
    """

    source_name: str

    def search(self, query: str, *, max_results: int, company: Optional[str] = None) -> List[EvidenceItem]:
        ...
