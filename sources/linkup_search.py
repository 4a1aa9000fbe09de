from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from linkup import LinkupClient

from config.settings import Settings
from models.evidence import EvidenceItem
from services.mapping import to_evidence_item
from sources.registry import register
from utils.llm_logger import log_call, sha256_text


class LinkupEvidenceSearch:
    """Evidence search over Linkup's searchResults output."""

    source_name = "linkup"

    def __init__(self, settings: Settings, client: Optional[LinkupClient] = None):
        if client is None and not settings.linkup_api_key:
            raise RuntimeError("LINKUP_API_KEY required for the linkup search backend")
        self.settings = settings
        self._client = client

    @property
    def client(self) -> LinkupClient:
        if self._client is None:
            self._client = LinkupClient(api_key=self.settings.linkup_api_key)
        return self._client

    def _to_raw(self, result: Any) -> Dict[str, Any]:
        if isinstance(result, dict):
            return result
        return {
            "name": getattr(result, "name", None),
            "url": getattr(result, "url", None),
            "content": getattr(result, "content", None),
        }

    def search(self, query: str, *, max_results: int, company: Optional[str] = None) -> List[EvidenceItem]:
        t0 = time.time()
        try:
            resp = self.client.search(
                query=query,
                depth=self.settings.linkup_depth,
                output_type="searchResults",
            )
        except Exception as e:
            log_call(
                caller="linkup_search.search",
                provider="linkup",
                model=self.settings.linkup_depth,
                operation="evidence_search",
                prompt_name=None,
                prompt_hash=sha256_text(query),
                duration_ms=int((time.time() - t0) * 1000),
                status="error",
                error=str(e),
            )
            raise
        results = getattr(resp, "results", None)
        if results is None and isinstance(resp, dict):
            results = resp.get("results")
        # Linkup has no result-count parameter; cap locally
        items = [to_evidence_item(self._to_raw(r), company) for r in (results or [])[:max_results]]
        log_call(
            caller="linkup_search.search",
            provider="linkup",
            model=self.settings.linkup_depth,
            operation="evidence_search",
            prompt_name=None,
            prompt_hash=sha256_text(query),
            duration_ms=int((time.time() - t0) * 1000),
            status="ok",
            extras={"results": len(items)},
        )
        logging.debug(f"linkup: {len(items)} results for query={query!r}")
        return items


register(LinkupEvidenceSearch.source_name, LinkupEvidenceSearch)
