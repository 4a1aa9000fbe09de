"""
Google Custom Search API backend for evidence search.
"""
import logging
import time
from typing import Dict, List, Optional

import requests

from config.settings import Settings
from models.evidence import EvidenceItem
from services.mapping import to_evidence_item
from sources.registry import register

# CSE returns at most 10 items per request
PAGE_SIZE = 10


class GoogleEvidenceSearch:
    """Handles Google Custom Search API requests for relationship evidence."""

    source_name = "google_cse"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.api_key = settings.google_api_key
        self.cse_id = settings.google_cse_id
        self.session = session or requests.Session()
        self.api_calls_made = 0

        if not self.api_key or not self.cse_id:
            raise RuntimeError("GOOGLE_API_KEY and GOOGLE_CSE_ID must be set for the google_cse search backend")

    def search_single_page(self, query: str, start_index: int = 1, num: int = PAGE_SIZE) -> Dict:
        """Execute a single Custom Search request; raises after the last failed attempt."""
        params = {
            'key': self.api_key,
            'cx': self.cse_id,
            'q': query,
            'start': start_index,
            'num': max(1, min(num, PAGE_SIZE)),
        }
        attempts = max(1, self.settings.max_retries)
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                response = self.session.get(
                    self.settings.google_search_url,
                    params=params,
                    timeout=self.settings.search_timeout_seconds,
                )
                self.api_calls_made += 1
                if response.status_code == 200:
                    return response.json()
                if response.status_code == 429:
                    logging.warning("Google CSE rate limit exceeded")
                    raise RuntimeError("Google CSE rate limit exceeded")
                last_error = RuntimeError(f"Google CSE request failed with status {response.status_code}")
                logging.error(f"Google CSE request failed with status {response.status_code}: {response.text[:200]}")
            except requests.exceptions.RequestException as e:
                last_error = e
                logging.error(f"Google CSE request error on attempt {attempt + 1}: {e}")
            if attempt < attempts - 1:
                time.sleep(2 ** attempt)

        assert last_error is not None
        raise last_error

    def search(self, query: str, *, max_results: int, company: Optional[str] = None) -> List[EvidenceItem]:
        """Collect up to max_results items, paging through CSE as needed."""
        items: List[EvidenceItem] = []
        start_index = 1
        while len(items) < max_results:
            data = self.search_single_page(query, start_index, max_results - len(items))
            page = data.get('items') or []
            if not page:
                break
            for raw in page:
                if len(items) >= max_results:
                    break
                items.append(to_evidence_item(raw, company))
            total = int((data.get('searchInformation') or {}).get('totalResults', 0) or 0)
            start_index += PAGE_SIZE
            if start_index > total:
                break
        logging.debug(f"google_cse: {len(items)} results for query={query!r} ({self.api_calls_made} API calls so far)")
        return items[:max_results]


register(GoogleEvidenceSearch.source_name, GoogleEvidenceSearch)
