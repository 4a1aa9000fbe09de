from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from models.contact import Contact
from models.evidence import EvidenceItem
from pipelines.runner import RunContext, StageResult
from ports.search import EvidenceSearchPort
from services.mapping import NEWS_DOMAINS, PRESS_DOMAINS


# Per-topic result caps: (shallow, medium, deep)
DEPTH_CAPS: Dict[str, tuple] = {
    "general": (5, 10, 15),
    "news": (3, 6, 10),
    "press": (3, 6, 10),
    "team": (5, 8, 12),
    "events": (3, 5, 8),
}
_DEPTH_INDEX = {"shallow": 0, "medium": 1, "deep": 2}


def cap_for(topic: str, depth: str) -> int:
    return DEPTH_CAPS[topic][_DEPTH_INDEX.get(depth, 1)]


def _text(item: EvidenceItem) -> tuple:
    return item.title.lower(), item.snippet.lower()


def _keep_news(item: EvidenceItem) -> bool:
    return item.content_type in ("news", "article") or any(d in item.domain for d in NEWS_DOMAINS[:6])


def _keep_press(item: EvidenceItem) -> bool:
    title, snippet = _text(item)
    return (
        item.content_type == "press_release"
        or any(d in item.domain for d in PRESS_DOMAINS)
        or "press release" in title
        or "announces" in title
        or "announced" in snippet
    )


def _keep_team(item: EvidenceItem) -> bool:
    title, snippet = _text(item)
    return (
        item.content_type == "company_page"
        or any(w in title for w in ("team", "leadership", "about"))
        or "team" in snippet
        or "executive" in snippet
    )


def _keep_events(item: EvidenceItem) -> bool:
    title, snippet = _text(item)
    return any(w in title for w in ("speaker", "conference", "event")) or any(
        w in snippet for w in ("speaker", "conference", "speaking")
    )


@dataclass(frozen=True)
class TopicQuery:
    topic: str
    query: str
    keep: Optional[Callable[[EvidenceItem], bool]] = None


def build_queries(contact: Contact) -> List[TopicQuery]:
    """The fixed topic set, in merge order."""
    name, company = contact.name, contact.company
    return [
        TopicQuery("general", f'"{name}" "{company}" {contact.position}'),
        TopicQuery("news", f'"{name}" "{company}" news interview', _keep_news),
        TopicQuery("press", f'"{company}" press release announces "{name}"', _keep_press),
        TopicQuery("team", f'"{company}" team leadership executive team about', _keep_team),
        TopicQuery("events", f'"{name}" speaker conference panel event', _keep_events),
    ]


class EvidenceGatherer:
    """Runs the topic searches concurrently and merges them into one deduplicated list."""

    def __init__(self, search: EvidenceSearchPort, concurrency: int = 5, timeout_seconds: float = 30):
        self.search = search
        self.concurrency = max(1, concurrency)
        self.timeout_seconds = timeout_seconds
        self.searches_issued = 0

    def gather(self, contact: Contact, depth: str) -> StageResult[List[EvidenceItem]]:
        queries = build_queries(contact)
        per_topic: Dict[str, List[EvidenceItem]] = {}
        failed: List[str] = []

        pool = ThreadPoolExecutor(max_workers=min(self.concurrency, len(queries)))
        try:
            futures = {
                q.topic: pool.submit(
                    self.search.search, q.query, max_results=cap_for(q.topic, depth), company=contact.company
                )
                for q in queries
            }
            self.searches_issued += len(futures)
            deadline = time.monotonic() + self.timeout_seconds
            for q in queries:
                try:
                    items = futures[q.topic].result(timeout=max(0.0, deadline - time.monotonic()))
                except FutureTimeout:
                    failed.append(q.topic)
                    logging.warning(f"Evidence search '{q.topic}' timed out", extra={"step": "gather", "status": "timeout"})
                    continue
                except Exception as e:
                    failed.append(q.topic)
                    logging.warning(
                        f"Evidence search '{q.topic}' failed: {e}",
                        extra={"step": "gather", "status": "error", "error": str(e)},
                    )
                    continue
                cap = cap_for(q.topic, depth)
                kept = [i for i in (items or []) if q.keep is None or q.keep(i)]
                per_topic[q.topic] = kept[:cap]
        finally:
            # Timed-out searches are abandoned, not awaited
            pool.shutdown(wait=False, cancel_futures=True)

        merged: List[EvidenceItem] = []
        seen = set()
        for q in queries:
            for item in per_topic.get(q.topic, []):
                key = item.url or f"{item.title}|{item.snippet}"
                if key in seen:
                    continue
                seen.add(key)
                merged.append(item)

        logging.info(
            f"Gathered {len(merged)} evidence items for {contact.name} ({len(failed)}/{len(queries)} searches failed)"
        )
        if len(failed) == len(queries):
            return StageResult.none([], "all evidence searches failed")
        if failed:
            return StageResult.degraded(merged, f"failed topics: {', '.join(failed)}")
        return StageResult.ok(merged)


class GatherEvidence:
    name = "gather_evidence"

    def __init__(self, gatherer: EvidenceGatherer):
        self.gatherer = gatherer

    def run(self, ctx: RunContext) -> RunContext:
        ctx.state = "searching"
        before = self.gatherer.searches_issued
        result = self.gatherer.gather(ctx.contact, ctx.depth)
        ctx.total_searches += self.gatherer.searches_issued - before
        ctx.outcomes[self.name] = result.status
        ctx.evidence = result.data
        if result.status == "none":
            ctx.meta["fallback_reason"] = result.detail
            ctx.halted = True
        return ctx
