from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Optional

from models.discovery import DiscoveryResponse


def _llm_usage_for_run(run_id: str) -> Dict[str, Dict[str, int]]:
    """Aggregate external-call usage from the JSONL trace for the given run_id.

    Returns dict like { 'openai': {'calls': N, 'tokens': T}, 'linkup': {...} }
    """
    from config.settings import get_settings

    result: Dict[str, Dict[str, int]] = {}
    log_path = Path(get_settings().llm_log_path)
    if not log_path.exists():
        return result
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            try:
                rec = json.loads(line)
            except ValueError:
                continue
            if not isinstance(rec, dict) or rec.get("run_id") != run_id:
                continue
            provider = rec.get("provider") or "unknown"
            usage = rec.get("usage") or {}
            bucket = result.setdefault(provider, {"calls": 0, "tokens": 0})
            bucket["calls"] += 1
            try:
                bucket["tokens"] += int(usage.get("total_tokens") or 0)
            except (TypeError, ValueError):
                pass
    return result


def print_summary(response: DiscoveryResponse, output_path: Optional[Path] = None) -> None:
    """Print a human-readable summary of one discovery run."""
    summary = response.search_summary
    insights = response.research_insights

    print("\n" + "=" * 60)
    print("FWB NETWORK DISCOVERY - SUMMARY")
    print("=" * 60)
    print(f"Request ID: {response.request_id}")
    print(f"Result Code: {response.code}{' (cached)' if response.cached else ''}")
    print(f"Generated At: {response.timestamp}")
    print(f"Processing Time: {response.processing_time_ms} ms")
    print()
    print("Search Statistics:")
    print(f"  Searches Issued: {summary.total_searches}")
    print(f"  Sources Analyzed: {summary.sources_analyzed}")
    print(f"  Confidence Score: {summary.confidence_score:.2f}")
    print(f"  Network Size: {insights.network_size_category}")
    print()
    print(f"Connections ({len(response.discovered_connections)}):")
    for c in response.discovered_connections:
        print(f"  [{c.networking_priority:>3}] {c.name} - {c.title} at {c.company} ({c.relationship_to_fwb})")
    if response.portfolio_insight:
        tiers = response.portfolio_insight.priority_tiers
        print()
        print(f"Priority Tiers: tier1={len(tiers.tier1)}, tier2={len(tiers.tier2)}, tier3={len(tiers.tier3)}")
    # Usage summary (per provider) for current RUN_ID if tracing enabled
    from config.settings import get_settings
    run_id = os.getenv("RUN_ID")
    if run_id and get_settings().llm_trace:
        usage = _llm_usage_for_run(run_id)
        if usage:
            print("External Call Usage:")
            for provider, stats in usage.items():
                print(f"  {provider}: calls={stats.get('calls', 0)}, tokens={stats.get('tokens', 0)}")
    if output_path:
        print(f"Output File: {output_path}")
    print("=" * 60)
