from __future__ import annotations

from models.contact import Contact, RequesterProfile
from models.discovery import DiscoveryResponse
from services.cache import DiscoveryCache, fingerprint


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_fingerprint_changes_with_any_input(contact, requester):
    base = fingerprint(contact, requester, "Become a CTO", "medium")
    assert base == fingerprint(contact, requester, "Become a CTO", "medium")
    assert base != fingerprint(contact, requester, "Become a CTO", "deep")
    assert base != fingerprint(contact, requester, None, "medium")
    other_contact = Contact(name=contact.name, company=contact.company, position="CEO")
    assert base != fingerprint(other_contact, requester, "Become a CTO", "medium")
    other_requester = RequesterProfile(name=requester.name, title="Staff Engineer")
    assert base != fingerprint(contact, other_requester, "Become a CTO", "medium")


def test_entries_expire_at_ttl():
    clock = _Clock()
    cache = DiscoveryCache(ttl_seconds=3600, clock=clock)
    cache.put("k", DiscoveryResponse(request_id="r1"))

    clock.now += 3599
    assert cache.get("k") is not None
    clock.now += 1
    assert cache.get("k") is None
    # Expired entry was evicted on lookup
    assert len(cache) == 0


def test_cached_payloads_are_isolated_from_callers():
    cache = DiscoveryCache(ttl_seconds=60, clock=_Clock())
    original = DiscoveryResponse(request_id="r1")
    cache.put("k", original)
    original.request_id = "mutated"

    first = cache.get("k")
    first.search_summary.total_searches = 99
    second = cache.get("k")
    assert second.request_id == "r1"
    assert second.search_summary.total_searches == 0


def test_last_write_wins_and_evict():
    cache = DiscoveryCache(ttl_seconds=60, clock=_Clock())
    cache.put("k", DiscoveryResponse(request_id="a"))
    cache.put("k", DiscoveryResponse(request_id="b"))
    assert cache.get("k").request_id == "b"
    cache.evict("k")
    assert cache.get("k") is None
    cache.put("x", DiscoveryResponse())
    cache.clear()
    assert len(cache) == 0


def test_fingerprint_keeps_field_boundaries(requester):
    a = Contact(name="Ann|Acme", company="Beta", position="CTO")
    b = Contact(name="Ann", company="Acme|Beta", position="CTO")
    assert fingerprint(a, requester, None, "medium") != fingerprint(b, requester, None, "medium")
