from __future__ import annotations

import unicodedata
from typing import Optional
from urllib.parse import unquote, urlparse

import tldextract


# Bundled public-suffix snapshot only; no network fetch at runtime
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text.startswith('http://') and not text.startswith('https://'):
        text = f"http://{text}"
    ext = _EXTRACT(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None


def hostname_from_url(url: Optional[str]) -> str:
    """Hostname of a URL without a leading www., or 'unknown'."""
    if not url:
        return "unknown"
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return "unknown"
    if host.startswith("www."):
        host = host[4:]
    return host or "unknown"


def normalize_linkedin_profile_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        u = urlparse(url)
    except ValueError:
        return None
    host = (u.netloc or '').lower().replace('www.', '').replace('de.linkedin.com', 'linkedin.com')
    path = (u.path or '').rstrip('/')
    if not host:
        return None
    if 'linkedin.com' not in host or not path.startswith('/in/'):
        return None
    # Keep only /in/{slug} and drop trailing locale/segments (e.g., /de, /en)
    parts = [p for p in path.split('/') if p]
    if len(parts) >= 2 and parts[0] == 'in':
        slug = unquote(parts[1])
        slug = unicodedata.normalize('NFKC', slug).strip().lower()
        # Remove invisible characters occasionally present
        slug = slug.replace('\u200b', '').replace('\u200c', '').replace('\u200d', '')
        return f"https://linkedin.com/in/{slug}"
    return f"https://linkedin.com{path}"
