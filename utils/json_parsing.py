from __future__ import annotations

import json
import re
from typing import Any, Optional


_FENCE_RE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")


def extract_json(text: Optional[str]) -> Optional[Any]:
    """Best-effort JSON extraction from a model response.

    Tries, in order: the raw text, a fenced ```json block, then the widest
    {...} or [...] slice. Returns None when nothing parses.
    """
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        pass

    m = _FENCE_RE.search(text)
    if m:
        try:
            return json.loads(m.group(1))
        except ValueError:
            pass

    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        start = text.find(open_ch)
        end = text.rfind(close_ch)
        if start != -1 and end > start:
            try:
                return json.loads(text[start : end + 1])
            except ValueError:
                continue
    return None
