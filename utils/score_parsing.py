from __future__ import annotations

import math
import re
from typing import Any, Optional


_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def parse_score(value: Any) -> Optional[float]:
    """Parse model-supplied scores like 8, '8.5', '8/10', '85%' into a float.

    The first number wins ('8/10' -> 8.0). Returns None for unparsable or
    non-finite inputs (json.loads accepts NaN and Infinity).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    s = str(value).strip()
    if not s:
        return None
    m = _NUMBER_RE.search(s)
    if not m:
        return None
    return float(m.group(0))


def clamp_score(value: Any, low: int, high: int, default: int) -> int:
    """Round a parsed score into [low, high]; fall back to default."""
    parsed = parse_score(value)
    if parsed is None:
        return default
    return int(min(high, max(low, round(parsed))))
