import hashlib
import math
from datetime import date, datetime
from typing import Any, Optional

def to_float(value: Any) -> float:
    """
    Best-effort numeric coercion for loosely typed JSON.
    Anything unparsable becomes NaN so a finiteness check can drop it.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan

def is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)

def parse_iso_date(value: Any) -> Optional[date]:
    """'2025-04-01' or a full ISO timestamp → date; None when absent or invalid."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None

def yen(amount: int) -> str:
    """Thousands-separated amount for mail bodies, e.g. 23,100,000."""
    return f"{amount:,}"

def weak_etag(payload_bytes: bytes) -> str:
    """Weak ETag for client-side conditional requests."""
    h = hashlib.sha256(payload_bytes).hexdigest()[:24]
    return f'W/"{h}"'
