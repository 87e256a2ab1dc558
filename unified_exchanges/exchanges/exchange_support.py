"""
Shared helpers for exchange adapters.

Safe field access returns None instead of raising when a key is missing or
the value is not numeric, so parsers can map partial payloads without
defaulting unknown values to zero.
"""

import time
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, Dict, List, Optional


def safe_value(obj: Any, key: Any, default: Any = None) -> Any:
    """Return obj[key] for dicts and lists, default when absent or None."""
    if obj is None:
        return default
    try:
        value = obj[key]
    except (KeyError, IndexError, TypeError):
        return default
    return default if value is None else value


def safe_string(obj: Any, key: Any, default: Optional[str] = None) -> Optional[str]:
    value = safe_value(obj, key)
    if value is None or value == "":
        return default
    return str(value)


def safe_integer(obj: Any, key: Any, default: Optional[int] = None) -> Optional[int]:
    value = safe_value(obj, key)
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return default


def safe_decimal(obj: Any, key: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Parse a monetary/quantity field as Decimal via its string form."""
    value = safe_value(obj, key)
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def seconds_to_ms(value: Optional[int]) -> Optional[int]:
    return None if value is None else value * 1000


def milliseconds() -> int:
    """Get current timestamp in milliseconds."""
    return int(time.time() * 1000)


def seconds() -> int:
    return int(time.time())


def iso8601(timestamp_ms: Optional[int]) -> Optional[str]:
    """Format a millisecond timestamp as ISO 8601 UTC, e.g. 2019-07-30T20:13:23.000Z."""
    if timestamp_ms is None:
        return None
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp_ms % 1000:03d}Z"


def ymd(timestamp_ms: int) -> str:
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%d")


TIMEFRAME_UNITS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "M": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}


def parse_timeframe(timeframe: str) -> int:
    """
    Convert a unified timeframe string to its duration in seconds.

    Args:
        timeframe: e.g. "1m", "4h", "1d"

    Returns:
        Duration in seconds

    Raises:
        ValueError: On an unknown unit or non-numeric amount
    """
    amount, unit = timeframe[:-1], timeframe[-1:]
    if unit not in TIMEFRAME_UNITS or not amount.isdigit():
        raise ValueError(f"Invalid timeframe: {timeframe}")
    return int(amount) * TIMEFRAME_UNITS[unit]


def _format_decimal(value: Decimal) -> str:
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def truncate_to_precision(value: Any, digits: Optional[int]) -> str:
    """Truncate to a number of decimal places, e.g. amounts."""
    dec = Decimal(str(value))
    if digits is None:
        return _format_decimal(dec)
    quantum = Decimal(1).scaleb(-digits)
    return _format_decimal(dec.quantize(quantum, rounding=ROUND_DOWN))


def round_to_precision(value: Any, digits: Optional[int]) -> str:
    """Round half-up to a number of decimal places, e.g. prices."""
    dec = Decimal(str(value))
    if digits is None:
        return _format_decimal(dec)
    quantum = Decimal(1).scaleb(-digits)
    return _format_decimal(dec.quantize(quantum, rounding=ROUND_HALF_UP))


def filter_by_since_limit(
    items: List[Any], since: Optional[int] = None, limit: Optional[int] = None
) -> List[Any]:
    """Sort records by timestamp, drop those before since, keep the first limit."""
    result = sorted(items, key=lambda item: item.timestamp or 0)
    if since is not None:
        result = [item for item in result if item.timestamp is not None and item.timestamp >= since]
    if limit is not None:
        result = result[:limit]
    return result


def omit(params: Optional[Dict[str, Any]], *keys: str) -> Dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if k not in keys}
