"""
Utility functions for the information ticker.
"""
import json
import re
import zoneinfo
from datetime import datetime
from typing import Any, NamedTuple, Optional, Sequence

from bs4 import BeautifulSoup

from .config import BULLET, ITEM_PADDING, LOCAL_TZ, TIME_FMT
from .exceptions import ConfigurationError

_FENCE_RE = re.compile(r'^```(\w*)?\s*\n?(.*?)\n?\s*```$', re.DOTALL)


class DecodeResult(NamedTuple):
    """Outcome of a best-effort JSON decode."""
    ok: bool
    value: Any = None
    error: Optional[str] = None


def strip_code_fence(text: str) -> str:
    """Remove an optional ```lang ... ``` wrapper around a payload."""
    clean = text.strip()
    match = _FENCE_RE.match(clean)
    if match and match.group(2):
        clean = match.group(2).strip()
    return clean


def decode_fenced_json(text: Optional[str]) -> DecodeResult:
    """
    Decode structured text returned by the AI source.

    Args:
        text: Raw response text, optionally wrapped in a code fence

    Returns:
        DecodeResult with ok=True and the parsed value, or ok=False and
        a short description of what went wrong
    """
    if text is None or not text.strip():
        return DecodeResult(False, error="empty response")

    payload = strip_code_fence(text)
    try:
        return DecodeResult(True, value=json.loads(payload))
    except ValueError as e:
        return DecodeResult(False, error=f"invalid JSON: {e}")


def extract_text(markup: Optional[str]) -> str:
    """Return the readable text of an HTML fragment, whitespace collapsed."""
    if not markup:
        return ""
    text = BeautifulSoup(markup, "html.parser").get_text(" ")
    return " ".join(text.split())


def unique_in_order(items: Sequence[str]) -> list:
    """De-duplicate strings keeping the first occurrence."""
    return list(dict.fromkeys(item for item in items if item))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def format_news_item(item: str) -> str:
    """Pad a news item and drop its trailing full stop."""
    text = item.strip()
    if text.endswith('.'):
        text = text[:-1]
    return f"{ITEM_PADDING}{text}{ITEM_PADDING}"


def format_news_string(items: Sequence[str], error: Optional[str] = None) -> str:
    """
    Build the scrolling news text.

    Args:
        items: Current news items
        error: When set, shown instead of the items

    Returns:
        Text for the news strip, empty while loading
    """
    if error:
        return error
    if not items:
        return ""
    return BULLET.join(format_news_item(item) for item in items)


def format_clock(now: Optional[datetime] = None) -> str:
    """Format the strip clock in the configured local timezone."""
    tz = zoneinfo.ZoneInfo(LOCAL_TZ)
    current = now.astimezone(tz) if now else datetime.now(tz)
    return current.strftime(TIME_FMT)


def format_error_message(error: Exception) -> str:
    """
    Format an exception into a user-friendly error message.

    Args:
        error: Exception to format

    Returns:
        Formatted error message
    """
    error_type = type(error).__name__
    error_msg = str(error)

    # Simplify common error messages
    if "certificate verify failed" in error_msg.lower():
        return "SSL Certificate Error"
    elif "timed out" in error_msg.lower() or "timeout" in error_msg.lower():
        return "Connection Timeout"
    elif "connection" in error_msg.lower():
        return "Connection Error"
    elif error_msg:
        return error_msg
    else:
        return error_type


def describe_failure(error: Optional[BaseException]) -> str:
    """Short operator-facing description of a source failure."""
    if error is None:
        return "no data"
    if isinstance(error, ConfigurationError):
        return "no credentials"
    return format_error_message(error)
