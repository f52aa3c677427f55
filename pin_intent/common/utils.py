"""Helpers for strings, times, validation, conversions, sequences and IDs."""

from __future__ import annotations

import re
import secrets
import string
import time
from datetime import timedelta
from fractions import Fraction
from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from pin_intent.common import constants as c
from pin_intent.common.types import IntentStatus, MatchType

T = TypeVar("T")

_ID_CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits
_ID_SUFFIX_LENGTH = 8

_UNIT_SECONDS = {
    "ns": Fraction(1, 1_000_000_000),
    "us": Fraction(1, 1_000_000),
    "µs": Fraction(1, 1_000_000),
    "μs": Fraction(1, 1_000_000),
    "ms": Fraction(1, 1000),
    "s": Fraction(1),
    "m": Fraction(60),
    "h": Fraction(3600),
}
_DURATION_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_STATUS_BY_NAME = {
    "created": IntentStatus.CREATED,
    "validated": IntentStatus.VALIDATED,
    "broadcasted": IntentStatus.BROADCASTED,
    "processed": IntentStatus.PROCESSED,
    "matched": IntentStatus.MATCHED,
    "completed": IntentStatus.COMPLETED,
    "failed": IntentStatus.FAILED,
    "expired": IntentStatus.EXPIRED,
}

_MATCH_TYPE_BY_NAME = {
    "exact": MatchType.EXACT,
    "partial": MatchType.PARTIAL,
    "semantic": MatchType.SEMANTIC,
    "pattern": MatchType.PATTERN,
}


def truncate_string(s: str, max_len: int) -> str:
    """Cut s to max_len characters and mark the cut with "..."."""
    if max_len < 0:
        raise ValueError("max_len cannot be negative")
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


def remove_duplicates(items: Iterable[T]) -> list[T]:
    """Return the items with repeats removed, keeping first occurrences in order."""
    return list(dict.fromkeys(items))


def is_expired(timestamp: int, ttl: int, now: Optional[int] = None) -> bool:
    """Tell whether a Unix timestamp plus ttl seconds lies in the past.

    A ttl of zero or less never expires.
    """
    if ttl <= 0:
        return False
    current = int(time.time()) if now is None else now
    return current > timestamp + ttl


def format_duration(duration: timedelta) -> str:
    """Format a duration in ms, s, m or h with two decimals."""
    seconds = duration.total_seconds()
    if duration < timedelta(seconds=1):
        return f"{seconds * 1000:.2f}ms"
    if duration < timedelta(minutes=1):
        return f"{seconds:.2f}s"
    if duration < timedelta(hours=1):
        return f"{seconds / 60:.2f}m"
    return f"{seconds / 3600:.2f}h"


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "300ms", "-1.5h" or "2h45m".

    Units are ns, us (or µs), ms, s, m and h. Raises ValueError on bad input.
    """
    rest = text
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = Fraction(0)
    position = 0
    while position < len(rest):
        match = _DURATION_COMPONENT.match(rest, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        total += Fraction(number) * _UNIT_SECONDS[unit]
        position = match.end()

    if negative:
        total = -total
    return timedelta(microseconds=round(total * 1_000_000))


def is_valid_intent_type(intent_type: str) -> bool:
    """Tell whether intent_type is one of the known intent types."""
    return intent_type in c.ALL_INTENT_TYPES


def is_valid_priority(priority: int) -> bool:
    """Tell whether priority lies between the low and urgent priorities."""
    return c.PRIORITY_LOW <= priority <= c.PRIORITY_URGENT


def is_valid_ttl(ttl: int) -> bool:
    """Tell whether a TTL in seconds is positive and within the maximum TTL."""
    return 0 < ttl <= int(c.DEFAULT_MAX_TTL.total_seconds())


def is_valid_payload_size(size: int) -> bool:
    """Tell whether a payload size in bytes is positive and within the maximum."""
    return 0 < size <= c.DEFAULT_MAX_PAYLOAD_SIZE


def status_from_string(text: str) -> IntentStatus:
    """Read a status name, case-insensitively; unknown names give CREATED."""
    return _STATUS_BY_NAME.get(text.lower(), IntentStatus.CREATED)


def match_type_from_string(text: str) -> MatchType:
    """Read a match type name, case-insensitively; unknown names give PARTIAL."""
    return _MATCH_TYPE_BY_NAME.get(text.lower(), MatchType.PARTIAL)


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into lists of at most size; a size below one gives one list."""
    if size <= 0:
        return [list(items)]
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


def merge_maps(*args: Mapping[str, str]) -> dict[str, str]:
    """Merge mappings into a new dict; later mappings win on shared keys."""
    result: dict[str, str] = {}
    for mapping in args:
        result.update(mapping)
    return result


def _random_suffix(length: int = _ID_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_ID_CHARSET) for _ in range(length))


def _generate_id(prefix: str) -> str:
    return f"{prefix}_{time.time_ns()}_{_random_suffix()}"


def generate_intent_id() -> str:
    """Return a new unique intent ID."""
    return _generate_id("intent")


def generate_peer_id() -> str:
    """Return a new unique peer ID."""
    return _generate_id("peer")


def generate_session_id() -> str:
    """Return a new unique session ID."""
    return _generate_id("session")