"""
=============================================================================
HEADER CODEC
=============================================================================

Writes one header value onto a host response, choosing the host setter from
the value's VARIANT:

    ┌──────────────┬──────────────────────────┬──────────────────────────┐
    │ Variant      │ "set" mode               │ "add" mode               │
    ├──────────────┼──────────────────────────┼──────────────────────────┤
    │ IntHeader    │ set_int_header(n, int)   │ add_int_header(n, int)   │
    │ DateHeader   │ set_date_header(n, ms)   │ add_date_header(n, ms)   │
    │ anything else│ set_header(n, str)       │ add_header(n, str)       │
    └──────────────┴──────────────────────────┴──────────────────────────┘

"set" replaces any earlier value for the name; "add" appends another
occurrence (used for repeated headers given as a list).

The header NAME is never inspected. Unknown names are written like any
other header. Integer values are truncated with int(); NaN and infinity
raise ValueError naming the header.

=============================================================================
"""

from datetime import date, datetime, timezone
from typing import Any, Union

from .host import HostResponse
from .types import DateHeader, IntHeader, header_value


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(value: Union[datetime, date]) -> int:
    """
    Milliseconds since the Unix epoch.

    Naive datetimes and plain dates are read as UTC.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def set_header(response: HostResponse, name: str, value: Any) -> None:
    """Set ``name`` on ``response``, replacing any previous value."""
    value = header_value(value)
    if isinstance(value, IntHeader):
        response.set_int_header(name, _int_value(name, value))
    elif isinstance(value, DateHeader):
        response.set_date_header(name, epoch_millis(value.value))
    else:
        response.set_header(name, str(value.value))


def add_header(response: HostResponse, name: str, value: Any) -> None:
    """Append one more occurrence of ``name`` to ``response``."""
    value = header_value(value)
    if isinstance(value, IntHeader):
        response.add_int_header(name, _int_value(name, value))
    elif isinstance(value, DateHeader):
        response.add_date_header(name, epoch_millis(value.value))
    else:
        response.add_header(name, str(value.value))


def _int_value(name: str, value: IntHeader) -> int:
    try:
        return int(value.value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Header {name} needs a finite number, got {value.value!r}") from e
