"""Go-style duration strings (``1h30m``, ``90s``, ``1.5h``, ``300ms``)."""

import re
from datetime import timedelta

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """
    Parse a positive Go-style duration.

    A duration is a sequence of decimal numbers, each with an optional
    fraction and a unit suffix. Valid units are ``ns``, ``us`` (or ``µs``),
    ``ms``, ``s``, ``m`` and ``h``. Sub-microsecond precision is lost.

    Raises:
        ValueError: If the value is malformed, not positive or too large for
            a timedelta
    """
    text = value.strip()
    if text.startswith("+"):
        text = text[1:]
    if not text or text.startswith("-"):
        raise ValueError(f"must be a positive duration: {value}")

    total_seconds = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise ValueError(f"failed to parse duration: {value}")
        number, unit = match.groups()
        total_seconds += float(number) * _UNIT_SECONDS[unit]
        pos = match.end()

    if total_seconds <= 0:
        raise ValueError(f"must be a positive duration: {value}")
    try:
        duration = timedelta(seconds=total_seconds)
    except OverflowError as e:
        raise ValueError(f"duration out of range: {value}") from e
    if duration <= timedelta(0):
        raise ValueError(f"duration is shorter than one microsecond: {value}")
    return duration


def format_duration(duration: timedelta) -> str:
    """Render a timedelta in Go style, e.g. ``1h30m0s``."""
    total_seconds = duration.total_seconds()
    hours, remainder = divmod(int(total_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)
    fraction = total_seconds - int(total_seconds)
    seconds_text = f"{seconds + fraction:g}s"
    if hours:
        return f"{hours}h{minutes}m{seconds_text}"
    if minutes:
        return f"{minutes}m{seconds_text}"
    return seconds_text
