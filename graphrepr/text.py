"""
Graphrepr Text Helpers

Truncation, durations, ordinals, hex and bracket-driven indentation of rendered text.
"""

# Standard library -----------------------------------------------------------------------------------------------------

import datetime as dt
from typing import Any, Iterable

# Constants ------------------------------------------------------------------------------------------------------------

ELLIPSIS = "…"

_US_PER_MS = 1_000
_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE
_US_PER_DAY = 24 * _US_PER_HOUR
_US_PER_WEEK = 7 * _US_PER_DAY

_OPENERS = "([{"
_CLOSERS = ")]}"


# Methods --------------------------------------------------------------------------------------------------------------


def conjoin(values: Iterable[Any], separator: str = ", ") -> str:
    """
    Join arbitrary values into one string using their str() form.

    Examples:
        >>> conjoin([1, "a", None])
        '1, a, None'
        >>> conjoin("abc", separator="-")
        'a-b-c'
    """
    return separator.join(str(v) for v in values)


def fmt_duration(value: dt.timedelta | int | float) -> str:
    """
    Format a duration with the largest sensible units, in compact form.

    The format depends on magnitude:
        - ``0`` for zero
        - ``{d}d`` for 7 days and longer
        - ``{d}d{h}h`` for 1 day and longer
        - ``{h}h{m}m{s}s`` for 1 hour and longer
        - ``{m}m{s}s`` for 1 minute and longer
        - ``{s}s`` with one decimal for 1 second and longer
        - ``{ms}ms`` with one decimal for 1 millisecond and longer
        - ``{µs}µs`` otherwise

    Negative durations get a leading ``-``. One-decimal values that are whole
    drop their ``.0``.

    Args:
        value: A timedelta, or a number of seconds.

    Returns:
        Compact duration string.

    Raises:
        TypeError: If value is not a timedelta or a real number.

    Examples:
        >>> fmt_duration(dt.timedelta(seconds=90))
        '1m30s'
        >>> fmt_duration(1.5)
        '1.5s'
        >>> fmt_duration(dt.timedelta(days=-1, hours=-2))
        '-1d2h'
    """
    if isinstance(value, dt.timedelta):
        total_us = (value.days * 86_400 + value.seconds) * _US_PER_SECOND + value.microseconds
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        total_us = round(value * _US_PER_SECOND)
    else:
        raise TypeError(f"duration must be a timedelta or number of seconds, but got {type(value).__name__}")

    sign = "-" if total_us < 0 else ""
    us = abs(total_us)

    if us == 0:
        return "0"
    if us >= _US_PER_WEEK:
        return f"{sign}{us // _US_PER_DAY}d"
    if us >= _US_PER_DAY:
        return f"{sign}{us // _US_PER_DAY}d{us % _US_PER_DAY // _US_PER_HOUR}h"
    if us >= _US_PER_HOUR:
        return (f"{sign}{us // _US_PER_HOUR}h{us % _US_PER_HOUR // _US_PER_MINUTE}m"
                f"{us % _US_PER_MINUTE // _US_PER_SECOND}s")
    if us >= _US_PER_MINUTE:
        return f"{sign}{us // _US_PER_MINUTE}m{us % _US_PER_MINUTE // _US_PER_SECOND}s"
    if us >= _US_PER_SECOND:
        return f"{sign}{_one_decimal(us / _US_PER_SECOND)}s"
    if us >= _US_PER_MS:
        return f"{sign}{_one_decimal(us / _US_PER_MS)}ms"
    return f"{sign}{us}µs"


def fmt_hex(value: int) -> str:
    """
    Format a non-negative integer as uppercase hex with 0x prefix.

    Negative values are shown in two's complement of the smallest
    64-bit multiple that holds them.

    Examples:
        >>> fmt_hex(255)
        '0xFF'
        >>> fmt_hex(-1)
        '0xFFFFFFFFFFFFFFFF'
    """
    if value < 0:
        bits = 64
        while -value > 1 << (bits - 1):
            bits += 64
        value &= (1 << bits) - 1
    return f"0x{value:X}"


def nth(i: int, index_by_zero: bool = False) -> str:
    """
    Convert a number to its English ordinal.

    Args:
        i: The number to convert.
        index_by_zero: If True, 0 is the '1st'.

    Examples:
        >>> nth(1), nth(2), nth(3), nth(4)
        ('1st', '2nd', '3rd', '4th')
        >>> nth(11), nth(112), nth(-21)
        ('11th', '112th', '-21st')
        >>> nth(0, index_by_zero=True)
        '1st'
    """
    if index_by_zero:
        i += 1
    n = abs(i)
    last = 0 if n // 10 % 10 == 1 else n % 10
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(last, "th")
    return f"{i}{suffix}"


def prettify(text: str, indent: str = "    ", separators: str = ",;") -> str:
    """
    Spread a one-line rendering over several lines by bracket nesting.

    Every opening bracket starts a new indented line unless it immediately
    closes; separators break the line at the current nesting level. Quoted
    text is copied verbatim.

    Examples:
        >>> print(prettify("{a: [1, 2], b: ()}"))
        {
            a: [
                1,
                2
            ],
            b: ()
        }
    """
    out: list[str] = []
    nest = 0
    pending_break = False
    quote = None
    n = len(text)

    for i, ch in enumerate(text):
        if quote:
            out.append(ch)
            if ch == quote and text[i - 1] != "\\":
                quote = None
            continue

        if pending_break:
            if ch == " ":
                continue
            _newline(out, indent, nest)
            pending_break = False

        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
        elif ch in _OPENERS and not (i + 1 < n and text[i + 1] in _CLOSERS):
            nest += 1
            out.append(ch)
            _newline(out, indent, nest)
        elif ch in _CLOSERS and not (i > 0 and text[i - 1] in _OPENERS):
            nest = max(nest - 1, 0)
            _strip_trailing_spaces(out)
            _newline(out, indent, nest)
            out.append(ch)
        elif ch in separators:
            out.append(ch)
            pending_break = nest > 0
        elif ch == " " and i > 0 and text[i - 1] in _OPENERS:
            continue
        elif ch == " " and i + 1 < n and text[i + 1] in _CLOSERS:
            continue
        else:
            out.append(ch)

    return "".join(out)


def truncate(text: str, limit: int, ellipsis: str = ELLIPSIS) -> str:
    """
    Cut text longer than limit characters, appending the ellipsis.

    A negative limit disables truncation.

    Examples:
        >>> truncate("abcdef", 3)
        'abc…'
        >>> truncate("abc", 3)
        'abc'
    """
    if limit < 0 or len(text) <= limit:
        return text
    return text[:limit] + ellipsis


# Private Methods ------------------------------------------------------------------------------------------------------

def _newline(out: list[str], indent: str, nest: int) -> None:
    out.append("\n")
    out.append(indent * nest)


def _one_decimal(x: float) -> str:
    """Round to one decimal, dropping a trailing .0"""
    r = round(x, 1)
    return str(int(r)) if r == int(r) else f"{r:.1f}"


def _strip_trailing_spaces(out: list[str]) -> None:
    while out and not out[-1].strip():
        out.pop()
