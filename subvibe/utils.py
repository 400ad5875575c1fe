"""
Timestamp utilities for subvibe.

Parses timestamp tokens of unknown shape into integer milliseconds and
formats milliseconds back into canonical SRT or WebVTT text. Subtitle files
found in the wild mix separators, drop zero padding, truncate hour and minute
fields and glue stray text onto timing lines, so parsing tries an ordered list
of candidate shapes and accepts the first one that matches.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Match, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

# Constants
DAY_MS = 24 * 3600 * 1000
MAX_TIMESTAMP_MS = 359_999_999  # 99:59:59.999

STYLE_SRT = "srt"
STYLE_VTT = "vtt"

# Anything outside this set marks a token as corrupted
_ILLEGAL_CHAR = re.compile(r"[^0-9:.,%]")
_DOT_RUN = re.compile(r"\.{2,}")


class InvalidTimestamp(ValueError):
    """Raised when a token has no plausible timestamp interpretation."""

    def __init__(self, token: str, reason: str = "Invalid timestamp format"):
        super().__init__(f"{reason}: {token!r}")
        self.token = token
        self.reason = reason


class UnusualTimestamp(InvalidTimestamp):
    """Raised when a token parses to a value above ``MAX_TIMESTAMP_MS``.

    The parsed value is kept on ``milliseconds`` so callers may downgrade
    the condition to a warning and keep the cue.
    """

    def __init__(self, token: str, milliseconds: int):
        super().__init__(token, "Unusual timestamp value")
        self.milliseconds = milliseconds


def _fraction_ms(fraction: Optional[str]) -> int:
    # Decimal semantics: "5" is 500ms, "05" is 50ms
    if not fraction:
        return 0
    return int(fraction.ljust(3, "0"))


def _hms(hours: int, minutes: int, seconds: int, milliseconds: int = 0) -> int:
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + milliseconds


def _from_percentage(m: Match[str]) -> int:
    percent = float(m.group(1))
    if percent < 0 or percent > 100:
        raise InvalidTimestamp(m.group(0), "Invalid percentage timestamp")
    return int(round(percent / 100 * DAY_MS))


def _from_full(m: Match[str]) -> int:
    hours, minutes, seconds, fraction = m.groups()
    return _hms(int(hours), int(minutes), int(seconds), _fraction_ms(fraction))


def _from_short(m: Match[str]) -> int:
    minutes, seconds, fraction = m.groups()
    return _hms(0, int(minutes), int(seconds), _fraction_ms(fraction))


def _from_ultra_short(m: Match[str]) -> int:
    seconds, fraction = m.groups()
    return int(seconds) * 1000 + _fraction_ms(fraction)


def _from_colon_milliseconds(m: Match[str]) -> int:
    hours, minutes, seconds, last = m.groups()
    if int(seconds) < 60:
        return _hms(int(hours or 0), int(minutes or 0), int(seconds), int(last))
    # Preceding segment cannot be seconds, so the final segment is
    if hours is not None:
        raise InvalidTimestamp(m.group(0))
    if minutes is None:
        return _hms(0, int(seconds), int(last))
    return _hms(int(minutes), int(seconds), int(last))


def _from_bare_digits(m: Match[str]) -> int:
    digits = m.group(1)
    return int(digits[:-3]) * 1000 + int(digits[-3:])


def _from_legacy_commas(m: Match[str]) -> int:
    hours, minutes, seconds, milliseconds = m.groups()
    canonical = f"{int(hours or 0):02d}:{int(minutes):02d}:{int(seconds):02d}.{milliseconds}"
    logger.debug(f"Rewrote legacy timestamp {m.group(0)!r} as {canonical!r}")
    return _match_shapes(canonical, allow_percentage=False)


@dataclass(frozen=True)
class _Shape:
    """One candidate timestamp shape: an anchored pattern and its converter."""
    name: str
    pattern: Pattern[str]
    convert: Callable[[Match[str]], int]


# Most specific first; the first pattern that matches decides the value
_SHAPES: List[_Shape] = [
    _Shape("percentage", re.compile(r"^(\d{1,3}(?:\.\d+)?)%$"), _from_percentage),
    _Shape("hh:mm:ss.mmm", re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})(?:[.,](\d{1,3}))?$"), _from_full),
    _Shape("mm:ss.mmm", re.compile(r"^(\d+):(\d{1,2})(?:[.,](\d{1,3}))?$"), _from_short),
    _Shape("ss.mmm", re.compile(r"^(\d+)[.,](\d{1,3})$"), _from_ultra_short),
    _Shape(
        "colon-milliseconds",
        re.compile(r"^(?:(?:(\d+):)?(\d{1,2}):)?(\d{1,2}):(\d{3})$"),
        _from_colon_milliseconds,
    ),
    _Shape("bare-digits", re.compile(r"^(\d{4,7})$"), _from_bare_digits),
    _Shape(
        "legacy-commas",
        re.compile(r"^(?:(\d+)[:,])?(\d{1,2})[:,](\d{1,2}),(\d{3})$"),
        _from_legacy_commas,
    ),
]


def _match_shapes(token: str, allow_percentage: bool) -> int:
    for shape in _SHAPES:
        if shape.name == "percentage" and not allow_percentage:
            continue
        m = shape.pattern.match(token)
        if m:
            value = shape.convert(m)
            logger.debug(f"Timestamp {token!r} matched {shape.name} -> {value}ms")
            return value
    raise InvalidTimestamp(token)


def parse_timestamp(token: str, allow_percentage: bool = True) -> int:
    """
    Parse a timestamp token of unknown shape into milliseconds.

    Shapes are tried in order: percentage, HH:MM:SS.mmm, MM:SS.mmm, SS.mmm,
    colon-delimited milliseconds (MM:SS:mmm), bare digit runs and the legacy
    MM,SS,mmm form. A token corrupted by illegal characters (an ellipsis, a
    cut string) is reduced to the suffix after the last illegal character.

    Args:
        token: Raw timestamp text, e.g. "00:01:02,500", "1:02.5" or "50%"
        allow_percentage: Accept WebVTT-style percentages of a 24h day

    Returns:
        Time in milliseconds

    Raises:
        InvalidTimestamp: If no shape matches
        UnusualTimestamp: If the value exceeds MAX_TIMESTAMP_MS; the parsed
            value is available on the exception

    Example:
        >>> parse_timestamp("1:23:45.678")
        5025678
        >>> parse_timestamp("04,5")
        4500
    """
    original = token
    token = _DOT_RUN.sub("…", (token or "").strip())
    if not token:
        raise InvalidTimestamp(original, "Empty timestamp")

    cut = max((m.end() for m in _ILLEGAL_CHAR.finditer(token)), default=None)
    if cut is not None:
        suffix = token[cut:]
        logger.debug(f"Timestamp {original!r} is corrupted, trying suffix {suffix!r}")
        if not suffix:
            raise InvalidTimestamp(original)
        token = suffix

    value = _match_shapes(token, allow_percentage)
    if value > MAX_TIMESTAMP_MS:
        raise UnusualTimestamp(original, value)
    return value


def try_parse_timestamp(token: str, allow_percentage: bool = True) -> Tuple[Optional[int], bool]:
    """
    Parse a timestamp without raising.

    Returns:
        (milliseconds, unusual). Milliseconds is None when the token has no
        valid interpretation; unusual is True when the value was kept
        despite exceeding MAX_TIMESTAMP_MS.
    """
    try:
        return parse_timestamp(token, allow_percentage), False
    except UnusualTimestamp as exc:
        return exc.milliseconds, True
    except InvalidTimestamp:
        return None, False


def format_timestamp(milliseconds: int, style: str = STYLE_SRT) -> str:
    """
    Format milliseconds as a canonical timestamp.

    Args:
        milliseconds: Non-negative time in milliseconds (negatives clamp to 0)
        style: "srt" for HH:MM:SS,mmm or "vtt" for [HH:]MM:SS.mmm

    Returns:
        Timestamp string

    Example:
        >>> format_timestamp(3661234)
        '01:01:01,234'
        >>> format_timestamp(61000, "vtt")
        '01:01.000'
    """
    ms = max(0, int(milliseconds))
    hours, ms = divmod(ms, 3_600_000)
    minutes, ms = divmod(ms, 60_000)
    seconds, ms = divmod(ms, 1000)

    if style == STYLE_SRT:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d},{ms:03d}"
    if style != STYLE_VTT:
        raise ValueError(f"Unknown timestamp style: {style}")
    if hours == 0:
        return f"{minutes:02d}:{seconds:02d}.{ms:03d}"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"


_HOUR_MINUTE = re.compile(r"(\d+)h\s*(\d+)m")
_MINUTE_SECOND = re.compile(r"(\d+)m\s*(\d+)s")
_DIGIT_GROUPS = re.compile(r"\d+")
_RANGE_SEPARATOR = re.compile(r"-->|->|\t|\s+-\s+|\s+to\s+")


def parse_loose_time(text: str) -> Optional[int]:
    """
    Best-effort extraction of a time from free text.

    Understands "1h 23m", "5m 35s" and groups of digits separated by any
    non-digit characters ("1:23", "12.345", "01:02:03.4").

    Args:
        text: Free text containing a time

    Returns:
        Milliseconds, or None if no digits were found
    """
    text = text.strip()

    m = _HOUR_MINUTE.search(text)
    if m:
        return int(m.group(1)) * 3_600_000 + int(m.group(2)) * 60_000

    m = _MINUTE_SECOND.search(text)
    if m:
        return int(m.group(1)) * 60_000 + int(m.group(2)) * 1000

    numbers = _DIGIT_GROUPS.findall(text)
    if not numbers:
        return None
    if len(numbers) > 4:
        numbers = numbers[-4:]

    if len(numbers) == 1:
        return int(numbers[0]) * 1000
    if len(numbers) == 2:
        a, b = numbers
        # Three digits look like milliseconds, otherwise MM:SS
        if len(b) == 3:
            return int(a) * 1000 + int(b)
        return int(a) * 60_000 + int(b) * 1000
    if len(numbers) == 3:
        a, b, c = numbers
        if len(c) == 3:
            return int(a) * 60_000 + int(b) * 1000 + int(c)
        return _hms(int(a), int(b), int(c))

    h, m_, s, ms = numbers
    return _hms(int(h), int(m_), int(s), int(ms.ljust(3, "0")[:3]))


def find_timestamp_range(text: str) -> Optional[Tuple[int, int]]:
    """
    Find the first (start, end) pair of loose times in a line of text.

    Args:
        text: Text such as "00:01 --> 00:04" or "1m 5s to 1m 9s"

    Returns:
        (start_ms, end_ms) tuple, or None if no pair could be read
    """
    parts = [p.strip() for p in _RANGE_SEPARATOR.split(text)]
    if len(parts) < 2 or any(not p for p in parts):
        return None

    for first, second in zip(parts, parts[1:]):
        start = parse_loose_time(first)
        end = parse_loose_time(second)
        if start is not None and end is not None:
            return start, end
    return None
