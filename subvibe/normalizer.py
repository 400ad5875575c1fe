"""
Validation and normalisation of cue lists.

Checks cues for timing and content problems, strips markup, and rewrites a
cue list into a tidy, strictly ordered form for SRT or WebVTT output.
"""

import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence

from .merger import merge_overlapping, reindex
from .models import Cue, ParseError, SEVERITY_ERROR, SEVERITY_WARNING, ValidationResult

logger = logging.getLogger(__name__)

MAX_RECOMMENDED_DURATION_MS = 10_000

# Normalisation defaults
DEFAULT_MIN_DURATION_MS = 500
DEFAULT_MAX_DURATION_MS = 7000
DEFAULT_MIN_GAP_MS = 40

_HTML_TAG = re.compile(r"<[^>]+>")
_ASS_TAG = re.compile(r"\{\\[^}]+\}")
_BRACKET_TAG = re.compile(r"\[[^\]]+\]")
_WHITESPACE = re.compile(r"\s+")

_SRT_TO_VTT = [
    (re.compile(r"\{\\b1\}(.*?)\{\\b0\}"), r"<b>\1</b>"),
    (re.compile(r"\{\\i1\}(.*?)\{\\i0\}"), r"<i>\1</i>"),
    (re.compile(r"\{\\u1\}(.*?)\{\\u0\}"), r"<u>\1</u>"),
]
_VTT_TO_SRT = [
    (re.compile(r"<b>(.*?)</b>"), r"{\\b1}\1{\\b0}"),
    (re.compile(r"<i>(.*?)</i>"), r"{\\i1}\1{\\i0}"),
    (re.compile(r"<u>(.*?)</u>"), r"{\\u1}\1{\\u0}"),
]


def validate(cues: Sequence[Cue]) -> ValidationResult:
    """
    Validate cue timings and content.

    Cues are checked in start-time order. Diagnostic line numbers point at
    the cue's index line as it would appear in SRT output of that order.

    Reported problems:
    - negative timestamps (error)
    - end not after start (error)
    - overlap with the next cue (warning)
    - duration over 10 seconds (warning)
    - empty text (error)

    Args:
        cues: Cues to validate

    Returns:
        ValidationResult; is_valid is False when any error was found
    """
    errors: List[ParseError] = []
    line = 1
    ordered = sorted(cues, key=lambda c: c.start_time)

    for i, cue in enumerate(ordered):
        if cue.start_time < 0 or cue.end_time < 0:
            errors.append(ParseError(line, "Negative timestamp detected", SEVERITY_ERROR))
        if cue.end_time <= cue.start_time:
            errors.append(ParseError(line, "End time must be after start time", SEVERITY_ERROR))
        if i + 1 < len(ordered) and cue.end_time > ordered[i + 1].start_time:
            errors.append(ParseError(line, "Subtitle overlaps with next subtitle", SEVERITY_WARNING))
        if cue.duration > MAX_RECOMMENDED_DURATION_MS:
            errors.append(ParseError(line, "Subtitle duration exceeds 10 seconds", SEVERITY_WARNING))
        if not cue.text.strip():
            errors.append(ParseError(line, "Empty subtitle text", SEVERITY_ERROR))
        # index, timing, text lines and the blank separator
        line += 3 + len(cue.text.split("\n"))

    return ValidationResult(
        is_valid=not any(e.severity == SEVERITY_ERROR for e in errors),
        errors=tuple(errors),
    )


def _strip_markup(text: str) -> str:
    text = _HTML_TAG.sub("", text)
    text = _ASS_TAG.sub("", text)
    return _BRACKET_TAG.sub("", text).strip()


def strip_formatting(cues: Sequence[Cue]) -> List[Cue]:
    """
    Remove HTML-style, SSA/ASS ``{\\...}`` and bracketed ``[...]`` tags.

    Example:
        >>> strip_formatting([Cue(1, 0, 1000, "<i>Hi</i> {\\\\an8}[music]")])[0].text
        'Hi'
    """
    return [replace(cue, text=_strip_markup(cue.text)) for cue in cues]


def _cleanup_spacing(text: str) -> str:
    lines = (_WHITESPACE.sub(" ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def _convert_markup(text: str, format: str) -> str:
    rules = _SRT_TO_VTT if format == "vtt" else _VTT_TO_SRT
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def _clamp_timings(cues: Sequence[Cue], min_duration: int, max_duration: int, min_gap: int) -> List[Cue]:
    clamped: List[Cue] = []
    last_end: Optional[int] = None
    for cue in cues:
        duration = min(max(cue.duration, min_duration), max_duration)
        start = cue.start_time if last_end is None else max(cue.start_time, last_end + min_gap)
        end = start + duration
        last_end = end
        if (start, end) == (cue.start_time, cue.end_time):
            clamped.append(cue)
        else:
            clamped.append(cue.with_timing(start, end))
    return clamped


def normalize(
    cues: Sequence[Cue],
    format: str = "srt",
    remove_formatting: bool = False,
    fix_timings: bool = True,
    merge_overlapping_cues: bool = True,
    min_duration: int = DEFAULT_MIN_DURATION_MS,
    max_duration: int = DEFAULT_MAX_DURATION_MS,
    min_gap: int = DEFAULT_MIN_GAP_MS,
    remove_empty: bool = True,
    cleanup_spacing: bool = True,
) -> List[Cue]:
    """
    Normalise cues into a strict, ordered form for SRT or WebVTT output.

    Steps, in order: drop empty cues, collapse whitespace, convert bold /
    italic / underline markup to the target format's style, optionally strip
    all markup, sort by start time, clamp durations and gaps, merge
    overlaps, and renumber from 1.

    Args:
        cues: Cues to normalise
        format: Target format, "srt" ({\\b1}...{\\b0}) or "vtt" (<b>...</b>)
        remove_formatting: Strip all markup after conversion
        fix_timings: Enforce min/max duration and minimum gap
        merge_overlapping_cues: Merge cues that still overlap
        min_duration: Minimum cue duration in milliseconds
        max_duration: Maximum cue duration in milliseconds
        min_gap: Minimum gap between cues in milliseconds
        remove_empty: Drop cues with whitespace-only text
        cleanup_spacing: Collapse runs of whitespace and drop blank lines

    Returns:
        Normalised cue list

    Raises:
        ValueError: If format is not "srt" or "vtt"
    """
    if format not in ("srt", "vtt"):
        raise ValueError(f"Unsupported normalize format: {format}")

    normalized = list(cues)
    if remove_empty:
        normalized = [cue for cue in normalized if cue.text.strip()]
    if cleanup_spacing:
        normalized = [replace(cue, text=_cleanup_spacing(cue.text)) for cue in normalized]

    normalized = [replace(cue, text=_convert_markup(cue.text, format)) for cue in normalized]
    if remove_formatting:
        normalized = strip_formatting(normalized)

    normalized.sort(key=lambda c: c.start_time)
    if fix_timings:
        normalized = _clamp_timings(normalized, min_duration, max_duration, min_gap)
    if merge_overlapping_cues:
        normalized = merge_overlapping(normalized)

    logger.debug(f"Normalized {len(cues)} cues into {len(normalized)} {format} cues")
    return reindex(normalized)
