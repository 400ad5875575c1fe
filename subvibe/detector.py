"""
Subtitle format detection.

Classifies raw text as SRT, WebVTT or unknown before it is handed to a
parser. Cheap sniffing (code fences, the WEBVTT header, an index line
followed by a timing line) settles most inputs; anything ambiguous is parsed
both ways and the interpretation with fewer diagnostics wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .models import ParseError, ParsedDocument, SEVERITY_ERROR
from .scanner import has_arrow, is_blank, is_index_line, split_lines
from .srt.parser import parse_srt
from .vtt.parser import HEADER, parse_vtt

logger = logging.getLogger(__name__)

FORMAT_SRT = "srt"
FORMAT_VTT = "vtt"
FORMAT_UNKNOWN = "unknown"

_FENCE_OPEN = re.compile(r"^\s*```[\w-]*\s*$")
_FENCE_CLOSE = re.compile(r"^\s*```\s*$")

_TIMESTAMP_HINTS = [
    re.compile(r"\d{1,2}:\d{1,2}"),             # MM:SS
    re.compile(r"\d{1,2}[:.]\d{1,3}"),          # SS.mmm
    re.compile(r"^\s*\d{1,5}\s*$"),             # bare seconds
    re.compile(r"\d{1,2}h\s*\d{1,2}m"),         # 1h 23m
    re.compile(r"\d{1,2}m\s*\d{1,2}s"),         # 5m 35s
    re.compile(r"\d{1,2}'\d{1,2}\""),           # 5'35"
]


@dataclass(frozen=True)
class FormatDetection:
    """Outcome of :func:`detect_format`."""
    type: str  # "srt", "vtt" or "unknown"
    errors: Optional[Tuple[ParseError, ...]] = None
    content: str = ""  # input with code fences blanked out


def strip_code_fences(content: str) -> str:
    """
    Blank out a surrounding markdown code fence.

    Fence lines are replaced by empty lines rather than removed, so line
    numbers reported by the parsers still match the original input.

    Args:
        content: Possibly fenced text, e.g. "```srt\\n1\\n...\\n```"

    Returns:
        Content with the fence lines emptied, or the input unchanged
    """
    lines = split_lines(content)
    filled = [i for i, line in enumerate(lines) if not is_blank(line)]
    if len(filled) < 2:
        return content
    first, last = filled[0], filled[-1]
    if not (_FENCE_OPEN.match(lines[first]) and _FENCE_CLOSE.match(lines[last])):
        return content

    logger.debug(f"Stripping code fence on lines {first + 1} and {last + 1}")
    lines[first] = ""
    lines[last] = ""
    return "\n".join(lines)


def has_timestamp(text: str) -> bool:
    """Check whether a line contains anything shaped like a time."""
    return any(pattern.search(text) for pattern in _TIMESTAMP_HINTS)


def looks_like_subtitle(text: str) -> bool:
    """
    Heuristic check that text could be a subtitle file.

    True when an index line is followed by a time, a time line is followed
    by text, or at least two lines carry times.
    """
    lines = split_lines(text.strip())
    if len(lines) < 2:
        return False

    for line, following in zip(lines, lines[1:]):
        if is_index_line(line) and has_timestamp(following):
            return True
        if has_timestamp(line) and following.strip():
            return True

    return sum(1 for line in lines if has_timestamp(line)) >= 2


def _unknown(message: str, content: str) -> FormatDetection:
    return FormatDetection(
        type=FORMAT_UNKNOWN,
        errors=(ParseError(1, message, SEVERITY_ERROR),),
        content=content,
    )


def _error_count(document: ParsedDocument) -> int:
    return len(document.errors or ())


def detect_format(content: str) -> FormatDetection:
    """
    Detect whether content is SRT or WebVTT.

    Args:
        content: Raw subtitle text

    Returns:
        FormatDetection with the detected type, document-level errors for
        unknown input and the (fence-stripped) content to parse

    Example:
        >>> detect_format("WEBVTT\\n\\n00:01.000 --> 00:02.000\\nHi").type
        'vtt'
    """
    if not content or not content.strip():
        return _unknown("Empty subtitle content", content or "")

    content = strip_code_fences(content)
    lines = split_lines(content)
    filled = [line for line in lines if not is_blank(line)]
    if not filled:
        return _unknown("Empty subtitle content", content)

    if filled[0].strip().startswith(HEADER):
        return FormatDetection(type=FORMAT_VTT, content=content)

    if len(filled) > 1 and is_index_line(filled[0]) and has_arrow(filled[1]):
        return FormatDetection(type=FORMAT_SRT, content=content)

    if not any(has_arrow(line) for line in lines) or not looks_like_subtitle(content):
        logger.debug("No timing lines found, content is not a subtitle file")
        return _unknown("Content does not appear to be a subtitle file", content)

    srt = parse_srt(content)
    vtt = parse_vtt(content)
    logger.debug(f"Ambiguous content: {_error_count(srt)} SRT vs {_error_count(vtt)} VTT diagnostics")
    if _error_count(srt) <= _error_count(vtt):
        return FormatDetection(type=FORMAT_SRT, content=content)
    return FormatDetection(type=FORMAT_VTT, content=content)

