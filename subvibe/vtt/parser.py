"""
WebVTT parser.

Uses the same recovering line scan as the SRT parser, extended with the
WebVTT block types (header metadata, NOTE, STYLE, REGION), cue identifiers,
cue settings and voice spans.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..models import (
    Cue,
    ParseError,
    ParsedDocument,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    VTTCueData,
    VTTRegion,
    VTTVoice,
    unknown_document,
)
from ..scanner import LineCursor, has_arrow, is_blank, split_lines, split_timing_line
from ..utils import try_parse_timestamp

logger = logging.getLogger(__name__)

HEADER = "WEBVTT"

_SETTING_KEYS = ("vertical", "line", "position", "size", "align", "region")
_VERTICAL_VALUES = ("rl", "lr")
_ALIGN_VALUES = ("start", "center", "middle", "end", "left", "right")
_SCROLL_VALUES = ("up", "none")

# A closed voice span on one line keeps its inner markup; an unclosed one
# runs to the next tag or the line end
_VOICE_SPAN = re.compile(r"<v(?:\.[^\s>]+)?\s+([^>]*)>(?:(.*?)</v>|([^<\n]*))")
_STRAY_VOICE_CLOSE = re.compile(r"</v>")


def parse_cue_settings(settings: str) -> Optional[Dict[str, str]]:
    """
    Parse whitespace-separated ``key:value`` cue settings.

    Unknown keys and invalid ``vertical``/``align`` values are ignored.

    Args:
        settings: Text after the end timestamp, e.g. "align:start line:90%"

    Returns:
        Sparse settings dictionary, or None if nothing was recognised
    """
    result: Dict[str, str] = {}
    for pair in settings.split():
        key, sep, value = pair.partition(":")
        if not sep or not value or key not in _SETTING_KEYS:
            continue
        if key == "vertical" and value not in _VERTICAL_VALUES:
            continue
        if key == "align" and value not in _ALIGN_VALUES:
            continue
        result[key] = value
    return result or None


def parse_region(lines: Sequence[str]) -> VTTRegion:
    """
    Parse the ``key=value`` body of a REGION block.

    Args:
        lines: Lines following the REGION keyword

    Returns:
        VTTRegion with defaults for unset keys
    """
    fields: Dict[str, object] = {}
    for line in lines:
        key, sep, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not sep:
            continue
        logger.debug(f"Region setting: {key} = {value}")
        if key == "id":
            fields["id"] = value
        elif key == "width":
            fields["width"] = value
        elif key == "lines":
            if value.isdecimal():
                fields["lines"] = int(value)
        elif key == "regionanchor":
            fields["region_anchor"] = value
        elif key == "viewportanchor":
            fields["viewport_anchor"] = value
        elif key == "scroll" and value in _SCROLL_VALUES:
            fields["scroll"] = value
    return VTTRegion(**fields)


def parse_voices(text: str) -> Tuple[str, Optional[Tuple[VTTVoice, ...]]]:
    """
    Extract ``<v Speaker>text</v>`` voice spans.

    Inline markup inside a closed span stays in the voice text, and text
    outside the spans stays in the cue text. An unclosed ``<v Speaker>text``
    span still yields a voice, running to the next tag or the end of its
    line.

    Args:
        text: Cue text

    Returns:
        (text with the voice markup stripped, voices or None)

    Example:
        >>> parse_voices("<v Roger>Hi <b>there</b></v>, bye")
        ('Hi <b>there</b>, bye', (VTTVoice(voice='Roger', text='Hi <b>there</b>'),))
    """
    voices: List[VTTVoice] = []

    def _strip(m: "re.Match[str]") -> str:
        inner = m.group(2) if m.group(2) is not None else m.group(3)
        voices.append(VTTVoice(voice=m.group(1).strip(), text=inner.strip()))
        return inner

    clean = _VOICE_SPAN.sub(_strip, text)
    if not voices:
        return text, None
    return _STRAY_VOICE_CLOSE.sub("", clean).strip(), tuple(voices)


def _skip_header(cursor: LineCursor) -> None:
    cursor.skip_blank()
    if cursor.at_end or not cursor.current.strip().startswith(HEADER):
        return
    cursor.advance()
    # Metadata lines run to the first blank line
    cursor.seek(lambda line: is_blank(line) or has_arrow(line))


def _read_block(cursor: LineCursor) -> List[str]:
    lines = []
    while not cursor.at_end and not is_blank(cursor.current):
        lines.append(cursor.current)
        cursor.advance()
    return lines


def parse_vtt(content: str, preserve_indexes: bool = False) -> ParsedDocument:
    """
    Parse WebVTT content into cues, styles, regions and diagnostics.

    A cue whose start or end timestamp cannot be parsed is dropped with one
    error per failing side; the scanner skips its text and resumes at the
    next block. Unusual (over 100 hours) values and reversed timings are
    kept with a warning.

    Args:
        content: Raw WebVTT text; the WEBVTT header is optional
        preserve_indexes: Attach source cue identifiers to the cues

    Returns:
        ParsedDocument of type "vtt"

    Example:
        >>> doc = parse_vtt("WEBVTT\\n\\n00:01.000 --> 50%\\nHalf a day")
        >>> doc.cues[0].end_time
        43200000
    """
    if not content or not content.strip():
        return unknown_document("Empty subtitle content")

    cursor = LineCursor(split_lines(content))
    cues: List[Cue] = []
    errors: List[ParseError] = []
    styles: List[str] = []
    regions: List[VTTRegion] = []

    logger.debug(f"Parsing VTT content: {len(cursor)} lines")
    _skip_header(cursor)

    while True:
        cursor.skip_blank()
        if cursor.at_end:
            break

        keyword = cursor.current.strip()
        if keyword == "NOTE" or keyword.startswith(("NOTE ", "NOTE\t")):
            # A comment never swallows a timing line
            cursor.advance()
            cursor.seek(lambda line: is_blank(line) or has_arrow(line))
            continue
        if keyword == "STYLE":
            cursor.advance()
            styles.append("\n".join(_read_block(cursor)))
            continue
        if keyword == "REGION":
            cursor.advance()
            regions.append(parse_region(_read_block(cursor)))
            continue

        identifier: Optional[str] = None
        if not has_arrow(cursor.current):
            identifier = keyword
            id_line = cursor.line_number
            cursor.advance()
            if cursor.at_end or not has_arrow(cursor.current):
                errors.append(ParseError(id_line, "Invalid subtitle format", SEVERITY_ERROR))
                # Stop where a later line could still open a cue
                while (not cursor.at_end and not is_blank(cursor.current)
                       and not has_arrow(cursor.current) and not has_arrow(cursor.peek(1))):
                    cursor.advance()
                continue

        line_no = cursor.line_number
        start_token, end_token, settings_text = split_timing_line(cursor.current)
        cursor.advance()
        start, start_unusual = try_parse_timestamp(start_token)
        end, end_unusual = try_parse_timestamp(end_token)

        if start is None or end is None:
            for side, token, value in (("start", start_token, start), ("end", end_token, end)):
                if value is None:
                    errors.append(ParseError(
                        line_no, f"Invalid {side} timestamp format: {token!r}", SEVERITY_ERROR
                    ))
            skipped = cursor.collect_text()
            logger.debug(f"Skipped cue at line {line_no} and {len(skipped)} text lines")
            continue

        if start_unusual or end_unusual:
            errors.append(ParseError(
                line_no, "Subtitle has unusual timestamp exceeding 100 hours", SEVERITY_WARNING
            ))

        if end < start:
            errors.append(ParseError(
                line_no,
                "Invalid timing: end time before start time. Timings have been swapped.",
                SEVERITY_WARNING,
            ))
            start, end = end, start

        raw_text = "\n".join(cursor.collect_text()).strip()
        if not raw_text:
            errors.append(ParseError(line_no, "Empty subtitle text", SEVERITY_ERROR))
            continue

        text, voices = parse_voices(raw_text)
        cues.append(Cue(
            index=len(cues) + 1,
            start_time=start,
            end_time=end,
            text=text,
            vtt=VTTCueData(
                identifier=identifier if preserve_indexes else None,
                settings=parse_cue_settings(settings_text),
                voices=voices,
            ),
        ))

    if not cues and not errors:
        errors.append(ParseError(1, "No subtitle cues found", SEVERITY_ERROR))

    logger.debug(f"Parsed {len(cues)} VTT cues, {len(styles)} styles, {len(regions)} regions")
    return ParsedDocument(
        type="vtt",
        cues=tuple(cues),
        errors=tuple(errors) if errors else None,
        styles=tuple(styles) if styles else None,
        regions=tuple(regions) if regions else None,
    )
