"""
SubRip (SRT) parser.

Scans the input line by line, recognising index / timing / text triplets and
recovering from malformed lines. The result is always a ParsedDocument:
problems are reported as ParseError diagnostics instead of being raised.
"""

import logging
from typing import List, Optional

from ..models import (
    Cue,
    ParseError,
    ParsedDocument,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    unknown_document,
)
from ..scanner import LineCursor, has_arrow, is_index_line, split_lines, split_timing_line
from ..utils import try_parse_timestamp

logger = logging.getLogger(__name__)


def find_overlaps(cues: List[Cue], lines: List[int]) -> List[ParseError]:
    """
    Report adjacent cues whose intervals intersect.

    Cues with identical start and end are treated as intentional duplicates
    and not reported.

    Args:
        cues: Accepted cues in parse order
        lines: Timing line number of each cue

    Returns:
        One warning per overlapping pair
    """
    warnings = []
    for i, (current, following) in enumerate(zip(cues, cues[1:])):
        if (current.start_time, current.end_time) == (following.start_time, following.end_time):
            continue
        if current.end_time > following.start_time:
            logger.debug(f"Cue {current.index} overlaps cue {following.index}")
            warnings.append(ParseError(lines[i], "Subtitles overlap", SEVERITY_WARNING))
    return warnings


def parse_srt(content: str, preserve_indexes: bool = False) -> ParsedDocument:
    """
    Parse SRT content into cues and diagnostics.

    Recovery rules:
    - a line with one unparseable timestamp side is kept with a warning,
      defaulting start to 0 and end to the start time
    - a line with both sides unparseable drops the cue and resynchronises
      at the next bare index line
    - end before start is swapped with a warning
    - text glued after the end timestamp becomes the first text line
    - overlapping neighbours are reported as warnings after the scan

    Args:
        content: Raw SRT text
        preserve_indexes: Use the source index numbers instead of
            renumbering accepted cues from 1

    Returns:
        ParsedDocument of type "srt"

    Example:
        >>> doc = parse_srt("1\\n00:00:01,000 --> 00:00:02,000\\nHello")
        >>> doc.cues[0].start_time, doc.cues[0].text
        (1000, 'Hello')
    """
    if not content or not content.strip():
        return unknown_document("Empty subtitle content")

    cursor = LineCursor(split_lines(content))
    cues: List[Cue] = []
    cue_lines: List[int] = []
    errors: List[ParseError] = []
    last_declared: Optional[int] = None

    logger.debug(f"Parsing SRT content: {len(cursor)} lines")

    while True:
        cursor.skip_blank()
        if cursor.at_end:
            break

        declared: Optional[int] = None
        if cursor.starts_new_cue():
            declared = int(cursor.current.strip())
            if last_declared is not None and declared != last_declared + 1:
                errors.append(ParseError(cursor.line_number, "Non-sequential subtitle index", SEVERITY_WARNING))
            last_declared = declared
            cursor.advance()
        elif not has_arrow(cursor.current):
            logger.debug(f"Unattributable line {cursor.line_number}: {cursor.current!r}")
            errors.append(ParseError(cursor.line_number, "Invalid subtitle format", SEVERITY_ERROR))
            cursor.advance()
            cursor.seek(is_index_line)
            continue

        line_no = cursor.line_number
        start_token, end_token, glued_text = split_timing_line(cursor.current)
        start, start_unusual = try_parse_timestamp(start_token, allow_percentage=False)
        end, end_unusual = try_parse_timestamp(end_token, allow_percentage=False)
        cursor.advance()

        if start is None and end is None:
            errors.append(ParseError(line_no, "Invalid or missing timestamp", SEVERITY_ERROR))
            cursor.seek(is_index_line)
            continue

        if start is None:
            errors.append(ParseError(
                line_no,
                f"Invalid start time on line {line_no}. Using 0ms as start time",
                SEVERITY_WARNING,
            ))
            start = 0
        if end is None:
            errors.append(ParseError(
                line_no,
                f"Invalid end time on line {line_no}. Using start time ({start}ms) as end time",
                SEVERITY_WARNING,
            ))
            end = start
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

        text = "\n".join(cursor.collect_text(glued_text)).strip()
        if not text:
            errors.append(ParseError(line_no, "Empty subtitle text", SEVERITY_ERROR))
            continue

        if declared is None:
            errors.append(ParseError(
                line_no, "Missing subtitle index, continuing with auto-numbering", SEVERITY_WARNING
            ))

        counter = len(cues) + 1
        index = declared if preserve_indexes and declared is not None else counter
        cues.append(Cue(index=index, start_time=start, end_time=end, text=text))
        cue_lines.append(line_no)

    errors.extend(find_overlaps(cues, cue_lines))
    if not cues and not errors:
        errors.append(ParseError(1, "No subtitle cues found", SEVERITY_ERROR))

    logger.debug(f"Parsed {len(cues)} SRT cues with {len(errors)} diagnostics")
    return ParsedDocument(
        type="srt",
        cues=tuple(cues),
        errors=tuple(errors) if errors else None,
    )
