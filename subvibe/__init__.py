"""
subvibe - Tolerant SRT and WebVTT parsing and generation

Parses subtitle files as they exist in the wild: mixed timestamp shapes,
missing indexes, truncated or glued timing lines, stray blank lines. Every
parse returns a structured document plus diagnostics instead of raising, and
the generators write canonical SRT / WebVTT that parses back to the same cues.

Features:
- Format detection (SRT, WebVTT, markdown code-fenced input)
- Timestamp engine accepting HH:MM:SS.mmm, MM:SS, SS.mmm, MM:SS:mmm,
  bare digits, legacy comma forms and percentages
- Recovering parsers with per-line warnings and errors
- WebVTT styles, regions, cue settings and voice spans
- Round-trip safe SRT and WebVTT generators
- Cue utilities: shift, scale, fix timings, merge, validate, normalize

Example usage:
    >>> from subvibe import parse, build, resync
    >>>
    >>> doc = parse(content)
    >>> for error in doc.errors or ():
    ...     print(error.line, error.severity, error.message)
    >>>
    >>> # Shift everything 2 seconds later and write WebVTT
    >>> shifted = resync(doc.cues, 2000)
    >>> vtt = build(shifted, format="vtt")
"""

import logging

__version__ = "1.0.0"
__author__ = "subvibe Contributors"
__license__ = "MIT"

# Add NullHandler to prevent "No handler found" warnings
# Users should configure logging in their application if they want to see logs
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Top-level API
from .core import parse, build, resync, SubtitleParser

# Parsers and generators
from .srt import parse_srt, generate_srt, convert_vtt_cues_to_srt
from .vtt import (
    parse_vtt,
    parse_cue_settings,
    parse_region,
    parse_voices,
    generate_vtt,
    convert_srt_cues_to_vtt,
)

# Format detection
from .detector import FormatDetection, detect_format, strip_code_fences, has_timestamp, looks_like_subtitle

# Timestamp utilities
from .utils import (
    InvalidTimestamp,
    UnusualTimestamp,
    parse_timestamp,
    try_parse_timestamp,
    format_timestamp,
    parse_loose_time,
    find_timestamp_range,
    MAX_TIMESTAMP_MS,
)

# Cue utilities
from .corrector import shift_time, scale_time, fix_timings
from .merger import merge_overlapping, deduplicate_cues, merge_cue_lists, reindex
from .normalizer import validate, strip_formatting, normalize

# Data models
from .models import (
    Cue,
    VTTCueData,
    VTTVoice,
    VTTRegion,
    ParseError,
    ParsedDocument,
    ValidationResult,
    SEVERITY_WARNING,
    SEVERITY_ERROR,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",

    # Top-level API
    "parse",
    "build",
    "resync",
    "SubtitleParser",

    # Parsers and generators
    "parse_srt",
    "parse_vtt",
    "generate_srt",
    "generate_vtt",
    "convert_vtt_cues_to_srt",
    "convert_srt_cues_to_vtt",
    "parse_cue_settings",
    "parse_region",
    "parse_voices",

    # Format detection
    "FormatDetection",
    "detect_format",
    "strip_code_fences",
    "has_timestamp",
    "looks_like_subtitle",

    # Timestamp utilities
    "InvalidTimestamp",
    "UnusualTimestamp",
    "parse_timestamp",
    "try_parse_timestamp",
    "format_timestamp",
    "parse_loose_time",
    "find_timestamp_range",
    "MAX_TIMESTAMP_MS",

    # Cue utilities
    "shift_time",
    "scale_time",
    "fix_timings",
    "merge_overlapping",
    "deduplicate_cues",
    "merge_cue_lists",
    "reindex",
    "validate",
    "strip_formatting",
    "normalize",

    # Models
    "Cue",
    "VTTCueData",
    "VTTVoice",
    "VTTRegion",
    "ParseError",
    "ParsedDocument",
    "ValidationResult",
    "SEVERITY_WARNING",
    "SEVERITY_ERROR",
]
