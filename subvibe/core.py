"""
Top-level subvibe API.

``parse`` detects the format and dispatches to the SRT or WebVTT parser,
``build`` serialises cues to SRT, WebVTT or plain text and ``resync`` shifts
timings. :class:`SubtitleParser` bundles the same operations behind an object
holding default options.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

from .corrector import shift_time
from .detector import FORMAT_SRT, FORMAT_UNKNOWN, FORMAT_VTT, detect_format
from .models import Cue, ParsedDocument
from .srt.generator import generate_srt
from .srt.parser import parse_srt
from .vtt.generator import generate_vtt
from .vtt.parser import parse_vtt

logger = logging.getLogger(__name__)

FORMAT_TEXT = "text"
BUILD_FORMATS = (FORMAT_TEXT, FORMAT_SRT, FORMAT_VTT)

_PARSERS = {
    FORMAT_SRT: parse_srt,
    FORMAT_VTT: parse_vtt,
}


def parse(content: str, preserve_indexes: bool = False) -> ParsedDocument:
    """
    Parse subtitle content, detecting SRT or WebVTT automatically.

    Never raises for string input: unrecognisable content yields a document
    of type "unknown" with a single error.

    Args:
        content: Raw subtitle text (may be wrapped in a markdown code fence)
        preserve_indexes: Keep source indexes/identifiers on the cues

    Returns:
        ParsedDocument

    Example:
        >>> doc = parse("1\\n00:00:01,000 --> 00:00:04,000\\nHello")
        >>> doc.type, len(doc.cues)
        ('srt', 1)
    """
    detection = detect_format(content)
    if detection.type == FORMAT_UNKNOWN:
        logger.info(f"Unrecognised subtitle content: {detection.errors[0].message}")
        return ParsedDocument(type=FORMAT_UNKNOWN, errors=detection.errors)

    document = _PARSERS[detection.type](detection.content, preserve_indexes=preserve_indexes)
    logger.info(
        f"Parsed {detection.type.upper()} content: {len(document.cues)} cues, "
        f"{len(document.errors or ())} diagnostics"
    )
    return document


def _resolve_build_format(
    source: Union[ParsedDocument, Sequence[Cue]],
    options: Union[str, Dict[str, Any], None],
    format: Optional[str],
    preserve_indexes: bool,
):
    if isinstance(options, str):
        # Legacy positional format argument
        format = format or options
    elif isinstance(options, dict):
        format = format or options.get("format")
        preserve_indexes = preserve_indexes or bool(options.get("preserve_indexes", False))
    elif options is not None:
        raise TypeError(f"Unsupported build options: {type(options).__name__}")

    if format is None:
        if isinstance(source, ParsedDocument) and source.type in (FORMAT_SRT, FORMAT_VTT):
            format = source.type
        else:
            format = FORMAT_SRT
    return format, preserve_indexes


def build(
    source: Union[ParsedDocument, Sequence[Cue]],
    options: Union[str, Dict[str, Any], None] = None,
    *,
    format: Optional[str] = None,
    preserve_indexes: bool = False,
) -> str:
    """
    Serialise cues as SRT, WebVTT or plain text.

    Args:
        source: ParsedDocument or sequence of cues
        options: Either a format name ("text", "srt", "vtt"), kept for
            backwards compatibility, or a dict with 'format' and
            'preserve_indexes' keys
        format: Output format; defaults to the document's own type, or SRT
            for bare cue lists and unknown documents
        preserve_indexes: Emit source indexes/identifiers

    Returns:
        Serialised content

    Raises:
        ValueError: If the format is not supported
        TypeError: If options is neither a string nor a dict

    Example:
        >>> build([Cue(1, 0, 1000, " Hi ")], "text")
        'Hi'
    """
    format, preserve_indexes = _resolve_build_format(source, options, format, preserve_indexes)
    if format not in BUILD_FORMATS:
        raise ValueError(f"Unsupported format: {format}. Expected one of {', '.join(BUILD_FORMATS)}")

    if format == FORMAT_SRT:
        return generate_srt(source, preserve_indexes=preserve_indexes)
    if format == FORMAT_VTT:
        return generate_vtt(source, preserve_indexes=preserve_indexes)

    cues = source.cues if isinstance(source, ParsedDocument) else source
    return "\n\n".join(text for text in (cue.text.strip() for cue in cues) if text)


def resync(cues: Sequence[Cue], offset: int, start_at: int = 0, end_at: Optional[int] = None):
    """
    Shift cue timings by ``offset`` milliseconds.

    See :func:`subvibe.corrector.shift_time`.
    """
    return shift_time(cues, offset, start_at=start_at, end_at=end_at)


class SubtitleParser:
    """
    Subtitle parsing and generation with default options.

    Example:
        >>> parser = SubtitleParser(preserve_indexes=True)
        >>> doc = parser.parse(content)
        >>> srt = parser.build(doc, format="srt")
    """

    def __init__(self, preserve_indexes: bool = False, default_format: Optional[str] = None):
        """
        Initialize parser.

        Args:
            preserve_indexes: Default index preservation for parse and build
            default_format: Default build format (None follows the document)
        """
        if default_format is not None and default_format not in BUILD_FORMATS:
            raise ValueError(f"Unsupported format: {default_format}")
        self.preserve_indexes = preserve_indexes
        self.default_format = default_format

    def parse(self, content: str) -> ParsedDocument:
        return parse(content, preserve_indexes=self.preserve_indexes)

    def parse_srt(self, content: str) -> ParsedDocument:
        return parse_srt(content, preserve_indexes=self.preserve_indexes)

    def parse_vtt(self, content: str) -> ParsedDocument:
        return parse_vtt(content, preserve_indexes=self.preserve_indexes)

    def build(self, source: Union[ParsedDocument, Sequence[Cue]], format: Optional[str] = None) -> str:
        return build(
            source,
            format=format or self.default_format,
            preserve_indexes=self.preserve_indexes,
        )

    def convert(self, content: str, format: str) -> str:
        """
        Parse content and rebuild it in another format.

        Args:
            content: Raw SRT or WebVTT text
            format: Target format ("text", "srt" or "vtt")

        Returns:
            Converted content
        """
        document = self.parse(content)
        logger.info(f"Converting {document.type} document with {len(document.cues)} cues to {format}")
        return self.build(document, format=format)
