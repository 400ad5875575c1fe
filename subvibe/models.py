"""
Data models for subvibe.

Defines the value objects produced by the parsers and consumed by the
generators and cue utilities. Every object is created fresh per parse call
and treated as immutable afterwards.
"""

from dataclasses import dataclass, field, replace, asdict
from typing import Any, Dict, List, Optional, Tuple

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


@dataclass(frozen=True)
class VTTVoice:
    """A speaker extracted from a ``<v Name>text</v>`` voice span."""
    voice: str
    text: str


@dataclass(frozen=True)
class VTTCueData:
    """WebVTT-only cue fields, attached to a :class:`Cue` when parsed from VTT."""
    identifier: Optional[str] = None
    settings: Optional[Dict[str, str]] = None  # vertical, line, position, size, align, region
    voices: Optional[Tuple[VTTVoice, ...]] = None


@dataclass(frozen=True)
class Cue:
    """Represents one subtitle entry: a time interval plus displayed text."""
    index: int
    start_time: int  # milliseconds
    end_time: int    # milliseconds
    text: str
    original: Optional[Tuple[int, int]] = None  # (start, end) before the first timing change
    vtt: Optional[VTTCueData] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.vtt.identifier if self.vtt else None

    @property
    def settings(self) -> Optional[Dict[str, str]]:
        return self.vtt.settings if self.vtt else None

    @property
    def voices(self) -> Optional[Tuple[VTTVoice, ...]]:
        return self.vtt.voices if self.vtt else None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def with_timing(self, start_time: int, end_time: int) -> "Cue":
        """
        Return a copy with new timing, remembering the first original timing.

        Args:
            start_time: New start in milliseconds
            end_time: New end in milliseconds

        Returns:
            New Cue whose ``original`` holds the pre-change interval
        """
        original = self.original or (self.start_time, self.end_time)
        return replace(self, start_time=start_time, end_time=end_time, original=original)


@dataclass(frozen=True)
class VTTRegion:
    """Parsed REGION block. Unset keys keep the WebVTT defaults."""
    id: str = ""
    width: str = "100%"
    lines: int = 3
    region_anchor: str = "0%,100%"
    viewport_anchor: str = "0%,100%"
    scroll: str = "none"  # "up" or "none"


@dataclass(frozen=True)
class ParseError:
    """A diagnostic reported while parsing.

    ``warning`` means the problem was recovered (cue kept or defaulted),
    ``error`` means the affected cue was discarded or the document rejected.
    """
    line: int  # 1-based physical line in the original input
    message: str
    severity: str = SEVERITY_ERROR


@dataclass(frozen=True)
class ParsedDocument:
    """Result of parsing subtitle content."""
    type: str  # "srt", "vtt" or "unknown"
    cues: Tuple[Cue, ...] = field(default_factory=tuple)
    errors: Optional[Tuple[ParseError, ...]] = None
    styles: Optional[Tuple[str, ...]] = None
    regions: Optional[Tuple[VTTRegion, ...]] = None

    @property
    def has_errors(self) -> bool:
        return any(e.severity == SEVERITY_ERROR for e in self.errors or ())

    @property
    def warnings(self) -> List[ParseError]:
        return [e for e in self.errors or () if e.severity == SEVERITY_WARNING]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-serialisable dictionary.

        Keys that are ``None`` on the document or its cues are omitted.

        Returns:
            Dictionary with 'type', 'cues' and, when present, 'errors',
            'styles' and 'regions'
        """
        data: Dict[str, Any] = {
            "type": self.type,
            "cues": [_cue_to_dict(cue) for cue in self.cues],
        }
        if self.errors:
            data["errors"] = [asdict(e) for e in self.errors]
        if self.styles:
            data["styles"] = list(self.styles)
        if self.regions:
            data["regions"] = [asdict(r) for r in self.regions]
        return data


def unknown_document(message: str) -> ParsedDocument:
    """Document-level failure: no cues and a single error on line 1."""
    return ParsedDocument(
        type="unknown",
        errors=(ParseError(line=1, message=message, severity=SEVERITY_ERROR),),
    )


def _cue_to_dict(cue: Cue) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "index": cue.index,
        "start_time": cue.start_time,
        "end_time": cue.end_time,
        "text": cue.text,
    }
    if cue.original:
        data["original"] = {"start_time": cue.original[0], "end_time": cue.original[1]}
    if cue.identifier is not None:
        data["identifier"] = cue.identifier
    if cue.settings:
        data["settings"] = dict(cue.settings)
    if cue.voices:
        data["voices"] = [asdict(v) for v in cue.voices]
    return data


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a cue list."""
    is_valid: bool
    errors: Tuple[ParseError, ...] = field(default_factory=tuple)
