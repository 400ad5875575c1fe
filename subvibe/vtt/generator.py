"""
WebVTT generator.
"""

from dataclasses import replace
from typing import List, Sequence, Union

from ..models import Cue, ParsedDocument, VTTCueData, VTTRegion, VTTVoice
from ..utils import STYLE_VTT, format_timestamp
from .parser import HEADER

# Canonical output order of cue settings
SETTING_ORDER = ("vertical", "line", "position", "size", "align", "region")


def _format_region(region: VTTRegion) -> str:
    return "\n".join([
        "REGION",
        f"id={region.id}",
        f"width={region.width}",
        f"lines={region.lines}",
        f"regionanchor={region.region_anchor}",
        f"viewportanchor={region.viewport_anchor}",
        f"scroll={region.scroll}",
    ])


def _render_voices(text: str, voices: Sequence[VTTVoice]) -> str:
    """Put voice spans back around their text, keeping everything else in ``text``."""
    if "\n".join(v.text for v in voices) == text:
        return "\n".join(f"<v {v.voice}>{v.text}</v>" for v in voices)

    parts: List[str] = []
    pos = 0
    for voice in voices:
        found = text.find(voice.text, pos)
        if found < 0:
            # Text was edited after parsing; drop the span, keep the words
            continue
        parts.append(text[pos:found])
        parts.append(f"<v {voice.voice}>{voice.text}</v>")
        pos = found + len(voice.text)
    parts.append(text[pos:])
    return "".join(parts)


def _format_cue(cue: Cue, identifier: Union[str, None]) -> str:
    timing = f"{format_timestamp(cue.start_time, STYLE_VTT)} --> {format_timestamp(cue.end_time, STYLE_VTT)}"
    if cue.settings:
        ordered = [f"{key}:{cue.settings[key]}" for key in SETTING_ORDER if key in cue.settings]
        if ordered:
            timing = f"{timing} {' '.join(ordered)}"

    if cue.voices:
        body = _render_voices(cue.text, cue.voices)
    else:
        body = cue.text

    lines = [identifier] if identifier is not None else []
    lines.extend([timing, body])
    return "\n".join(lines)


def generate_vtt(source: Union[ParsedDocument, Sequence[Cue]], preserve_indexes: bool = False) -> str:
    """
    Serialise cues (and a document's styles and regions) as WebVTT text.

    Output is the ``WEBVTT`` header, then STYLE blocks, REGION blocks and
    cues, separated by one blank line and ending with a newline.

    In preserve mode a cue parsed from WebVTT keeps its own identifier line
    (omitted when it had none) and any other cue uses its index; otherwise
    cues are numbered from 1.

    Args:
        source: ParsedDocument or sequence of cues
        preserve_indexes: Keep source identifiers instead of renumbering

    Returns:
        WebVTT content as string

    Example:
        >>> generate_vtt([Cue(index=1, start_time=1000, end_time=4000, text="Hello")])
        'WEBVTT\\n\\n1\\n00:01.000 --> 00:04.000\\nHello\\n'
    """
    blocks: List[str] = [HEADER]
    cues: Sequence[Cue] = source
    if isinstance(source, ParsedDocument):
        cues = source.cues
        blocks.extend(f"STYLE\n{style}" for style in source.styles or ())
        blocks.extend(_format_region(region) for region in source.regions or ())

    for position, cue in enumerate(cues, start=1):
        if not preserve_indexes:
            identifier = str(position)
        elif cue.vtt is not None:
            identifier = cue.vtt.identifier
        else:
            identifier = str(cue.index)
        blocks.append(_format_cue(cue, identifier))

    return "\n\n".join(blocks) + "\n"


def convert_srt_cues_to_vtt(cues: Sequence[Cue]) -> List[Cue]:
    """
    Attach WebVTT data to plain cues, using each index as the identifier.

    Args:
        cues: Cues parsed from SRT (or any cues)

    Returns:
        Cues carrying VTTCueData; existing settings and voices are kept
    """
    converted = []
    for cue in cues:
        vtt = cue.vtt or VTTCueData()
        converted.append(replace(cue, vtt=replace(vtt, identifier=str(cue.index))))
    return converted
