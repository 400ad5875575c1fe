"""
SubRip (SRT) generator.
"""

import re
from dataclasses import replace
from typing import List, Sequence, Union

from ..models import Cue, ParsedDocument
from ..utils import STYLE_SRT, format_timestamp

_VOICE_SPAN = re.compile(r"<v(?:\.[^\s>]+)?\s+[^>]*>|</v>")


def _cues_of(source: Union[ParsedDocument, Sequence[Cue]]) -> Sequence[Cue]:
    if isinstance(source, ParsedDocument):
        return source.cues
    return source


def generate_srt(source: Union[ParsedDocument, Sequence[Cue]], preserve_indexes: bool = False) -> str:
    """
    Serialise cues as SRT text.

    Each cue becomes ``index``, ``HH:MM:SS,mmm --> HH:MM:SS,mmm`` and its text,
    with one blank line between cues and a trailing newline.

    Args:
        source: ParsedDocument or sequence of cues
        preserve_indexes: Emit ``cue.index`` instead of renumbering from 1

    Returns:
        SRT content as string

    Example:
        >>> generate_srt([Cue(index=1, start_time=1000, end_time=4000, text="Hello")])
        '1\\n00:00:01,000 --> 00:00:04,000\\nHello\\n'
    """
    blocks: List[str] = []
    for position, cue in enumerate(_cues_of(source), start=1):
        number = cue.index if preserve_indexes and cue.index is not None else position
        blocks.append("\n".join([
            str(number),
            f"{format_timestamp(cue.start_time, STYLE_SRT)} --> {format_timestamp(cue.end_time, STYLE_SRT)}",
            cue.text,
            "",
        ]))
    return "\n".join(blocks)


def convert_vtt_cues_to_srt(cues: Sequence[Cue]) -> List[Cue]:
    """
    Drop WebVTT-only data and voice markup, renumbering from 1.

    Args:
        cues: Cues parsed from WebVTT (or any cues)

    Returns:
        Plain cues suitable for SRT output
    """
    return [
        replace(cue, index=position, text=_VOICE_SPAN.sub("", cue.text), vtt=None)
        for position, cue in enumerate(cues, start=1)
    ]
