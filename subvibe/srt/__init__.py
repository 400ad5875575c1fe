"""
SubRip (SRT) support: recovering parser and generator.
"""

from .parser import parse_srt
from .generator import generate_srt, convert_vtt_cues_to_srt

__all__ = [
    "parse_srt",
    "generate_srt",
    "convert_vtt_cues_to_srt",
]
