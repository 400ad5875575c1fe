"""
WebVTT support: recovering parser and generator.

Handles the optional WEBVTT header, NOTE/STYLE/REGION blocks, cue
identifiers, cue settings and voice spans.
"""

from .parser import parse_vtt, parse_cue_settings, parse_region, parse_voices
from .generator import generate_vtt, convert_srt_cues_to_vtt

__all__ = [
    # Parsing
    "parse_vtt",
    "parse_cue_settings",
    "parse_region",
    "parse_voices",

    # Generation
    "generate_vtt",
    "convert_srt_cues_to_vtt",
]
