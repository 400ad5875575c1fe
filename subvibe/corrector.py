"""
Timing correction utilities for subvibe.

Shifts and scales cue timings (to resync subtitles against a different cut
of a video) and repairs common timing problems. Every changed cue remembers
its first timing in ``Cue.original``.
"""

import logging
from typing import List, Optional, Sequence

from .models import Cue

logger = logging.getLogger(__name__)

# Defaults for fix_timings
MIN_DURATION_MS = 500
MIN_GAP_MS = 40


def _in_window(cue: Cue, start_at: int, end_at: Optional[int]) -> bool:
    if cue.end_time < start_at:
        return False
    return end_at is None or cue.start_time <= end_at


def shift_time(cues: Sequence[Cue], offset: int, start_at: int = 0, end_at: Optional[int] = None) -> List[Cue]:
    """
    Shift cue timings by a fixed offset.

    Start times clamp at 0 and every shifted cue keeps at least 1ms of
    duration.

    Args:
        cues: Cues to shift
        offset: Milliseconds to add (negative to move earlier)
        start_at: Only shift cues ending at or after this time
        end_at: Only shift cues starting at or before this time

    Returns:
        New list of cues; cues outside the window are returned unchanged

    Example:
        >>> shifted = shift_time([Cue(1, 1000, 2000, "Hi")], -1500)
        >>> shifted[0].start_time, shifted[0].end_time, shifted[0].original
        (0, 500, (1000, 2000))
    """
    if offset == 0:
        return list(cues)

    logger.debug(f"Shifting {len(cues)} cues by {offset}ms")
    shifted = []
    for cue in cues:
        if not _in_window(cue, start_at, end_at):
            shifted.append(cue)
            continue
        start = max(0, cue.start_time + offset)
        end = max(start + 1, cue.end_time + offset)
        shifted.append(cue.with_timing(start, end))
    return shifted


def scale_time(
    cues: Sequence[Cue],
    factor: float,
    anchor: int = 0,
    start_at: int = 0,
    end_at: Optional[int] = None,
) -> List[Cue]:
    """
    Stretch or compress cue timings around an anchor point.

    Args:
        cues: Cues to scale
        factor: Scale factor, e.g. 1.1 for 10% slower, 0.9 for 10% faster
        anchor: Time in milliseconds that stays fixed
        start_at: Only scale cues ending at or after this time
        end_at: Only scale cues starting at or before this time

    Returns:
        New list of cues with integer millisecond timings

    Raises:
        ValueError: If factor is not positive
    """
    if factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {factor}")

    scaled = []
    for cue in cues:
        if not _in_window(cue, start_at, end_at):
            scaled.append(cue)
            continue
        start = max(0, round(anchor + (cue.start_time - anchor) * factor))
        end = max(start + 1, round(anchor + (cue.end_time - anchor) * factor))
        scaled.append(cue.with_timing(start, end))
    return scaled


def fix_timings(cues: Sequence[Cue], min_duration: int = MIN_DURATION_MS, min_gap: int = MIN_GAP_MS) -> List[Cue]:
    """
    Sort cues and enforce a minimum duration and a minimum gap.

    A cue starting too close to the previous one is pushed back; a cue that
    is too short is extended.

    Args:
        cues: Cues to fix
        min_duration: Minimum cue duration in milliseconds
        min_gap: Minimum gap between consecutive cues in milliseconds

    Returns:
        New list of cues sorted by start time
    """
    fixed: List[Cue] = []
    adjusted = 0
    for cue in sorted(cues, key=lambda c: c.start_time):
        start = cue.start_time
        end = max(start + min_duration, cue.end_time)
        if fixed and start < fixed[-1].end_time + min_gap:
            start = fixed[-1].end_time + min_gap
            end = max(start + min_duration, end)

        if (start, end) == (cue.start_time, cue.end_time):
            fixed.append(cue)
        else:
            adjusted += 1
            fixed.append(cue.with_timing(start, end))

    if adjusted:
        logger.debug(f"Adjusted timing of {adjusted} of {len(fixed)} cues")
    return fixed
