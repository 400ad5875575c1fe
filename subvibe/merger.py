"""
Cue merging and deduplication utilities for subvibe.

Combines cue lists from several sources (for example partial subtitle
downloads of the same video) without duplication, and collapses
overlapping cues into one.
"""

import logging
from dataclasses import replace
from typing import List, Sequence, Set, Tuple

from .models import Cue

logger = logging.getLogger(__name__)


def _signature(cue: Cue) -> Tuple[int, int, str]:
    return cue.start_time, cue.end_time, cue.text


def reindex(cues: Sequence[Cue]) -> List[Cue]:
    """Renumber cues sequentially from 1."""
    return [replace(cue, index=position) for position, cue in enumerate(cues, start=1)]


def merge_overlapping(cues: Sequence[Cue]) -> List[Cue]:
    """
    Merge cues whose intervals touch or intersect.

    Cues are sorted by start time; a cue starting at or before the end of
    the previous merged cue is folded into it, extending the end time and
    appending its text on a new line.

    Args:
        cues: Cues to merge

    Returns:
        Merged cues, renumbered from 1

    Example:
        >>> merged = merge_overlapping([Cue(1, 0, 2000, "A"), Cue(2, 1500, 3000, "B")])
        >>> merged[0].end_time, merged[0].text
        (3000, 'A\\nB')
    """
    merged: List[Cue] = []
    for cue in sorted(cues, key=lambda c: c.start_time):
        if merged and cue.start_time <= merged[-1].end_time:
            last = merged[-1]
            merged[-1] = replace(
                last,
                end_time=max(last.end_time, cue.end_time),
                text=f"{last.text}\n{cue.text}",
            )
        else:
            merged.append(cue)

    if len(merged) < len(cues):
        logger.debug(f"Merged {len(cues)} cues into {len(merged)}")
    return reindex(merged)


def deduplicate_cues(existing_cues: Sequence[Cue], new_cues: Sequence[Cue]) -> List[Cue]:
    """
    Deduplicate cues based on timing and text.

    Args:
        existing_cues: Cues already kept
        new_cues: Cues to add

    Returns:
        Cues from new_cues that match neither existing_cues nor an earlier
        cue of new_cues

    Example:
        >>> existing = [Cue(1, 1000, 2000, "Hello")]
        >>> new = [Cue(1, 1000, 2000, "Hello"), Cue(2, 3000, 4000, "World")]
        >>> [c.text for c in deduplicate_cues(existing, new)]
        ['World']
    """
    seen: Set[Tuple[int, int, str]] = {_signature(cue) for cue in existing_cues}

    unique = []
    for cue in new_cues:
        signature = _signature(cue)
        if signature not in seen:
            unique.append(cue)
            seen.add(signature)
    return unique


def merge_cue_lists(*cue_lists: Sequence[Cue]) -> List[Cue]:
    """
    Merge several cue lists into one, dropping duplicates.

    The result is sorted by start time (stable for equal starts) and
    renumbered from 1.

    Args:
        *cue_lists: Cue lists in priority order

    Returns:
        Merged cue list
    """
    merged: List[Cue] = []
    for cues in cue_lists:
        unique = deduplicate_cues(merged, cues)
        logger.debug(f"Adding {len(unique)} of {len(cues)} cues")
        merged.extend(unique)

    logger.info(f"Merged {len(cue_lists)} cue lists into {len(merged)} cues")
    return reindex(sorted(merged, key=lambda c: c.start_time))
