"""
Line scanning helpers shared by the SRT and VTT parsers.

The parsers walk the input one physical line at a time with an explicit
:class:`LineCursor`, so each parse call owns its own position and the
parser functions stay reentrant.
"""

import re
from typing import Callable, List, Optional, Tuple

ARROW = "-->"

_NEWLINE = re.compile(r"\r\n|\r|\n")
_INDEX_LINE = re.compile(r"^[0-9]+$")
_ELLIPSES = ("…", "...")
# Leading run of timestamp characters; text may be glued on without a space
_END_TOKEN = re.compile(r"[0-9:.,%…]+")


def split_lines(content: str) -> List[str]:
    """Split content into physical lines, dropping a leading byte order mark."""
    if content.startswith("\ufeff"):
        content = content[1:]
    return _NEWLINE.split(content)


def is_blank(line: Optional[str]) -> bool:
    return line is None or not line.strip()


def is_index_line(line: Optional[str]) -> bool:
    return line is not None and bool(_INDEX_LINE.match(line.strip()))


def has_arrow(line: Optional[str]) -> bool:
    return line is not None and ARROW in line


def is_ellipsis_timing(line: str) -> bool:
    """A timing line mangled by truncation, e.g. "…7:22,759 --> 07:24,000"."""
    return has_arrow(line) and line.lstrip().startswith(_ELLIPSES)


def split_timing_line(line: str) -> Tuple[str, str, str]:
    """
    Split a timing line on the arrow.

    Args:
        line: Line containing "-->"

    Returns:
        (start_token, end_token, rest) where rest is whatever follows the
        end token (cue settings in VTT, glued cue text in SRT)

    Example:
        >>> split_timing_line("00:01.000 --> 00:04.000 align:start")
        ('00:01.000', '00:04.000', 'align:start')
        >>> split_timing_line("00:00:01,000 --> 00:00:04,000Hello")
        ('00:00:01,000', '00:00:04,000', 'Hello')
    """
    left, _, right = line.partition(ARROW)
    right = right.strip()
    m = _END_TOKEN.match(right)
    if m:
        end_token, rest = m.group(0), right[m.end():]
    else:
        # No timestamp characters at all; keep the first word as the token
        parts = right.split(None, 1)
        end_token = parts[0] if parts else ""
        rest = parts[1] if len(parts) > 1 else ""
    return left.strip(), end_token, rest.strip()


class LineCursor:
    """Cursor over the physical lines of one input document."""

    def __init__(self, lines: List[str]):
        self.lines = lines
        self.pos = 0

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    @property
    def line_number(self) -> int:
        """1-based number of the current line, clamped to the input length."""
        return self.clamp(self.pos + 1)

    @property
    def current(self) -> str:
        return self.lines[self.pos]

    def clamp(self, line_number: int) -> int:
        return max(1, min(line_number, len(self.lines)))

    def peek(self, offset: int = 0) -> Optional[str]:
        index = self.pos + offset
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def advance(self, count: int = 1) -> None:
        self.pos = min(self.pos + count, len(self.lines))

    def skip_blank(self) -> None:
        while not self.at_end and is_blank(self.current):
            self.pos += 1

    def seek(self, predicate: Callable[[str], bool]) -> None:
        """Advance until the current line satisfies ``predicate`` or input ends."""
        while not self.at_end and not predicate(self.current):
            self.pos += 1

    def starts_new_cue(self, offset: int = 0) -> bool:
        """True when a bare index line is followed by a timing line."""
        return is_index_line(self.peek(offset)) and has_arrow(self.peek(offset + 1))

    def collect_text(self, first_line: str = "") -> List[str]:
        """
        Collect cue text lines starting at the current line.

        Collection stops at a blank line, at the unambiguous start of a new
        cue (bare index followed by a timing line), at a timing line mangled
        by an ellipsis, or at a timing line met before any text was seen.

        Args:
            first_line: Text already found glued onto the timing line

        Returns:
            The collected lines, unmodified
        """
        text_lines = [first_line] if first_line else []
        while not self.at_end:
            line = self.current
            if is_blank(line) or self.starts_new_cue():
                break
            if has_arrow(line) and (not text_lines or is_ellipsis_timing(line)):
                break
            text_lines.append(line)
            self.pos += 1
        return text_lines
