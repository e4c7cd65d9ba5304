"""
SRT block classifier.

Tags each subtitle line as an index, timing, blank or text line. Only
text lines are handed to the correction rules; the other kinds carry the
subtitle structure and must come out of the engine untouched.

Classification looks at one line at a time. There is no block state, so
a text line that happens to be all digits is classified as an index line
and a malformed timestamp falls through to text.
"""

import re
from collections.abc import Iterable

from subclean.models import ClassifiedLine, LineKind

# Block sequence number: ASCII digits only, no surrounding whitespace
INDEX_PATTERN = re.compile(r"[0-9]+")

# "00:00:01,000 --> 00:00:02,000", anything after the end stamp is ignored
TIMING_PATTERN = re.compile(
    r"[0-9]{2}:[0-9]{2}:[0-9]{2},[0-9]{3}\s+-->\s+[0-9]{2}:[0-9]{2}:[0-9]{2},[0-9]{3}"
)


def classify_line(line: str) -> ClassifiedLine:
    """
    Classify a single subtitle line.

    Args:
        line: Line content without its terminator.

    Returns:
        ClassifiedLine with the original content preserved verbatim.
    """
    if INDEX_PATTERN.fullmatch(line):
        kind = LineKind.INDEX
    elif TIMING_PATTERN.match(line):
        kind = LineKind.TIMING
    elif not line.strip():
        kind = LineKind.BLANK
    else:
        kind = LineKind.TEXT
    return ClassifiedLine(kind=kind, content=line)


def classify(lines: Iterable[str]) -> list[ClassifiedLine]:
    """
    Classify every line of a subtitle document.

    Example:
        >>> [c.kind.value for c in classify(["1", "00:00:01,000 --> 00:00:02,000", "Hi", ""])]
        ['index', 'timing', 'text', 'blank']
    """
    return [classify_line(line) for line in lines]
