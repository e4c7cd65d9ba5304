"""
Data models for subclean.

These models describe a subtitle document as it moves through the
correction engine: raw lines, typed lines, per-category statistics
and the final report.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Line terminators kept verbatim so a document reassembles byte-for-byte
_LINE_SPLIT = re.compile(r"(\r\n|\r|\n)")


class LineKind(Enum):
    """Structural role of a single subtitle line."""

    INDEX = "index"
    TIMING = "timing"
    TEXT = "text"
    BLANK = "blank"


@dataclass(frozen=True)
class ClassifiedLine:
    """A subtitle line tagged with its structural kind."""

    kind: LineKind
    content: str

    @property
    def is_text(self) -> bool:
        """Whether correction rules may touch this line."""
        return self.kind is LineKind.TEXT


@dataclass(frozen=True)
class SubtitleDocument:
    """
    Immutable view of a subtitle file's lines.

    Each line is stored without its terminator; the terminator that
    followed it ("\\n", "\\r\\n", "\\r", or "" for the final line) is
    kept alongside so that `to_text()` rebuilds the exact input.

    Example:
        >>> doc = SubtitleDocument.from_text("1\\r\\n00:00:01,000 --> 00:00:02,000\\r\\nHi\\r\\n")
        >>> doc.lines
        ('1', '00:00:01,000 --> 00:00:02,000', 'Hi', '')
        >>> doc.to_text() == "1\\r\\n00:00:01,000 --> 00:00:02,000\\r\\nHi\\r\\n"
        True
    """

    lines: tuple[str, ...]
    terminators: tuple[str, ...]

    def __post_init__(self):
        if len(self.lines) != len(self.terminators):
            raise ValueError(
                f"lines and terminators must have the same length, "
                f"got {len(self.lines)} and {len(self.terminators)}"
            )

    @classmethod
    def from_text(cls, text: str) -> "SubtitleDocument":
        """Split text into lines, remembering each line's terminator."""
        if not text:
            return cls(lines=(), terminators=())

        parts = _LINE_SPLIT.split(text)
        # split() with a capture group alternates content and terminator
        lines = tuple(parts[0::2])
        terminators = tuple(parts[1::2]) + ("",)
        return cls(lines=lines, terminators=terminators)

    def to_text(self, lines: Sequence[str] | None = None) -> str:
        """
        Reassemble the document, optionally with replacement lines.

        Args:
            lines: New line contents (same count as the original). Uses the
                original lines if None.

        Returns:
            Text joined with the original terminators.
        """
        if lines is None:
            lines = self.lines
        elif len(lines) != len(self.lines):
            raise ValueError(
                f"Expected {len(self.lines)} replacement lines, got {len(lines)}"
            )
        return "".join(line + end for line, end in zip(lines, self.terminators))

    def __len__(self) -> int:
        return len(self.lines)


@dataclass
class CorrectionStats:
    """
    Per-category correction counts for one document.

    Counts are incremented once per substitution that actually changed
    the text. Categories are created on first use, but the engine
    zero-initializes every category of its pipeline up front.

    Example:
        >>> stats = CorrectionStats.for_categories(["iFix", "qToG"])
        >>> stats.increment("iFix")
        >>> stats["iFix"], stats["qToG"]
        (1, 0)
    """

    counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def for_categories(cls, categories: Iterable[str]) -> "CorrectionStats":
        """Create stats with every category initialized to zero."""
        return cls(counts={category: 0 for category in categories})

    def increment(self, category: str, amount: int = 1) -> None:
        """Add `amount` to a category's count."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        self.counts[category] = self.counts.get(category, 0) + amount

    def __getitem__(self, category: str) -> int:
        return self.counts.get(category, 0)

    def __contains__(self, category: object) -> bool:
        return category in self.counts

    def __iter__(self):
        return iter(self.counts)

    @property
    def total(self) -> int:
        """Total substitutions across all categories."""
        return sum(self.counts.values())

    def nonzero(self) -> dict[str, int]:
        """Categories with at least one correction, in insertion order."""
        return {category: count for category, count in self.counts.items() if count}

    def merge(self, other: "CorrectionStats") -> "CorrectionStats":
        """Return new stats holding the sum of both."""
        merged = CorrectionStats(counts=dict(self.counts))
        for category, count in other.counts.items():
            merged.increment(category, count)
        return merged

    def to_dict(self) -> dict[str, int]:
        """Plain dictionary copy of the counts."""
        return dict(self.counts)


@dataclass
class CorrectionReport:
    """
    Result of correcting one subtitle document.

    `changed` is True iff `corrected_text` differs from `original_text`.
    `error` is set only when a rule failed and the document was left
    uncorrected.
    """

    original_text: str
    corrected_text: str
    changed: bool
    stats: CorrectionStats
    ruleset_version: str = ""
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Whether correction was abandoned because a rule failed."""
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        The document texts are omitted; callers already hold them.
        """
        return {
            "changed": self.changed,
            "stats": self.stats.to_dict(),
            "ruleset_version": self.ruleset_version,
            "error": self.error,
        }
