"""
subclean: Fix common OCR errors in SRT subtitles.

Subtitles ripped from image-based tracks (PGS, VobSub) and run through
OCR come back with predictable glyph confusions: "l" for "I", "0" for
"o", a trailing "q" for "g", typographic quotes and glued contractions.
subclean repairs these in the text lines of an SRT document while
leaving index and timing lines untouched.

Example:
    >>> import subclean
    >>> report = subclean.correct(srt_text)
    >>> if report.changed:
    ...     path.write_text(report.corrected_text, encoding="utf-8")
    >>> report.stats.nonzero()
    {'iFix': 3, 'qToG': 1}
"""

from subclean.batch import (
    BatchSummary,
    FileResult,
    ManifestEntry,
    correct_file,
    correct_files,
    find_manifest,
    fix_subtitles,
    parse_manifest,
)
from subclean.classifier import classify, classify_line
from subclean.config import CleanupConfig, load_config
from subclean.engine import CorrectionEngine, correct
from subclean.exceptions import (
    ConfigurationError,
    ManifestError,
    RuleError,
    SubCleanError,
)
from subclean.models import (
    ClassifiedLine,
    CorrectionReport,
    CorrectionStats,
    LineKind,
    SubtitleDocument,
)
from subclean.normalizers import (
    CATEGORIES,
    RULESET_VERSION,
    CorrectionRule,
    RulePipeline,
    build_pipeline,
    default_rules,
)

__version__ = "0.1.0"
__all__ = [
    # Main API
    "correct",
    "CorrectionEngine",
    "classify",
    "classify_line",
    # Rules
    "RulePipeline",
    "CorrectionRule",
    "build_pipeline",
    "default_rules",
    "CATEGORIES",
    "RULESET_VERSION",
    # Configuration
    "CleanupConfig",
    "load_config",
    # Models
    "SubtitleDocument",
    "ClassifiedLine",
    "LineKind",
    "CorrectionStats",
    "CorrectionReport",
    # Batch
    "ManifestEntry",
    "FileResult",
    "BatchSummary",
    "parse_manifest",
    "find_manifest",
    "correct_file",
    "correct_files",
    "fix_subtitles",
    # Exceptions
    "SubCleanError",
    "ConfigurationError",
    "RuleError",
    "ManifestError",
]
