"""
Subtitle correction engine.

This module provides the main `correct()` function that turns the text
of one subtitle file into a CorrectionReport by wiring together:
- SubtitleDocument (line splitting with original terminators)
- classify (index / timing / text / blank tagging)
- RulePipeline (ordered OCR repairs on text lines only)

The engine does no I/O. Reading files, picking which ones to correct and
writing results back belong to the caller (see subclean.batch).
"""

from __future__ import annotations

import logging

from subclean.classifier import classify, classify_line
from subclean.config import CleanupConfig
from subclean.exceptions import RuleError
from subclean.models import (
    ClassifiedLine,
    CorrectionReport,
    CorrectionStats,
    LineKind,
    SubtitleDocument,
)
from subclean.normalizers.pipeline import RulePipeline, build_pipeline

logger = logging.getLogger(__name__)


class CorrectionEngine:
    """
    Corrects whole subtitle documents with a fixed rule pipeline.

    The engine holds no per-document state, so one instance can serve
    many documents, including from several threads at once.

    Example:
        >>> engine = CorrectionEngine()
        >>> report = engine.correct("1\\n00:00:01,000 --> 00:00:02,000\\n- l mean, I do.\\n")
        >>> report.corrected_text.splitlines()[2]
        '- I mean, I do.'
        >>> report.stats["iFix"]
        1
    """

    def __init__(
        self,
        pipeline: RulePipeline | None = None,
        config: CleanupConfig | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            pipeline: Rule pipeline to use. Built from config if None.
            config: Cleanup configuration (uses defaults if None).
        """
        self.config = config or CleanupConfig()
        self.pipeline = pipeline or build_pipeline(self.config)

    def correct(self, document_text: str) -> CorrectionReport:
        """
        Correct one subtitle document.

        Args:
            document_text: Full text of a subtitle file.

        Returns:
            CorrectionReport. If a rule fails and on_rule_error is "warn",
            the report carries the original text, changed=False, zeroed
            stats and an error message.

        Raises:
            RuleError: If a rule fails and on_rule_error is "raise".
        """
        document = SubtitleDocument.from_text(document_text)
        stats = self.pipeline.new_stats()

        try:
            corrected_lines = [
                self._correct_line(line, stats) if line.is_text else line.content
                for line in classify(document.lines)
            ]
        except RuleError as e:
            if self.config.on_rule_error == "raise":
                raise
            logger.warning("Correction skipped, document left unchanged: %s", e)
            return CorrectionReport(
                original_text=document_text,
                corrected_text=document_text,
                changed=False,
                stats=self.pipeline.new_stats(),
                ruleset_version=self.pipeline.version,
                error=str(e),
            )

        corrected_text = document.to_text(corrected_lines)
        changed = corrected_text != document_text

        logger.debug(
            "Corrected %d lines (changed=%s): %s",
            len(document),
            changed,
            stats.nonzero(),
        )

        return CorrectionReport(
            original_text=document_text,
            corrected_text=corrected_text,
            changed=changed,
            stats=stats,
            ruleset_version=self.pipeline.version,
        )

    def _correct_line(self, line: ClassifiedLine, stats: CorrectionStats) -> str:
        """
        Correct one TEXT line, keeping the original if it would change kind.

        Stripping invisible characters can turn a text line into a blank,
        index or timing line ("\\u200b", "\\ufeff42"). Such a result would
        alter the document structure, so the line is left as it was and
        its counts are dropped.
        """
        line_stats = CorrectionStats()
        corrected = self.pipeline.apply_rules(line.content, line_stats)

        kind = classify_line(corrected).kind
        if kind is not LineKind.TEXT:
            logger.debug("Keeping %r: correction would make it a %s line", line.content, kind.value)
            return line.content

        for category, count in line_stats.nonzero().items():
            stats.increment(category, count)
        return corrected


def correct(document_text: str, pipeline: RulePipeline | None = None) -> CorrectionReport:
    """
    Correct one subtitle document with the default or a given pipeline.

    This is the main entry point for subclean.

    Args:
        document_text: Full text of a subtitle file.
        pipeline: Optional rule pipeline (default rule set if None).

    Returns:
        CorrectionReport with corrected text and per-category stats.

    Example:
        >>> report = correct("Teh cat sat.")
        >>> report.corrected_text, report.changed
        ('The cat sat.', True)
    """
    return CorrectionEngine(pipeline=pipeline).correct(document_text)
