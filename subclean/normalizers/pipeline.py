"""
Ordered rule pipeline for subtitle text lines.

The pipeline is the single place where rule order lives: a tuple of
CorrectionRule objects applied front to back, each one seeing the output
of the previous. Pipelines are immutable and can be shared between
threads; per-document state lives only in the CorrectionStats passed in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from subclean.exceptions import ConfigurationError, RuleError
from subclean.models import CorrectionStats
from subclean.normalizers.rules import (
    RULESET_VERSION,
    WORD_CORRECTIONS,
    CorrectionRule,
    default_rules,
)

if TYPE_CHECKING:
    from subclean.config import CleanupConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RulePipeline:
    """
    Applies an ordered rule set to one text line at a time.

    Attributes:
        rules: Rules in application order.
        version: Rule-set version reported alongside results.

    Example:
        >>> pipeline = RulePipeline()
        >>> stats = pipeline.new_stats()
        >>> pipeline.apply_rules("I'min teh car", stats)
        "I'm in the car"
        >>> stats.nonzero()
        {'wordCorrections': 1, 'contractionSplit': 1}
    """

    rules: tuple[CorrectionRule, ...] = field(default_factory=default_rules)
    version: str = RULESET_VERSION

    def __post_init__(self) -> None:
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))
        for rule in self.rules:
            if not isinstance(rule, CorrectionRule):
                raise ConfigurationError(f"Expected CorrectionRule, got {type(rule).__name__}")

    @property
    def categories(self) -> tuple[str, ...]:
        """Distinct rule categories, in first-use order."""
        return tuple(dict.fromkeys(rule.category for rule in self.rules))

    def new_stats(self) -> CorrectionStats:
        """Zero-initialized stats covering every category of this pipeline."""
        return CorrectionStats.for_categories(self.categories)

    def apply_rules(self, text: str, stats: CorrectionStats) -> str:
        """
        Run every rule over a single text line.

        Args:
            text: Content of one TEXT line (no terminator).
            stats: Document-level counters, updated in place.

        Returns:
            Corrected line content.

        Raises:
            RuleError: If a rule raises. Counts already added for this
                line are left in `stats`; the engine discards them.
        """
        for rule in self.rules:
            try:
                text, count = rule.apply_counted(text)
            except Exception as e:
                raise RuleError(rule.category, f"{type(e).__name__}: {e}") from e
            if count:
                stats.increment(rule.category, count)
        return text

    def without(self, *categories: str) -> RulePipeline:
        """Return a pipeline with the given categories removed, order preserved."""
        unknown = set(categories) - set(self.categories)
        if unknown:
            raise ConfigurationError(f"Pipeline has no categories {sorted(unknown)}")
        return RulePipeline(
            rules=tuple(rule for rule in self.rules if rule.category not in categories),
            version=self.version,
        )


def build_pipeline(config: CleanupConfig | None = None) -> RulePipeline:
    """
    Create the rule pipeline described by a CleanupConfig.

    Args:
        config: Cleanup configuration (uses the default rule set if None).

    Returns:
        Configured RulePipeline.
    """
    if config is None:
        return RulePipeline()

    table = config.word_corrections(dict(WORD_CORRECTIONS))
    pipeline = RulePipeline(rules=default_rules(table))
    if config.disabled_categories:
        pipeline = pipeline.without(*sorted(config.disabled_categories))
        logger.debug("Disabled rule categories: %s", sorted(config.disabled_categories))
    return pipeline
