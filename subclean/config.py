"""
Configuration for subclean subtitle correction.

The engine itself needs no configuration; these options shape the rule
set it is built with and how the batch layer picks and processes files.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import yaml

from subclean.exceptions import ConfigurationError
from subclean.normalizers.rules import CATEGORIES, WORD_CORRECTIONS, validate_word_corrections

logger = logging.getLogger(__name__)


@dataclass
class CleanupConfig:
    """
    Configuration for subtitle cleanup.

    All options have sensible defaults. Create a config only
    if you need to customize behavior.

    Example:
        >>> config = CleanupConfig(
        ...     disabled_categories=frozenset({"qToG"}),
        ...     extra_word_corrections={"thier": "their"},
        ... )
        >>> engine = CorrectionEngine(config=config)
    """

    # Manifest language codes that get corrected (others pass through)
    languages: tuple[str, ...] = ("eng", "en")

    # Rule failure policy: "warn" leaves the document uncorrected
    on_rule_error: Literal["warn", "raise"] = "warn"

    # Rule set shaping
    disabled_categories: frozenset[str] = field(default_factory=frozenset)
    extra_word_corrections: dict[str, str] = field(default_factory=dict)

    # Batch processing
    parallel: bool = False
    max_workers: int = 4

    def __post_init__(self):
        """Validate configuration."""
        if isinstance(self.languages, str):
            self.languages = (self.languages,)
        self.languages = tuple(lang.strip().lower() for lang in self.languages)
        if not self.languages:
            raise ConfigurationError("languages must not be empty")

        valid_policies = ("warn", "raise")
        if self.on_rule_error not in valid_policies:
            raise ConfigurationError(
                f"on_rule_error must be one of {valid_policies}, got {self.on_rule_error!r}"
            )

        self.disabled_categories = frozenset(self.disabled_categories)
        unknown = self.disabled_categories - set(CATEGORIES)
        if unknown:
            raise ConfigurationError(
                f"Unknown rule categories: {sorted(unknown)}. Known: {list(CATEGORIES)}"
            )

        self.extra_word_corrections = dict(self.extra_word_corrections)
        validate_word_corrections(self.extra_word_corrections)
        # Entries may not chain into the default table either
        self.word_corrections(dict(WORD_CORRECTIONS))

        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

    def word_corrections(self, base: dict[str, str]) -> dict[str, str]:
        """
        Merge extra word corrections over a base table.

        Raises:
            ConfigurationError: If the merged table is not usable.
        """
        merged = dict(base)
        merged.update({key.lower(): value for key, value in self.extra_word_corrections.items()})
        validate_word_corrections(merged)
        return merged


def load_config(path: str | Path) -> CleanupConfig:
    """
    Load a CleanupConfig from a YAML file.

    Example file:
        languages: [eng, en]
        on_rule_error: warn
        disabled_categories: [qToG]
        extra_word_corrections:
          thier: their

    Raises:
        ConfigurationError: If the file cannot be read or has invalid content.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path} must be a mapping, got {type(data).__name__}")

    return config_from_dict(data)


def config_from_dict(data: dict[str, Any]) -> CleanupConfig:
    """Build a CleanupConfig from a plain mapping (e.g. parsed YAML)."""
    known = {f.name for f in fields(CleanupConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {sorted(unknown)}")

    kwargs = dict(data)
    if "languages" in kwargs and not isinstance(kwargs["languages"], str):
        kwargs["languages"] = tuple(kwargs["languages"] or ())
    if "disabled_categories" in kwargs:
        kwargs["disabled_categories"] = frozenset(kwargs["disabled_categories"] or ())
    if "extra_word_corrections" in kwargs:
        kwargs["extra_word_corrections"] = dict(kwargs["extra_word_corrections"] or {})

    try:
        config = CleanupConfig(**kwargs)
    except (TypeError, AttributeError) as e:
        raise ConfigurationError(f"Invalid config values: {e}") from e

    logger.debug("Loaded config: %s", config)
    return config
