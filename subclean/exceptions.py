"""
Exception classes for subclean.

All subclean exceptions inherit from SubCleanError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     config = subclean.load_config("cleanup.yaml")
    ... except subclean.ConfigurationError as e:
    ...     print(f"Bad config: {e}")
    ... except subclean.SubCleanError as e:
    ...     print(f"subclean error: {e}")
"""


class SubCleanError(Exception):
    """
    Base exception for all subclean errors.

    Catch this to handle any subclean-specific error.
    """

    pass


class ConfigurationError(SubCleanError):
    """
    Raised for invalid configuration or rule tables.

    Example:
        >>> CleanupConfig(on_rule_error="ignore")
        ConfigurationError: on_rule_error must be one of ('warn', 'raise'), got 'ignore'
    """

    pass


class RuleError(SubCleanError):
    """
    Raised when a correction rule fails on a line.

    This is only raised when config.on_rule_error == "raise".
    Otherwise the document is left uncorrected and a warning is logged.
    """

    def __init__(self, category: str, message: str):
        super().__init__(f"Rule '{category}' failed: {message}")
        self.category = category


class ManifestError(SubCleanError):
    """Raised when a subtitle manifest entry cannot be parsed in strict mode."""

    pass
