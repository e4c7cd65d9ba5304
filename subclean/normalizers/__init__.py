"""
Normalizers for repairing OCR'd subtitle text.

Rule Pipeline:
- RulePipeline: Ordered, immutable rule set applied to one text line at a time
- CorrectionRule: A named group of regex substitutions counted under one category
- default_rules: The standard OCR repair rules in their fixed order

Rule tables (WORD_CORRECTIONS, GLOBAL_CHAR_FIXES, ...) are read-only and
can be replaced by building rules with custom tables.
"""

from subclean.normalizers.pipeline import RulePipeline, build_pipeline
from subclean.normalizers.rules import (
    CATEGORIES,
    CONTRACTION_STEMS,
    GLOBAL_CHAR_FIXES,
    LIGATURES,
    RULESET_VERSION,
    WORD_CORRECTIONS,
    CorrectionRule,
    Substitution,
    contraction_split_rule,
    default_rules,
    digit_to_letter_rule,
    ellipsis_spacing_rule,
    global_replacements_rule,
    hyphen_normalize_rule,
    i_fix_rule,
    ligature_rule,
    punct_spacing_rule,
    q_to_g_rule,
    space_collapse_rule,
    validate_word_corrections,
    word_corrections_rule,
    zero_to_o_rule,
    zero_width_rule,
)

__all__ = [
    # Pipeline
    "RulePipeline",
    "build_pipeline",
    "default_rules",
    "RULESET_VERSION",
    "CATEGORIES",
    # Rule types
    "CorrectionRule",
    "Substitution",
    # Rule builders
    "zero_width_rule",
    "ligature_rule",
    "global_replacements_rule",
    "i_fix_rule",
    "zero_to_o_rule",
    "digit_to_letter_rule",
    "q_to_g_rule",
    "word_corrections_rule",
    "punct_spacing_rule",
    "ellipsis_spacing_rule",
    "hyphen_normalize_rule",
    "space_collapse_rule",
    "contraction_split_rule",
    "validate_word_corrections",
    # Tables
    "WORD_CORRECTIONS",
    "GLOBAL_CHAR_FIXES",
    "LIGATURES",
    "CONTRACTION_STEMS",
]
