"""
OCR correction rules for subtitle text lines.

Each rule is a named category plus an ordered group of regex
substitutions. Rules only ever see the content of one text line; index
and timing lines are filtered out by the engine before any rule runs.

The default rule set targets the glyph confusions that image-based
subtitle OCR produces most often:
- l / | / 1 read instead of a capital I
- digits inside words (h0w, mi5sing)
- a trailing q read instead of g (somethinq)
- typographic quotes, dashes and ligatures
- glued contractions (I'min, you'reup)

Every rule is idempotent on its own: running it on its own output
changes nothing. Look-around is used for context so that neighbouring
candidates are repaired together, and a rule repeats its substitutions
until the line stops changing.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from subclean.exceptions import ConfigurationError

# Bumped whenever rule order or rule semantics change
RULESET_VERSION = "1.1.0"


# ============================================================================
# Rule Tables
# ============================================================================

# Small, conservative word-level fixes (typo -> correction)
WORD_CORRECTIONS: Mapping[str, str] = MappingProxyType(
    {
        "teh": "the",
        "adn": "and",
        "woud": "would",
        "coud": "could",
        "shoud": "should",
        "becuase": "because",
        "dont": "don't",
        "wont": "won't",
        "cant": "can't",
        "alot": "a lot",
    }
)

# Typographic punctuation -> plain ASCII, one entry per counted group
GLOBAL_CHAR_FIXES: tuple[tuple[str, str], ...] = (
    ("[“”„»«]", '"'),
    ("[‘’]", "'"),
    ("…", "..."),
    ("[—–]", "-"),
)

LIGATURES: tuple[tuple[str, str], ...] = (
    ("ﬁ", "fi"),
    ("ﬂ", "fl"),
)

CONTRACTION_STEMS: tuple[str, ...] = (
    "I'm",
    "you're",
    "we're",
    "they're",
    "it's",
    "he's",
    "she's",
    "I'd",
    "you'd",
    "he'd",
    "she'd",
    "we'd",
    "they'd",
    "I'll",
    "you'll",
    "he'll",
    "she'll",
    "we'll",
    "they'll",
)

# Category names in pipeline order
CATEGORIES: tuple[str, ...] = (
    "zeroWidthStrip",
    "ligatureFix",
    "globalReplacements",
    "iFix",
    "zeroToO",
    "digitToLetter",
    "qToG",
    "wordCorrections",
    "punctSpacing",
    "ellipsisSpacing",
    "hyphenNormalize",
    "spaceCollapse",
    "contractionSplit",
)

# Whole-word token as seen by the dictionary rule (ASCII word characters only)
WORD_TOKEN_PATTERN = re.compile(r"\b[\w']+\b", re.ASCII)


# ============================================================================
# Rule Types
# ============================================================================

Replacement = str | Callable[[re.Match[str]], str]


@dataclass(frozen=True)
class Substitution:
    """A single regex rewrite inside a rule."""

    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, text: str) -> tuple[str, int]:
        """
        Rewrite all matches in text.

        Returns:
            Tuple of (new text, number of matches whose replacement
            actually differed from the matched text).
        """
        changed = 0

        def _replace(match: re.Match[str]) -> str:
            nonlocal changed
            if callable(self.replacement):
                new = self.replacement(match)
            else:
                new = match.expand(self.replacement)
            if new != match.group(0):
                changed += 1
            return new

        return self.pattern.sub(_replace, text), changed


@dataclass(frozen=True)
class CorrectionRule:
    """
    A named, ordered group of substitutions counted under one category.

    Attributes:
        category: Statistics key this rule increments.
        substitutions: Rewrites applied in order, each on the previous output.
        count_per_substitution: Count one per substitution that changed
            the line instead of one per replaced occurrence.
        description: Human-readable summary for reports.
    """

    category: str
    substitutions: tuple[Substitution, ...]
    count_per_substitution: bool = False
    description: str = ""

    def apply_counted(self, text: str) -> tuple[str, int]:
        """
        Apply the rule and return (new text, count for this category).

        The substitutions are repeated until the text stops changing, so a
        rewrite that exposes a new match (a second glued contraction, a
        fresh whitespace-then-ellipsis run) is handled in the same call.
        Counts from every pass are summed.
        """
        total = 0
        # Built-in rules settle within len(text) passes; the bound only stops
        # a custom rule that never does
        for _ in range(len(text) + 1):
            new_text, count = self._apply_once(text)
            if new_text == text:
                break
            text = new_text
            total += count
        return text, total

    def _apply_once(self, text: str) -> tuple[str, int]:
        total = 0
        for substitution in self.substitutions:
            text, changed = substitution.apply(text)
            if changed:
                total += 1 if self.count_per_substitution else changed
        return text, total

    def apply(self, text: str) -> str:
        """Apply the rule, discarding the count."""
        return self.apply_counted(text)[0]


def _sub(pattern: str, replacement: Replacement, flags: int = 0) -> Substitution:
    return Substitution(pattern=re.compile(pattern, flags), replacement=replacement)


# ============================================================================
# Rule Builders
# ============================================================================


def zero_width_rule() -> CorrectionRule:
    """Strip zero-width spaces and stray byte-order marks."""
    return CorrectionRule(
        category="zeroWidthStrip",
        substitutions=(_sub("[\u200b\ufeff]", ""),),
        description="Remove zero-width space and BOM characters",
    )


def ligature_rule() -> CorrectionRule:
    """Expand fi/fl ligature glyphs."""
    return CorrectionRule(
        category="ligatureFix",
        substitutions=tuple(_sub(glyph, plain) for glyph, plain in LIGATURES),
        description="Expand fi/fl ligatures",
    )


def global_replacements_rule() -> CorrectionRule:
    """Normalize typographic quotes, ellipses and dashes."""
    return CorrectionRule(
        category="globalReplacements",
        substitutions=tuple(_sub(pattern, plain) for pattern, plain in GLOBAL_CHAR_FIXES),
        count_per_substitution=True,
        description="Plain quotes, apostrophes, ellipses and hyphens",
    )


def i_fix_rule() -> CorrectionRule:
    """
    Repair l / | / 1 read in place of a capital I.

    Sub-patterns, highest priority first:
        "- l mean"   -> "- I mean"   (dialogue dash, lone char)
        "-l'm"       -> "-I'm"       (dialogue dash, contraction)
        "so l said"  -> "so I said"  (standalone word)
        "and l'm"    -> "and I'm"    (contraction after a space)
        "| know"     -> "I know"     (line-leading pipe)
        " |know"     -> " Iknow"     (pipe glued to the next word)
        "spl|ne"     -> "splIne"     (pipe inside a word)
    """
    return CorrectionRule(
        category="iFix",
        substitutions=(
            _sub(r"^(\s*-\s*)[l|1](?=\s)", r"\g<1>I"),
            _sub(r"^(\s*-\s*)[l|1](?=')", r"\g<1>I"),
            _sub(r"(?<=\s)[l|1](?=\s)", "I"),
            _sub(r"(?<=\s)[l|1](?=')", "I"),
            _sub(r"^(\s*)\|(?=\s)", r"\g<1>I"),
            _sub(r"(?<=\s)\|(?=[A-Za-z])", "I"),
            _sub(r"(?<=[A-Za-z])\|(?=[A-Za-z])", "I"),
        ),
        description="Contextual l/|/1 to I",
    )


def zero_to_o_rule() -> CorrectionRule:
    """Replace 0 with o between two letters (h0w -> how, never 1080p)."""
    return CorrectionRule(
        category="zeroToO",
        substitutions=(_sub(r"(?<=[A-Za-z])0(?=[A-Za-z])", "o"),),
        description="0 to o between letters",
    )


def digit_to_letter_rule() -> CorrectionRule:
    """Replace 5/1/8 with s/l/B between two letters."""
    return CorrectionRule(
        category="digitToLetter",
        substitutions=(
            _sub(r"(?<=[A-Za-z])5(?=[A-Za-z])", "s"),
            _sub(r"(?<=[A-Za-z])1(?=[A-Za-z])", "l"),
            _sub(r"(?<=[A-Za-z])8(?=[A-Za-z])", "B"),
        ),
        description="5/1/8 to s/l/B between letters",
    )


def q_to_g_rule() -> CorrectionRule:
    """Replace a word-final q with g (somethinq. -> something.)."""
    return CorrectionRule(
        category="qToG",
        substitutions=(_sub(r"q(?=[\s.,!?;:'\")\]]|$)", "g"),),
        description="Trailing q to g",
    )


def validate_word_corrections(table: Mapping[str, str]) -> None:
    """
    Check a word-correction table before it is used in a rule.

    Keys must be single whole-word tokens. No replacement may contain a
    token that is itself a key, otherwise a second pass would rewrite the
    first pass's output.

    Raises:
        ConfigurationError: If the table is unusable.
    """
    for key, replacement in table.items():
        if not isinstance(key, str) or not isinstance(replacement, str):
            raise ConfigurationError(
                f"Word corrections must map strings to strings, got {key!r}: {replacement!r}"
            )

    keys = {key.lower() for key in table}
    for key, replacement in table.items():
        if not WORD_TOKEN_PATTERN.fullmatch(key):
            raise ConfigurationError(f"Word correction key {key!r} is not a single word")
        for token in WORD_TOKEN_PATTERN.findall(replacement):
            if token.lower() in keys:
                raise ConfigurationError(
                    f"Word correction {key!r} -> {replacement!r} produces "
                    f"{token!r}, which is itself corrected"
                )


def word_corrections_rule(table: Mapping[str, str] | None = None) -> CorrectionRule:
    """
    Build the curated dictionary rule.

    Tokens are looked up case-insensitively. If the original token starts
    with a capital, so does the replacement ("Teh" -> "The").

    Args:
        table: typo -> correction mapping. Defaults to WORD_CORRECTIONS.
    """
    if table is None:
        table = WORD_CORRECTIONS
    validate_word_corrections(table)
    lookup = MappingProxyType({key.lower(): value for key, value in table.items()})

    def _correct_word(match: re.Match[str]) -> str:
        word = match.group(0)
        replacement = lookup.get(word.lower())
        if replacement is None:
            return word
        if word[0].isupper() and replacement:
            return replacement[0].upper() + replacement[1:]
        return replacement

    return CorrectionRule(
        category="wordCorrections",
        substitutions=(Substitution(pattern=WORD_TOKEN_PATTERN, replacement=_correct_word),),
        description=f"Curated word fixes ({len(lookup)} entries)",
    )


def punct_spacing_rule() -> CorrectionRule:
    """Drop spaces before punctuation, add one after sentence punctuation."""
    return CorrectionRule(
        category="punctSpacing",
        substitutions=(
            _sub(r"\s+([.!?,;:])", r"\1"),
            _sub(r"([.!?])([A-Za-z])", r"\1 \2"),
        ),
        description="Punctuation spacing",
    )


def ellipsis_spacing_rule() -> CorrectionRule:
    """Attach '...' to the preceding word and space it from the next."""
    return CorrectionRule(
        category="ellipsisSpacing",
        substitutions=(
            _sub(r"\s+\.\.\.", "..."),
            _sub(r"\.\.\.(?=[A-Za-z])", "... "),
        ),
        description="Ellipsis spacing",
    )


def hyphen_normalize_rule() -> CorrectionRule:
    """Normalize the dialogue dash to '- ' and collapse '--' runs."""
    return CorrectionRule(
        category="hyphenNormalize",
        substitutions=(
            _sub(r"^\s*-\s*(?=\S)", "- "),
            _sub(r"-{2,}", "-"),
        ),
        description="Dialogue dash and repeated hyphens",
    )


def space_collapse_rule() -> CorrectionRule:
    """Collapse runs of plain spaces. Tabs are left alone."""
    return CorrectionRule(
        category="spaceCollapse",
        substitutions=(_sub(r" {2,}", " "),),
        description="Collapse repeated spaces",
    )


def contraction_split_rule(stems: tuple[str, ...] = CONTRACTION_STEMS) -> CorrectionRule:
    """Split a contraction glued to the next word (I'min -> I'm in)."""
    alternation = "|".join(re.escape(stem) for stem in sorted(stems, key=len, reverse=True))
    return CorrectionRule(
        category="contractionSplit",
        substitutions=(_sub(rf"\b({alternation})([a-z]{{2,}})\b", r"\1 \2", re.ASCII),),
        description="Split glued contractions",
    )


def default_rules(word_corrections: Mapping[str, str] | None = None) -> tuple[CorrectionRule, ...]:
    """
    Build the standard ordered rule set.

    Order matters: later rules see the output of earlier ones (the I fix
    runs before the digit rules so that " 1 " becomes "I", not "l").

    Args:
        word_corrections: Optional replacement for the curated dictionary.

    Returns:
        Rules in CATEGORIES order.
    """
    return (
        zero_width_rule(),
        ligature_rule(),
        global_replacements_rule(),
        i_fix_rule(),
        zero_to_o_rule(),
        digit_to_letter_rule(),
        q_to_g_rule(),
        word_corrections_rule(word_corrections),
        punct_spacing_rule(),
        ellipsis_spacing_rule(),
        hyphen_normalize_rule(),
        space_collapse_rule(),
        contraction_split_rule(),
    )
