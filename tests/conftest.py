"""
Pytest configuration and fixtures for subclean tests.
"""

import random
from pathlib import Path

import pytest

SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:03,500\n"
    "- l mean, I do.\n"
    "-| don't know.\n"
    "\n"
    "2\n"
    "00:00:04,000 --> 00:00:06,000\n"
    "Teh cat sat , somethinq.\n"
    "\n"
    "3\n"
    "00:00:06,500 --> 00:00:08,000 X1:100 X2:200\n"
    "I'min the car...with you\n"
)

EXPECTED_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:03,500\n"
    "- I mean, I do.\n"
    "- I don't know.\n"
    "\n"
    "2\n"
    "00:00:04,000 --> 00:00:06,000\n"
    "The cat sat, something.\n"
    "\n"
    "3\n"
    "00:00:06,500 --> 00:00:08,000 X1:100 X2:200\n"
    "I'm in the car... with you\n"
)

# Building blocks for generated OCR-style lines: confusable glyphs,
# punctuation, whitespace, contraction stems and invisible characters
OCR_TOKENS = (
    *"l|1I058qgoa.!?,;:'\"-",
    " ",
    "  ",
    "\t",
    "...",
    "--",
    "I'm",
    "he's",
    "she's",
    "you're",
    "they'll",
    "in",
    "gone",
    "teh",
    "dont",
    "42",
    "\u200b",
    "\ufeff",
    "\ufb01",
    "\u201c",
    "\u2014",
    "\u2026",
)

CLEAN_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,000\n"
    "Hello, world!\n"
    "\n"
    "2\n"
    "00:00:02,500 --> 00:00:04,000\n"
    "Nothing to fix here.\n"
)


@pytest.fixture(scope="session")
def sample_srt() -> str:
    """SRT document with a handful of typical OCR errors."""
    return SAMPLE_SRT


@pytest.fixture(scope="session")
def expected_srt() -> str:
    """SAMPLE_SRT after correction with the default rule set."""
    return EXPECTED_SRT


@pytest.fixture(scope="session")
def clean_srt() -> str:
    """SRT document that needs no correction."""
    return CLEAN_SRT


@pytest.fixture
def subtitle_workdir(tmp_path: Path) -> Path:
    """
    Work directory laid out like the extraction step leaves it.

    Contains a manifest for "movie.mkv" listing an English track with
    errors, a French track, a clean forced English track and a track
    whose file is missing.
    """
    (tmp_path / "movie.eng.srt").write_text(SAMPLE_SRT, encoding="utf-8")
    (tmp_path / "movie.fre.srt").write_text(
        "1\n00:00:01,000 --> 00:00:02,000\nTeh chat , noir.\n", encoding="utf-8"
    )
    (tmp_path / "movie.en.forced.srt").write_text(CLEAN_SRT, encoding="utf-8")
    (tmp_path / "movie_subtitles.exports").write_text(
        "movie.eng.srt|3|eng|S_HDMV/PGS|0|English\n"
        "movie.fre.srt|4|fre|S_HDMV/PGS|0|Français\n"
        "movie.en.forced.srt|5|EN|S_HDMV/PGS|1|Forced | Signs\n"
        "missing.eng.srt|6|eng|S_HDMV/PGS|0|\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture(scope="session")
def random_ocr_lines() -> list[str]:
    """Seeded random lines mixing OCR confusions, punctuation and stems."""
    rng = random.Random(20240611)
    return [
        "".join(rng.choice(OCR_TOKENS) for _ in range(rng.randint(1, 14)))
        for _ in range(600)
    ]
