"""
Tests for subtitle exports manifest parsing and lookup.
"""

import pytest

from subclean.batch import (
    LEGACY_MANIFEST_NAME,
    ManifestEntry,
    find_manifest,
    parse_manifest,
    parse_manifest_line,
)
from subclean.exceptions import ManifestError


class TestParseManifestLine:
    """Tests for parse_manifest_line()."""

    def test_full_line(self):
        """All six fields are read."""
        entry = parse_manifest_line("movie.eng.srt|3|eng|S_HDMV/PGS|0|English SDH")
        assert entry == ManifestEntry(
            filename="movie.eng.srt",
            track_index="3",
            language="eng",
            codec="S_HDMV/PGS",
            forced=False,
            title="English SDH",
        )

    def test_title_with_delimiter(self):
        """Everything after the fifth delimiter belongs to the title."""
        entry = parse_manifest_line("a.srt|1|eng|S_TEXT/UTF8|0|Forced | Signs")
        assert entry.title == "Forced | Signs"

    @pytest.mark.parametrize("value", ["1", "true", "True", "yes", "forced"])
    def test_forced_flags(self, value):
        """Common truthy spellings mark a forced track."""
        assert parse_manifest_line(f"a.srt|1|eng|c|{value}|").forced is True

    @pytest.mark.parametrize("value", ["0", "", "false", "no"])
    def test_not_forced(self, value):
        """Anything else is not forced."""
        assert parse_manifest_line(f"a.srt|1|eng|c|{value}|").forced is False

    def test_short_line(self):
        """Missing trailing fields are left empty."""
        entry = parse_manifest_line("a.srt|2|en")
        assert entry.filename == "a.srt"
        assert entry.language == "en"
        assert entry.codec == ""
        assert entry.title == ""

    def test_language_lowercased(self):
        """Language codes are compared case-insensitively."""
        entry = parse_manifest_line("a.srt|1|ENG|c|0|")
        assert entry.language == "eng"
        assert entry.matches_language(["eng", "en"])
        assert not entry.matches_language(["fre"])

    def test_crlf_stripped(self):
        """A trailing CR does not leak into the title."""
        assert parse_manifest_line("a.srt|1|eng|c|0|Title\r\n").title == "Title"

    def test_blank_line(self):
        """Blank lines are skipped."""
        assert parse_manifest_line("   ") is None

    def test_missing_filename_lenient(self, caplog):
        """Without a filename the line is skipped with a warning."""
        assert parse_manifest_line("|1|eng|c|0|") is None
        assert "without filename" in caplog.text

    def test_missing_filename_strict(self):
        """Strict parsing refuses lines without a filename."""
        with pytest.raises(ManifestError):
            parse_manifest_line("|1|eng|c|0|", strict=True)


class TestParseManifest:
    """Tests for parse_manifest()."""

    def test_multiple_lines(self):
        """Every non-blank line becomes an entry, in order."""
        entries = parse_manifest(
            "a.eng.srt|3|eng|S_HDMV/PGS|0|English\n"
            "\n"
            "b.fre.srt|4|fre|S_HDMV/PGS|0|Français\r\n"
            "|5|eng||0|\n"
        )
        assert [e.filename for e in entries] == ["a.eng.srt", "b.fre.srt"]
        assert entries[1].title == "Français"

    def test_empty(self):
        """An empty manifest has no entries."""
        assert parse_manifest("") == []


class TestFindManifest:
    """Tests for find_manifest()."""

    def test_prefers_media_specific(self, tmp_path):
        """The per-media manifest wins over the legacy name."""
        specific = tmp_path / "movie_subtitles.exports"
        specific.write_text("", encoding="utf-8")
        (tmp_path / LEGACY_MANIFEST_NAME).write_text("", encoding="utf-8")
        assert find_manifest(tmp_path, "movie.mkv") == specific

    def test_media_path_uses_stem(self, tmp_path):
        """A full media path is reduced to its stem."""
        specific = tmp_path / "movie_subtitles.exports"
        specific.write_text("", encoding="utf-8")
        assert find_manifest(tmp_path, "/media/films/movie.mkv") == specific

    def test_legacy_fallback(self, tmp_path):
        """The legacy manifest is used when no per-media one exists."""
        legacy = tmp_path / LEGACY_MANIFEST_NAME
        legacy.write_text("", encoding="utf-8")
        assert find_manifest(tmp_path, "movie.mkv") == legacy

    def test_none_found(self, tmp_path):
        """No manifest gives None."""
        assert find_manifest(tmp_path, "movie.mkv") is None
