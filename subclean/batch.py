"""
Batch correction of extracted subtitle files.

The extraction step upstream writes one SRT per subtitle track plus an
exports manifest describing them, one track per line:

    filename.srt|track_index|language|codec|forced|title

This module reads that manifest, keeps the tracks whose language is
configured for correction (English by default), runs the correction
engine over each file and rewrites only the files that changed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from subclean.config import CleanupConfig
from subclean.engine import CorrectionEngine
from subclean.exceptions import ManifestError
from subclean.models import CorrectionReport, CorrectionStats

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = "_subtitles.exports"
LEGACY_MANIFEST_NAME = "subtitles.exports"

FORCED_VALUES = {"1", "true", "yes", "forced"}


# =============================================================================
# MANIFEST
# =============================================================================


@dataclass(frozen=True)
class ManifestEntry:
    """One extracted subtitle track listed in the exports manifest."""

    filename: str
    track_index: str = ""
    language: str = ""
    codec: str = ""
    forced: bool = False
    title: str = ""

    def matches_language(self, languages: Iterable[str]) -> bool:
        """Whether this track's language code is one of `languages`."""
        return self.language in {lang.lower() for lang in languages}


def parse_manifest_line(line: str, strict: bool = False) -> ManifestEntry | None:
    """
    Parse a single manifest line.

    Blank lines yield None. The title is everything after the fifth
    delimiter, so titles may contain "|". Missing trailing fields are
    left empty.

    Raises:
        ManifestError: If strict and the line has no filename.
    """
    if not line.strip():
        return None

    parts = line.rstrip("\r\n").split("|", 5)
    parts += [""] * (6 - len(parts))
    filename, track_index, language, codec, forced, title = parts

    if not filename.strip():
        if strict:
            raise ManifestError(f"Manifest line has no filename: {line!r}")
        logger.warning("Skipping manifest line without filename: %r", line)
        return None

    return ManifestEntry(
        filename=filename.strip(),
        track_index=track_index.strip(),
        language=language.strip().lower(),
        codec=codec.strip(),
        forced=forced.strip().lower() in FORCED_VALUES,
        title=title.strip(),
    )


def parse_manifest(text: str, strict: bool = False) -> list[ManifestEntry]:
    """
    Parse the text of an exports manifest.

    Example:
        >>> entries = parse_manifest("movie.eng.srt|3|eng|S_HDMV/PGS|0|English\\n")
        >>> entries[0].filename, entries[0].language
        ('movie.eng.srt', 'eng')
    """
    entries = []
    for line in text.splitlines():
        entry = parse_manifest_line(line, strict=strict)
        if entry is not None:
            entries.append(entry)
    return entries


def find_manifest(work_dir: str | Path, media_name: str | Path) -> Path | None:
    """
    Locate the exports manifest for a media file.

    Prefers "<basename>_subtitles.exports" and falls back to the legacy
    "subtitles.exports".

    Args:
        work_dir: Directory holding the extracted subtitles.
        media_name: Media file name or path (only its stem is used).

    Returns:
        Path to the manifest, or None if neither exists.
    """
    work_dir = Path(work_dir)
    candidates = [
        work_dir / f"{Path(media_name).stem}{MANIFEST_SUFFIX}",
        work_dir / LEGACY_MANIFEST_NAME,
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


# =============================================================================
# FILE CORRECTION
# =============================================================================


@dataclass
class FileResult:
    """Outcome of correcting one subtitle file."""

    path: Path
    report: CorrectionReport
    written: bool = False


@dataclass
class BatchSummary:
    """Aggregate results of a batch run."""

    files_processed: int = 0
    files_updated: int = 0
    results: list[FileResult] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def stats(self) -> CorrectionStats:
        """Correction counts summed over every processed file."""
        total = CorrectionStats()
        for result in self.results:
            total = total.merge(result.report.stats)
        return total

    @property
    def ok(self) -> bool:
        """Whether every selected file was processed without error."""
        return not self.errors


def read_subtitle(path: Path) -> str:
    """Read a subtitle file as UTF-8 with its line endings untouched."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_subtitle(path: Path, text: str) -> None:
    """Write subtitle text as UTF-8 without translating line endings."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def correct_file(path: str | Path, engine: CorrectionEngine, write: bool = True) -> FileResult:
    """
    Correct one subtitle file, rewriting it only if it changed.

    Args:
        path: SRT file path.
        engine: Correction engine to use.
        write: Whether to write changes back (False for dry runs).

    Returns:
        FileResult with the engine's report.

    Raises:
        OSError: If the file cannot be read or written.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    path = Path(path)
    report = engine.correct(read_subtitle(path))

    written = False
    if report.changed and write:
        write_subtitle(path, report.corrected_text)
        written = True

    return FileResult(path=path, report=report, written=written)


def correct_files(
    paths: Iterable[str | Path],
    engine: CorrectionEngine | None = None,
    parallel: bool = False,
    max_workers: int = 4,
    write: bool = True,
) -> Iterator[tuple[Path, FileResult | Exception]]:
    """
    Correct multiple subtitle files, yielding results as completed.

    Each document is independent, so parallel mode simply runs one
    engine call per file on a thread pool.

    Args:
        paths: SRT file paths.
        engine: Correction engine (default rule set if None).
        parallel: Whether to process files concurrently.
        max_workers: Max parallel workers (if parallel=True).
        write: Whether to write changes back.

    Yields:
        (path, result) tuples where result is a FileResult or the
        exception raised for that file.
    """
    engine = engine or CorrectionEngine()
    paths = [Path(p) for p in paths]

    if not parallel or len(paths) < 2:
        for path in paths:
            try:
                yield (path, correct_file(path, engine, write=write))
            except (OSError, UnicodeDecodeError) as e:
                yield (path, e)
        return

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(correct_file, path, engine, write): path for path in paths}
        for future in as_completed(futures):
            path = futures[future]
            try:
                yield (path, future.result())
            except (OSError, UnicodeDecodeError) as e:
                yield (path, e)


def format_stats(stats: CorrectionStats) -> str:
    """One-line "category=count" summary of non-zero counts."""
    nonzero = stats.nonzero()
    if not nonzero:
        return "no corrections"
    return ", ".join(f"{category}={count}" for category, count in nonzero.items())


def fix_subtitles(
    work_dir: str | Path,
    media_name: str | Path,
    config: CleanupConfig | None = None,
    write: bool = True,
) -> BatchSummary:
    """
    Correct every configured-language subtitle listed in the manifest.

    Args:
        work_dir: Directory holding the manifest and extracted SRT files.
        media_name: Media file the subtitles were extracted from.
        config: Cleanup configuration (uses defaults if None).
        write: Whether to write changes back.

    Returns:
        BatchSummary. A missing or empty manifest yields an empty summary.
    """
    config = config or CleanupConfig()
    work_dir = Path(work_dir)
    summary = BatchSummary()

    manifest = find_manifest(work_dir, media_name)
    if manifest is None:
        logger.warning("No subtitle manifest found in %s, skipping subtitle cleanup", work_dir)
        return summary

    raw = read_subtitle(manifest).strip()
    if not raw:
        logger.warning("Subtitle manifest %s is empty, nothing to clean", manifest)
        return summary

    selected = []
    for entry in parse_manifest(raw):
        if not entry.matches_language(config.languages):
            logger.debug("Skipping %s (language %r)", entry.filename, entry.language)
            continue
        path = work_dir / entry.filename
        if not path.is_file():
            logger.warning("Subtitle file not found: %s", path)
            summary.missing.append(path)
            continue
        selected.append(path)

    engine = CorrectionEngine(config=config)
    for path, result in correct_files(
        selected,
        engine,
        parallel=config.parallel,
        max_workers=config.max_workers,
        write=write,
    ):
        if isinstance(result, Exception):
            logger.warning("Failed to clean %s: %s", path.name, result)
            summary.errors.append((path, str(result)))
            continue

        summary.files_processed += 1
        summary.results.append(result)
        if result.report.failed:
            summary.errors.append((path, result.report.error))
        elif result.report.changed:
            summary.files_updated += 1
            action = "Updated" if result.written else "Would update"
            logger.info("%s %s | %s", action, path.name, format_stats(result.report.stats))
        else:
            logger.info("No changes needed for %s", path.name)

    logger.info(
        "Subtitle cleanup done: processed %d file(s), updated %d",
        summary.files_processed,
        summary.files_updated,
    )
    return summary
