#!/usr/bin/env python3
"""
Basic subclean Usage Example

This example demonstrates the core workflow:
1. Correct the text of one SRT document
2. Inspect per-category correction counts
3. Customize the rule set
4. Correct the English tracks listed in an exports manifest
"""

from pathlib import Path

from subclean import CleanupConfig, CorrectionEngine, correct, fix_subtitles
from subclean.batch import correct_files, format_stats

SAMPLE = """1
00:00:01,000 --> 00:00:03,500
- l mean, I do.

2
00:00:04,000 --> 00:00:06,000
Teh cat sat , somethinq.
"""


def main():
    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Correction
    # ─────────────────────────────────────────────────────────────────────────

    report = correct(SAMPLE)

    print(report.corrected_text)
    print(f"Changed: {report.changed}")
    print(f"Rule set: {report.ruleset_version}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Correction Stats
    # ─────────────────────────────────────────────────────────────────────────

    # Every category is present; nonzero() keeps the ones that fired
    for category, count in report.stats.nonzero().items():
        print(f"  {category}: {count}")
    print(f"  total: {report.stats.total}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Custom Configuration
    # ─────────────────────────────────────────────────────────────────────────

    config = CleanupConfig(
        disabled_categories=frozenset({"qToG"}),  # Keep trailing q's
        extra_word_corrections={"thier": "their"},  # Extend the dictionary
        on_rule_error="raise",  # Fail loudly instead of skipping the file
    )

    # One engine serves any number of documents
    engine = CorrectionEngine(config=config)
    print(engine.correct("Thier cat sat , somethinq.").corrected_text)


def manifest_example():
    """Correct the English tracks an extraction step left in a work directory."""
    work_dir = Path("work/")

    summary = fix_subtitles(work_dir, "movie.mkv", config=CleanupConfig(parallel=True))

    print(f"Processed {summary.files_processed}, updated {summary.files_updated}")
    for path in summary.missing:
        print(f"  missing: {path.name}")
    for path, message in summary.errors:
        print(f"  FAILED {path.name}: {message}")


def dry_run_example():
    """Preview corrections for a directory of SRT files without writing."""
    for path, result in correct_files(sorted(Path("subs/").glob("*.srt")), write=False):
        if isinstance(result, Exception):
            print(f"{path.name}: FAILED ({result})")
        elif result.report.changed:
            print(f"{path.name}: {format_stats(result.report.stats)}")


if __name__ == "__main__":
    # The manifest and dry-run examples use placeholder paths.
    print("subclean Usage Examples")
    print("=" * 50)
    main()
