"""
Command-line interface for subclean.

Usage:
    # Correct SRT files in place
    subclean fix movie.eng.srt other.eng.srt

    # Show what would change without writing
    subclean fix --dry-run movie.eng.srt

    # Correct the English tracks listed in a work directory's manifest
    subclean manifest /tmp/work movie.mkv --config cleanup.yaml

    # Machine-readable output
    subclean fix --json movie.eng.srt
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from tabulate import tabulate

from subclean import __version__
from subclean.batch import FileResult, correct_files, fix_subtitles
from subclean.config import CleanupConfig, load_config
from subclean.engine import CorrectionEngine
from subclean.exceptions import ConfigurationError, SubCleanError
from subclean.models import CorrectionStats

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2


def generate_cli_report(
    results: list[FileResult],
    failures: list[tuple[Path, str]],
    title: str = "Subtitle Cleanup Report",
) -> str:
    """Terminal-friendly tables of per-file status and per-category totals."""
    lines = []
    lines.append("=" * 60)
    lines.append(title)
    lines.append("=" * 60)
    lines.append("")

    rows = []
    for result in results:
        if result.report.failed:
            status = "failed"
        elif result.written:
            status = "updated"
        elif result.report.changed:
            status = "would update"
        else:
            status = "unchanged"
        rows.append([result.path.name, status, result.report.stats.total])
    for path, _ in failures:
        rows.append([path.name, "error", "-"])
    lines.append(tabulate(rows, headers=["File", "Status", "Corrections"], tablefmt="simple"))
    lines.append("")

    totals = CorrectionStats()
    for result in results:
        totals = totals.merge(result.report.stats)
    nonzero = totals.nonzero()
    if nonzero:
        lines.append(
            tabulate(
                sorted(nonzero.items()),
                headers=["Category", "Count"],
                tablefmt="simple",
            )
        )
    else:
        lines.append("No corrections.")

    for path, message in failures:
        lines.append(f"! {path.name}: {message}")

    return "\n".join(lines)


def generate_json_report(
    results: list[FileResult],
    failures: list[tuple[Path, str]],
) -> str:
    """Machine-readable report."""
    return json.dumps(
        {
            "version": __version__,
            "files": [
                {"path": str(result.path), "written": result.written, **result.report.to_dict()}
                for result in results
            ],
            "failures": [{"path": str(path), "error": message} for path, message in failures],
        },
        indent=2,
    )


def _load_config(args: argparse.Namespace) -> CleanupConfig:
    config = load_config(args.config) if args.config else CleanupConfig()
    if args.parallel:
        config = replace(config, parallel=True)
    if args.workers is not None:
        config = replace(config, max_workers=args.workers)
    return config


def _cmd_fix(args: argparse.Namespace) -> int:
    config = _load_config(args)
    engine = CorrectionEngine(config=config)

    results: list[FileResult] = []
    failures: list[tuple[Path, str]] = []
    for path, result in correct_files(
        args.files,
        engine,
        parallel=config.parallel,
        max_workers=config.max_workers,
        write=not args.dry_run,
    ):
        if isinstance(result, Exception):
            logger.warning("Failed to clean %s: %s", path, result)
            failures.append((path, str(result)))
        else:
            results.append(result)

    _print_report(args, results, failures)
    if failures or any(r.report.failed for r in results):
        return EXIT_FAILURES
    return EXIT_OK


def _cmd_manifest(args: argparse.Namespace) -> int:
    config = _load_config(args)
    summary = fix_subtitles(args.work_dir, args.media, config=config, write=not args.dry_run)
    failures = [(path, message) for path, message in summary.errors]
    failures += [(path, "file not found") for path in summary.missing]
    # failed reports are already listed in results
    failures = [f for f in failures if f[0] not in {r.path for r in summary.results}]

    _print_report(args, summary.results, failures)
    return EXIT_OK if summary.ok else EXIT_FAILURES


def _print_report(
    args: argparse.Namespace,
    results: list[FileResult],
    failures: list[tuple[Path, str]],
) -> None:
    if args.json:
        print(generate_json_report(results, failures))
    else:
        print(generate_cli_report(results, failures))


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="subclean",
        description="Fix common OCR errors in SRT subtitles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=Path,
        help="Path to YAML cleanup config",
    )
    common.add_argument(
        "--dry-run",
        action="store_true",
        help="Report corrections without writing files",
    )
    common.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON report instead of tables",
    )
    common.add_argument(
        "--parallel",
        action="store_true",
        help="Process files concurrently",
    )
    common.add_argument(
        "--workers",
        type=int,
        help="Max parallel workers (default: 4)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    fix = subparsers.add_parser("fix", parents=[common], help="Correct SRT files in place")
    fix.add_argument("files", nargs="+", type=Path, help="SRT files to correct")
    fix.set_defaults(handler=_cmd_fix)

    manifest = subparsers.add_parser(
        "manifest",
        parents=[common],
        help="Correct tracks listed in a subtitle exports manifest",
    )
    manifest.add_argument("work_dir", type=Path, help="Directory with manifest and SRT files")
    manifest.add_argument("media", help="Media file the subtitles were extracted from")
    manifest.set_defaults(handler=_cmd_manifest)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return an exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except SubCleanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
