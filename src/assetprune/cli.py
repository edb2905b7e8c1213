from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from assetprune import __version__
from assetprune.models import (
    CLEANUP_SCRIPT_FILENAME,
    DEFAULT_ASSETS_DIR,
    DEFAULT_SOURCE_DIRS,
    DEFAULT_SOURCE_FILES,
    REPORT_FILENAME,
    AssetConfig,
)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="assetprune",
        description=(
            "Find static assets that nothing in the project references. "
            "Removal is a dry-run unless --execute --yes is given."
        ),
    )
    parser.add_argument("--path", default=".", help="Project root directory")
    parser.add_argument(
        "--assets-dir",
        default=DEFAULT_ASSETS_DIR,
        help=f"Asset directory relative to --path (default: {DEFAULT_ASSETS_DIR})",
    )
    parser.add_argument(
        "--source-dir",
        action="append",
        default=[],
        help="Directory to scan for asset references (repeatable, replaces defaults)",
    )
    parser.add_argument(
        "--source-file",
        action="append",
        default=[],
        help="Extra file to scan for asset references (repeatable, replaces defaults)",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--report",
        default=REPORT_FILENAME,
        help=f"JSON report path, relative to --path (default: {REPORT_FILENAME})",
    )
    output.add_argument("--no-report", action="store_true", help="Do not write a JSON report")
    parser.add_argument(
        "--cleanup-script",
        action="store_true",
        help=f"Write {CLEANUP_SCRIPT_FILENAME} to the project root",
    )
    parser.add_argument(
        "--remove",
        action="store_true",
        help="Remove unused assets after reporting (dry-run unless --execute)",
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Actually delete files (requires --remove and --yes)",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm destructive removal (required with --execute)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    root = Path(args.path).resolve()
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Path does not exist or is not a directory: {root}")
    if args.execute and not args.remove:
        raise SystemExit("--execute only applies together with --remove.")
    if args.execute and not args.yes:
        raise SystemExit("Refusing to delete files without --yes confirmation.")

    assets_dir = Path(args.assets_dir)
    if assets_dir.is_absolute():
        try:
            assets_dir = assets_dir.resolve().relative_to(root)
        except ValueError:
            raise SystemExit(
                f"Assets directory must be inside the project root {root}: {args.assets_dir}"
            ) from None
    report_path = root / args.report
    script_path = root / CLEANUP_SCRIPT_FILENAME
    try:
        config = AssetConfig(
            root=root,
            assets_dir=assets_dir.as_posix(),
            source_dirs=tuple(args.source_dir) or DEFAULT_SOURCE_DIRS,
            source_files=tuple(args.source_file) or DEFAULT_SOURCE_FILES,
            ignored_files=frozenset({report_path, script_path}),
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    from assetprune.analyzer import detect
    from assetprune.errors import AssetPruneError
    from assetprune.references import SourceReferenceScanner
    from assetprune.remover import remove_unused
    from assetprune.report import (
        render_outcome,
        render_report,
        write_cleanup_script,
        write_report,
    )

    try:
        report = detect(config, SourceReferenceScanner(config))
    except AssetPruneError as exc:
        raise SystemExit(f"Unused asset detection failed: {exc}") from exc

    print(render_report(report))
    if not args.no_report:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        write_report(report, report_path)
        print(f"Report saved to: {report_path}")
    if args.cleanup_script:
        write_cleanup_script(report, script_path)
        print(f"Cleanup script written to: {script_path}")

    if args.remove:
        outcome = remove_unused(root, report, dry_run=not args.execute)
        print(render_outcome(outcome))
    elif report.unused_assets:
        print("Run with --remove to preview removal, --remove --execute --yes to delete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
