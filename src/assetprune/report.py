from __future__ import annotations

import json
import shlex
from dataclasses import asdict
from pathlib import Path

from assetprune.models import DetectionReport, RemovalOutcome


def write_report(report: DetectionReport, path: Path) -> None:
    path.write_text(json.dumps(asdict(report), indent=2, sort_keys=True) + "\n")


def write_cleanup_script(report: DetectionReport, path: Path) -> None:
    """Write a reviewable ``sh`` script that deletes the unused assets.

    The script locates the project root relative to its own directory, so
    ``path`` must sit directly in the project root.
    """
    lines = [
        "#!/bin/sh",
        "# Generated by assetprune. Review before running!",
        "set -eu",
        'ROOT="$(cd "$(dirname "$0")" && pwd)"',
        "",
        f'echo "Removing {report.summary.unused_assets} unused assets '
        f'({report.summary.formatted_total_unused_size})..."',
    ]
    for asset in report.unused_assets:
        lines.append(f'rm -f "$ROOT"/{shlex.quote(asset.path)}')
    lines.append('echo "Done. Rebuild and test the app before committing."')
    path.write_text("\n".join(lines) + "\n")
    path.chmod(0o700)


def render_report(report: DetectionReport) -> str:
    summary = report.summary
    lines = [
        "Unused Asset Detection Report",
        "=============================",
        "",
        f"Root: {report.root}",
        f"Total assets found: {summary.total_assets}",
        f"Referenced assets: {summary.referenced_assets}",
        f"Unused assets: {summary.unused_assets}",
        f"Total unused size: {summary.formatted_total_unused_size}",
        f"Errors: {summary.errors_encountered}",
        "",
    ]
    if report.unused_assets:
        lines.append("Unused assets (sorted by size):")
        for asset in report.unused_assets:
            lines.append(f"  - {asset.path} ({asset.formatted_size})")
        lines.extend(
            [
                "",
                "Recommendations:",
                "  - Review unused assets before deletion",
                "  - Check if assets are used in native code or configuration",
                "  - Consider keeping assets that might be loaded dynamically",
                "  - Removing unused assets could save "
                f"{summary.formatted_total_unused_size} of space",
                "",
            ]
        )
    else:
        lines.extend(["No unused assets found.", ""])
    lines.extend(_render_errors(report.errors))
    return "\n".join(lines)


def render_outcome(outcome: RemovalOutcome) -> str:
    if outcome.dry_run:
        lines = [
            f"DRY RUN: would remove {outcome.removed_count} assets",
            f"Would save {outcome.formatted_removed_size} of space",
        ]
    else:
        lines = [
            f"Removed {outcome.removed_count} assets",
            f"Saved {outcome.formatted_removed_size} of space",
        ]
    lines.append("")
    lines.extend(_render_errors(outcome.errors))
    return "\n".join(lines)


def _render_errors(errors: tuple[str, ...]) -> list[str]:
    if not errors:
        return []
    lines = [f"Errors encountered ({len(errors)}):"]
    lines.extend(f"  - {error}" for error in errors)
    lines.append("")
    return lines
