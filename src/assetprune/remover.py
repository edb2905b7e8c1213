from __future__ import annotations

import logging
from pathlib import Path

from assetprune.models import DetectionReport, RemovalOutcome
from assetprune.sizes import format_size

logger = logging.getLogger(__name__)


def remove_unused(root: Path, report: DetectionReport, dry_run: bool = True) -> RemovalOutcome:
    """Delete the report's unused assets, or only log them when ``dry_run``.

    A failed deletion is recorded and the remaining assets are still tried.
    Deleted files are not recoverable.
    """
    removed: list[str] = []
    errors: list[str] = []
    removed_size = 0

    if report.unused_assets:
        verb = "Would remove" if dry_run else "Removing"
        logger.info("%s %d unused assets", verb, len(report.unused_assets))

    for asset in report.unused_assets:
        if dry_run:
            logger.info("[DRY RUN] Would remove: %s (%s)", asset.path, asset.formatted_size)
        else:
            try:
                (root / asset.path).unlink()
            except OSError as exc:
                message = f"Error removing {asset.path}: {exc.strerror or exc}"
                logger.error(message)
                errors.append(message)
                continue
            logger.info("Removed: %s (%s)", asset.path, asset.formatted_size)
        removed.append(asset.path)
        removed_size += asset.size

    return RemovalOutcome(
        dry_run=dry_run,
        removed_count=len(removed),
        removed_size=removed_size,
        formatted_removed_size=format_size(removed_size),
        removed=tuple(removed),
        errors=tuple(errors),
    )
