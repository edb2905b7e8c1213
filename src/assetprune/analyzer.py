from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path

from assetprune.errors import AssetPruneError, ReferenceScanError
from assetprune.models import (
    AssetConfig,
    DetectionReport,
    ReportSummary,
    RunContext,
    UnusedAsset,
)
from assetprune.references import ReferenceScanner
from assetprune.scanner import scan_assets
from assetprune.sizes import format_size

logger = logging.getLogger(__name__)


def detect(config: AssetConfig, reference_scanner: ReferenceScanner) -> DetectionReport:
    """Run scan, reference lookup, diff and sizing, and return the report.

    Nothing on disk is modified. Missing asset roots and reference scanner
    failures are raised; every other problem ends up in ``report.errors``.
    """
    context = RunContext(root=config.root.resolve())
    inventory = scan_assets(context, config.assets_dir, config.extensions)
    referenced = _referenced_assets(context, reference_scanner)
    unused = find_unused(inventory, referenced)
    logger.info("Found %d unused assets", len(unused))
    sizes = compute_sizes(context, unused)
    return build_report(context.root, inventory, referenced, sizes, context.errors)


def _referenced_assets(
    context: RunContext,
    reference_scanner: ReferenceScanner,
) -> frozenset[str]:
    logger.info("Getting referenced assets...")
    try:
        scan = reference_scanner.scan_references()
        referenced = frozenset(scan.referenced_assets)
    except AssetPruneError:
        raise
    except Exception as exc:
        raise ReferenceScanError(f"Error getting referenced assets: {exc}") from exc
    context.errors.extend(getattr(scan, "errors", ()))
    logger.info("Found %d referenced assets", len(referenced))
    return referenced


def find_unused(inventory: Iterable[str], referenced: Iterable[str]) -> frozenset[str]:
    """Return the inventory paths that are not referenced.

    Both sides must already use the same root-relative, ``/``-separated form.
    """
    return frozenset(inventory) - frozenset(referenced)


def compute_sizes(context: RunContext, unused: Iterable[str]) -> dict[str, int]:
    sizes: dict[str, int] = {}
    for rel_path in sorted(unused):
        try:
            sizes[rel_path] = (context.root / rel_path).stat().st_size
        except OSError as exc:
            message = f"Error getting size for {rel_path}: {exc.strerror or exc}"
            logger.warning(message)
            context.errors.append(message)
            sizes[rel_path] = 0
    logger.info("Total size of unused assets: %s", format_size(total_size(sizes)))
    return sizes


def total_size(sizes: Mapping[str, int]) -> int:
    return sum(sizes.values())


def build_report(
    root: Path,
    inventory: Iterable[str],
    referenced: Iterable[str],
    sizes: Mapping[str, int],
    errors: Iterable[str],
) -> DetectionReport:
    all_assets = tuple(sorted(inventory))
    referenced_assets = tuple(sorted(referenced))
    errors = tuple(errors)
    unused = [
        UnusedAsset(path=path, size=size, formatted_size=format_size(size))
        for path, size in sizes.items()
    ]
    # Stable sort: equal sizes keep the order of ``sizes``.
    unused.sort(key=lambda asset: asset.size, reverse=True)
    unused_assets = tuple(unused)
    unused_size = total_size(sizes)
    summary = ReportSummary(
        total_assets=len(all_assets),
        referenced_assets=len(referenced_assets),
        unused_assets=len(unused_assets),
        total_unused_size=unused_size,
        formatted_total_unused_size=format_size(unused_size),
        errors_encountered=len(errors),
    )
    return DetectionReport(
        root=str(root),
        generated_at=datetime.now(timezone.utc).isoformat(),
        summary=summary,
        all_assets=all_assets,
        referenced_assets=referenced_assets,
        unused_assets=unused_assets,
        errors=errors,
    )
