from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from assetprune.errors import MissingDirectoryError
from assetprune.models import (
    ASSET_EXTENSIONS,
    DEFAULT_ASSETS_DIR,
    RunContext,
    normalize_assets_dir,
)

logger = logging.getLogger(__name__)


def scan_assets(
    context: RunContext,
    assets_dir: str = DEFAULT_ASSETS_DIR,
    extensions: Iterable[str] = ASSET_EXTENSIONS,
) -> frozenset[str]:
    """Collect every asset file under ``assets_dir``.

    Paths are relative to ``context.root`` and use ``/`` separators. A
    subdirectory that cannot be read is recorded in ``context.errors`` and
    skipped; a missing asset root raises :class:`MissingDirectoryError`.
    """
    root = context.root
    assets_dir = normalize_assets_dir(assets_dir)
    assets_root = root / assets_dir
    if not assets_root.is_dir():
        raise MissingDirectoryError(assets_root)

    wanted = {ext.lower() for ext in extensions}

    def _record(exc: OSError) -> None:
        directory = _relative(root, Path(exc.filename)) if exc.filename else assets_dir
        message = f"Error scanning assets directory {directory}: {exc.strerror or exc}"
        logger.warning(message)
        context.errors.append(message)

    logger.info("Scanning assets directory: %s", assets_root)
    assets: set[str] = set()
    for dirpath, _dirnames, filenames in os.walk(assets_root, onerror=_record):
        for name in filenames:
            full_path = Path(dirpath) / name
            if full_path.suffix.lower() not in wanted:
                continue
            assets.add(_relative(root, full_path))
    logger.info("Found %d total assets", len(assets))
    return frozenset(assets)


def _relative(root: Path, path: Path) -> str:
    return path.relative_to(root).as_posix()
