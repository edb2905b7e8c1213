"""Source scanning that produces the set of asset paths a project references."""

from __future__ import annotations

import logging
import os
import posixpath
import re
from collections.abc import Iterator, Set
from pathlib import Path
from typing import Protocol

from assetprune.models import (
    CLEANUP_SCRIPT_FILENAME,
    REPORT_FILENAME,
    AssetConfig,
    ReferenceScan,
)

logger = logging.getLogger(__name__)

OUTPUT_FILES = {REPORT_FILENAME, CLEANUP_SCRIPT_FILENAME}


class ReferenceResult(Protocol):
    @property
    def referenced_assets(self) -> Set[str]: ...


class ReferenceScanner(Protocol):
    def scan_references(self) -> ReferenceResult: ...


class SourceReferenceScanner:
    """Find quoted asset paths in source and config files.

    Catches ``require("../assets/a.png")``, ``import a from "@/assets/a.png"``
    and plain strings such as ``"./assets/icon.png"`` in ``app.json``. Paths
    built at runtime are invisible to it.
    """

    def __init__(self, config: AssetConfig) -> None:
        self.config = config
        self.root = config.root.resolve()
        self.assets_dir = config.assets_dir
        self._ignored = {path.resolve() for path in config.ignored_files}
        self._pattern = _reference_pattern(config.extensions)

    def scan_references(self) -> ReferenceScan:
        referenced: set[str] = set()
        scanned: list[str] = []
        errors: list[str] = []

        for path in self._iter_source_files(errors):
            rel_path = path.relative_to(self.root).as_posix()
            try:
                content = path.read_text(encoding="utf-8", errors="ignore")
            except OSError as exc:
                errors.append(f"Error scanning file {rel_path}: {exc.strerror or exc}")
                continue
            scanned.append(rel_path)
            source_dir = posixpath.dirname(rel_path)
            for match in self._pattern.finditer(content):
                asset = normalize_reference(match.group(2), self.assets_dir, source_dir)
                if asset is not None:
                    logger.debug("Found asset reference: %s in %s", asset, rel_path)
                    referenced.add(asset)

        for message in errors:
            logger.warning(message)
        logger.info("Scanned %d files, %d assets referenced", len(scanned), len(referenced))
        return ReferenceScan(
            referenced_assets=frozenset(referenced),
            scanned_files=tuple(sorted(scanned)),
            errors=tuple(errors),
        )

    def _iter_source_files(self, errors: list[str]) -> Iterator[Path]:
        def _record(exc: OSError) -> None:
            errors.append(f"Error scanning directory {exc.filename}: {exc.strerror or exc}")

        seen: set[Path] = set()
        for source_dir in self.config.source_dirs:
            top = self.root / source_dir
            if not top.is_dir():
                continue
            for dirpath, dirnames, filenames in os.walk(top, onerror=_record):
                dirnames[:] = sorted(d for d in dirnames if d not in self.config.excluded_dirs)
                for name in sorted(filenames):
                    path = Path(dirpath) / name
                    if path.suffix not in self.config.source_extensions:
                        continue
                    if path not in seen and not self._is_ignored(path):
                        seen.add(path)
                        yield path

        for source_file in self.config.source_files:
            path = self.root / source_file
            if path.is_file() and path not in seen and not self._is_ignored(path):
                seen.add(path)
                yield path

    def _is_ignored(self, path: Path) -> bool:
        return path.name in OUTPUT_FILES or path.resolve() in self._ignored


def normalize_reference(
    raw: str,
    assets_dir: str,
    source_dir: str | None = None,
) -> str | None:
    """Map a reference as written in source to a root-relative asset path.

    ``source_dir`` is the root-relative directory of the referencing file.
    When given, ``./`` and ``../`` references are first resolved against it.
    Otherwise ``./`` is read as the project root and a ``../`` path is cut at
    the first segment of ``assets_dir``. Returns ``None`` for references that
    do not point into ``assets_dir``.
    """
    prefix = assets_dir + "/"
    normalized = raw.replace("\\", "/")
    if source_dir is not None and normalized.startswith(("./", "../")):
        resolved = posixpath.normpath(posixpath.join(source_dir, normalized))
        if resolved.startswith(prefix):
            return resolved
    if normalized.startswith("./"):
        normalized = normalized[2:]
    if normalized.startswith("@/"):
        normalized = normalized[2:]
    if "../" in normalized:
        parts = normalized.split("/")
        anchor = assets_dir.split("/")[0]
        if anchor in parts:
            normalized = "/".join(parts[parts.index(anchor) :])
    if normalized.startswith(prefix):
        return normalized
    return None


def _reference_pattern(extensions: Set[str]) -> re.Pattern[str]:
    suffixes = "|".join(sorted(re.escape(ext.lstrip(".")) for ext in extensions))
    return re.compile(
        rf"""(['"`])([^'"`\n]+\.(?:{suffixes}))\1""",
        re.IGNORECASE,
    )
