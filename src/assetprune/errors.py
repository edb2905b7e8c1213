from __future__ import annotations

from pathlib import Path


class AssetPruneError(Exception):
    """Base class for errors that abort a run."""


class MissingDirectoryError(AssetPruneError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Assets directory '{path}' does not exist")
        self.path = path


class ReferenceScanError(AssetPruneError):
    """Raised when the reference scanner cannot produce a reference set."""
