from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_ASSETS_DIR = "assets"
ASSET_EXTENSIONS = frozenset(
    {
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".svg",
        ".ttf",
        ".otf",
        ".woff",
        ".woff2",
        ".mp3",
        ".mp4",
        ".webm",
        ".ico",
    }
)
DEFAULT_SOURCE_DIRS = (
    "app",
    "components",
    "hooks",
    "context",
    "services",
    "schemas",
    "scripts",
    "docs",
)
DEFAULT_SOURCE_FILES = ("app.json", "app.config.js", "metro.config.js")
SOURCE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx", ".json", ".md"})
EXCLUDED_DIRS = frozenset({"node_modules", ".git", ".expo", "dist", "build"})
REPORT_FILENAME = "unused-assets-report.json"
CLEANUP_SCRIPT_FILENAME = "cleanup-unused-assets.sh"


@dataclass(frozen=True)
class AssetConfig:
    root: Path
    assets_dir: str = DEFAULT_ASSETS_DIR
    extensions: frozenset[str] = ASSET_EXTENSIONS
    source_dirs: tuple[str, ...] = DEFAULT_SOURCE_DIRS
    source_files: tuple[str, ...] = DEFAULT_SOURCE_FILES
    source_extensions: frozenset[str] = SOURCE_EXTENSIONS
    excluded_dirs: frozenset[str] = EXCLUDED_DIRS
    # Files this tool wrote; never read back as source.
    ignored_files: frozenset[Path] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "assets_dir", normalize_assets_dir(self.assets_dir))


def normalize_assets_dir(value: str) -> str:
    """Return ``value`` as a clean root-relative POSIX path.

    ``./assets/`` becomes ``assets``. Absolute paths and paths that leave the
    project root raise :class:`ValueError`.
    """
    normalized = posixpath.normpath(value.replace("\\", "/"))
    if normalized == "." or posixpath.isabs(normalized) or normalized.split("/")[0] == "..":
        raise ValueError(
            f"Assets directory must be a subdirectory of the project root: {value}"
        )
    return normalized


@dataclass
class RunContext:
    """State shared by the stages of a single detection run."""

    root: Path
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnusedAsset:
    path: str
    size: int
    formatted_size: str


@dataclass(frozen=True)
class ReportSummary:
    total_assets: int
    referenced_assets: int
    unused_assets: int
    total_unused_size: int
    formatted_total_unused_size: str
    errors_encountered: int


@dataclass(frozen=True)
class DetectionReport:
    root: str
    generated_at: str
    summary: ReportSummary
    all_assets: tuple[str, ...]
    referenced_assets: tuple[str, ...]
    unused_assets: tuple[UnusedAsset, ...]
    errors: tuple[str, ...]


@dataclass(frozen=True)
class RemovalOutcome:
    dry_run: bool
    removed_count: int
    removed_size: int
    formatted_removed_size: str
    removed: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReferenceScan:
    referenced_assets: frozenset[str]
    scanned_files: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
