"""tapbump - Homebrew formula updater.

A utility for publishing a tagged GitHub release to a Homebrew tap.
Downloads the release source archive, calculates its SHA256 checksum and
writes a fresh formula into the tap repository, ready to be committed.
"""

from __future__ import annotations

__version__ = "0.1.0"

from . import checksum, cli, config, download, errors, formula, pipeline, release, utils

# Re-export commonly used functions
from .checksum import sha256_file
from .cli import main
from .config import FormulaMetadata, ReleaseCoordinates, TapbumpConfig
from .download import ArtifactRef, download_file, fetch_release_archive
from .errors import (
    ArtifactReadError,
    DownloadError,
    InvariantViolation,
    TapbumpError,
    UsageError,
    WriteError,
)
from .formula import FormulaDocument, formula_path, render_formula, write_formula
from .pipeline import FormulaUpdater, PipelineResult, Stage, update_formula
from .release import VersionTag, archive_url, homepage_url, resolve_version

__all__ = [
    "ArtifactReadError",
    "ArtifactRef",
    "DownloadError",
    "FormulaDocument",
    "FormulaMetadata",
    "FormulaUpdater",
    "InvariantViolation",
    "PipelineResult",
    "ReleaseCoordinates",
    "Stage",
    "TapbumpConfig",
    "TapbumpError",
    "UsageError",
    "VersionTag",
    "WriteError",
    "archive_url",
    "checksum",
    "cli",
    "config",
    "download",
    "download_file",
    "errors",
    "fetch_release_archive",
    "formula",
    "formula_path",
    "homepage_url",
    "main",
    "pipeline",
    "release",
    "render_formula",
    "resolve_version",
    "sha256_file",
    "update_formula",
    "utils",
    "write_formula",
]
