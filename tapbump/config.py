"""Configuration management for tapbump."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import UsageError
from .formula import INSTALL_DIRECTIVES
from .utils import log

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "hantianjz"
DEFAULT_PROJECT = "tmx"
DEFAULT_DESCRIPTION = "Terminal multiplexer wrapper and session manager"
DEFAULT_TARGET_REPO = Path("./homebrew-tap")

# Environment variables and the coordinate they override
ENV_OVERRIDES = {
    "owner": "REPO_OWNER",
    "repo_name": "REPO_NAME",
    "formula_name": "FORMULA_NAME",
}

_OWNER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*$")
_REPO_RE = re.compile(r"^[A-Za-z0-9._-]+$")
_FORMULA_RE = re.compile(r"^[a-z0-9][a-z0-9@._+-]*$")
_HOST_RE = re.compile(r"^[A-Za-z0-9.-]+(:\d+)?$")


@dataclass(frozen=True)
class ReleaseCoordinates:
    """Where the release lives and what the formula is called."""

    owner: str = DEFAULT_OWNER
    repo_name: str = DEFAULT_PROJECT
    formula_name: str = DEFAULT_PROJECT


@dataclass(frozen=True)
class FormulaMetadata:
    """Fixed text embedded in every rendered formula."""

    description: str = DEFAULT_DESCRIPTION
    license: str = "MIT"
    build_dependency: str = "rust"
    binary_name: str | None = None  # falls back to the formula name
    version_flag: str = "--version"


@dataclass
class TapbumpConfig:
    """Configuration for tapbump."""

    coordinates: ReleaseCoordinates = field(default_factory=ReleaseCoordinates)
    metadata: FormulaMetadata = field(default_factory=FormulaMetadata)
    host: str = "github.com"
    formula_dir: str = "Formula"
    formula_extension: str = "rb"
    timeout: float = 30.0

    def validate(self) -> None:
        """Validate the configuration."""
        coordinates = self.coordinates
        if not _OWNER_RE.match(coordinates.owner):
            msg = f"Invalid repository owner: {coordinates.owner!r}"
            raise UsageError(msg)
        if not _REPO_RE.match(coordinates.repo_name) or coordinates.repo_name in {
            ".",
            "..",
        }:
            msg = f"Invalid repository name: {coordinates.repo_name!r}"
            raise UsageError(msg)
        if not _FORMULA_RE.match(coordinates.formula_name):
            msg = f"Invalid formula name: {coordinates.formula_name!r}"
            raise UsageError(msg)
        if not _HOST_RE.match(self.host):
            msg = f"Invalid host: {self.host!r}"
            raise UsageError(msg)
        if self.metadata.build_dependency not in INSTALL_DIRECTIVES:
            known = ", ".join(sorted(INSTALL_DIRECTIVES))
            msg = (
                f"Unsupported build dependency {self.metadata.build_dependency!r}"
                f" (known: {known})"
            )
            raise UsageError(msg)
        if self.timeout <= 0:
            msg = f"Timeout must be positive, got {self.timeout}"
            raise UsageError(msg)

    @classmethod
    def load(
        cls,
        config_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> TapbumpConfig:
        """Build the configuration from defaults, a YAML file and the environment.

        Later sources win: the optional config file overrides the built-in
        defaults and ``REPO_OWNER``, ``REPO_NAME`` and ``FORMULA_NAME``
        override both. Empty environment variables are ignored.
        """
        data: dict[str, Any] = {}
        if config_file:
            data.update(_read_config_file(Path(config_file)))

        env = os.environ if environ is None else environ
        for key, variable in ENV_OVERRIDES.items():
            value = env.get(variable, "").strip()
            if value:
                log(f"Using {variable}={value} from the environment", "debug", "🌍")
                data[key] = value

        config = _config_from_dict(data)
        config.validate()
        return config


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a flat mapping."""
    try:
        with open(path) as file:
            config_data = yaml.safe_load(file)
    except FileNotFoundError as e:
        msg = f"Configuration file not found: {path}"
        raise UsageError(msg) from e
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in configuration file {path}: {e}"
        raise UsageError(msg) from e
    except OSError as e:
        msg = f"Could not read configuration file {path}: {e}"
        raise UsageError(msg) from e

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        msg = f"Configuration file {path} must contain a mapping"
        raise UsageError(msg)
    log(f"Loaded configuration from {path}", "debug", "📄")
    return config_data


def _config_from_dict(data: Mapping[str, Any]) -> TapbumpConfig:
    """Split a flat mapping into coordinates, metadata and top-level settings."""
    coordinate_keys = {f.name for f in fields(ReleaseCoordinates)}
    metadata_keys = {f.name for f in fields(FormulaMetadata)}
    top_level_keys = {"host", "formula_dir", "timeout"}

    non_string_keys = [key for key in data if not isinstance(key, str)]
    if non_string_keys:
        listed = ", ".join(map(repr, non_string_keys))
        msg = f"Configuration keys must be strings, got: {listed}"
        raise UsageError(msg)

    unknown = set(data) - coordinate_keys - metadata_keys - top_level_keys
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(sorted(unknown))}"
        raise UsageError(msg)

    for key, value in data.items():
        if key == "timeout":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                msg = f"Configuration key 'timeout' must be a number, got {value!r}"
                raise UsageError(msg)
        elif not isinstance(value, str) or not value.strip():
            msg = f"Configuration key {key!r} must be a non-empty string"
            raise UsageError(msg)

    coordinates = ReleaseCoordinates(
        **{k: v for k, v in data.items() if k in coordinate_keys},
    )
    metadata = FormulaMetadata(**{k: v for k, v in data.items() if k in metadata_keys})
    settings = {k: v for k, v in data.items() if k in top_level_keys}
    if "timeout" in settings:
        settings["timeout"] = float(settings["timeout"])
    return TapbumpConfig(coordinates=coordinates, metadata=metadata, **settings)
