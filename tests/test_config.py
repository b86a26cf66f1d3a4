"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from tapbump.config import (
    DEFAULT_DESCRIPTION,
    FormulaMetadata,
    ReleaseCoordinates,
    TapbumpConfig,
)
from tapbump.errors import UsageError


def test_defaults() -> None:
    """Without a file or environment the built-in defaults apply."""
    config = TapbumpConfig.load(environ={})
    assert config.coordinates == ReleaseCoordinates("hantianjz", "tmx", "tmx")
    assert config.metadata.description == DEFAULT_DESCRIPTION
    assert config.metadata.license == "MIT"
    assert config.metadata.build_dependency == "rust"
    assert config.host == "github.com"
    assert config.formula_dir == "Formula"
    assert config.timeout == 30.0  # noqa: PLR2004


def test_environment_overrides() -> None:
    """REPO_OWNER, REPO_NAME and FORMULA_NAME override the coordinates."""
    config = TapbumpConfig.load(
        environ={"REPO_OWNER": "acme", "REPO_NAME": "cli", "FORMULA_NAME": "acme-cli"},
    )
    assert config.coordinates == ReleaseCoordinates("acme", "cli", "acme-cli")


def test_empty_environment_values_are_ignored() -> None:
    """An exported but empty variable does not blank out the default."""
    config = TapbumpConfig.load(environ={"REPO_OWNER": "", "REPO_NAME": "  "})
    assert config.coordinates.owner == "hantianjz"
    assert config.coordinates.repo_name == "tmx"


def test_config_file_then_environment(tmp_path: Path) -> None:
    """The environment wins over the config file, which wins over defaults."""
    config_file = tmp_path / "tapbump.yaml"
    config_file.write_text(
        "owner: file-owner\n"
        "repo_name: file-repo\n"
        "description: From the file\n"
        "build_dependency: go\n"
        "timeout: 5\n",
    )
    config = TapbumpConfig.load(config_file, environ={"REPO_OWNER": "env-owner"})
    assert config.coordinates.owner == "env-owner"
    assert config.coordinates.repo_name == "file-repo"
    assert config.coordinates.formula_name == "tmx"
    assert config.metadata == FormulaMetadata(
        description="From the file",
        build_dependency="go",
    )
    assert config.timeout == 5.0  # noqa: PLR2004


def test_empty_config_file(tmp_path: Path) -> None:
    """An empty YAML file means no overrides."""
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")
    assert TapbumpConfig.load(config_file, environ={}) == TapbumpConfig()


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("owner: [unclosed\n", "Invalid YAML"),
        ("- just\n- a list\n", "must contain a mapping"),
        ("colour: blue\n", "Unknown configuration keys: colour"),
        ("license: 3\n", "must be a non-empty string"),
        ("timeout: fast\n", "must be a number"),
        ("timeout: 0\n", "Timeout must be positive"),
        ("build_dependency: cobol\n", "Unsupported build dependency"),
        ("1: a\nfoo: b\n", "keys must be strings"),
    ],
)
def test_invalid_config_file(tmp_path: Path, content: str, message: str) -> None:
    """Problems in the config file are reported as usage errors."""
    config_file = tmp_path / "bad.yaml"
    config_file.write_text(content)
    with pytest.raises(UsageError, match=message):
        TapbumpConfig.load(config_file, environ={})


def test_missing_config_file(tmp_path: Path) -> None:
    """An explicitly requested config file must exist."""
    with pytest.raises(UsageError, match="not found"):
        TapbumpConfig.load(tmp_path / "nope.yaml", environ={})


@pytest.mark.parametrize(
    "environ",
    [
        {"REPO_OWNER": "acme/evil"},
        {"REPO_OWNER": "-acme"},
        {"REPO_NAME": ".."},
        {"REPO_NAME": "has space"},
        {"FORMULA_NAME": "Capitalized"},
        {"FORMULA_NAME": "../escape"},
    ],
)
def test_invalid_coordinates(environ: dict[str, str]) -> None:
    """Coordinates that would break the URL or the formula path are rejected."""
    with pytest.raises(UsageError):
        TapbumpConfig.load(environ=environ)
