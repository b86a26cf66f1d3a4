"""Render Homebrew formulas and write them into a tap repository."""

from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import InvariantViolation, WriteError
from .release import homepage_url
from .utils import log

if TYPE_CHECKING:
    from .config import FormulaMetadata, ReleaseCoordinates

logger = logging.getLogger(__name__)

# Standard install directive for each supported build dependency
INSTALL_DIRECTIVES = {
    "rust": 'system "cargo", "install", *std_cargo_args',
    "go": 'system "go", "build", *std_go_args',
}

_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")
DEFAULT_MODE = 0o644

FORMULA_TEMPLATE = """\
class {class_name} < Formula
  desc "{description}"
  homepage "{homepage}"
  url "{url}"
  sha256 "{digest}"
  license "{license}"

  depends_on "{build_dependency}" => :build

  def install
    {install}
  end

  test do
    system "#{{bin}}/{binary_name}", "{version_flag}"
  end
end
"""


@dataclass(frozen=True)
class FormulaDocument:
    """A rendered formula and the name it is filed under."""

    formula_name: str
    text: str


def formula_class_name(name: str) -> str:
    """Return the Ruby class name Homebrew expects for a formula name.

    ``tmx`` becomes ``Tmx``, ``my-tool`` becomes ``MyTool`` and
    ``foo@1.2`` becomes ``FooAT12``.
    """
    class_name = name[:1].upper() + name[1:].lower()
    class_name = re.sub(
        r"[-_.\s]([a-zA-Z0-9])",
        lambda m: m.group(1).upper(),
        class_name,
    )
    class_name = class_name.replace("+", "x")
    return re.sub(r"(.)@(\d)", r"\1AT\2", class_name, count=1)


def _ruby_string(value: str, field_name: str) -> str:
    """Escape a value for use inside a double-quoted Ruby string."""
    if "\n" in value or "\r" in value:
        msg = f"Formula field {field_name!r} must be a single line: {value!r}"
        raise InvariantViolation(msg)
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")


def render_formula(
    coordinates: ReleaseCoordinates,
    metadata: FormulaMetadata,
    url: str,
    digest: str,
    host: str = "github.com",
) -> FormulaDocument:
    """Render the formula text for a release archive.

    The output depends only on the arguments, so equal inputs always give
    byte-identical documents.
    """
    if not _DIGEST_RE.match(digest):
        msg = f"Digest is not 64 lowercase hex characters: {digest!r}"
        raise InvariantViolation(msg)
    if not url.startswith("https://"):
        msg = f"Archive URL must use https: {url!r}"
        raise InvariantViolation(msg)
    install = INSTALL_DIRECTIVES.get(metadata.build_dependency)
    if install is None:
        msg = f"No install directive for build dependency {metadata.build_dependency!r}"
        raise InvariantViolation(msg)

    text = FORMULA_TEMPLATE.format(
        class_name=formula_class_name(coordinates.formula_name),
        description=_ruby_string(metadata.description, "desc"),
        homepage=_ruby_string(homepage_url(coordinates, host), "homepage"),
        url=_ruby_string(url, "url"),
        digest=digest,
        license=_ruby_string(metadata.license, "license"),
        build_dependency=_ruby_string(metadata.build_dependency, "depends_on"),
        install=install,
        binary_name=_ruby_string(
            metadata.binary_name or coordinates.formula_name,
            "binary_name",
        ),
        version_flag=_ruby_string(metadata.version_flag, "version_flag"),
    )
    return FormulaDocument(formula_name=coordinates.formula_name, text=text)


def formula_path(
    target_repo: Path,
    formula_name: str,
    formula_dir: str = "Formula",
    extension: str = "rb",
) -> Path:
    """Return where a formula lives inside a tap repository."""
    return Path(target_repo) / formula_dir / f"{formula_name}.{extension}"


def write_formula(
    target_repo: Path,
    document: FormulaDocument,
    formula_dir: str = "Formula",
    extension: str = "rb",
) -> Path:
    """Write a formula, replacing any previous file at the same path.

    The text goes to a temporary file next to the destination which is then
    renamed over it, so the destination holds either the old or the new
    formula and never a partial one.
    """
    target_repo = Path(target_repo)
    dest_path = formula_path(target_repo, document.formula_name, formula_dir, extension)

    if target_repo.exists() and not target_repo.is_dir():
        msg = "Target repository path is not a directory"
        raise WriteError(msg, target_repo)

    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Could not create formula directory: {e}"
        raise WriteError(msg, dest_path.parent) from e

    log(f"Updating formula at: {dest_path}", "info", "📝")
    # A symlinked formula is updated through the link, as a shell redirect would
    real_path = dest_path.resolve() if dest_path.is_symlink() else dest_path
    mode = DEFAULT_MODE
    temp_name = None
    try:
        if real_path.is_file():
            mode = stat.S_IMODE(real_path.stat().st_mode)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=real_path.parent,
            prefix=f".{real_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            temp_name = f.name
            f.write(document.text)
        os.chmod(temp_name, mode)
        os.replace(temp_name, real_path)
        temp_name = None
    except OSError as e:
        msg = f"Could not write formula: {e}"
        raise WriteError(msg, dest_path) from e
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)

    logger.debug("Wrote %d bytes to %s", len(document.text), dest_path)
    return dest_path
