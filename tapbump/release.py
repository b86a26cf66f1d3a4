"""Release identity: version/tag normalization and the URLs derived from it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import UsageError

if TYPE_CHECKING:
    from .config import ReleaseCoordinates


@dataclass(frozen=True)
class VersionTag:
    """A release version in both of its spellings.

    ``tag`` always carries exactly one leading ``v`` and ``version`` never does.
    """

    raw_input: str
    tag: str
    version: str


def resolve_version(raw: str | None) -> VersionTag:
    """Normalize a user-supplied version or tag.

    ``"v1.2.0"`` and ``"1.2.0"`` both resolve to tag ``v1.2.0`` and
    version ``1.2.0``.
    """
    if raw is None or not raw.strip():
        msg = "A version or tag is required"
        raise UsageError(msg)

    cleaned = raw.strip()
    version = cleaned[1:] if cleaned.startswith("v") else cleaned
    if (
        not version
        or version.startswith("v")
        or any(c.isspace() or c in "/?#" for c in version)
    ):
        msg = f"Invalid version: {raw!r}"
        raise UsageError(msg)
    return VersionTag(raw_input=raw, tag=f"v{version}", version=version)


def homepage_url(coordinates: ReleaseCoordinates, host: str = "github.com") -> str:
    """Return the project homepage on the hosting service."""
    return f"https://{host}/{coordinates.owner}/{coordinates.repo_name}"


def archive_url(
    coordinates: ReleaseCoordinates,
    version_tag: VersionTag,
    host: str = "github.com",
) -> str:
    """Return the source archive URL for a tagged release."""
    return (
        f"{homepage_url(coordinates, host)}/archive/refs/tags/{version_tag.tag}.tar.gz"
    )
