"""SHA-256 digests of downloaded archives."""

from __future__ import annotations

import hashlib
from pathlib import Path

from .errors import ArtifactReadError
from .utils import log

CHUNK_SIZE = 65536


def sha256_file(path: Path) -> str:
    """Return the lowercase hex SHA-256 digest of the whole file."""
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        msg = f"Could not read downloaded archive: {e}"
        raise ArtifactReadError(msg, path) from e

    hexdigest = digest.hexdigest()
    log(f"Calculated SHA256: {hexdigest}", "info", "🔐")
    return hexdigest
