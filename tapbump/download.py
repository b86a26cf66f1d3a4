"""Download functions for tapbump."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import requests

from .errors import DownloadError
from .utils import log

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass(frozen=True)
class ArtifactRef:
    """A downloaded release archive and the URL it came from."""

    url: str
    local_path: Path


def download_file(url: str, destination: Path, timeout: float = 30) -> Path:
    """Download a file from a URL to a destination path.

    Redirects are followed. An HTTP error status, a transport failure, or an
    empty body all raise ``DownloadError``.
    """
    log(f"Downloading from {url}", "info", "📥")
    try:
        with requests.get(
            url,
            stream=True,
            timeout=timeout,
            allow_redirects=True,
        ) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
    except requests.RequestException as e:
        msg = f"Download failed: {e}"
        raise DownloadError(msg, url) from e
    except OSError as e:
        msg = f"Could not save download to {destination}: {e}"
        raise DownloadError(msg, url) from e

    if not destination.is_file() or destination.stat().st_size == 0:
        msg = "Failed to download tarball or file is empty"
        raise DownloadError(msg, url)

    log(f"Downloaded {destination.stat().st_size} bytes", "debug", "📦")
    return destination


@contextmanager
def fetch_release_archive(
    url: str,
    filename: str,
    timeout: float = 30,
) -> Iterator[ArtifactRef]:
    """Download a release archive into a temporary directory.

    The directory belongs to this context only and is removed when the
    context exits, whether it exits normally, through an exception, or
    through an interrupt.
    """
    with tempfile.TemporaryDirectory(prefix="tapbump-") as temp_dir:
        logger.debug("Created temporary directory %s", temp_dir)
        local_path = Path(temp_dir) / filename
        download_file(url, local_path, timeout=timeout)
        yield ArtifactRef(url=url, local_path=local_path)
