"""Configuration for pytest fixtures used in tapbump tests."""

from __future__ import annotations

import hashlib
import io
import tarfile
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Callable

import pytest
import requests
from _pytest.monkeypatch import MonkeyPatch

import tapbump.download
import tapbump.utils


class FakeResponse:
    """Stand-in for a streamed ``requests.Response``."""

    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.closed = False

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def raise_for_status(self) -> None:
        if self.status_code >= 400:  # noqa: PLR2004
            msg = f"{self.status_code} Client Error"
            raise requests.HTTPError(msg, response=self)  # type: ignore[arg-type]

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    """Reset verbosity so tests do not leak it into each other."""
    tapbump.utils.setup_logging(verbose=False)
    yield
    tapbump.utils.setup_logging(verbose=False)


@pytest.fixture
def scratch_dir(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
    """Point ``tempfile`` at an empty directory so leftovers can be inspected."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


def create_dummy_tarball(binary_name: str = "tmx") -> bytes:
    """Return the bytes of a .tar.gz containing a single file."""
    buffer = io.BytesIO()
    payload = b"fn main() {}\n"
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        info = tarfile.TarInfo(name=f"{binary_name}/src/main.rs")
        info.size = len(payload)
        info.mtime = 0
        tar.addfile(info, io.BytesIO(payload))
    return buffer.getvalue()


@pytest.fixture
def tarball_bytes() -> bytes:
    """Bytes of a small source archive."""
    return create_dummy_tarball()


@pytest.fixture
def tarball_digest(tarball_bytes: bytes) -> str:
    """The expected SHA256 of ``tarball_bytes``."""
    return hashlib.sha256(tarball_bytes).hexdigest()


@pytest.fixture
def mock_get(monkeypatch: MonkeyPatch) -> Callable[..., list[dict]]:
    r"""Replace ``requests.get`` in the download module.

    Usage:
        calls = mock_get(b"archive bytes")
        calls = mock_get(b"", status_code=404)
        calls = mock_get(error=requests.ConnectionError("boom"))

    Returns the list the fake appends each call's URL, keyword arguments and
    response to.
    """

    def _install(
        content: bytes = b"",
        status_code: int = 200,
        error: Exception | None = None,
    ) -> list[dict]:
        calls: list[dict] = []

        def fake_get(url: str, **kwargs: object) -> FakeResponse:
            calls.append({"url": url, **kwargs})
            if error is not None:
                raise error
            response = FakeResponse(content, status_code)
            calls[-1]["response"] = response
            return response

        monkeypatch.setattr(tapbump.download.requests, "get", fake_get)
        return calls

    return _install
