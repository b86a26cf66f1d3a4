"""The formula update pipeline: resolve, fetch, hash, render, write."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from .checksum import sha256_file
from .config import DEFAULT_TARGET_REPO, TapbumpConfig
from .download import fetch_release_archive
from .errors import TapbumpError
from .formula import FormulaDocument, formula_path, render_formula, write_formula
from .release import VersionTag, archive_url, resolve_version
from .utils import log

if TYPE_CHECKING:
    from .config import ReleaseCoordinates

logger = logging.getLogger(__name__)


class Stage(str, enum.Enum):
    """Pipeline stages, in the order they run."""

    RESOLVING = "resolving"
    FETCHING = "fetching"
    HASHING = "hashing"
    RENDERING = "rendering"
    WRITING = "writing"
    DONE = "done"


class Failure(NamedTuple):
    """The stage a run failed in and the error that stopped it."""

    stage: Stage
    cause: TapbumpError


@dataclass(frozen=True)
class PipelineResult:
    """What a successful run produced."""

    version_tag: VersionTag
    artifact_url: str
    digest: str
    document: FormulaDocument
    formula_path: Path | None  # None for dry runs


class FormulaUpdater:
    """Runs one formula update from a version string to a written formula.

    An updater is single use: ``run`` walks the stages once and the updater
    ends in either ``Stage.DONE`` or with ``failure`` set.
    """

    def __init__(
        self,
        raw_version: str | None,
        target_repo: str | Path | None = None,
        config: TapbumpConfig | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.raw_version = raw_version
        self.target_repo = Path(target_repo) if target_repo else DEFAULT_TARGET_REPO
        self.config = config if config is not None else TapbumpConfig()
        self.dry_run = dry_run
        self.state: Stage | None = None
        self.failure: Failure | None = None

    @contextmanager
    def _stage(self, stage: Stage) -> Iterator[None]:
        """Enter ``stage`` and record it as the failure point if it raises."""
        self.state = stage
        logger.debug("Entering stage %s", stage.value)
        try:
            yield
        except TapbumpError as e:
            # Stages nest around the download; the innermost one is the culprit
            if self.failure is None:
                e.stage = stage.value
                self.failure = Failure(stage, e)
            raise

    def run(self) -> PipelineResult:
        """Run every stage once, raising the first ``TapbumpError``."""
        if self.state is not None:
            msg = "FormulaUpdater.run() may only be called once"
            raise RuntimeError(msg)

        coordinates = self.config.coordinates
        with self._stage(Stage.RESOLVING):
            version_tag = resolve_version(self.raw_version)
            url = archive_url(coordinates, version_tag, self.config.host)
            self._announce(coordinates, version_tag)

        # The archive's temporary directory is gone once this block exits
        with (
            self._stage(Stage.FETCHING),
            fetch_release_archive(
                url,
                f"{coordinates.repo_name}.tar.gz",
                timeout=self.config.timeout,
            ) as artifact,
            self._stage(Stage.HASHING),
        ):
            digest = sha256_file(artifact.local_path)

        with self._stage(Stage.RENDERING):
            document = render_formula(
                coordinates,
                self.config.metadata,
                url,
                digest,
                self.config.host,
            )

        written_path = None
        if not self.dry_run:
            with self._stage(Stage.WRITING):
                written_path = write_formula(
                    self.target_repo,
                    document,
                    self.config.formula_dir,
                    self.config.formula_extension,
                )

        self.state = Stage.DONE
        return PipelineResult(
            version_tag=version_tag,
            artifact_url=url,
            digest=digest,
            document=document,
            formula_path=written_path,
        )

    def _announce(
        self,
        coordinates: ReleaseCoordinates,
        version_tag: VersionTag,
    ) -> None:
        log(
            f"Updating Homebrew formula for {coordinates.repo_name}"
            f" to version {version_tag.version}",
            "info",
            "🍺",
        )
        log(f"Repository: {coordinates.owner}/{coordinates.repo_name}", "info")
        log(f"Tag: {version_tag.tag}", "info")
        destination = formula_path(
            self.target_repo,
            coordinates.formula_name,
            self.config.formula_dir,
            self.config.formula_extension,
        )
        log(f"Formula path: {destination}", "debug")


def update_formula(
    raw_version: str | None,
    target_repo: str | Path | None = None,
    config: TapbumpConfig | None = None,
    *,
    dry_run: bool = False,
) -> PipelineResult:
    """Update the formula for ``raw_version`` in ``target_repo``."""
    return FormulaUpdater(raw_version, target_repo, config, dry_run=dry_run).run()
