"""Framework artifacts derived from seed stubs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Callable

from .config import ModuleConfig
from .durable import WriteOutcome, durable_write
from .template import StubRenderer

__all__ = [
    "ARTIFACTS",
    "MIGRATION_TIMESTAMP_FORMAT",
    "Artifact",
    "generate_artifact",
    "seed_paths",
]

LOGGER = logging.getLogger(__name__)

MIGRATION_TIMESTAMP_FORMAT = "%Y_%m_%d_%H%M%S"


@dataclass(slots=True, frozen=True)
class Artifact:
    """A seed stub and the rule naming the file generated from it.

    ``seed`` is relative to the stub directory and uses ``/`` separators.
    ``filename`` receives the module config and the generation time and
    returns the output file name, written into the seed's directory.
    """

    key: str
    seed: str
    filename: Callable[[ModuleConfig, datetime], str]

    @property
    def directory(self) -> PurePosixPath:
        return PurePosixPath(self.seed).parent

    def output_path(self, config: ModuleConfig, now: datetime) -> PurePosixPath:
        return self.directory / self.filename(config, now)


def _migration_filename(config: ModuleConfig, now: datetime) -> str:
    return f"{now.strftime(MIGRATION_TIMESTAMP_FORMAT)}_{config.migration_name}.php"


ARTIFACTS: tuple[Artifact, ...] = (
    Artifact("model", "Models/modelName.php.stub", lambda config, _: f"{config.model_name}.php"),
    Artifact(
        "controller",
        "Http/Controllers/controllerName.php.stub",
        lambda config, _: f"{config.controller_name}.php",
    ),
    Artifact("migration", "Database/Migrations/migration.php.stub", _migration_filename),
    Artifact("request", "Http/Requests/Request.php.stub", lambda config, _: f"{config.request_name}.php"),
)


def seed_paths(artifacts: tuple[Artifact, ...] = ARTIFACTS) -> frozenset[PurePosixPath]:
    """Return the stub-relative paths consumed by ``artifacts``."""

    return frozenset(PurePosixPath(artifact.seed) for artifact in artifacts)


def generate_artifact(
    artifact: Artifact,
    stubs_dir: Path,
    module_dir: Path,
    config: ModuleConfig,
    *,
    renderer: StubRenderer,
    now: datetime,
) -> tuple[Path, WriteOutcome] | None:
    """Render ``artifact`` into ``module_dir``.

    Returns the destination path with the outcome of writing it, or ``None``
    when the seed stub is missing. A missing seed is logged and skipped so the
    remaining artifacts are still generated.
    """

    seed = stubs_dir.joinpath(*PurePosixPath(artifact.seed).parts)
    if not seed.is_file():
        LOGGER.warning("seed stub %s not found; skipping %s", seed, artifact.key)
        return None

    contents = renderer.render_file(seed, config.context())
    destination = module_dir.joinpath(*artifact.output_path(config, now).parts)
    write = durable_write(destination, contents)
    LOGGER.debug("generated %s at %s (%s)", artifact.key, destination, write.value)
    return destination, write
