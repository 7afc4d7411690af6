"""Copying the generic stub tree into a module and publishing the bundled stubs."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator

from .config import ModuleConfig
from .durable import WriteOutcome, durable_write
from .errors import StubsNotFoundError
from .settings import BUNDLED_STUBS_PATH
from .template import StubRenderer

__all__ = ["copy_stub_tree", "iter_stub_files", "publish_stubs"]

LOGGER = logging.getLogger(__name__)


def iter_stub_files(stubs_dir: Path) -> Iterator[PurePosixPath]:
    """Yield every file below ``stubs_dir`` as a sorted, ``/`` separated relative path."""

    if not stubs_dir.is_dir():
        raise StubsNotFoundError(stubs_dir)

    for source in sorted(stubs_dir.rglob("*")):
        if source.is_file():
            yield PurePosixPath(source.relative_to(stubs_dir).as_posix())


def copy_stub_tree(
    stubs_dir: Path,
    module_dir: Path,
    config: ModuleConfig,
    *,
    renderer: StubRenderer,
    skip: Iterable[PurePosixPath] = (),
) -> list[tuple[Path, WriteOutcome]]:
    """Render every stub except ``skip`` into ``module_dir``.

    File names and contents get the module placeholders substituted and the
    ``.stub`` suffix is dropped. Returns each destination with the outcome of
    writing it.
    """

    skipped = set(skip)
    context = config.context()
    written: list[tuple[Path, WriteOutcome]] = []

    for relative in iter_stub_files(stubs_dir):
        if relative in skipped:
            continue

        target_name = renderer.render_name(relative.name, context)
        destination = module_dir.joinpath(*relative.parent.parts, target_name)
        contents = renderer.render_file(stubs_dir.joinpath(*relative.parts), context)
        written.append((destination, durable_write(destination, contents)))

    return written


def publish_stubs(destination: Path, *, force: bool = False, source: Path = BUNDLED_STUBS_PATH) -> Path:
    """Copy the bundled stub tree to ``destination`` so a host project can edit it."""

    if destination.exists():
        if not force:
            raise FileExistsError(f"{destination} already exists")
        shutil.rmtree(destination)

    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, destination)
    LOGGER.info("published stubs to %s", destination)
    return destination
