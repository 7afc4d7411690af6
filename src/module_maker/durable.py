"""Replace files on disk while tolerating transient locks held by other processes."""

from __future__ import annotations

import logging
import os
import shutil
import time
from enum import Enum
from pathlib import Path
from typing import Callable
from uuid import uuid4

__all__ = ["WriteOutcome", "durable_write"]

LOGGER = logging.getLogger(__name__)

DEFAULT_RETRIES = 5
DEFAULT_DELAY = 0.12


class WriteOutcome(str, Enum):
    """How :func:`durable_write` got the contents onto disk."""

    REPLACED = "replaced"
    COPIED = "copied"
    FAILED = "failed"

    @property
    def written(self) -> bool:
        return self is not WriteOutcome.FAILED


def _remove_existing(target: Path, retries: int, delay: float, sleep: Callable[[float], None]) -> bool:
    for attempt in range(retries):
        try:
            target.unlink()
        except FileNotFoundError:
            return True
        except OSError as exc:
            LOGGER.debug("unlink of %s failed (attempt %d): %s", target, attempt + 1, exc)
            sleep(delay)
            continue
        return True
    return False


def _rename_into_place(tmp: Path, target: Path, retries: int, delay: float, sleep: Callable[[float], None]) -> bool:
    for attempt in range(retries):
        try:
            os.replace(tmp, target)
        except OSError as exc:
            LOGGER.debug("rename %s -> %s failed (attempt %d): %s", tmp, target, attempt + 1, exc)
            sleep(delay)
            continue
        return True
    return False


def durable_write(
    target: str | Path,
    contents: str,
    *,
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
    encoding: str = "utf-8",
    sleep: Callable[[float], None] = time.sleep,
) -> WriteOutcome:
    """Write ``contents`` to ``target`` through a temporary sibling file.

    The existing target is removed with up to ``retries`` attempts spaced by
    ``delay`` seconds, the new contents are written to a uniquely named
    temporary file next to it and renamed into place. When every rename
    attempt fails the temporary file is copied over the target instead.

    Line endings in ``contents`` are written as given.

    Returns :attr:`WriteOutcome.REPLACED` when the rename succeeded,
    :attr:`WriteOutcome.COPIED` when only the copy fallback worked and
    :attr:`WriteOutcome.FAILED` when nothing reached ``target``. Failures are
    logged and never raised; the temporary file is removed on every path.
    """

    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    if not _remove_existing(target, retries, delay, sleep):
        LOGGER.warning("could not remove %s after %d attempts", target, retries)

    tmp = target.with_name(f"{target.name}.tmp{uuid4().hex[:8]}")
    try:
        try:
            tmp.write_text(contents, encoding=encoding, newline="")
        except OSError as exc:
            LOGGER.warning("could not write temporary file for %s: %s", target, exc)
            return WriteOutcome.FAILED

        if _rename_into_place(tmp, target, retries, delay, sleep):
            return WriteOutcome.REPLACED

        LOGGER.warning("rename into %s kept failing; falling back to copy", target)
        try:
            shutil.copyfile(tmp, target)
        except OSError as exc:
            LOGGER.warning("could not write %s: %s", target, exc)
            return WriteOutcome.FAILED
        return WriteOutcome.COPIED
    finally:
        try:
            tmp.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            LOGGER.warning("could not remove temporary file %s: %s", tmp, exc)
