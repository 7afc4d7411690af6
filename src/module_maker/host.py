"""Edits applied to the host project: composer autoload and provider registration.

The two provider registration variants are pure functions from the current
file contents and a fully-qualified class name to the new contents and a
:class:`PatchOutcome`. Which one runs depends on the host framework's major
version (``bootstrap/providers.php`` from version 11 on, ``config/app.php``
before that).
"""

from __future__ import annotations

import json
import logging
import os
import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Callable

from .durable import WriteOutcome, durable_write

__all__ = [
    "BOOTSTRAP_PROVIDERS",
    "CONFIG_APP",
    "MODULES_AUTOLOAD_NAMESPACE",
    "MODULES_AUTOLOAD_PATH",
    "HostPatchResult",
    "PatchOutcome",
    "ProviderTarget",
    "detect_framework_version",
    "ensure_psr4_autoload",
    "patch_bootstrap_providers",
    "patch_config_app",
    "register_provider",
    "run_dump_autoload",
    "select_provider_target",
    "update_composer_autoload",
]

LOGGER = logging.getLogger(__name__)

FRAMEWORK_PACKAGE = "laravel/framework"
BOOTSTRAP_PROVIDERS_SINCE = 11
MODULES_AUTOLOAD_NAMESPACE = "Modules\\"
MODULES_AUTOLOAD_PATH = "modules/"

_ARRAY_CLOSE = re.compile(r"\]\s*;\s*$", re.MULTILINE)
_PROVIDERS_ARRAY = re.compile(
    r"('providers'\s*=>\s*(?:ServiceProvider::defaultProviders\(\)\s*->\s*merge\(\s*)?\[)(.*?)(\r?\n\s*\])",
    re.DOTALL,
)
_MAJOR_VERSION = re.compile(r"(\d+)")


class PatchOutcome(str, Enum):
    """Result of applying an edit to a host file."""

    INSERTED = "inserted"
    ALREADY_PRESENT = "already_present"
    NOT_FOUND = "not_found"
    MISSING_FILE = "missing_file"
    WRITE_FAILED = "write_failed"


def _class_reference(fqcn: str) -> str:
    return f"{fqcn}::class"


def _line_ending(contents: str) -> str:
    return "\r\n" if "\r\n" in contents else "\n"


def patch_bootstrap_providers(contents: str, fqcn: str) -> tuple[str, PatchOutcome]:
    """Add ``fqcn`` to the array returned by ``bootstrap/providers.php``."""

    reference = _class_reference(fqcn)
    if reference in contents:
        return contents, PatchOutcome.ALREADY_PRESENT

    match = _ARRAY_CLOSE.search(contents)
    if match is None:
        return contents, PatchOutcome.NOT_FOUND

    newline = _line_ending(contents)
    insertion = f"    {reference},{newline}"
    line_start = contents.rfind("\n", 0, match.start()) + 1
    preceding = contents[line_start : match.start()].rstrip()
    if preceding:
        # The closing bracket shares a line with the last entry.
        separator = "" if preceding.endswith((",", "[")) else ","
        insertion = f"{separator}{newline}{insertion}"
        line_start = match.start()
    return contents[:line_start] + insertion + contents[line_start:], PatchOutcome.INSERTED


def patch_config_app(contents: str, fqcn: str) -> tuple[str, PatchOutcome]:
    """Append ``fqcn`` to the ``'providers'`` array of ``config/app.php``."""

    reference = _class_reference(fqcn)
    if reference in contents:
        return contents, PatchOutcome.ALREADY_PRESENT

    match = _PROVIDERS_ARRAY.search(contents)
    if match is None:
        return contents, PatchOutcome.NOT_FOUND

    end = match.end(2)
    insertion = f"{_line_ending(contents)}        {reference},"
    return contents[:end] + insertion + contents[end:], PatchOutcome.INSERTED


@dataclass(slots=True, frozen=True)
class ProviderTarget:
    """A host file that lists service providers and the function that edits it."""

    relative_path: PurePosixPath
    patch: Callable[[str, str], tuple[str, PatchOutcome]]

    def path(self, base_path: Path) -> Path:
        return base_path.joinpath(*self.relative_path.parts)


BOOTSTRAP_PROVIDERS = ProviderTarget(PurePosixPath("bootstrap/providers.php"), patch_bootstrap_providers)
CONFIG_APP = ProviderTarget(PurePosixPath("config/app.php"), patch_config_app)


def select_provider_target(major_version: int | None, base_path: Path) -> ProviderTarget:
    """Pick the provider registration file for the host framework.

    When the version is unknown the bootstrap file is used if the host has
    one.
    """

    if major_version is None:
        if BOOTSTRAP_PROVIDERS.path(base_path).is_file():
            return BOOTSTRAP_PROVIDERS
        return CONFIG_APP
    if major_version >= BOOTSTRAP_PROVIDERS_SINCE:
        return BOOTSTRAP_PROVIDERS
    return CONFIG_APP


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.debug("could not read %s: %s", path, exc)
        return None


def _major(version: Any) -> int | None:
    if not isinstance(version, str):
        return None
    match = _MAJOR_VERSION.search(version)
    return int(match.group(1)) if match else None


def detect_framework_version(base_path: Path) -> int | None:
    """Return the host framework's major version, or ``None`` when unknown.

    The installed version in ``composer.lock`` wins over the constraint in
    ``composer.json``.
    """

    lock = _read_json(base_path / "composer.lock")
    if isinstance(lock, dict):
        for package in lock.get("packages", []):
            if isinstance(package, dict) and package.get("name") == FRAMEWORK_PACKAGE:
                major = _major(package.get("version"))
                if major is not None:
                    return major

    manifest = _read_json(base_path / "composer.json")
    if isinstance(manifest, dict):
        require = manifest.get("require")
        if isinstance(require, dict):
            return _major(require.get(FRAMEWORK_PACKAGE))
    return None


@dataclass(slots=True)
class HostPatchResult:
    """Outcome of editing one host file."""

    path: Path
    outcome: PatchOutcome
    subject: str
    write: WriteOutcome | None = None

    @property
    def changed(self) -> bool:
        return self.outcome is PatchOutcome.INSERTED

    @property
    def degraded(self) -> bool:
        """The edit landed only through the non-atomic copy fallback."""

        return self.write is WriteOutcome.COPIED

    @property
    def failed(self) -> bool:
        return self.outcome in (PatchOutcome.NOT_FOUND, PatchOutcome.MISSING_FILE, PatchOutcome.WRITE_FAILED)

    @property
    def message(self) -> str:
        if self.outcome is PatchOutcome.INSERTED:
            return f"Registered {self.subject} in {self.path.name}"
        if self.outcome is PatchOutcome.ALREADY_PRESENT:
            return f"{self.subject} already present in {self.path.name}"
        if self.outcome is PatchOutcome.MISSING_FILE:
            return f"{self.path} does not exist; skipping automatic registration of {self.subject}"
        if self.outcome is PatchOutcome.WRITE_FAILED:
            return f"Could not write {self.path}. Add {self.subject} manually."
        return f"Could not edit {self.path.name} automatically. Add {self.subject} manually."


def _read_host_file(path: Path) -> str:
    # newline="" keeps CRLF endings intact for the rewrite.
    with path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def _write_host_file(path: Path, contents: str, subject: str) -> HostPatchResult:
    write = durable_write(path, contents)
    if not write.written:
        result = HostPatchResult(path, PatchOutcome.WRITE_FAILED, subject, write)
        LOGGER.warning(result.message)
        return result

    result = HostPatchResult(path, PatchOutcome.INSERTED, subject, write)
    LOGGER.info(result.message)
    return result


def register_provider(base_path: Path, fqcn: str, major_version: int | None) -> HostPatchResult:
    """Register ``fqcn`` in the provider file matching ``major_version``."""

    target = select_provider_target(major_version, base_path)
    path = target.path(base_path)
    subject = _class_reference(fqcn)

    if not path.is_file():
        result = HostPatchResult(path, PatchOutcome.MISSING_FILE, subject)
        LOGGER.warning(result.message)
        return result

    updated, outcome = target.patch(_read_host_file(path), fqcn)
    if outcome is PatchOutcome.INSERTED:
        return _write_host_file(path, updated, subject)

    result = HostPatchResult(path, outcome, subject)
    if outcome is PatchOutcome.NOT_FOUND:
        LOGGER.warning(result.message)
    else:
        LOGGER.info(result.message)
    return result


def ensure_psr4_autoload(manifest: dict[str, Any]) -> bool:
    """Map ``Modules\\`` to ``modules/`` in ``manifest``. Returns whether it changed."""

    autoload = manifest.setdefault("autoload", {})
    psr4 = autoload.setdefault("psr-4", {})
    if MODULES_AUTOLOAD_NAMESPACE in psr4:
        return False
    psr4[MODULES_AUTOLOAD_NAMESPACE] = MODULES_AUTOLOAD_PATH
    return True


def update_composer_autoload(base_path: Path) -> HostPatchResult:
    """Add the modules PSR-4 mapping to the host's ``composer.json``."""

    path = base_path / "composer.json"
    subject = f'psr-4 mapping "{MODULES_AUTOLOAD_NAMESPACE}" => "{MODULES_AUTOLOAD_PATH}"'
    if not path.is_file():
        result = HostPatchResult(path, PatchOutcome.MISSING_FILE, subject)
        LOGGER.warning(result.message)
        return result

    raw = _read_host_file(path)
    try:
        manifest = json.loads(raw)
    except json.JSONDecodeError as exc:
        LOGGER.debug("could not parse %s: %s", path, exc)
        manifest = None
    if not isinstance(manifest, dict):
        result = HostPatchResult(path, PatchOutcome.NOT_FOUND, subject)
        LOGGER.warning(result.message)
        return result

    if not ensure_psr4_autoload(manifest):
        return HostPatchResult(path, PatchOutcome.ALREADY_PRESENT, subject)

    rendered = json.dumps(manifest, indent=4, ensure_ascii=False) + "\n"
    return _write_host_file(path, rendered.replace("\n", _line_ending(raw)), subject)


def run_dump_autoload(
    base_path: Path,
    *,
    runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
) -> bool:
    """Run ``composer dump-autoload`` in ``base_path``. Returns ``False`` on any failure."""

    binary = "composer.bat" if os.name == "nt" else "composer"
    try:
        completed = runner(
            [binary, "dump-autoload"],
            cwd=base_path,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        LOGGER.warning("could not run %s dump-autoload: %s", binary, exc)
        return False

    if completed.returncode != 0:
        LOGGER.warning("%s dump-autoload exited with %s: %s", binary, completed.returncode, completed.stdout)
        return False
    return True
