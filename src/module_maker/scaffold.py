"""Module scaffolding."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from .artifacts import ARTIFACTS, Artifact, generate_artifact, seed_paths
from .config import ModuleConfig
from .durable import WriteOutcome
from .errors import ModuleExistsError, StubsNotFoundError
from .host import (
    HostPatchResult,
    detect_framework_version,
    register_provider,
    run_dump_autoload,
    update_composer_autoload,
)
from .settings import MakerSettings
from .stubs import copy_stub_tree
from .template import StubRenderer

__all__ = ["MODULE_FOLDERS", "ModuleScaffolder", "ScaffoldReport"]

LOGGER = logging.getLogger(__name__)

MODULE_FOLDERS: tuple[str, ...] = (
    "Actions",
    "Database/Factories",
    "Database/Migrations",
    "DTO",
    "Http/Controllers",
    "Http/Requests",
    "Http/Resources",
    "Models",
    "Providers",
    "routes",
    "Tests",
)


@dataclass(slots=True)
class ScaffoldReport:
    """Everything a single :meth:`ModuleScaffolder.create` call did."""

    config: ModuleConfig
    module_path: Path
    directories: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    artifacts: dict[str, Path] = field(default_factory=dict)
    host: list[HostPatchResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class ModuleScaffolder:
    """Create a module skeleton and register it with the host project."""

    def __init__(
        self,
        settings: MakerSettings,
        *,
        renderer: StubRenderer | None = None,
        artifacts: tuple[Artifact, ...] = ARTIFACTS,
        clock: Callable[[], datetime] = datetime.now,
        dump_autoload: Callable[[Path], bool] = run_dump_autoload,
    ) -> None:
        self.settings = settings
        self.renderer = renderer or StubRenderer()
        self.artifacts = artifacts
        self.clock = clock
        self.dump_autoload = dump_autoload

    def create(self, name: str | ModuleConfig) -> ScaffoldReport:
        """Generate the module ``name``.

        Raises :class:`ModuleExistsError` before touching the filesystem when
        the module directory is already present, whatever its contents.
        """

        config = name if isinstance(name, ModuleConfig) else ModuleConfig.from_name(name)
        module_path = self.settings.modules_root / config.name
        if module_path.exists():
            raise ModuleExistsError(module_path)

        stubs_dir = self.settings.stubs_root
        if not stubs_dir.is_dir():
            raise StubsNotFoundError(stubs_dir)

        report = ScaffoldReport(config=config, module_path=module_path)
        LOGGER.info("creating module %s at %s from %s", config.name, module_path, stubs_dir)

        report.directories = self.create_directories(module_path)
        for destination, write in copy_stub_tree(
            stubs_dir,
            module_path,
            config,
            renderer=self.renderer,
            skip=seed_paths(self.artifacts),
        ):
            self._record_write(destination, write, report)

        now = self.clock()
        for artifact in self.artifacts:
            generated = generate_artifact(
                artifact,
                stubs_dir,
                module_path,
                config,
                renderer=self.renderer,
                now=now,
            )
            if generated is None:
                report.warnings.append(f"Seed stub {artifact.seed} not found; {artifact.key} was not generated.")
                continue
            destination, write = generated
            if self._record_write(destination, write, report):
                report.artifacts[artifact.key] = destination

        self.register_with_host(config, report)
        return report

    def create_directories(self, module_path: Path) -> list[Path]:
        """Create ``module_path`` and the fixed module folders."""

        module_path.mkdir(parents=True)
        created = []
        for folder in MODULE_FOLDERS:
            directory = module_path.joinpath(*folder.split("/"))
            directory.mkdir(parents=True, exist_ok=True)
            created.append(directory)
        return created

    def register_with_host(self, config: ModuleConfig, report: ScaffoldReport) -> None:
        """Patch ``composer.json`` and the provider list of the host project."""

        base_path = self.settings.base_path

        composer = update_composer_autoload(base_path)
        self._record(composer, report)
        if composer.changed and self.settings.dump_autoload:
            if not self.dump_autoload(base_path):
                report.warnings.append(
                    "Could not run 'composer dump-autoload' automatically. Run it manually."
                )

        major_version = self.settings.framework_version
        if major_version is None:
            major_version = detect_framework_version(base_path)
        self._record(register_provider(base_path, config.provider_fqcn, major_version), report)

    @staticmethod
    def _record(result: HostPatchResult, report: ScaffoldReport) -> None:
        report.host.append(result)
        if result.failed:
            report.warnings.append(result.message)
        elif result.degraded:
            report.warnings.append(f"{result.path} was updated without an atomic rename.")

    @staticmethod
    def _record_write(path: Path, write: WriteOutcome, report: ScaffoldReport) -> bool:
        if write is WriteOutcome.FAILED:
            report.warnings.append(f"Could not write {path}.")
            return False
        if write is WriteOutcome.COPIED:
            report.warnings.append(f"{path} was written without an atomic rename.")
        report.files.append(path)
        return True
