"""Custom exception types raised by the module maker."""

from __future__ import annotations

from pathlib import Path


class ModuleMakerError(RuntimeError):
    """Base class for errors that abort a module-maker command."""


class InvalidModuleNameError(ModuleMakerError, ValueError):
    """Raised when a module name cannot be used as a PHP class prefix."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"invalid module name '{name}'. Use letters, digits and underscores, "
            "starting with a letter."
        )
        self.name = name


class ModuleExistsError(ModuleMakerError, FileExistsError):
    """Raised when the target module directory is already present."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} already exists")
        self.path = path


class StubsNotFoundError(ModuleMakerError, FileNotFoundError):
    """Raised when no stub directory can be located."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"stub directory {path} does not exist")
        self.path = path
