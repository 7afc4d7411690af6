"""Settings for the module maker.

Values are read from, in increasing priority: built-in defaults, the host
project's ``module-maker.json``, ``MODULE_MAKER_*`` environment variables and
explicit overrides (usually CLI flags). Relative paths are resolved against
the host project root.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BUNDLED_STUBS_PATH",
    "CONFIG_FILENAME",
    "PUBLISHED_STUBS_PATH",
    "MakerSettings",
]

CONFIG_FILENAME = "module-maker.json"
PUBLISHED_STUBS_PATH = Path("stubs") / "vendor" / "module-maker" / "module"
BUNDLED_STUBS_PATH = Path(__file__).resolve().parent / "stubs" / "module"

_ENVIRONMENT = {
    "MODULE_MAKER_MODULES_PATH": "modules_path",
    "MODULE_MAKER_STUBS_PATH": "stubs_path",
    "MODULE_MAKER_FRAMEWORK_VERSION": "framework_version",
}


class MakerSettings(BaseModel):
    """Resolved configuration for a single command invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_path: Path = Field(default_factory=Path.cwd, description="Root of the host project.")
    modules_path: Path = Field(default=Path("modules"), description="Directory receiving generated modules.")
    stubs_path: Path = Field(
        default=PUBLISHED_STUBS_PATH,
        description="Stub directory; the bundled stubs are used when it does not exist.",
    )
    framework_version: int | None = Field(
        default=None,
        ge=1,
        description="Host framework major version. Detected from composer files when unset.",
    )
    dump_autoload: bool = Field(default=True, description="Run 'composer dump-autoload' after editing composer.json.")

    @property
    def modules_root(self) -> Path:
        return self.base_path / self.modules_path

    @property
    def stubs_root(self) -> Path:
        """The configured stub directory, or the bundled one when it is missing."""

        candidate = self.base_path / self.stubs_path
        if candidate.is_dir():
            return candidate
        return BUNDLED_STUBS_PATH

    @property
    def config_file(self) -> Path:
        return self.base_path / CONFIG_FILENAME

    @classmethod
    def load(
        cls,
        base_path: str | Path | None = None,
        *,
        overrides: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "MakerSettings":
        """Build settings for the host project rooted at ``base_path``.

        ``overrides`` entries whose value is ``None`` are ignored so argparse
        namespaces can be passed through without filtering.

        Raises :class:`ValueError` when the settings file does not hold a JSON object
        and pydantic's :class:`~pydantic.ValidationError` when a value does
        not fit its field.
        """

        root = Path(base_path) if base_path is not None else Path.cwd()
        values: dict[str, Any] = {}

        config_file = root / CONFIG_FILENAME
        if config_file.is_file():
            stored = json.loads(config_file.read_text(encoding="utf-8"))
            if not isinstance(stored, dict):
                raise ValueError(f"{config_file} must contain a JSON object")
            values.update(stored)

        env = os.environ if environ is None else environ
        for variable, key in _ENVIRONMENT.items():
            if env.get(variable):
                values[key] = env[variable]

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        values["base_path"] = root
        return cls.model_validate(values)

    def publish(self, *, force: bool = False) -> Path:
        """Write the publishable settings to ``module-maker.json``."""

        target = self.config_file
        if target.exists() and not force:
            raise FileExistsError(f"{target} already exists")

        payload = self.model_dump(mode="json", exclude={"base_path"})
        target.write_text(json.dumps(payload, indent=4) + "\n", encoding="utf-8")
        return target
