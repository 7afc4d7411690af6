from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from module_maker.settings import MakerSettings  # noqa: E402

BOOTSTRAP_PROVIDERS = """<?php

return [
    App\\Providers\\AppServiceProvider::class,
];
"""

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 5)


@pytest.fixture()
def host_project(tmp_path: Path) -> Path:
    """A minimal framework 11 host project."""

    root = tmp_path / "app"
    (root / "bootstrap").mkdir(parents=True)
    (root / "bootstrap" / "providers.php").write_text(BOOTSTRAP_PROVIDERS, encoding="utf-8")
    manifest = {
        "name": "acme/app",
        "require": {"php": "^8.2", "laravel/framework": "^11.0"},
        "autoload": {"psr-4": {"App\\": "app/"}},
    }
    (root / "composer.json").write_text(json.dumps(manifest, indent=4), encoding="utf-8")
    return root


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def settings(host_project: Path) -> MakerSettings:
    return MakerSettings.load(host_project, overrides={"dump_autoload": False}, environ={})
