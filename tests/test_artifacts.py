from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from module_maker.artifacts import ARTIFACTS, Artifact, generate_artifact, seed_paths
from module_maker.config import ModuleConfig
from module_maker.durable import WriteOutcome
from module_maker.settings import BUNDLED_STUBS_PATH
from module_maker.template import StubRenderer, find_placeholders

NOW = datetime(2024, 5, 17, 9, 30, 5)


def _artifact(key: str) -> Artifact:
    return next(artifact for artifact in ARTIFACTS if artifact.key == key)


def test_output_paths_for_blog():
    config = ModuleConfig.from_name("Blog")
    outputs = {artifact.key: str(artifact.output_path(config, NOW)) for artifact in ARTIFACTS}
    assert outputs == {
        "model": "Models/Blog.php",
        "controller": "Http/Controllers/BlogController.php",
        "migration": "Database/Migrations/2024_05_17_093005_create_blogs_table.php",
        "request": "Http/Requests/BlogRequest.php",
    }


def test_migration_name_has_fourteen_digit_timestamp():
    name = _artifact("migration").output_path(ModuleConfig.from_name("Category"), NOW).name
    assert re.fullmatch(r"\d{4}_\d{2}_\d{2}_\d{6}_create_categories_table\.php", name)


def test_seed_paths_cover_every_artifact():
    assert {str(path) for path in seed_paths()} == {artifact.seed for artifact in ARTIFACTS}


def test_generate_artifact_renders_bundled_seed(tmp_path: Path):
    config = ModuleConfig.from_name("Blog")
    generated = generate_artifact(
        _artifact("controller"),
        BUNDLED_STUBS_PATH,
        tmp_path,
        config,
        renderer=StubRenderer(),
        now=NOW,
    )
    assert generated is not None
    written, write = generated
    assert written == tmp_path / "Http" / "Controllers" / "BlogController.php"
    assert write is WriteOutcome.REPLACED
    contents = written.read_text(encoding="utf-8")
    assert "class BlogController extends Controller" in contents
    assert "use Modules\\Blog\\Http\\Resources\\BlogResource;" in contents
    assert find_placeholders(contents) == []


def test_generate_artifact_with_missing_seed_is_skipped(tmp_path: Path, caplog):
    stubs = tmp_path / "stubs"
    stubs.mkdir()
    module = tmp_path / "module"
    written = generate_artifact(
        _artifact("model"),
        stubs,
        module,
        ModuleConfig.from_name("Blog"),
        renderer=StubRenderer(),
        now=NOW,
    )
    assert written is None
    assert not module.exists()
    assert "skipping model" in caplog.text
