from __future__ import annotations

from pathlib import Path

import pytest

from module_maker.cli import main


def test_cli_create_module(host_project: Path, capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--base-path", str(host_project), "create", "Blog", "--no-dump-autoload"])
    assert exit_code == 0
    assert (host_project / "modules" / "Blog" / "Models" / "Blog.php").exists()

    out = capsys.readouterr().out
    assert "Module Blog created successfully!" in out
    assert "providers.php" in out


def test_cli_accepts_framework_command_alias(host_project: Path):
    exit_code = main(
        ["-b", str(host_project), "module:create", "Post", "--no-dump-autoload", "--modules-path", "src/Modules"]
    )
    assert exit_code == 0
    assert (host_project / "src" / "Modules" / "Post" / "Http" / "Controllers" / "PostController.php").exists()


def test_cli_reports_existing_module(host_project: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["-b", str(host_project), "create", "Blog", "--no-dump-autoload"]) == 0
    capsys.readouterr()

    assert main(["-b", str(host_project), "create", "Blog", "--no-dump-autoload"]) == 1
    captured = capsys.readouterr()
    assert "Module already exists!" in captured.err
    assert "created successfully" not in captured.out


def test_cli_rejects_invalid_name(host_project: Path):
    with pytest.raises(SystemExit) as excinfo:
        main(["-b", str(host_project), "create", "not valid"])
    assert excinfo.value.code == 2
    assert not (host_project / "modules").exists()


def test_cli_prints_warnings_for_missing_host_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["-b", str(tmp_path), "create", "Blog", "--framework-version", "10"]) == 0
    err = capsys.readouterr().err
    assert "composer.json does not exist" in err
    assert "app.php does not exist" in err


def test_cli_publish(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["-b", str(tmp_path), "publish", "stubs"]) == 0
    assert (tmp_path / "stubs" / "vendor" / "module-maker" / "module" / "Models" / "modelName.php.stub").is_file()

    assert main(["-b", str(tmp_path), "publish", "config"]) == 0
    assert (tmp_path / "module-maker.json").is_file()

    assert main(["-b", str(tmp_path), "publish", "config"]) == 1
    assert "--force" in capsys.readouterr().err


def test_cli_reports_invalid_environment_setting(
    host_project: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setenv("MODULE_MAKER_FRAMEWORK_VERSION", "11.x")

    assert main(["-b", str(host_project), "create", "Blog", "--no-dump-autoload"]) == 1
    assert "Invalid module maker settings" in capsys.readouterr().err
    assert not (host_project / "modules").exists()


@pytest.mark.parametrize("contents", ["{oops", "[1, 2]"])
@pytest.mark.parametrize("command", [["create", "Blog", "--no-dump-autoload"], ["publish", "stubs"]])
def test_cli_reports_unreadable_settings_file(
    host_project: Path, capsys: pytest.CaptureFixture[str], contents: str, command: list[str]
):
    (host_project / "module-maker.json").write_text(contents, encoding="utf-8")

    assert main(["-b", str(host_project), *command]) == 1
    assert "Could not read module-maker.json" in capsys.readouterr().err
    assert not (host_project / "modules").exists()
    assert not (host_project / "stubs").exists()


def test_package_import_does_not_run_the_cli():
    import importlib

    module = importlib.import_module("module_maker.__main__")
    assert module.main is main
