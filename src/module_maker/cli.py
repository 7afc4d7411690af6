"""Command line interface for the module maker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from .errors import InvalidModuleNameError, ModuleExistsError, StubsNotFoundError
from .host import PatchOutcome
from .scaffold import ModuleScaffolder
from .settings import CONFIG_FILENAME, MakerSettings
from .stubs import publish_stubs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="module-maker",
        description="Generate modules for a Laravel application",
    )
    parser.add_argument(
        "-b",
        "--base-path",
        type=Path,
        default=None,
        help="Root of the host project (defaults to the current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser(
        "create", aliases=["module:create"], help="create a new module"
    )
    create_parser.add_argument("name", help="Name of the module, e.g. Blog")
    create_parser.add_argument("--modules-path", type=Path, help="Directory receiving modules")
    create_parser.add_argument("--stubs-path", type=Path, help="Directory holding the module stubs")
    create_parser.add_argument(
        "--framework-version",
        type=int,
        help="Host framework major version, detected from composer files by default",
    )
    create_parser.add_argument(
        "--no-dump-autoload",
        dest="dump_autoload",
        action="store_false",
        default=None,
        help="Do not run 'composer dump-autoload' after editing composer.json",
    )

    publish_parser = subparsers.add_parser(
        "publish", help="copy the stubs or the settings file into the host project"
    )
    publish_parser.add_argument("tag", choices=["stubs", "config"], help="What to publish")
    publish_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite previously published files",
    )

    return parser


def _warn(message: str) -> None:
    print(message, file=sys.stderr)


def _load_settings(base_path: Path | None, overrides: dict[str, object] | None = None) -> MakerSettings | None:
    try:
        return MakerSettings.load(base_path, overrides=overrides)
    except ValidationError as exc:
        _warn(f"Invalid module maker settings: {exc}")
    except ValueError as exc:
        # json.JSONDecodeError and a settings file that is not an object.
        _warn(f"Could not read {CONFIG_FILENAME}: {exc}")
    return None


def _handle_create(args: argparse.Namespace) -> int:
    settings = _load_settings(
        args.base_path,
        {
            "modules_path": args.modules_path,
            "stubs_path": args.stubs_path,
            "framework_version": args.framework_version,
            "dump_autoload": args.dump_autoload,
        },
    )
    if settings is None:
        return 1
    scaffolder = ModuleScaffolder(settings)
    try:
        report = scaffolder.create(args.name)
    except ModuleExistsError:
        _warn("Module already exists!")
        return 1
    except StubsNotFoundError as exc:
        _warn(str(exc))
        return 1

    for result in report.host:
        if result.outcome in (PatchOutcome.INSERTED, PatchOutcome.ALREADY_PRESENT):
            print(result.message)
    for warning in report.warnings:
        _warn(warning)
    print(f"Module {report.config.name} created successfully!")
    return 0


def _handle_publish(args: argparse.Namespace) -> int:
    settings = _load_settings(args.base_path)
    if settings is None:
        return 1
    try:
        if args.tag == "stubs":
            target = publish_stubs(settings.base_path / settings.stubs_path, force=args.force)
        else:
            target = settings.publish(force=args.force)
    except FileExistsError as exc:
        _warn(f"{exc}. Use --force to overwrite.")
        return 1
    print(f"Published {args.tag} to {target}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command in ("create", "module:create"):
            return _handle_create(args)
        if args.command == "publish":
            return _handle_publish(args)
    except InvalidModuleNameError as exc:
        parser.error(str(exc))
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
