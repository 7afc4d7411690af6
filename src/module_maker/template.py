"""Literal placeholder substitution for stub files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

__all__ = [
    "STUB_SUFFIX",
    "StubRenderer",
    "TemplateRenderingError",
    "find_placeholders",
]


STUB_SUFFIX = ".stub"

_PLACEHOLDER_PATTERN = re.compile(r"{{\s*(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*}}")


class TemplateRenderingError(RuntimeError):
    """Raised when a placeholder has no value and ``missing="error"``."""


def find_placeholders(text: str) -> list[str]:
    """Return the keys of every ``{{ key }}`` placeholder left in ``text``."""

    return [match.group("key") for match in _PLACEHOLDER_PATTERN.finditer(text)]


@dataclass(slots=True)
class StubRenderer:
    """Replace ``{{ key }}`` placeholders and bare literal tokens.

    ``literals`` maps bare words (no braces) to keys of the render context.
    The stub set uses one of them, ``resourceName``, directly in file names and
    class declarations.
    """

    literals: Mapping[str, str] = field(default_factory=lambda: {"resourceName": "resourceName"})

    def render_string(
        self,
        template: str,
        context: Mapping[str, str],
        *,
        missing: str = "keep",
    ) -> str:
        """Render ``template`` using ``context``.

        Parameters
        ----------
        template:
            The stub text.
        context:
            Mapping providing values for placeholders.
        missing:
            ``"keep"`` leaves unknown placeholders untouched, ``"empty"``
            removes them and ``"error"`` raises
            :class:`TemplateRenderingError`.
        """

        if missing not in {"keep", "empty", "error"}:
            raise ValueError("missing must be 'keep', 'empty', or 'error'")

        def substitute(match: re.Match[str]) -> str:
            key = match.group("key")
            if key in context:
                return str(context[key])
            if missing == "keep":
                return match.group(0)
            if missing == "empty":
                return ""
            raise TemplateRenderingError(f"missing value for '{key}'")

        rendered = _PLACEHOLDER_PATTERN.sub(substitute, template)
        for literal, key in self.literals.items():
            if key in context:
                rendered = rendered.replace(literal, str(context[key]))
        return rendered

    def render_name(self, filename: str, context: Mapping[str, str]) -> str:
        """Render a stub file name and strip its ``.stub`` suffix."""

        rendered = self.render_string(filename, context)
        if rendered.endswith(STUB_SUFFIX):
            rendered = rendered[: -len(STUB_SUFFIX)]
        return rendered

    def render_file(
        self,
        template_path: str | Path,
        context: Mapping[str, str],
        *,
        encoding: str = "utf-8",
        missing: str = "keep",
    ) -> str:
        """Read ``template_path`` and return its rendered contents."""

        template_path = Path(template_path)
        if not template_path.is_file():
            raise FileNotFoundError(template_path)

        text = template_path.read_text(encoding=encoding)
        return self.render_string(text, context, missing=missing)
