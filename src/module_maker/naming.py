"""String normalisation utilities used to derive PHP identifiers."""

from __future__ import annotations

import re

from .errors import InvalidModuleNameError

__all__ = ["class_prefix", "pluralize", "snake_case", "table_name", "validate_module_name"]


_MODULE_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_UPPERCASE_BOUNDARY = re.compile(r"(.)(?=[A-Z])")
_MULTIPLE_UNDERSCORES = re.compile(r"_+")

_UNCOUNTABLE = frozenset(
    {
        "audio",
        "data",
        "deer",
        "equipment",
        "feedback",
        "fish",
        "information",
        "metadata",
        "money",
        "news",
        "police",
        "rice",
        "series",
        "sheep",
        "species",
        "traffic",
    }
)

_IRREGULAR = {
    "child": "children",
    "foot": "feet",
    "goose": "geese",
    "man": "men",
    "mouse": "mice",
    "ox": "oxen",
    "person": "people",
    "tooth": "teeth",
    "woman": "women",
}

# Ordered: the first matching rule wins.
_PLURAL_RULES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"(quiz)$", r"\1zes"),
        (r"(matr|vert|ind)(ix|ex)$", r"\1ices"),
        (r"(alias|status|campus)$", r"\1es"),
        (r"(bu)s$", r"\1ses"),
        (r"(octop|vir)us$", r"\1i"),
        (r"(ax|test)is$", r"\1es"),
        (r"(buffal|tomat|her|potat|ech)o$", r"\1oes"),
        (r"sis$", "ses"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"(hive)$", r"\1s"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(x|ch|ss|sh|z)$", r"\1es"),
        (r"([ti])um$", r"\1a"),
        (r"s$", "s"),
        (r"$", "s"),
    )
)


def validate_module_name(name: str) -> str:
    """Return ``name`` stripped of surrounding whitespace or raise.

    Module names become directory names, PHP namespaces and class prefixes, so
    only identifier characters are accepted.
    """

    candidate = name.strip()
    if not _MODULE_NAME.match(candidate):
        raise InvalidModuleNameError(name)
    return candidate


def class_prefix(name: str) -> str:
    """Upper-case the first character of ``name`` and keep the rest verbatim."""

    return name[:1].upper() + name[1:]


def snake_case(name: str) -> str:
    """Convert ``BlogPost`` style names into ``blog_post``."""

    if name.islower():
        return name
    candidate = _UPPERCASE_BOUNDARY.sub(r"\1_", name).lower()
    return _MULTIPLE_UNDERSCORES.sub("_", candidate)


def _match_case(source: str, target: str) -> str:
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def pluralize(word: str) -> str:
    """Return the English plural of ``word``.

    Only the last ``_`` separated segment is inflected so ``blog_post`` becomes
    ``blog_posts``.
    """

    head, sep, last = word.rpartition("_")
    if not last:
        return word

    lowered = last.lower()
    if lowered in _UNCOUNTABLE:
        plural = last
    elif lowered in _IRREGULAR:
        plural = _match_case(last, _IRREGULAR[lowered])
    else:
        plural = last
        for pattern, replacement in _PLURAL_RULES:
            if pattern.search(last):
                plural = pattern.sub(replacement, last, count=1)
                break

    return f"{head}{sep}{plural}"


def table_name(module_name: str) -> str:
    """Derive the database table name for ``module_name`` (``Category`` -> ``categories``)."""

    return pluralize(snake_case(module_name))
