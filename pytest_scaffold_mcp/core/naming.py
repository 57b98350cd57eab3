"""Naming helpers: case conversion and simple English inflection."""

from __future__ import annotations

import re

_IRREGULAR: dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "foot": "feet",
    "tooth": "teeth",
}
_IRREGULAR_SINGULAR: dict[str, str] = {v: k for k, v in _IRREGULAR.items()}
_UNCOUNTABLE: frozenset[str] = frozenset({
    "data", "equipment", "information", "media", "metadata", "news",
    "series", "species", "status", "settings",
})

_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-]+")
_LAST_WORD = re.compile(r"([A-Za-z]+)$")


def snake(name: str) -> str:
    """UserProfile -> user_profile."""
    return _SEPARATORS.sub("_", _CASE_BOUNDARY.sub("_", name)).strip("_").lower()


def kebab(name: str) -> str:
    """UserProfile -> user-profile."""
    return snake(name).replace("_", "-")


def studly(name: str) -> str:
    """order_item -> OrderItem."""
    parts = _SEPARATORS.split(_CASE_BOUNDARY.sub("_", name))
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


def _last_word(text: str) -> tuple[str, str]:
    # Split on the final case or separator boundary: "OrderItem" -> ("Order", "Item")
    pieces = _SEPARATORS.split(_CASE_BOUNDARY.sub("_", text))
    word = pieces[-1] if pieces else text
    return text[: len(text) - len(word)], word


def _match_case(source: str, target: str) -> str:
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def plural(word: str) -> str:
    """Pluralize the last word of a name: Category -> Categories."""
    if not word:
        return word
    head, last = _last_word(word)
    lower = last.lower()

    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR:
        return head + _match_case(last, _IRREGULAR[lower])
    if lower in _IRREGULAR_SINGULAR:
        return word
    if re.search(r"[^aeiou]y$", lower):
        return word[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", lower):
        return word + "es"
    return word + "s"


def singular(word: str) -> str:
    """Singularize the last word of a name: order_items -> order_item."""
    if not word:
        return word
    head, last = _last_word(word)
    lower = last.lower()

    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_SINGULAR:
        return head + _match_case(last, _IRREGULAR_SINGULAR[lower])
    if lower in _IRREGULAR:
        return word
    if lower.endswith("ies") and len(lower) > 3:
        return word[:-3] + "y"
    if re.search(r"(sses|xes|zes|ches|shes)$", lower):
        return word[:-2]
    if lower.endswith(("ss", "us", "is")):
        return word
    if lower.endswith("s"):
        return word[:-1]
    return word


def split_qualified(qualified_name: str) -> tuple[str, str]:
    """Split 'pkg.module.Name' into ('pkg.module', 'Name')."""
    namespace, _, short = qualified_name.rpartition(".")
    return namespace, short


def strip_suffix(name: str, suffix: str) -> str:
    """Remove a trailing suffix when the name is longer than it."""
    if name.endswith(suffix) and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name
