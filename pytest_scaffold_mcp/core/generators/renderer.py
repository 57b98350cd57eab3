"""
Template renderer.

Placeholders look like `{{ name }}` (inner spaces optional). Rendering is a
single pass over the template: substituted text is never scanned again, and
placeholders without an entry in the map are left as they are. There are no
conditionals or loops; generators pre-join repeated fragments.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def render(template: str, substitutions: Mapping[str, str]) -> str:
    """Replace every known placeholder in one pass."""
    if not substitutions:
        return template

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in substitutions:
            return str(substitutions[name])
        return match.group(0)

    return PLACEHOLDER.sub(replace, template)


def placeholders(template: str) -> set[str]:
    """Names of all placeholders a template mentions."""
    return set(PLACEHOLDER.findall(template))


def join_blocks(blocks: Iterable[str]) -> str:
    """Join top-level blocks (whole test functions) with two blank lines."""
    return "\n\n\n".join(b.strip("\n") for b in blocks if b.strip())
