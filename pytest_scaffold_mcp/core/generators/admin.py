"""Admin resource and page test generator."""

from __future__ import annotations

from pathlib import Path

from ...constants import ADMIN_ROUTE_PREFIX, PAGE_ROUTES, RESOURCE_SUFFIX
from ..analyzer.models import AdminResourceDescriptor, FormFieldInfo, PageInfo
from ..naming import kebab, snake, strip_suffix
from .base import (
    ConfirmHook,
    GenerationOutcome,
    GeneratorBase,
    identifier,
    output_file,
    py_literal,
)
from .controller import sample_uri
from .renderer import join_blocks

ADMIN_TESTS_DIR = Path("feature") / "admin"

# Role -> words that identify it in a page key or class name
PAGE_ROLES: tuple[tuple[str, frozenset[str]], ...] = (
    ("List", frozenset({"list", "index"})),
    ("Create", frozenset({"create", "new"})),
    ("Edit", frozenset({"edit", "update"})),
    ("View", frozenset({"view", "show", "detail"})),
)


def page_role(key: str, short_name: str) -> str | None:
    """
    Classify a page as List, Create, Edit or View.

    The page key is compared whole; the class name is split into words,
    so 'ListUsers' is a List page. Returns None for other pages.
    """
    key = key.lower()
    words = set(snake(short_name).split("_"))
    for role, tokens in PAGE_ROLES:
        if key in tokens or tokens & words:
            return role
    return None


def _label(field) -> str:
    return field.label or field.name.replace("_", " ").capitalize()


def _sample_value(field: FormFieldInfo):
    kind = field.type.lower()
    if "toggle" in kind or "checkbox" in kind:
        return True
    if "number" in kind or "numeric" in kind:
        return 1
    if "date" in kind:
        return "2024-01-01"
    if "email" in field.name:
        return "user@example.com"
    return f"Sample {_label(field)}"


class AdminTestGenerator(GeneratorBase):
    """Writes one resource test file and one file per registered page."""

    def generate(
        self,
        descriptor: AdminResourceDescriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> list[GenerationOutcome]:
        d = descriptor
        directory = Path(output_root) / ADMIN_TESTS_DIR
        subs = self._resource_substitutions(d)

        outcomes = [self.emit(
            "admin_resource_test", subs, output_file(directory, d.short_name), "admin_resource",
            force, confirm,
        )]

        page_directory = directory / snake(d.short_name)
        for page in d.pages.values():
            role = page_role(page.key, page.short_name)
            stub = f"admin_{role.lower()}_page_test" if role else "admin_page_test"
            if not self.stubs.exists(stub):
                stub = "admin_page_test"
            outcomes.append(self.emit(
                stub, self._page_substitutions(d, page, role, subs),
                output_file(page_directory, page.short_name), f"admin_page:{page.key}",
                force, confirm,
            ))
        return outcomes

    def _resource_substitutions(self, d: AdminResourceDescriptor) -> dict[str, str]:
        return {
            "resource_module": d.namespace,
            "resource_class": d.short_name,
            "resource_slug": identifier(d.short_name),
            "resource_url": f"/{ADMIN_ROUTE_PREFIX}/{kebab(strip_suffix(d.short_name, RESOURCE_SUFFIX))}",
            "model": d.model,
            "page_keys": py_literal(sorted(d.pages)),
            "navigation_group": repr(d.navigation_group),
            "form_fields": py_literal([f.name for f in d.form_fields]),
            "table_columns": py_literal([c.name for c in d.table_columns]),
        }

    def _page_substitutions(
        self,
        d: AdminResourceDescriptor,
        page: PageInfo,
        role: str | None,
        resource_subs: dict[str, str],
    ) -> dict[str, str]:
        slug = identifier(page.short_name)
        url = sample_uri(resource_subs["resource_url"] + PAGE_ROUTES.get(role or "", ""))
        required = [f for f in d.form_fields if f.required]

        return {
            **resource_subs,
            "page_class": page.short_name,
            "page_key": page.key,
            "page_slug": slug,
            "page_url": url,
            "field_labels": py_literal([_label(f) for f in d.form_fields]),
            "column_labels": py_literal([_label(c) for c in d.table_columns]),
            "form_data": py_literal({f.name: _sample_value(f) for f in required}),
            "required_test": _required_test(slug, required[0]) if required else "",
            "column_tests": join_blocks(_column_tests(slug, d)),
            "relationship_tests": join_blocks(_relationship_tests(slug, d)),
        }


def _required_test(slug: str, field: FormFieldInfo) -> str:
    return "\n".join([
        f"def test_{slug}_requires_{identifier(field.name)}(client):",
        "    data = dict(FORM_DATA)",
        f"    data.pop({field.name!r}, None)",
        "    response = client.post(URL, data=data)",
        "    assert response.status_code in (302, 400, 422)",
    ])


def _column_tests(slug: str, d: AdminResourceDescriptor) -> list[str]:
    blocks = []
    sortable = next((c for c in d.table_columns if c.sortable), None)
    if sortable:
        blocks.append("\n".join([
            f"def test_{slug}_sorts_by_{identifier(sortable.name)}(client):",
            f"    response = client.get(URL, params={{'sort': {sortable.name!r}}})",
            "    assert response.status_code == 200",
        ]))
    searchable = next((c for c in d.table_columns if c.searchable), None)
    if searchable:
        blocks.append("\n".join([
            f"def test_{slug}_searches_{identifier(searchable.name)}(client):",
            "    response = client.get(URL, params={'search': 'sample'})",
            "    assert response.status_code == 200",
        ]))
    return blocks

def _relationship_tests(slug: str, d: AdminResourceDescriptor) -> list[str]:
    # The view page names each relation of the record it shows
    return [
        "\n".join([
            f"def test_{slug}_shows_{identifier(r.name)}_relationship(client):",
            "    response = client.get(URL)",
            "    assert response.status_code == 200",
            f"    assert {r.name.replace('_', ' ').capitalize()!r} in response.text",
        ])
        for r in d.relationships
    ]
