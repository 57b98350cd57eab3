"""Admin panel resource analyzer."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from ...config import FrameworkProfile
from ...constants import PANEL_PROVIDER_SUFFIX, RESOURCE_SUFFIX
from ..errors import AnalysisError, NotFoundError, ScaffoldError
from ..naming import split_qualified, strip_suffix
from .base import AnalyzerBase
from .discovery import discover_classes
from .environment import ADMIN, Environment
from .introspection import canonical_name, probe, resolve_object
from .model import ModelAnalyzer
from .models import (
    AdminResourceDescriptor,
    FormFieldInfo,
    PageInfo,
    PanelInfo,
    RelationshipInfo,
    SubjectKind,
    Survey,
    TableColumnInfo,
)

logger = logging.getLogger(__name__)

# Layout containers hold their children under one of these attributes
_CHILD_ATTRIBUTES = ("schema", "children", "components")


class SchemaProvider(Protocol):
    """Reads the form and table schema a resource declares."""

    def describe_form(self, resource: type) -> list[FormFieldInfo]: ...

    def describe_table(self, resource: type) -> list[TableColumnInfo]: ...


class AttributeSchemaProvider:
    """
    Duck-typed schema reader.

    Calls `resource.form_schema()` and `resource.table_schema()` and reads
    each component's name, label and flags from attributes or zero-argument
    methods (`name`/`get_name`, `required`/`is_required`, ...). Layout
    containers without a name are flattened. Any failure yields an empty list.
    """

    def describe_form(self, resource: type) -> list[FormFieldInfo]:
        return [
            FormFieldInfo(
                name=name,
                type=type(component).__name__,
                label=_read(component, "label", "get_label"),
                required=bool(_read(component, "required", "is_required", default=False)),
            )
            for component, name in self._components(resource, "form_schema")
        ]

    def describe_table(self, resource: type) -> list[TableColumnInfo]:
        return [
            TableColumnInfo(
                name=name,
                type=type(component).__name__,
                label=_read(component, "label", "get_label"),
                sortable=bool(_read(component, "sortable", "is_sortable", default=False)),
                searchable=bool(_read(component, "searchable", "is_searchable", default=False)),
            )
            for component, name in self._components(resource, "table_schema")
        ]

    def _components(self, resource: type, method: str) -> list[tuple[Any, str]]:
        schema = getattr(resource, method, None)
        if not callable(schema):
            return []
        outcome = probe(schema)
        if not outcome.ok or not isinstance(outcome.value, Iterable):
            return []
        return list(_flatten(outcome.value))


def _read(obj: Any, *names: str, default: Any = None) -> Any:
    """First available attribute among `names`; zero-argument callables are called."""
    for name in names:
        value = getattr(obj, name, None)
        if value is None:
            continue
        if callable(value) and not isinstance(value, type):
            outcome = probe(value)
            if not outcome.ok:
                continue
            value = outcome.value
        return value
    return default


def _flatten(components: Iterable[Any]) -> Iterable[tuple[Any, str]]:
    for component in components:
        name = _read(component, "name", "get_name")
        if isinstance(name, str) and name:
            yield component, name
            continue
        for attr in _CHILD_ATTRIBUTES:
            children = _read(component, attr)
            if isinstance(children, (list, tuple)):
                yield from _flatten(children)
                break


class AdminResourceAnalyzer(AnalyzerBase):
    """Analyze admin panel resources."""

    kind = SubjectKind.ADMIN_RESOURCE
    base_field = "resource_base"

    def __init__(
        self,
        profile: FrameworkProfile | None = None,
        schema_provider: SchemaProvider | None = None,
        model_analyzer: ModelAnalyzer | None = None,
    ):
        super().__init__(profile)
        self.schema_provider = schema_provider or AttributeSchemaProvider()
        self.model_analyzer = model_analyzer or ModelAnalyzer(self.profile)

    def analyze(self, subject: str | type) -> AdminResourceDescriptor:
        cls = self.resolve(subject)
        qualified = canonical_name(cls)
        namespace, short_name = split_qualified(qualified)

        model = self._model(cls, qualified, short_name)
        return AdminResourceDescriptor(
            qualified_name=qualified,
            short_name=short_name,
            namespace=namespace,
            model=model,
            pages=_pages(cls),
            form_fields=tuple(self.schema_provider.describe_form(cls)),
            table_columns=tuple(self.schema_provider.describe_table(cls)),
            navigation_group=_navigation_group(cls),
            relationships=self._relationships(model),
        )

    def survey(self, environment: Environment) -> Survey:
        """Analyze every resource in the resources package, if the admin panel is installed."""
        if not environment.has_capability(ADMIN):
            logger.info("Admin panel is not installed; skipping")
            return Survey(installed=False)

        subjects, skipped = [], {}
        classes = discover_classes(
            self.profile.resources_package,
            self.base(),
            skip_module=lambda name: "pages" in name.split("."),
        )
        for cls in classes:
            try:
                subjects.append(self.analyze(cls))
            except AnalysisError as exc:
                logger.warning(f"Skipping resource {canonical_name(cls)}: {exc}")
                skipped[canonical_name(cls)] = str(exc)
        return Survey(
            installed=True,
            subjects=tuple(subjects),
            skipped=skipped,
            panels=tuple(self.panels()),
        )

    def panels(self) -> list[PanelInfo]:
        """
        Describe every panel provider in the panels package.

        A host without panel providers, or whose panel base class cannot be
        resolved, simply has no panels.
        """
        try:
            providers = discover_classes(self.profile.panels_package, self.base("panel_base"))
        except ScaffoldError as exc:
            logger.info(f"No admin panels found: {exc}")
            return []
        return [_panel(cls) for cls in providers]

    def _relationships(self, model: str) -> tuple[RelationshipInfo, ...]:
        """Relationships of the managed model; empty when it cannot be analyzed."""
        try:
            return self.model_analyzer.analyze(model).relationships
        except ScaffoldError as exc:
            logger.debug(f"No relationships for {model}: {exc}")
            return ()

    def _model(self, cls: type, qualified: str, short_name: str) -> str:
        """
        Resolve the managed model.

        Raises:
            NotFoundError: If neither the resource nor the naming guess yields a model
        """
        if callable(getattr(cls, "get_model", None)):
            outcome = probe(cls.get_model)
            if outcome.ok and outcome.value is not None:
                return _class_name(outcome.value)

        declared = getattr(cls, "model", None)
        if declared is not None:
            return _class_name(declared)

        guess = f"{self.profile.models_package}.{strip_suffix(short_name, RESOURCE_SUFFIX)}"
        outcome = probe(resolve_object, guess)
        if outcome.ok and isinstance(outcome.value, type):
            return canonical_name(outcome.value)
        raise NotFoundError(qualified, "could not determine the resource's model")


def _class_name(value: Any) -> str:
    if isinstance(value, str):
        return value
    if not isinstance(value, type):
        value = type(value)
    return canonical_name(value)


def _pages(cls: type) -> dict[str, PageInfo]:
    if not callable(getattr(cls, "get_pages", None)):
        return {}
    outcome = probe(cls.get_pages)
    if not outcome.ok or not isinstance(outcome.value, dict):
        return {}

    pages = {}
    for key, page in outcome.value.items():
        qualified = _class_name(page)
        pages[str(key)] = PageInfo(
            key=str(key),
            qualified_name=qualified,
            short_name=split_qualified(qualified)[1],
        )
    return pages


def _navigation_group(cls: type) -> str | None:
    if callable(getattr(cls, "get_navigation_group", None)):
        outcome = probe(cls.get_navigation_group)
        if outcome.ok:
            return outcome.value
    group = getattr(cls, "navigation_group", None)
    return group if isinstance(group, str) else None


def _class_names(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(_class_name(v) for v in value)


def _panel(cls: type) -> PanelInfo:
    """
    Read a panel provider.

    `panel()` is called on a fresh provider and the result read through
    `path`/`get_path`, `resources`/`get_resources` and so on. Without a
    usable `panel()` the provider class itself is read the same way.
    """
    qualified = canonical_name(cls)
    source: Any = cls
    provider = probe(cls)
    if provider.ok and callable(getattr(provider.value, "panel", None)):
        built = probe(provider.value.panel)
        if built.ok and built.value is not None:
            source = built.value

    path = _read(source, "path", "get_path")
    return PanelInfo(
        qualified_name=qualified,
        name=strip_suffix(cls.__name__, PANEL_PROVIDER_SUFFIX),
        path=path if isinstance(path, str) else None,
        resources=_class_names(_read(source, "resources", "get_resources")),
        pages=_class_names(_read(source, "pages", "get_pages")),
        widgets=_class_names(_read(source, "widgets", "get_widgets")),
    )
