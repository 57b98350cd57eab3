"""Minimal web framework: the base classes the sample application builds on."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


# =============================================================================
# ORM
# =============================================================================

class Relation(Generic[T]):
    def __init__(self, parent: Model, related: type[T]):
        self.parent = parent
        self.related = related


class HasOne(Relation[T]):
    pass


class HasMany(Relation[T]):
    pass


class BelongsTo(Relation[T]):
    pass


class Model:
    primary_key = "id"
    incrementing = True
    key_type = "int"
    timestamps = True

    def __init__(self, **attributes):
        self.attributes = dict(attributes)

    def boot(self):
        pass

    def save(self):
        return True

    def has_one(self, related):
        return HasOne(self, related)

    def has_many(self, related):
        return HasMany(self, related)

    def belongs_to(self, related):
        return BelongsTo(self, related)


# =============================================================================
# HTTP
# =============================================================================

class Controller:
    middleware: tuple = ()


# =============================================================================
# Reactive components
# =============================================================================

class Component:
    listeners: dict = {}

    def mount(self):
        pass

    def emit(self, event, *args):
        pass

    def dispatch(self, event, *args):
        pass


# =============================================================================
# Admin panel
# =============================================================================

class Field:
    def __init__(self, name, label=None, required=False, sortable=False, searchable=False):
        self.name = name
        self.label = label
        self.required = required
        self.sortable = sortable
        self.searchable = searchable


class TextInput(Field):
    pass


class Toggle(Field):
    pass


class TextColumn(Field):
    pass


class Section:
    """Layout container; has no name of its own."""

    def __init__(self, heading, schema):
        self.heading = heading
        self.schema = list(schema)


class Resource:
    model = None

    @classmethod
    def form_schema(cls):
        return []

    @classmethod
    def table_schema(cls):
        return []

    @classmethod
    def get_pages(cls):
        return {}


class Page:
    resource = None


class Panel:
    def __init__(self, path, resources=(), pages=(), widgets=()):
        self.path = path
        self.resources = list(resources)
        self.pages = list(pages)
        self.widgets = list(widgets)


class PanelProvider:
    def panel(self):
        raise NotImplementedError
