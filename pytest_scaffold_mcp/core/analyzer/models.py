"""Data models describing analyzed subjects."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, Union

# Parameter kinds matching Python's inspect module
ParameterKind = Literal[
    "positional_only",      # Before /
    "positional_or_keyword", # Normal parameters
    "var_positional",       # *args
    "keyword_only",         # After * or *args
    "var_keyword"           # **kwargs
]


class SubjectKind(str, Enum):
    """Kinds of subject the analyzers understand."""
    MODEL = "model"
    CONTROLLER = "controller"
    TABLE = "table"
    COMPONENT = "component"
    ADMIN_RESOURCE = "admin_resource"


@dataclass(frozen=True)
class ParameterInfo:
    """Information about a function parameter."""
    name: str
    type_hint: str | None = None
    default_value: str | None = None
    has_default: bool = False
    kind: ParameterKind = "positional_or_keyword"


@dataclass(frozen=True)
class MethodInfo:
    """A method declared directly on an analyzed class."""
    name: str
    parameters: tuple[ParameterInfo, ...] = ()
    return_type: str | None = None
    docstring: str | None = None


@dataclass(frozen=True)
class RelationshipInfo:
    """A model method returning a relation object."""
    name: str
    kind: str
    related: str | None = None


@dataclass(frozen=True)
class ScopeInfo:
    """A query scope; `name` drops the scope_ prefix, `method` keeps it."""
    name: str
    method: str
    parameters: tuple[ParameterInfo, ...] = ()


@dataclass(frozen=True)
class MixinInfo:
    name: str
    qualified_name: str


@dataclass(frozen=True)
class RouteInfo:
    """A route bound to a controller action."""
    uri: str
    methods: tuple[str, ...]
    name: str | None
    action: str
    middleware: tuple[str, ...] = ()


@dataclass(frozen=True)
class PropertyInfo:
    """A public attribute declared on a component."""
    name: str
    type_hint: str | None = None
    default_value: str | None = None
    has_default: bool = False


@dataclass(frozen=True)
class EventInfo:
    """An event emitted by a component method."""
    name: str
    method: str


@dataclass(frozen=True)
class ListenerInfo:
    event: str
    handler: str


@dataclass(frozen=True)
class ColumnInfo:
    """Column metadata; fields default to their zero value when unknown."""
    name: str
    type: str
    nullable: bool = False
    default: str | None = None
    auto_increment: bool = False
    unsigned: bool = False
    length: int | None = None


@dataclass(frozen=True)
class ForeignKeyInfo:
    local_column: str
    foreign_table: str
    foreign_column: str
    on_delete: str | None = None
    on_update: str | None = None


@dataclass(frozen=True)
class IndexInfo:
    name: str
    columns: tuple[str, ...]
    unique: bool = False
    primary: bool = False


@dataclass(frozen=True)
class FormFieldInfo:
    name: str
    type: str
    label: str | None = None
    required: bool = False


@dataclass(frozen=True)
class TableColumnInfo:
    name: str
    type: str
    label: str | None = None
    sortable: bool = False
    searchable: bool = False


@dataclass(frozen=True)
class PageInfo:
    """An admin page registered under a key such as 'index' or 'edit'."""
    key: str
    qualified_name: str
    short_name: str


# =============================================================================
# Descriptors
# =============================================================================

def _plain(value: Any) -> Any:
    """Recursively turn dataclasses and read-only mappings into plain containers."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_plain(v) for v in value)
    return value


def _freeze_mappings(instance: Any) -> None:
    # Frozen dataclasses still hand out their dicts; swap in read-only views
    for f in fields(instance):
        value = getattr(instance, f.name)
        if isinstance(value, Mapping) and not isinstance(value, MappingProxyType):
            object.__setattr__(instance, f.name, MappingProxyType(dict(value)))


class _Serializable:
    """Mixin giving descriptors a JSON-friendly dict form and read-only mappings."""

    def __post_init__(self) -> None:
        _freeze_mappings(self)

    def to_dict(self) -> dict[str, Any]:
        data = _plain(self)
        data["kind"] = self.kind.value
        return data


@dataclass(frozen=True)
class ModelDescriptor(_Serializable):
    """Everything the model analyzer learned about one model class."""
    qualified_name: str
    short_name: str
    namespace: str
    table: str
    primary_key: str = "id"
    incrementing: bool = True
    key_type: str = "int"
    timestamps: bool = True
    fillable: tuple[str, ...] = ()
    guarded: tuple[str, ...] = ()
    hidden: tuple[str, ...] = ()
    visible: tuple[str, ...] = ()
    casts: Mapping[str, str] = field(default_factory=dict)
    dates: tuple[str, ...] = ()
    relationships: tuple[RelationshipInfo, ...] = ()
    scopes: tuple[ScopeInfo, ...] = ()
    mixins: tuple[MixinInfo, ...] = ()
    has_factory: bool = False
    has_uuid: bool = False
    validation_rules: Mapping[str, str] = field(default_factory=dict)

    kind = SubjectKind.MODEL


@dataclass(frozen=True)
class ControllerDescriptor(_Serializable):
    qualified_name: str
    short_name: str
    namespace: str
    methods: tuple[MethodInfo, ...] = ()
    mixins: tuple[MixinInfo, ...] = ()
    routes: tuple[RouteInfo, ...] = ()
    model: str | None = None
    is_api: bool = False
    is_resourceful: bool = False
    middleware: tuple[str, ...] = ()

    kind = SubjectKind.CONTROLLER


@dataclass(frozen=True)
class TableDescriptor(_Serializable):
    """Schema of a single table as seen through one connection."""
    qualified_name: str
    short_name: str
    namespace: str
    model_name: str
    primary_key: tuple[str, ...] = ()
    columns: tuple[ColumnInfo, ...] = ()
    foreign_keys: Mapping[str, ForeignKeyInfo] = field(default_factory=dict)
    indexes: Mapping[str, IndexInfo] = field(default_factory=dict)
    has_timestamps: bool = False
    has_soft_deletes: bool = False

    kind = SubjectKind.TABLE

    @property
    def table(self) -> str:
        return self.short_name

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


@dataclass(frozen=True)
class DatabaseDescriptor:
    """All analyzed tables of one connection."""
    connection: str
    driver: str
    tables: tuple[TableDescriptor, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "connection": self.connection,
            "driver": self.driver,
            "tables": [t.to_dict() for t in self.tables],
        }


@dataclass(frozen=True)
class ComponentDescriptor(_Serializable):
    qualified_name: str
    short_name: str
    namespace: str
    name: str
    properties: tuple[PropertyInfo, ...] = ()
    methods: tuple[MethodInfo, ...] = ()
    events: tuple[EventInfo, ...] = ()
    listeners: tuple[ListenerInfo, ...] = ()
    validation_rules: Mapping[str, str] = field(default_factory=dict)
    validation_attributes: Mapping[str, str] = field(default_factory=dict)
    query_string: tuple[str, ...] = ()

    kind = SubjectKind.COMPONENT


@dataclass(frozen=True)
class AdminResourceDescriptor(_Serializable):
    qualified_name: str
    short_name: str
    namespace: str
    model: str
    pages: Mapping[str, PageInfo] = field(default_factory=dict)
    form_fields: tuple[FormFieldInfo, ...] = ()
    table_columns: tuple[TableColumnInfo, ...] = ()
    navigation_group: str | None = None
    # Relationships of the managed model, shown on the View page
    relationships: tuple[RelationshipInfo, ...] = ()

    kind = SubjectKind.ADMIN_RESOURCE


@dataclass(frozen=True)
class PanelInfo:
    """
    An admin panel registered by a panel provider.

    Attributes:
        name: Provider class name without the PanelProvider suffix
        path: URL prefix the panel is served under, if declared
        resources: Qualified names of the registered resources
        pages: Qualified names of standalone panel pages
        widgets: Qualified names of dashboard widgets
    """
    qualified_name: str
    name: str
    path: str | None = None
    resources: tuple[str, ...] = ()
    pages: tuple[str, ...] = ()
    widgets: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return _plain(self)


Descriptor = Union[
    ModelDescriptor,
    ControllerDescriptor,
    TableDescriptor,
    ComponentDescriptor,
    AdminResourceDescriptor,
]


@dataclass(frozen=True)
class Survey:
    """
    Result of a bulk scan over an optional capability.

    `installed` is False when the host application lacks the capability;
    that is reported rather than raised.
    """
    installed: bool
    subjects: tuple[Descriptor, ...] = ()
    skipped: Mapping[str, str] = field(default_factory=dict)
    panels: tuple[PanelInfo, ...] = ()

    def __post_init__(self) -> None:
        _freeze_mappings(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "installed": self.installed,
            "subjects": [s.to_dict() for s in self.subjects],
            "skipped": dict(self.skipped),
            "panels": [p.to_dict() for p in self.panels],
        }
