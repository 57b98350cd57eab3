"""Analyzers - introspect host application subjects into descriptors."""

from .admin import AdminResourceAnalyzer, AttributeSchemaProvider, SchemaProvider
from .base import AnalyzerBase
from .component import ComponentAnalyzer, EventEmissionDetector, RegexEmissionDetector
from .controller import ControllerAnalyzer
from .database import DatabaseAnalyzer
from .dialects import SchemaDialect, dialect_for
from .environment import Environment, ModuleEnvironment, StaticEnvironment, environment_for
from .model import ModelAnalyzer
from .models import (
    AdminResourceDescriptor,
    ComponentDescriptor,
    ControllerDescriptor,
    DatabaseDescriptor,
    Descriptor,
    ModelDescriptor,
    PanelInfo,
    SubjectKind,
    Survey,
    TableDescriptor,
)
from .routes import RouteTable, StarletteRouteTable, StaticRouteTable

__all__ = [
    # Analyzers
    "AnalyzerBase",
    "ModelAnalyzer",
    "ControllerAnalyzer",
    "DatabaseAnalyzer",
    "ComponentAnalyzer",
    "AdminResourceAnalyzer",
    # Capabilities
    "Environment",
    "ModuleEnvironment",
    "StaticEnvironment",
    "environment_for",
    "EventEmissionDetector",
    "RegexEmissionDetector",
    "SchemaProvider",
    "AttributeSchemaProvider",
    "SchemaDialect",
    "dialect_for",
    "RouteTable",
    "StaticRouteTable",
    "StarletteRouteTable",
    # Descriptors
    "Descriptor",
    "SubjectKind",
    "ModelDescriptor",
    "ControllerDescriptor",
    "TableDescriptor",
    "DatabaseDescriptor",
    "ComponentDescriptor",
    "AdminResourceDescriptor",
    "PanelInfo",
    "Survey",
]
