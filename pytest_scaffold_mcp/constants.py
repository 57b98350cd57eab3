"""
Shared constants used across the project.
"""

from typing import Final

# Output layout
DEFAULT_TEST_PATH: Final[str] = "tests"
DEFAULT_CONNECTION: Final[str] = "default"
TEST_FILE_PREFIX: Final[str] = "test_"
TEST_FILE_EXTENSION: Final[str] = ".py"

# Host framework defaults (dotted import paths)
DEFAULT_MODEL_BASE: Final[str] = "app.framework.Model"
DEFAULT_RELATION_BASE: Final[str] = "app.framework.Relation"
DEFAULT_CONTROLLER_BASE: Final[str] = "app.framework.Controller"
DEFAULT_COMPONENT_BASE: Final[str] = "app.framework.Component"
DEFAULT_RESOURCE_BASE: Final[str] = "app.framework.Resource"
DEFAULT_PANEL_BASE: Final[str] = "app.framework.PanelProvider"
DEFAULT_MODELS_PACKAGE: Final[str] = "app.models"
DEFAULT_CONTROLLERS_PACKAGE: Final[str] = "app.controllers"
DEFAULT_COMPONENTS_PACKAGE: Final[str] = "app.components"
DEFAULT_RESOURCES_PACKAGE: Final[str] = "app.admin.resources"
DEFAULT_PANELS_PACKAGE: Final[str] = "app.admin.panels"
DEFAULT_ROUTES: Final[str] = "app.routes.ROUTES"

# Methods that are lifecycle hooks rather than behaviour
LIFECYCLE_METHODS: Final[frozenset[str]] = frozenset({
    "__init__", "__new__", "__init_subclass__", "boot", "booted", "mount",
})

# REST actions; a controller with RESOURCEFUL_THRESHOLD of them is resourceful
RESOURCE_ACTIONS: Final[tuple[str, ...]] = (
    "index", "create", "store", "show", "edit", "update", "destroy",
)
RESOURCEFUL_THRESHOLD: Final[int] = 4

# Naming suffixes stripped when guessing an associated model
CONTROLLER_SUFFIX: Final[str] = "Controller"
RESOURCE_SUFFIX: Final[str] = "Resource"
PANEL_PROVIDER_SUFFIX: Final[str] = "PanelProvider"

# Model conventions
SCOPE_PREFIX: Final[str] = "scope_"
DEFAULT_PRIMARY_KEY: Final[str] = "id"
DEFAULT_KEY_TYPE: Final[str] = "int"
TIMESTAMP_COLUMNS: Final[tuple[str, str]] = ("created_at", "updated_at")
SOFT_DELETE_COLUMN: Final[str] = "deleted_at"

# Tables never analyzed in bulk
EXCLUDED_TABLES: Final[frozenset[str]] = frozenset({"migrations", "alembic_version"})

# Component event emission
EMIT_METHODS: Final[tuple[str, ...]] = ("emit", "dispatch")

# Admin panel
ADMIN_ROUTE_PREFIX: Final[str] = "admin"
PAGE_ROUTES: Final[dict[str, str]] = {
    "List": "",
    "Create": "/create",
    "Edit": "/{record}/edit",
    "View": "/{record}",
}
