"""
Configuration for the scaffolder.

Settings come from environment variables with defaults from constants.py.
The framework profile names the host application's base classes and
packages by dotted path; nothing is imported until an analyzer needs it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

from .constants import (
    DEFAULT_COMPONENT_BASE,
    DEFAULT_COMPONENTS_PACKAGE,
    DEFAULT_CONNECTION,
    DEFAULT_CONTROLLER_BASE,
    DEFAULT_CONTROLLERS_PACKAGE,
    DEFAULT_MODEL_BASE,
    DEFAULT_MODELS_PACKAGE,
    DEFAULT_PANEL_BASE,
    DEFAULT_PANELS_PACKAGE,
    DEFAULT_RELATION_BASE,
    DEFAULT_RESOURCE_BASE,
    DEFAULT_RESOURCES_PACKAGE,
    DEFAULT_ROUTES,
    DEFAULT_TEST_PATH,
)

ENV_PREFIX = "SCAFFOLD_"


@dataclass(frozen=True)
class FrameworkProfile:
    """Dotted paths describing the host application."""
    model_base: str = DEFAULT_MODEL_BASE
    relation_base: str = DEFAULT_RELATION_BASE
    controller_base: str = DEFAULT_CONTROLLER_BASE
    component_base: str = DEFAULT_COMPONENT_BASE
    resource_base: str = DEFAULT_RESOURCE_BASE
    panel_base: str = DEFAULT_PANEL_BASE
    models_package: str = DEFAULT_MODELS_PACKAGE
    controllers_package: str = DEFAULT_CONTROLLERS_PACKAGE
    components_package: str = DEFAULT_COMPONENTS_PACKAGE
    resources_package: str = DEFAULT_RESOURCES_PACKAGE
    panels_package: str = DEFAULT_PANELS_PACKAGE
    routes: str | None = DEFAULT_ROUTES

    @classmethod
    def from_env(cls) -> FrameworkProfile:
        """Build a profile, letting SCAFFOLD_<FIELD> override each default."""
        overrides = {}
        for f in fields(cls):
            value = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
            if value:
                overrides[f.name] = value
        return cls(**overrides)


@dataclass(frozen=True)
class ScaffoldConfig:
    """
    Runtime settings.

    Attributes:
        test_path: Root directory generated tests are written under
        stubs_path: Optional directory whose stubs take precedence
        database_url: SQLAlchemy URL used for schema analysis
        connection: Label reported as the connection name
        bootstrap: Whether to write a conftest.py when none exists
        profile: Host framework description
    """
    test_path: Path = Path(DEFAULT_TEST_PATH)
    stubs_path: Path | None = None
    database_url: str | None = None
    connection: str = DEFAULT_CONNECTION
    bootstrap: bool = True
    profile: FrameworkProfile = field(default_factory=FrameworkProfile)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> ScaffoldConfig:
    """Load configuration from the environment."""
    stubs_path = os.getenv(f"{ENV_PREFIX}STUBS_PATH")

    return ScaffoldConfig(
        test_path=Path(os.getenv(f"{ENV_PREFIX}TEST_PATH", DEFAULT_TEST_PATH)),
        stubs_path=Path(stubs_path) if stubs_path else None,
        database_url=os.getenv(f"{ENV_PREFIX}DATABASE_URL") or None,
        connection=os.getenv(f"{ENV_PREFIX}CONNECTION", DEFAULT_CONNECTION),
        bootstrap=_env_flag(f"{ENV_PREFIX}BOOTSTRAP", True),
        profile=FrameworkProfile.from_env(),
    )
