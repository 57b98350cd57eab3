"""Optional host capabilities (reactive components, admin panel)."""

from __future__ import annotations

import importlib.util
from collections.abc import Iterable, Mapping
from typing import Protocol

from ...config import FrameworkProfile

COMPONENTS = "components"
ADMIN = "admin"


class Environment(Protocol):
    def has_capability(self, name: str) -> bool: ...


class StaticEnvironment:
    """A fixed set of capabilities."""

    def __init__(self, capabilities: Iterable[str] = ()):
        self._capabilities = frozenset(capabilities)

    def has_capability(self, name: str) -> bool:
        return name in self._capabilities


class ModuleEnvironment:
    """
    A capability is present when the module providing it can be found.

    Each capability is looked up at most once per environment instance.
    """

    def __init__(self, modules: Mapping[str, str]):
        self._modules = dict(modules)
        self._resolved: dict[str, bool] = {}

    def has_capability(self, name: str) -> bool:
        if name not in self._resolved:
            module = self._modules.get(name)
            self._resolved[name] = module is not None and _module_exists(module)
        return self._resolved[name]


def _module_exists(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False


def environment_for(profile: FrameworkProfile) -> ModuleEnvironment:
    return ModuleEnvironment({
        COMPONENTS: profile.components_package,
        ADMIN: profile.resources_package,
    })
