"""Find subject classes inside a package."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from collections.abc import Callable

from ..errors import AnalysisError, NotFoundError
from .introspection import canonical_name, probe


def discover_classes(
    package: str,
    base: type,
    skip_module: Callable[[str], bool] | None = None,
) -> list[type]:
    """
    Return concrete subclasses of `base` defined in `package` and its submodules.

    Submodules that fail to import are ignored, as are modules rejected by
    `skip_module`. Classes are returned in discovery order, each once.

    Raises:
        NotFoundError: If the package itself cannot be imported
        AnalysisError: If importing the package raises anything else
    """
    try:
        root = importlib.import_module(package)
    except ImportError as exc:
        raise NotFoundError(package, str(exc)) from exc
    except Exception as exc:
        raise AnalysisError(f"Importing {package} failed: {type(exc).__name__}: {exc}") from exc

    modules = [root]
    if hasattr(root, "__path__"):
        for info in pkgutil.walk_packages(root.__path__, prefix=f"{package}."):
            if skip_module and skip_module(info.name):
                continue
            outcome = probe(importlib.import_module, info.name)
            if outcome.ok:
                modules.append(outcome.value)

    found: dict[str, type] = {}
    for module in modules:
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if (
                obj.__module__ == module.__name__
                and issubclass(obj, base)
                and obj is not base
                and not inspect.isabstract(obj)
            ):
                found.setdefault(canonical_name(obj), obj)
    return list(found.values())
