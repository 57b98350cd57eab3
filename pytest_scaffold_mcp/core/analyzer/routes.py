"""
Route tables.

A route table is anything with a `routes()` method yielding RouteInfo.
Actions are dotted paths to the handling callable, e.g.
'app.controllers.user.UserController.index'.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from ..errors import NotFoundError
from .introspection import canonical_name, resolve_object
from .models import RouteInfo

logger = logging.getLogger(__name__)


class RouteTable(Protocol):
    def routes(self) -> Iterable[RouteInfo]: ...


class StaticRouteTable:
    """Routes declared up front as RouteInfo objects or plain dicts."""

    def __init__(self, entries: Iterable[RouteInfo | dict] = ()):
        self._routes = [_coerce(entry) for entry in entries]

    def routes(self) -> list[RouteInfo]:
        return list(self._routes)


class StarletteRouteTable:
    """
    Adapter over a Starlette/FastAPI-style application.

    Reads `path`, `methods`, `name` and `endpoint` from each object in
    `app.routes`; routes without a named endpoint are ignored.
    """

    def __init__(self, app: Any):
        self._app = app

    def routes(self) -> list[RouteInfo]:
        found = []
        for route in getattr(self._app, "routes", ()):
            endpoint = getattr(route, "endpoint", None)
            if endpoint is None or not hasattr(endpoint, "__qualname__"):
                continue
            found.append(RouteInfo(
                uri=getattr(route, "path", ""),
                methods=tuple(sorted(getattr(route, "methods", None) or ("GET",))),
                name=getattr(route, "name", None),
                action=canonical_name(endpoint),
                middleware=tuple(str(m) for m in getattr(route, "middleware", None) or ()),
            ))
        return found


def _coerce(entry: RouteInfo | dict) -> RouteInfo:
    if isinstance(entry, RouteInfo):
        return entry
    methods = entry.get("methods", ("GET",))
    if isinstance(methods, str):
        methods = (methods,)
    return RouteInfo(
        uri=entry["uri"],
        methods=tuple(m.upper() for m in methods),
        name=entry.get("name"),
        action=entry["action"],
        middleware=tuple(entry.get("middleware", ())),
    )


def route_table_from(source: Any) -> RouteTable:
    """Wrap an app, a route table or an iterable of entries."""
    if hasattr(source, "routes") and callable(source.routes):
        return source
    if hasattr(source, "routes"):
        return StarletteRouteTable(source)
    return StaticRouteTable(source)


def load_route_table(path: str | None) -> RouteTable:
    """Resolve the configured routes; a missing table yields no routes."""
    if not path:
        return StaticRouteTable()
    try:
        return route_table_from(resolve_object(path))
    except NotFoundError as exc:
        logger.debug(f"No route table at {path}: {exc}")
        return StaticRouteTable()
