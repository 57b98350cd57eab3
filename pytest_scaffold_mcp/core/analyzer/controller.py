"""Controller analyzer: declared actions, bound routes and API/resource flags."""

from __future__ import annotations

import logging
from typing import Any

from ...config import FrameworkProfile
from ...constants import (
    CONTROLLER_SUFFIX,
    RESOURCE_ACTIONS,
    RESOURCEFUL_THRESHOLD,
)
from ..naming import singular, split_qualified, strip_suffix
from .base import AnalyzerBase
from .introspection import (
    aggregate_mixins,
    canonical_name,
    declared_methods,
    describe_method,
    probe,
    public_method_names,
    resolve_object,
)
from .models import ControllerDescriptor, MixinInfo, RouteInfo, SubjectKind
from .routes import RouteTable, load_route_table

logger = logging.getLogger(__name__)


class ControllerAnalyzer(AnalyzerBase):
    """Analyze controller classes against a route table."""

    kind = SubjectKind.CONTROLLER
    base_field = "controller_base"

    def __init__(
        self,
        profile: FrameworkProfile | None = None,
        route_table: RouteTable | None = None,
    ):
        super().__init__(profile)
        self._route_table = route_table

    @property
    def route_table(self) -> RouteTable:
        if self._route_table is None:
            self._route_table = load_route_table(self.profile.routes)
        return self._route_table

    def analyze(self, subject: str | type) -> ControllerDescriptor:
        cls = self.resolve(subject)
        qualified = canonical_name(cls)
        namespace, short_name = split_qualified(qualified)
        mixins = aggregate_mixins(cls, self.base())
        routes = self._routes(qualified)
        logger.debug(f"Controller {qualified}: {len(routes)} routes")

        return ControllerDescriptor(
            qualified_name=qualified,
            short_name=short_name,
            namespace=namespace,
            methods=tuple(describe_method(n, f) for n, f in declared_methods(cls)),
            mixins=mixins,
            routes=routes,
            model=self._model(cls, short_name),
            is_api=self._is_api(cls, qualified, mixins),
            is_resourceful=_is_resourceful(cls),
            middleware=self._middleware(cls),
        )

    def _routes(self, qualified: str) -> tuple[RouteInfo, ...]:
        """Routes whose action is a method of this controller, keyed by method name."""
        prefix = f"{qualified}."
        bound = []
        for route in self.route_table.routes():
            if route.action.startswith(prefix):
                bound.append(RouteInfo(
                    uri=route.uri,
                    methods=route.methods,
                    name=route.name,
                    action=route.action[len(prefix):],
                    middleware=route.middleware,
                ))
        return tuple(bound)

    def _model(self, cls: type, short_name: str) -> str | None:
        declared = getattr(cls, "model", None)
        if isinstance(declared, str):
            return declared
        if isinstance(declared, type):
            return canonical_name(declared)
        if declared is not None and not callable(declared):
            return canonical_name(type(declared))

        guess = f"{self.profile.models_package}.{singular(strip_suffix(short_name, CONTROLLER_SUFFIX))}"
        outcome = probe(resolve_object, guess)
        if outcome.ok and isinstance(outcome.value, type):
            return canonical_name(outcome.value)
        return None

    def _is_api(self, cls: type, qualified: str, mixins: tuple[MixinInfo, ...]) -> bool:
        declared = getattr(cls, "is_api", None)
        if isinstance(declared, bool):
            return declared

        namespace, short_name = split_qualified(qualified)
        if "Api" in short_name or "api" in namespace.split("."):
            return True
        return any("Api" in m.name or "API" in m.name for m in mixins)

    def _middleware(self, cls: type) -> tuple[str, ...]:
        if callable(getattr(cls, "get_middleware", None)):
            outcome = probe(lambda: cls().get_middleware())
            entries = outcome.value if outcome.ok else None
        else:
            entries = getattr(cls, "middleware", None)

        if not isinstance(entries, (list, tuple)):
            return ()
        return tuple(_middleware_name(entry) for entry in entries)


def _is_resourceful(cls: type) -> bool:
    available = public_method_names(cls)
    return sum(1 for action in RESOURCE_ACTIONS if action in available) >= RESOURCEFUL_THRESHOLD


def _middleware_name(entry: Any) -> str:
    if isinstance(entry, dict):
        return str(entry.get("middleware", entry))
    if isinstance(entry, type):
        return entry.__name__
    return str(entry)
