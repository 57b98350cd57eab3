"""Reactive component analyzer."""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from typing import Protocol

from ...config import FrameworkProfile
from ...constants import EMIT_METHODS
from ..errors import AnalysisError
from ..naming import kebab, split_qualified
from .base import AnalyzerBase, as_rule_map, as_tuple
from .discovery import discover_classes
from .environment import COMPONENTS, Environment
from .introspection import (
    annotation_text,
    canonical_name,
    declared_methods,
    describe_method,
    probe,
)
from .models import (
    ComponentDescriptor,
    EventInfo,
    ListenerInfo,
    PropertyInfo,
    SubjectKind,
    Survey,
)

logger = logging.getLogger(__name__)


class EventEmissionDetector(Protocol):
    def detect(self, func: Callable) -> list[str]:
        """Names of events emitted by `func`, in source order."""
        ...


class RegexEmissionDetector:
    """
    Textual heuristic over method source.

    Matches literal event names passed to `self.emit(...)` or
    `self.dispatch(...)`; names built at runtime are not seen.
    """

    def __init__(self, methods: tuple[str, ...] = EMIT_METHODS):
        names = "|".join(re.escape(m) for m in methods)
        self._pattern = re.compile(rf"self\.(?:{names})\(\s*['\"]([^'\"]+)['\"]")

    def detect(self, func: Callable) -> list[str]:
        source = probe(inspect.getsource, func)
        if not source.ok:
            return []
        return self._pattern.findall(source.value)


class ComponentAnalyzer(AnalyzerBase):
    """Analyze reactive UI components."""

    kind = SubjectKind.COMPONENT
    base_field = "component_base"

    def __init__(
        self,
        profile: FrameworkProfile | None = None,
        detector: EventEmissionDetector | None = None,
    ):
        super().__init__(profile)
        self.detector = detector or RegexEmissionDetector()

    def analyze(self, subject: str | type) -> ComponentDescriptor:
        cls = self.resolve(subject)
        qualified = canonical_name(cls)
        namespace, short_name = split_qualified(qualified)
        methods = list(declared_methods(cls))

        return ComponentDescriptor(
            qualified_name=qualified,
            short_name=short_name,
            namespace=namespace,
            name=_component_name(cls, short_name),
            properties=_properties(cls),
            methods=tuple(describe_method(n, f) for n, f in methods),
            events=self._events(cls, methods),
            listeners=_listeners(cls),
            validation_rules=as_rule_map(getattr(cls, "rules", None)),
            validation_attributes={
                str(k): str(v) for k, v in (getattr(cls, "validation_attributes", None) or {}).items()
            },
            query_string=_query_string(getattr(cls, "query_string", None)),
        )

    def survey(self, environment: Environment) -> Survey:
        """Analyze every component in the components package, if installed."""
        if not environment.has_capability(COMPONENTS):
            logger.info("Reactive components are not installed; skipping")
            return Survey(installed=False)

        subjects, skipped = [], {}
        for cls in discover_classes(self.profile.components_package, self.base()):
            try:
                subjects.append(self.analyze(cls))
            except AnalysisError as exc:
                logger.warning(f"Skipping component {canonical_name(cls)}: {exc}")
                skipped[canonical_name(cls)] = str(exc)
        return Survey(installed=True, subjects=tuple(subjects), skipped=skipped)

    def _events(self, cls: type, methods: list[tuple[str, Callable]]) -> tuple[EventInfo, ...]:
        if not any(callable(getattr(cls, m, None)) for m in EMIT_METHODS):
            return ()

        # A later emission of the same event rebinds it to the later method
        emitted: dict[str, str] = {}
        for name, func in methods:
            for event in self.detector.detect(func):
                emitted[event] = name
        return tuple(EventInfo(name=e, method=m) for e, m in emitted.items())


def _component_name(cls: type, short_name: str) -> str:
    if callable(getattr(cls, "get_name", None)):
        outcome = probe(lambda: cls().get_name())
        if outcome.ok and isinstance(outcome.value, str):
            return outcome.value
    return kebab(short_name)


def _properties(cls: type) -> tuple[PropertyInfo, ...]:
    """Public annotated attributes declared on the class itself, ClassVars excluded."""
    found = []
    namespace = vars(cls)
    for name, annotation in inspect.get_annotations(cls).items():
        hint = annotation_text(annotation)
        if name.startswith("_") or (hint and "ClassVar" in hint):
            continue
        found.append(PropertyInfo(
            name=name,
            type_hint=hint,
            default_value=repr(namespace[name]) if name in namespace else None,
            has_default=name in namespace,
        ))
    return tuple(found)


def _listeners(cls: type) -> tuple[ListenerInfo, ...]:
    if callable(getattr(cls, "get_listeners", None)):
        outcome = probe(lambda: cls().get_listeners())
        listeners = outcome.value if outcome.ok else None
    else:
        listeners = getattr(cls, "listeners", None)

    if not isinstance(listeners, dict):
        return ()
    return tuple(
        ListenerInfo(event=str(event), handler=getattr(handler, "__name__", str(handler)))
        for event, handler in listeners.items()
    )


def _query_string(value) -> tuple[str, ...]:
    if isinstance(value, dict):
        return tuple(str(k) for k in value)
    return tuple(str(v) for v in as_tuple(value))
