"""Base class for class-based analyzers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ...config import FrameworkProfile
from .introspection import resolve_base, resolve_class
from .models import Descriptor, SubjectKind


class AnalyzerBase(ABC):
    """
    Resolve an identifier against a framework base class and describe it.

    Subclasses set `kind` and `base_field`, the FrameworkProfile field naming
    the base class their subjects must derive from.
    """

    kind: SubjectKind
    base_field: str

    def __init__(self, profile: FrameworkProfile | None = None):
        self.profile = profile or FrameworkProfile()
        self._bases: dict[str, type] = {}

    def base(self, field_name: str | None = None) -> type:
        """Resolve (once) the framework class named by a profile field."""
        field_name = field_name or self.base_field
        if field_name not in self._bases:
            self._bases[field_name] = resolve_base(getattr(self.profile, field_name))
        return self._bases[field_name]

    def resolve(self, subject: str | type) -> type:
        return resolve_class(subject, self.base())

    @abstractmethod
    def analyze(self, subject: str | type) -> Descriptor:
        """Describe one subject; never returns a partial descriptor."""
        pass


def as_tuple(value: Any) -> tuple:
    """Coerce a list-like convention attribute into a tuple."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return ()


def as_rule_map(value: Any) -> dict[str, str]:
    """Normalize a rules mapping; list rules are joined with '|'."""
    if not isinstance(value, dict):
        return {}
    return {
        str(k): v if isinstance(v, str) else "|".join(str(r) for r in v)
        for k, v in value.items()
    }
