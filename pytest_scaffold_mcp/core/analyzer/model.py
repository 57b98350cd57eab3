"""Model analyzer: reads ORM conventions and relationships from a model class."""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable
from typing import Any

from ...constants import (
    DEFAULT_KEY_TYPE,
    DEFAULT_PRIMARY_KEY,
    SCOPE_PREFIX,
    TIMESTAMP_COLUMNS,
)
from ..naming import plural, snake, split_qualified
from .base import AnalyzerBase, as_rule_map, as_tuple
from .introspection import (
    ProbeOutcome,
    aggregate_mixins,
    canonical_name,
    declared_methods,
    describe_parameters,
    probe,
)
from .models import ModelDescriptor, RelationshipInfo, ScopeInfo, SubjectKind

logger = logging.getLogger(__name__)


class ModelAnalyzer(AnalyzerBase):
    """Analyze ORM model classes."""

    kind = SubjectKind.MODEL
    base_field = "model_base"

    def analyze(self, subject: str | type) -> ModelDescriptor:
        cls = self.resolve(subject)
        qualified = canonical_name(cls)
        namespace, short_name = split_qualified(qualified)

        primary_key = getattr(cls, "primary_key", DEFAULT_PRIMARY_KEY)
        incrementing = bool(getattr(cls, "incrementing", True))
        key_type = getattr(cls, "key_type", DEFAULT_KEY_TYPE)
        timestamps = bool(getattr(cls, "timestamps", True))
        mixins = aggregate_mixins(cls, self.base())

        casts = dict(getattr(cls, "casts", None) or {})
        if incrementing:
            casts = {primary_key: key_type, **casts}

        dates = list(as_tuple(getattr(cls, "dates", None)))
        if timestamps:
            dates.extend(c for c in TIMESTAMP_COLUMNS if c not in dates)

        has_uuid = hasattr(cls, "get_uuid_column_name") or any(
            "uuid" in m.name.lower() for m in mixins
        )
        has_factory = callable(getattr(cls, "factory", None)) or any(
            m.name == "HasFactory" for m in mixins
        )

        relationships = self._relationships(cls)
        logger.debug(f"Model {qualified}: {len(relationships)} relationships, {len(mixins)} mixins")

        return ModelDescriptor(
            qualified_name=qualified,
            short_name=short_name,
            namespace=namespace,
            table=getattr(cls, "__tablename__", None) or snake(plural(short_name)),
            primary_key=primary_key,
            incrementing=incrementing,
            key_type=key_type,
            timestamps=timestamps,
            fillable=as_tuple(getattr(cls, "fillable", None)),
            guarded=as_tuple(getattr(cls, "guarded", None)),
            hidden=as_tuple(getattr(cls, "hidden", None)),
            visible=as_tuple(getattr(cls, "visible", None)),
            casts=casts,
            dates=tuple(dates),
            relationships=relationships,
            scopes=self._scopes(cls),
            mixins=mixins,
            has_factory=has_factory,
            has_uuid=has_uuid,
            validation_rules=as_rule_map(getattr(cls, "rules", None)),
        )

    # =========================================================================
    # Relationships
    # =========================================================================

    def _relationships(self, cls: type) -> tuple[RelationshipInfo, ...]:
        """
        Find declared methods returning a relation.

        The return annotation is trusted first; otherwise the method is
        called on a fresh instance. Methods needing arguments are skipped.
        """
        relation_base = self.base("relation_base")
        instance: ProbeOutcome | None = None
        found = []

        for name, func in declared_methods(cls):
            if name.startswith(SCOPE_PREFIX) or not inspect.isfunction(vars(cls)[name]):
                continue
            if any(not p.has_default and p.kind in ("positional_only", "positional_or_keyword")
                   for p in describe_parameters(func)):
                continue

            relation = self._from_annotation(name, func, relation_base)
            if relation is not None and relation.related is not None:
                found.append(relation)
                continue

            if instance is None:
                instance = probe(cls)
            if not instance.ok:
                if relation is not None:
                    found.append(relation)
                continue

            outcome = probe(getattr(instance.value, name))
            if outcome.ok and isinstance(outcome.value, relation_base):
                found.append(RelationshipInfo(
                    name=name,
                    kind=type(outcome.value).__name__,
                    related=_related_name(outcome.value),
                ))
            elif relation is not None:
                found.append(relation)

        return tuple(found)

    def _from_annotation(
        self,
        name: str,
        func: Callable,
        relation_base: type,
    ) -> RelationshipInfo | None:
        hints = probe(typing.get_type_hints, func)
        if not hints.ok or "return" not in hints.value:
            return None

        returned = hints.value["return"]
        origin = typing.get_origin(returned) or returned
        if not isinstance(origin, type) or not issubclass(origin, relation_base):
            return None

        related = None
        args = typing.get_args(returned)
        if args and isinstance(args[0], type):
            related = canonical_name(args[0])
        return RelationshipInfo(name=name, kind=origin.__name__, related=related)

    # =========================================================================
    # Scopes
    # =========================================================================

    def _scopes(self, cls: type) -> tuple[ScopeInfo, ...]:
        scopes = []
        for name, func in declared_methods(cls):
            if not name.startswith(SCOPE_PREFIX) or name == SCOPE_PREFIX:
                continue
            # First argument is the query being scoped
            parameters = describe_parameters(func)[1:]
            scopes.append(ScopeInfo(
                name=name[len(SCOPE_PREFIX):],
                method=name,
                parameters=parameters,
            ))
        return tuple(scopes)


def _related_name(relation: Any) -> str | None:
    """Qualified name of the model a relation points at, if exposed."""
    getter = getattr(relation, "get_related", None)
    related = probe(getter).value if callable(getter) else None
    if related is None:
        related = getattr(relation, "related", None)
    if related is None:
        return None
    if isinstance(related, str):
        return related
    if not isinstance(related, type):
        related = type(related)
    return canonical_name(related)
