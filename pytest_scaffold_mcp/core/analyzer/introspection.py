"""
Introspection primitives shared by every analyzer.

Covers resolving dotted identifiers to classes, reading members declared
directly on a class, describing signatures, aggregating mixins and
running best-effort probes against live objects.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ...constants import LIFECYCLE_METHODS
from ..errors import AnalysisError, NotFoundError, TypeKindMismatchError
from .models import MethodInfo, MixinInfo, ParameterInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Bases that never count as mixins
_NON_MIXIN_MODULES = frozenset({"builtins", "typing", "abc"})


# =============================================================================
# Probing
# =============================================================================

@dataclass(frozen=True)
class ProbeOutcome(Generic[T]):
    """Value produced by a probe, or the failure that prevented it."""
    value: T | None = None
    failure: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def probe(func: Callable[..., T], *args: Any, **kwargs: Any) -> ProbeOutcome[T]:
    """Call `func`, converting any exception into a failed outcome."""
    try:
        return ProbeOutcome(value=func(*args, **kwargs))
    except Exception as exc:
        label = getattr(func, "__qualname__", repr(func))
        logger.debug(f"Probe {label} failed: {exc!r}")
        return ProbeOutcome(failure=f"{type(exc).__name__}: {exc}")


# =============================================================================
# Resolution
# =============================================================================

def canonical_name(obj: Any) -> str:
    """Return 'module.QualName' for a class or function."""
    return f"{obj.__module__}.{obj.__qualname__}"


def resolve_object(identifier: str) -> Any:
    """
    Import the longest module prefix of `identifier` and walk the rest.

    Raises:
        NotFoundError: If no prefix imports or an attribute is missing
        AnalysisError: If a module raises anything else while importing
    """
    if not identifier or identifier.startswith(".") or identifier.endswith("."):
        raise NotFoundError(identifier, "not a dotted path")

    parts = identifier.split(".")
    last_error: ImportError | None = None

    for i in range(len(parts), 0, -1):
        module_name = ".".join(parts[:i])
        try:
            obj = importlib.import_module(module_name)
        except ImportError as exc:
            last_error = exc
            continue
        except Exception as exc:
            raise AnalysisError(
                f"Importing {module_name} for {identifier} failed: {type(exc).__name__}: {exc}"
            ) from exc

        for attr in parts[i:]:
            try:
                obj = getattr(obj, attr)
            except AttributeError:
                raise NotFoundError(identifier, f"{module_name} has no attribute {attr}") from None
        return obj

    raise NotFoundError(identifier, str(last_error) if last_error else None)


def resolve_class(subject: str | type, base: type) -> type:
    """
    Resolve `subject` to a proper subclass of `base`.

    Raises:
        NotFoundError: If the identifier does not resolve
        TypeKindMismatchError: If it resolves to something else
    """
    if isinstance(subject, type):
        obj, identifier = subject, canonical_name(subject)
    else:
        obj, identifier = resolve_object(subject), subject

    if not isinstance(obj, type) or obj is base or not issubclass(obj, base):
        raise TypeKindMismatchError(identifier, canonical_name(base))
    return obj


def resolve_base(path: str) -> type:
    """Resolve a framework base class from its dotted path."""
    obj = resolve_object(path)
    if not isinstance(obj, type):
        raise NotFoundError(path, "not a class")
    return obj


# =============================================================================
# Members
# =============================================================================

def _unwrap(member: Any) -> Callable | None:
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    if inspect.isfunction(member):
        return member
    return None


def declared_methods(
    cls: type,
    exclude: frozenset[str] = LIFECYCLE_METHODS,
) -> Iterator[tuple[str, Callable]]:
    """Yield public methods declared on `cls` itself, never inherited ones."""
    for name, member in vars(cls).items():
        if name.startswith("_") or name in exclude:
            continue
        func = _unwrap(member)
        if func is not None:
            yield name, func


def public_method_names(cls: type) -> set[str]:
    """Public method names of `cls`, inherited ones included."""
    names: set[str] = set()
    for klass in cls.__mro__:
        for name, member in vars(klass).items():
            if not name.startswith("_") and _unwrap(member) is not None:
                names.add(name)
    return names


def annotation_text(annotation: Any) -> str | None:
    """Render an annotation as source-like text."""
    if annotation is inspect.Parameter.empty:
        return None
    if isinstance(annotation, str):
        return annotation
    return inspect.formatannotation(annotation)


def describe_parameters(func: Callable) -> tuple[ParameterInfo, ...]:
    """Describe parameters of `func`, dropping a leading self/cls."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return ()

    params = list(sig.parameters.values())
    if params and params[0].name in ("self", "cls"):
        params = params[1:]

    return tuple(
        ParameterInfo(
            name=p.name,
            type_hint=annotation_text(p.annotation),
            default_value=None if p.default is inspect.Parameter.empty else repr(p.default),
            has_default=p.default is not inspect.Parameter.empty,
            kind=p.kind.name.lower(),
        )
        for p in params
    )


def describe_method(name: str, func: Callable) -> MethodInfo:
    try:
        return_type = annotation_text(inspect.signature(func).return_annotation)
    except (TypeError, ValueError):
        return_type = None

    return MethodInfo(
        name=name,
        parameters=describe_parameters(func),
        return_type=return_type,
        docstring=inspect.getdoc(func),
    )


# =============================================================================
# Mixins
# =============================================================================

def aggregate_mixins(cls: type, root_base: type) -> tuple[MixinInfo, ...]:
    """
    Collect mixins used by `cls`, its ancestors and the mixins themselves.

    Within the hierarchy rooted at `root_base`, any direct base that does not
    itself derive from `root_base` is a mixin. Each mixin appears once.
    """
    found: dict[str, MixinInfo] = {}
    visited: set[type] = set()

    def visit(mixin: type) -> None:
        if mixin in visited or mixin.__module__ in _NON_MIXIN_MODULES:
            return
        visited.add(mixin)
        qualified = canonical_name(mixin)
        found.setdefault(qualified, MixinInfo(name=mixin.__name__, qualified_name=qualified))
        for base in mixin.__bases__:
            visit(base)

    for klass in cls.__mro__:
        if not issubclass(klass, root_base):
            continue
        for base in klass.__bases__:
            if not issubclass(base, root_base):
                visit(base)

    return tuple(found.values())
