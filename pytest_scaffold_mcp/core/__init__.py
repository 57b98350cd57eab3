"""Core domain logic: analyzers, descriptors and generators."""

from .errors import (
    AnalysisError,
    NotFoundError,
    RenderIOError,
    ScaffoldError,
    TypeKindMismatchError,
    UnsupportedDriverError,
)

__all__ = [
    "ScaffoldError",
    "AnalysisError",
    "NotFoundError",
    "TypeKindMismatchError",
    "UnsupportedDriverError",
    "RenderIOError",
]
