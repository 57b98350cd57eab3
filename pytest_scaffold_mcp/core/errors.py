"""Exceptions raised by analyzers and generators."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolder errors."""


class AnalysisError(ScaffoldError):
    """A subject could not be analyzed."""


class NotFoundError(AnalysisError):
    """The identifier does not resolve to a loaded subject."""

    def __init__(self, identifier: str, reason: str | None = None):
        self.identifier = identifier
        self.reason = reason
        message = f"Subject not found: {identifier}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class TypeKindMismatchError(AnalysisError):
    """The subject resolved but is not of the expected kind."""

    def __init__(self, identifier: str, expected: str):
        self.identifier = identifier
        self.expected = expected
        super().__init__(f"{identifier} is not a subclass of {expected}")


class UnsupportedDriverError(AnalysisError):
    """The database dialect is not one of the supported families."""

    def __init__(self, driver: str):
        self.driver = driver
        super().__init__(f"Unsupported database driver: {driver}")


class RenderIOError(ScaffoldError):
    """A generated file could not be written."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot write {path}: {cause}")
