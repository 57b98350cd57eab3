"""
Service Layer Base - result and error types shared by all services.

Services never raise to their callers: analyzer and generator exceptions
are converted into a failed ServiceResult carrying an ErrorCode.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import (
    AnalysisError,
    NotFoundError,
    RenderIOError,
    ScaffoldError,
    TypeKindMismatchError,
    UnsupportedDriverError,
)

T = TypeVar("T")


class ErrorCode(str, Enum):
    """
    Standard error codes for service operations.

    Using string enum for easy serialization.
    """
    # Input validation
    VALIDATION_ERROR = "validation_error"
    MISSING_INPUT = "missing_input"

    # Analysis
    NOT_FOUND = "not_found"
    TYPE_KIND_MISMATCH = "type_kind_mismatch"
    ANALYSIS_ERROR = "analysis_error"

    # Database
    DATABASE_NOT_CONFIGURED = "database_not_configured"
    UNSUPPORTED_DRIVER = "unsupported_driver"
    DATABASE_ERROR = "database_error"

    # Output
    RENDER_IO_ERROR = "render_io_error"

    # General
    INTERNAL_ERROR = "internal_error"


_EXCEPTION_CODES: tuple[tuple[type[Exception], ErrorCode], ...] = (
    (NotFoundError, ErrorCode.NOT_FOUND),
    (TypeKindMismatchError, ErrorCode.TYPE_KIND_MISMATCH),
    (UnsupportedDriverError, ErrorCode.UNSUPPORTED_DRIVER),
    (AnalysisError, ErrorCode.ANALYSIS_ERROR),
    (RenderIOError, ErrorCode.RENDER_IO_ERROR),
    (SQLAlchemyError, ErrorCode.DATABASE_ERROR),
)


def error_code_for(exc: Exception) -> ErrorCode:
    """Map an exception raised below the service layer to its ErrorCode."""
    for exc_type, code in _EXCEPTION_CODES:
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL_ERROR


@dataclass(frozen=True)
class ServiceError:
    """
    Structured error information.

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable error message
        details: Optional additional context
    """
    code: ErrorCode
    message: str
    details: dict | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Either success with data or failure with an error, never both.

    Usage:
        result = service.analyze("model", "app.models.User")
        if result.success:
            descriptor = result.data
        else:
            print(result.error.message)
    """
    success: bool
    data: T | None = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data, error=None)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: dict | None = None
    ) -> ServiceResult[T]:
        return cls(
            success=False,
            data=None,
            error=ServiceError(code=code, message=message, details=details)
        )

    @classmethod
    def from_exception(cls, exc: ScaffoldError | SQLAlchemyError) -> ServiceResult[T]:
        """Failed result for an analyzer, generator or database exception."""
        return cls.fail(error_code_for(exc), str(exc))

    def unwrap(self) -> T:
        """
        Get the data, raising if failed.

        Raises:
            ValueError: If result is a failure
        """
        if not self.success or self.data is None:
            error_msg = self.error.message if self.error else "Unknown error"
            raise ValueError(f"Cannot unwrap failed result: {error_msg}")
        return self.data
