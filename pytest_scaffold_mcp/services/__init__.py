"""Services package.

Exposes stateless service classes and shared result types used by the MCP handlers.
"""

from ..config import ScaffoldConfig
from .analysis import AnalysisService
from .base import (
    ErrorCode,
    ServiceError,
    ServiceResult,
)
from .generation import BatchResult, GenerationService, SubjectResult

__all__ = [
    # Base
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    # Services
    "AnalysisService",
    "GenerationService",
    "BatchResult",
    "SubjectResult",
]


# =============================================================================
# Convenience factory functions
# =============================================================================

def create_analysis_service(config: ScaffoldConfig | None = None) -> AnalysisService:
    """Factory for AnalysisService (configuration from the environment by default)."""

    return AnalysisService(config=config)


def create_generation_service(
    config: ScaffoldConfig | None = None,
    analysis_service: AnalysisService | None = None
) -> GenerationService:
    """Factory for GenerationService (optionally inject dependencies)."""

    return GenerationService(config=config, analysis_service=analysis_service)
