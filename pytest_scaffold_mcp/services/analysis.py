"""
Analysis Service - resolves identifiers and runs the matching analyzer.

Owns the analyzers for one configuration so that framework base classes
and the route table are resolved once and reused across subjects.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import ScaffoldConfig, load_config
from ..constants import RESOURCE_SUFFIX
from ..core.analyzer import (
    AdminResourceAnalyzer,
    AnalyzerBase,
    ComponentAnalyzer,
    ControllerAnalyzer,
    DatabaseAnalyzer,
    Descriptor,
    Environment,
    ModelAnalyzer,
    RouteTable,
    SubjectKind,
    Survey,
    environment_for,
)
from ..core.errors import ScaffoldError
from .base import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


def parse_kind(kind: SubjectKind | str) -> SubjectKind | None:
    try:
        return SubjectKind(kind)
    except ValueError:
        return None


class AnalysisService:
    """
    Service for analyzing host application subjects.

    Dependencies (engine, route table, environment) may be injected;
    otherwise they are built from the configuration on first use.
    """

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        engine: Engine | None = None,
        route_table: RouteTable | None = None,
        environment: Environment | None = None,
    ):
        self.config = config or load_config()
        self._engine = engine
        self._owns_engine = False
        self._environment = environment
        profile = self.config.profile
        self._analyzers: dict[SubjectKind, AnalyzerBase] = {
            SubjectKind.MODEL: ModelAnalyzer(profile),
            SubjectKind.CONTROLLER: ControllerAnalyzer(profile, route_table),
            SubjectKind.COMPONENT: ComponentAnalyzer(profile),
            SubjectKind.ADMIN_RESOURCE: AdminResourceAnalyzer(profile),
        }

    # =========================================================================
    # Dependencies
    # =========================================================================

    @property
    def environment(self) -> Environment:
        if self._environment is None:
            self._environment = environment_for(self.config.profile)
        return self._environment

    def analyzer(self, kind: SubjectKind) -> AnalyzerBase:
        return self._analyzers[kind]

    def database_analyzer(self) -> DatabaseAnalyzer | None:
        """Analyzer for the configured database, or None when there is none."""
        if self._engine is None and self.config.database_url:
            self._engine = create_engine(self.config.database_url)
            self._owns_engine = True
        if self._engine is None:
            return None
        return DatabaseAnalyzer(self._engine, self.config.connection)

    def close(self) -> None:
        """Dispose the engine this service created; injected engines are left alone."""
        if self._owns_engine and self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._owns_engine = False

    # =========================================================================
    # Operations
    # =========================================================================

    def qualify(self, kind: SubjectKind, identifier: str) -> str:
        """
        Expand a short class name into a dotted path.

        'User' becomes '<models_package>.User'; admin resources also gain
        the Resource suffix. Dotted identifiers are returned unchanged.
        """
        if "." in identifier or kind == SubjectKind.TABLE:
            return identifier

        profile = self.config.profile
        if kind == SubjectKind.ADMIN_RESOURCE and not identifier.endswith(RESOURCE_SUFFIX):
            identifier = f"{identifier}{RESOURCE_SUFFIX}"
        package = {
            SubjectKind.MODEL: profile.models_package,
            SubjectKind.CONTROLLER: profile.controllers_package,
            SubjectKind.COMPONENT: profile.components_package,
            SubjectKind.ADMIN_RESOURCE: profile.resources_package,
        }[kind]
        return f"{package}.{identifier}"

    def analyze(self, kind: SubjectKind | str, identifier: str | None) -> ServiceResult[Descriptor]:
        """
        Analyze one subject.

        Args:
            kind: Subject kind ("model", "controller", "table", "component", "admin_resource")
            identifier: Dotted class path, short class name or table name

        Returns:
            ServiceResult containing the descriptor
        """
        parsed = parse_kind(kind)
        if parsed is None:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"Unknown subject kind: {kind}",
                {"allowed": [k.value for k in SubjectKind]},
            )
        if not identifier:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "An identifier is required")

        try:
            if parsed == SubjectKind.TABLE:
                analyzer = self.database_analyzer()
                if analyzer is None:
                    return no_database_result()
                descriptor = analyzer.analyze(identifier)
            else:
                descriptor = self.analyzer(parsed).analyze(self.qualify(parsed, identifier))
        except (ScaffoldError, SQLAlchemyError) as exc:
            logger.info(f"Analysis of {parsed.value} {identifier} failed: {exc}")
            return ServiceResult.from_exception(exc)

        return ServiceResult.ok(descriptor)

    def survey(self, kind: SubjectKind) -> ServiceResult[Survey]:
        """Analyze all components or admin resources, if that capability is installed."""
        analyzer = self.analyzer(kind)
        if not isinstance(analyzer, (ComponentAnalyzer, AdminResourceAnalyzer)):
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, f"Cannot survey subjects of kind {kind.value}"
            )
        try:
            return ServiceResult.ok(analyzer.survey(self.environment))
        except ScaffoldError as exc:
            return ServiceResult.from_exception(exc)


def no_database_result() -> ServiceResult:
    return ServiceResult.fail(
        ErrorCode.DATABASE_NOT_CONFIGURED,
        "No database configured; set SCAFFOLD_DATABASE_URL",
    )
