"""
Generation Service - runs Analyze -> Describe -> Render for batches of subjects.

A subject that fails to analyze or render is reported in the batch result
and the batch moves on to the next subject.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from ..config import ScaffoldConfig
from ..core.analyzer import Descriptor, SubjectKind, TableDescriptor
from ..core.analyzer.discovery import discover_classes
from ..core.analyzer.introspection import canonical_name
from ..core.errors import ScaffoldError
from ..core.generators import (
    AdminTestGenerator,
    ComponentTestGenerator,
    ConfirmHook,
    FileWriter,
    GenerationOutcome,
    ModelTestGenerator,
    OutcomeStatus,
    StubLoader,
    bootstrap_test_suite,
    generator_for,
)
from .analysis import AnalysisService, no_database_result, parse_kind
from .base import ErrorCode, ServiceError, ServiceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubjectResult:
    """Files written for one subject, or the reason none were."""
    subject: str
    kind: SubjectKind
    outcomes: tuple[GenerationOutcome, ...] = ()
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result = {
            "subject": self.subject,
            "kind": self.kind.value,
            "files": [o.to_dict() for o in self.outcomes],
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


@dataclass(frozen=True)
class BatchResult:
    """
    Result of a generation batch.

    Attributes:
        results: One entry per subject, in processing order
        notes: Informational messages (e.g. a capability is not installed)
        bootstrap: Outcome of writing conftest.py, when bootstrapping ran
    """
    results: tuple[SubjectResult, ...] = ()
    notes: tuple[str, ...] = ()
    bootstrap: GenerationOutcome | None = None

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for r in self.results for o in r.outcomes if o.status == status)

    @property
    def failed_subjects(self) -> list[SubjectResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> dict:
        return {
            "summary": {
                "subjects": len(self.results),
                "failed_subjects": len(self.failed_subjects),
                "created": self.count(OutcomeStatus.CREATED),
                "skipped": self.count(OutcomeStatus.SKIPPED),
                "failed": self.count(OutcomeStatus.FAILED),
            },
            "results": [r.to_dict() for r in self.results],
            "notes": list(self.notes),
            "bootstrap": self.bootstrap.to_dict() if self.bootstrap else None,
        }


@dataclass
class _Batch:
    results: list[SubjectResult] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    bootstrap: GenerationOutcome | None = None

    def freeze(self) -> BatchResult:
        return BatchResult(tuple(self.results), tuple(self.notes), self.bootstrap)


class GenerationService:
    """
    Service for generating test files.

    Stateless apart from the injected dependencies.
    """

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        analysis_service: AnalysisService | None = None,
        writer: FileWriter | None = None,
    ):
        self._owns_analysis = analysis_service is None
        self._analysis = analysis_service or AnalysisService(config)
        self.config = config or self._analysis.config
        self._stubs = StubLoader(self.config.stubs_path)
        self._writer = writer or FileWriter()
        self._models = ModelTestGenerator(self._stubs, self._writer)
        self._components = ComponentTestGenerator(self._stubs, self._writer)
        self._admin = AdminTestGenerator(self._stubs, self._writer)

    # =========================================================================
    # Public operations
    # =========================================================================

    def generate(
        self,
        kind: SubjectKind | str,
        identifiers: Iterable[str],
        force: bool = False,
        output_root: str | Path | None = None,
        confirm: ConfirmHook | None = None,
    ) -> ServiceResult[BatchResult]:
        """
        Analyze and generate tests for each identifier of one kind.

        Args:
            kind: Subject kind
            identifiers: Dotted paths, short class names or table names
            force: Overwrite existing files without asking
            output_root: Overrides the configured test path
            confirm: Asked before overwriting when force is False

        Returns:
            ServiceResult containing a BatchResult
        """
        parsed = parse_kind(kind)
        if parsed is None:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, f"Unknown subject kind: {kind}")
        identifiers = [i for i in identifiers if i]
        if not identifiers:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "At least one identifier is required")

        root = self._root(output_root)
        batch = self._start(root)
        for identifier in identifiers:
            batch.results.append(self._run(parsed, identifier, root, force, confirm))
        return ServiceResult.ok(batch.freeze())

    def generate_database(
        self,
        tables: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
        force: bool = False,
        output_root: str | Path | None = None,
    ) -> ServiceResult[BatchResult]:
        """Generate model tests for every table of the configured database."""
        names = self._table_names(tables, exclude)
        if not names.success:
            return ServiceResult.fail(names.error.code, names.error.message)

        root = self._root(output_root)
        batch = self._start(root)
        for name in names.data:
            batch.results.append(self._run(SubjectKind.TABLE, name, root, force, None))
        return ServiceResult.ok(batch.freeze())

    def generate_all(
        self,
        force: bool = False,
        output_root: str | Path | None = None,
    ) -> ServiceResult[BatchResult]:
        """
        Generate tests for everything that can be discovered.

        Models and controllers are discovered in their packages, tables
        through the configured database, and components and admin resources
        only when those capabilities are installed.
        """
        root = self._root(output_root)
        batch = self._start(root)

        for kind, base_field, package in (
            (SubjectKind.MODEL, "model_base", self.config.profile.models_package),
            (SubjectKind.CONTROLLER, "controller_base", self.config.profile.controllers_package),
        ):
            try:
                base = self._analysis.analyzer(kind).base(base_field)
                classes = discover_classes(package, base)
            except ScaffoldError as exc:
                batch.notes.append(f"No {kind.value}s discovered: {exc}")
                continue
            for cls in classes:
                batch.results.append(self._run(kind, canonical_name(cls), root, force, None))

        names = self._table_names()
        if names.success:
            for name in names.data:
                batch.results.append(self._run(SubjectKind.TABLE, name, root, force, None))
        else:
            batch.notes.append(f"Database skipped: {names.error.message}")

        for kind in (SubjectKind.COMPONENT, SubjectKind.ADMIN_RESOURCE):
            survey = self._analysis.survey(kind)
            if not survey.success:
                batch.notes.append(f"{kind.value} survey failed: {survey.error.message}")
                continue
            if not survey.data.installed:
                batch.notes.append(f"{kind.value} support is not installed")
                continue
            for subject, reason in survey.data.skipped.items():
                batch.results.append(SubjectResult(
                    subject=subject,
                    kind=kind,
                    error=ServiceError(ErrorCode.ANALYSIS_ERROR, reason),
                ))
            for descriptor in survey.data.subjects:
                batch.results.append(self._render(descriptor, root, force, None))
            for panel in survey.data.panels:
                batch.notes.append(f"Admin panel {panel.name} at /{panel.path or ''}: {len(panel.resources)} resources")

        return ServiceResult.ok(batch.freeze())

    def generate_for(
        self,
        descriptor: Descriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> list[GenerationOutcome]:
        """Dispatch a descriptor to the generator for its kind."""
        if isinstance(descriptor, TableDescriptor):
            return self._models.generate_from_table(
                descriptor, output_root, force, confirm,
                namespace=self.config.profile.models_package,
            )
        if descriptor.kind == SubjectKind.MODEL:
            return self._models.generate(descriptor, output_root, force, confirm)
        if descriptor.kind == SubjectKind.CONTROLLER:
            generator = generator_for(descriptor, stubs=self._stubs, writer=self._writer)
            return generator.generate(descriptor, output_root, force, confirm)
        if descriptor.kind == SubjectKind.COMPONENT:
            return self._components.generate(descriptor, output_root, force, confirm)
        return self._admin.generate(descriptor, output_root, force, confirm)

    def close(self) -> None:
        """Release resources held by an analysis service this service created."""
        if self._owns_analysis:
            self._analysis.close()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _root(self, output_root: str | Path | None) -> Path:
        return Path(output_root) if output_root else self.config.test_path

    def _table_names(
        self,
        tables: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> ServiceResult[list[str]]:
        analyzer = self._analysis.database_analyzer()
        if analyzer is None:
            return no_database_result()
        try:
            return ServiceResult.ok(analyzer.list_tables(include=tables, exclude=exclude))
        except (ScaffoldError, SQLAlchemyError) as exc:
            return ServiceResult.from_exception(exc)

    def _start(self, root: Path) -> _Batch:
        batch = _Batch()
        if self.config.bootstrap:
            batch.bootstrap = bootstrap_test_suite(root, self._stubs, self._writer)
        return batch

    def _run(
        self,
        kind: SubjectKind,
        identifier: str,
        root: Path,
        force: bool,
        confirm: ConfirmHook | None,
    ) -> SubjectResult:
        try:
            analysis = self._analysis.analyze(kind, identifier)
        except Exception as exc:
            logger.exception(f"Unexpected failure analyzing {kind.value} {identifier}")
            return _unexpected(identifier, kind, exc)
        if not analysis.success:
            logger.warning(f"Skipping {kind.value} {identifier}: {analysis.error.message}")
            return SubjectResult(subject=identifier, kind=kind, error=analysis.error)
        return self._render(analysis.data, root, force, confirm)

    def _render(
        self,
        descriptor: Descriptor,
        root: Path,
        force: bool,
        confirm: ConfirmHook | None,
    ) -> SubjectResult:
        try:
            outcomes = self.generate_for(descriptor, root, force, confirm)
        except ScaffoldError as exc:
            logger.warning(f"Cannot render tests for {descriptor.qualified_name}: {exc}")
            failure = ServiceResult.from_exception(exc)
            return SubjectResult(descriptor.qualified_name, descriptor.kind, error=failure.error)
        except Exception as exc:
            logger.exception(f"Unexpected failure rendering {descriptor.qualified_name}")
            return _unexpected(descriptor.qualified_name, descriptor.kind, exc)
        return SubjectResult(descriptor.qualified_name, descriptor.kind, tuple(outcomes))


def _unexpected(subject: str, kind: SubjectKind, exc: Exception) -> SubjectResult:
    return SubjectResult(
        subject=subject,
        kind=kind,
        error=ServiceError(ErrorCode.INTERNAL_ERROR, f"Unexpected error: {type(exc).__name__}: {exc}"),
    )
