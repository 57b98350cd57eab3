"""Base generator class, outcomes and the overwrite policy."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ...constants import TEST_FILE_EXTENSION, TEST_FILE_PREFIX
from ..errors import RenderIOError
from ..naming import snake
from .renderer import render
from .stubs import StubLoader

logger = logging.getLogger(__name__)

# Asked "overwrite this file?"; True means overwrite
ConfirmHook = Callable[[str], bool]


class OutcomeStatus(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationOutcome:
    """What happened to one output file."""
    path: Path
    role: str
    status: OutcomeStatus
    error: str | None = None

    @property
    def written(self) -> bool:
        return self.status == OutcomeStatus.CREATED

    def to_dict(self) -> dict:
        result = {
            "path": str(self.path),
            "role": self.role,
            "status": self.status.value,
        }
        if self.error:
            result["error"] = self.error
        return result


class FileWriter:
    """
    Writes rendered files under the overwrite policy.

    An existing file is replaced only when `force` is set or the confirm
    hook agrees. Without a hook it is skipped and left untouched.
    """

    def write(
        self,
        path: Path,
        content: str,
        role: str,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> GenerationOutcome:
        if path.exists() and not force:
            if confirm is None or not confirm(f"The file {path} already exists. Overwrite it?"):
                logger.info(f"Skipped existing file: {path}")
                return GenerationOutcome(path=path, role=role, status=OutcomeStatus.SKIPPED)

        try:
            self._write(path, content)
        except RenderIOError as exc:
            logger.error(str(exc))
            return GenerationOutcome(path=path, role=role, status=OutcomeStatus.FAILED, error=str(exc))

        logger.info(f"Created test file: {path}")
        return GenerationOutcome(path=path, role=role, status=OutcomeStatus.CREATED)

    def _write(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise RenderIOError(path, exc) from exc


class GeneratorBase(ABC):
    """Abstract base for generators that turn one descriptor into test files."""

    def __init__(self, stubs: StubLoader | None = None, writer: FileWriter | None = None):
        self.stubs = stubs or StubLoader()
        self.writer = writer or FileWriter()

    @abstractmethod
    def generate(
        self,
        descriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> list[GenerationOutcome]:
        """Render and write every file for the descriptor."""
        pass

    def emit(
        self,
        stub: str,
        substitutions: Mapping[str, str],
        path: Path,
        role: str,
        force: bool,
        confirm: ConfirmHook | None,
    ) -> GenerationOutcome:
        content = render(self.stubs.load(stub), substitutions)
        return self.writer.write(path, content, role, force=force, confirm=confirm)


def output_file(directory: Path, short_name: str, suffix: str = "") -> Path:
    """`<directory>/test_<snake short name>[_<suffix>].py`"""
    stem = snake(short_name)
    if suffix:
        stem = f"{stem}_{suffix}"
    return directory / f"{TEST_FILE_PREFIX}{stem}{TEST_FILE_EXTENSION}"


def identifier(text: str) -> str:
    """Make text usable inside a Python function name."""
    return re.sub(r"[^0-9a-zA-Z_]+", "_", snake(text)).strip("_") or "item"


def py_literal(value) -> str:
    """Source text for a list, dict or scalar literal."""
    if isinstance(value, tuple):
        value = list(value)
    elif isinstance(value, Mapping):
        value = dict(value)
    return repr(value)
