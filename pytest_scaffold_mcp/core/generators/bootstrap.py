"""Prepare an output root to host the scaffolded suite."""

from __future__ import annotations

from pathlib import Path

from .base import FileWriter, GenerationOutcome
from .stubs import StubLoader

CONFTEST = "conftest.py"


def bootstrap_test_suite(
    output_root: Path,
    stubs: StubLoader | None = None,
    writer: FileWriter | None = None,
) -> GenerationOutcome:
    """Write a conftest.py with a `client` fixture unless one already exists."""
    stubs = stubs or StubLoader()
    writer = writer or FileWriter()
    return writer.write(Path(output_root) / CONFTEST, stubs.load("conftest"), "bootstrap")
