"""Test generators - render stubs from descriptors and write test files."""

from .admin import AdminTestGenerator, page_role
from .base import (
    ConfirmHook,
    FileWriter,
    GenerationOutcome,
    GeneratorBase,
    OutcomeStatus,
)
from .bootstrap import bootstrap_test_suite
from .component import ComponentTestGenerator
from .controller import ApiControllerTestGenerator, ControllerTestGenerator, generator_for
from .model import ModelTestGenerator, model_from_table
from .renderer import render
from .stubs import StubLoader

__all__ = [
    "GeneratorBase",
    "GenerationOutcome",
    "OutcomeStatus",
    "ConfirmHook",
    "FileWriter",
    "StubLoader",
    "render",
    "ModelTestGenerator",
    "model_from_table",
    "ControllerTestGenerator",
    "ApiControllerTestGenerator",
    "generator_for",
    "ComponentTestGenerator",
    "AdminTestGenerator",
    "page_role",
    "bootstrap_test_suite",
]
