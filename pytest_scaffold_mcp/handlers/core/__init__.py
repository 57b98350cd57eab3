"""Registry for core MCP tool definitions and handlers."""

# Tool definitions and handlers
from .analyze_subject import (
    TOOL_DEFINITION as ANALYZE_SUBJECT_TOOL,
    handle as handle_analyze_subject,
)

from .generate_tests import (
    TOOL_DEFINITION as GENERATE_TESTS_TOOL,
    handle as handle_generate_tests,
)

from .generate_database_tests import (
    TOOL_DEFINITION as GENERATE_DATABASE_TESTS_TOOL,
    handle as handle_generate_database_tests,
)

from .generate_all_tests import (
    TOOL_DEFINITION as GENERATE_ALL_TESTS_TOOL,
    handle as handle_generate_all_tests,
)


# All Core tool definitions
TOOLS = [
    ANALYZE_SUBJECT_TOOL,
    GENERATE_TESTS_TOOL,
    GENERATE_DATABASE_TESTS_TOOL,
    GENERATE_ALL_TESTS_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "analyze_subject": handle_analyze_subject,
    "generate_tests": handle_generate_tests,
    "generate_database_tests": handle_generate_database_tests,
    "generate_all_tests": handle_generate_all_tests,
}


__all__ = [
    # Tool definitions
    "TOOLS",
    "ANALYZE_SUBJECT_TOOL",
    "GENERATE_TESTS_TOOL",
    "GENERATE_DATABASE_TESTS_TOOL",
    "GENERATE_ALL_TESTS_TOOL",
    # Handlers
    "HANDLERS",
    "handle_analyze_subject",
    "handle_generate_tests",
    "handle_generate_database_tests",
    "handle_generate_all_tests",
]
