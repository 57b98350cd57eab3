"""MCP handler for generate_database_tests (delegates to GenerationService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import GenerationService, ServiceResult
from ._formatting import format_batch_result

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="generate_database_tests",
    description=(
        "Generate model tests from the configured database schema "
        "(SCAFFOLD_DATABASE_URL). Every table is analyzed unless a list of "
        "tables is given; migration bookkeeping tables are always excluded."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "tables": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Only generate for these tables (optional)"
            },
            "exclude": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Tables to leave out (optional)"
            },
            "force": {
                "type": "boolean",
                "description": "Overwrite existing test files (default: false)"
            },
            "output_root": {
                "type": "string",
                "description": "Directory to write tests under (default: SCAFFOLD_TEST_PATH)"
            }
        }
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """Generate tests for database tables and return the batch summary."""
    service = GenerationService()

    try:
        result = service.generate_database(
            tables=arguments.get("tables"),
            exclude=arguments.get("exclude"),
            force=arguments.get("force", False),
            output_root=arguments.get("output_root")
        )
    finally:
        service.close()

    if not result.success:
        return _error_response(result)

    return [TextContent(type="text", text=format_batch_result(result.data))]


# =============================================================================
# Helpers
# =============================================================================

def _error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]
