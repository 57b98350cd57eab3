"""MCP handler for generate_all_tests (delegates to GenerationService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import GenerationService, ServiceResult
from ._formatting import format_batch_result

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="generate_all_tests",
    description=(
        "Discover every model and controller, every table of the configured "
        "database, and, when installed, every component and admin resource, "
        "then generate tests for all of them."
    ),
    inputSchema={
        "type": "object",
        "properties": {
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
    """Generate tests for everything discoverable and return the batch summary."""
    service = GenerationService()

    try:
        result = service.generate_all(
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
