"""MCP handler for the analyze_subject tool (delegates to AnalysisService)."""

from __future__ import annotations

import json

from mcp.types import TextContent, Tool

from ...core.analyzer import SubjectKind
from ...services import AnalysisService, ServiceResult

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="analyze_subject",
    description=(
        "Analyze one subject of the host application by reflection and return "
        "its descriptor: model (table, keys, casts, relationships, scopes), "
        "controller (routes, resourcefulness, middleware), database table "
        "(columns, foreign keys, indexes), reactive component (properties, "
        "events, listeners) or admin resource (form, table, pages)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "kind": {
                "type": "string",
                "enum": [k.value for k in SubjectKind],
                "description": "Kind of subject to analyze"
            },
            "identifier": {
                "type": "string",
                "description": "Dotted class path, short class name, or table name"
            }
        },
        "required": ["kind", "identifier"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """Analyze the requested subject and return its descriptor as JSON."""
    service = AnalysisService()

    try:
        result = service.analyze(
            kind=arguments.get("kind", ""),
            identifier=arguments.get("identifier")
        )
    finally:
        service.close()

    if not result.success:
        return _error_response(result)

    return [TextContent(type="text", text=json.dumps(result.data.to_dict(), indent=2, default=str))]


# =============================================================================
# Helpers
# =============================================================================

def _error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]
