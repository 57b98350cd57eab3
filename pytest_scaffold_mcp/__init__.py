"""pytest-scaffold: reflection-driven test scaffolding served over MCP."""

__version__ = "0.1.0"
