"""Single-tool MCP server reporting ClickHouse reachability."""

__version__ = "0.1.0"
