"""
MCP application factory.

Builds the FastMCP server and registers its only tool, `ping`. The
ClickHouse client is handed in by the caller; nothing here is global, so
tests can build as many independent servers as they need.

Note: Authentication is NOT handled here. It is enforced at the HTTP
layer by the middleware in auth_middleware.py.
"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from monitoring_mcp import __version__
from monitoring_mcp.app.clickhouse import ClickHouseClient
from monitoring_mcp.tools.ping import ping

SERVER_NAME = "monitoring-mcp"
HEALTH_PATH = "/health"


def create_mcp_server(clickhouse: ClickHouseClient) -> FastMCP:
    """
    Create the FastMCP server with the `ping` tool bound to `clickhouse`
    and the unauthenticated GET /health liveness route.

    Args:
        clickhouse: Client shared with the startup gate.

    Returns:
        FastMCP: The server, ready to be wrapped by create_http_app().
    """
    mcp = FastMCP(SERVER_NAME, version=__version__)

    @mcp.tool(name="ping", description="Check MCP server and ClickHouse connectivity")
    async def ping_tool() -> dict:
        result = await ping(clickhouse)
        return result.model_dump(mode="json")

    # Liveness only: answers even when ClickHouse is down, so the container
    # is not restarted while `ping` can still report the problem.
    @mcp.custom_route(HEALTH_PATH, methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return mcp
