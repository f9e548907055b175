"""
HTTP transport.

Turns the FastMCP server into a Starlette application with two entry points:

  - GET /health   unauthenticated liveness route (registered by mcp_app.py)
  - POST /mcp     MCP streamable-HTTP endpoint, behind BearerTokenMiddleware

and runs it with uvicorn inside a scoped context manager, so the listening
socket is released on every exit path.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastmcp import FastMCP
from starlette.middleware import Middleware

from monitoring_mcp.app.auth_middleware import BearerTokenMiddleware

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"


def create_http_app(mcp: FastMCP, api_key: str, path: str = MCP_PATH):
    """
    Build the ASGI application for `mcp` with the Bearer-token middleware
    attached. Routes registered on `mcp` (such as /health) are kept.

    Args:
        mcp:     The FastMCP server to expose.
        api_key: Shared secret expected in 'Authorization: Bearer <key>'.
        path:    URL path of the MCP endpoint.

    Returns:
        The Starlette application produced by FastMCP.
    """
    return mcp.http_app(
        path=path,
        middleware=[Middleware(BearerTokenMiddleware, api_key=api_key, protected_path=path)],
        transport="http",
        stateless_http=True,
        json_response=True,
    )


class RunningServer:
    """Handle on a uvicorn server started by serve_http()."""

    def __init__(self, server: uvicorn.Server, task: asyncio.Task):
        self._server = server
        self._task = task

    @property
    def port(self) -> int:
        """The port actually bound, useful when serving on port 0."""
        return self._server.servers[0].sockets[0].getsockname()[1]

    def shutdown(self) -> None:
        """Ask uvicorn to stop accepting connections and finish in-flight requests."""
        self._server.should_exit = True

    async def wait_closed(self) -> None:
        """Suspend until the server has stopped."""
        await asyncio.shield(self._task)


@asynccontextmanager
async def serve_http(
    app,
    host: str = "0.0.0.0",
    port: int = 0,
    log_level: Optional[str] = None,
) -> AsyncIterator[RunningServer]:
    """
    Run `app` with uvicorn for the duration of the `async with` block.

    The block is entered once the socket is bound. Leaving it, normally or
    through an exception, triggers uvicorn's graceful shutdown and waits
    for it to complete.

    Raises:
        RuntimeError: If the server stops before it starts listening
            (port already in use, failing lifespan startup, ...).
    """
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_config=None,  # use the root logging configuration
        log_level=log_level.lower() if log_level else None,
        lifespan="on",
    )
    server = uvicorn.Server(config)

    async def _serve() -> None:
        try:
            await server.serve()
        except SystemExit as e:
            # uvicorn calls sys.exit() when it cannot bind
            raise RuntimeError(f"HTTP server on {host}:{port} exited with code {e.code}") from None

    task = asyncio.ensure_future(_serve())
    try:
        while not server.started:
            if task.done():
                task.result()
                raise RuntimeError(f"HTTP server on {host}:{port} stopped before listening")
            await asyncio.sleep(0.01)

        yield RunningServer(server, task)
    finally:
        server.should_exit = True
        if not task.done():
            await task
