"""
Entry point for the monitoring MCP server.

Starts a Uvicorn HTTP server that serves the FastMCP application.
Before the app is ready, it:
  1. Loads and validates the configuration from the environment.
  2. Waits for ClickHouse to answer its /ping endpoint, retrying at a fixed
     interval, and exits with status 1 if it never does.
  3. Wraps the ASGI app with the Bearer-token authentication middleware.
"""

import logging
import signal
import sys

import anyio
from pydantic import ValidationError

from monitoring_mcp.app.clickhouse import ClickHouseClient, check_clickhouse_health
from monitoring_mcp.app.config import Settings, load_settings
from monitoring_mcp.app.mcp_app import create_mcp_server
from monitoring_mcp.app.startup import await_ready
from monitoring_mcp.app.transport import create_http_app, serve_http

logger = logging.getLogger(__name__)


async def run(settings: Settings) -> int:
    """
    Wait for ClickHouse, then serve the MCP endpoint until shutdown.

    Args:
        settings: Validated process settings.

    Returns:
        int: The process exit code (0 after a graceful shutdown, 1 if
        ClickHouse never became reachable).
    """
    async with ClickHouseClient(settings.CLICKHOUSE_URL, timeout=settings.CLICKHOUSE_TIMEOUT) as clickhouse:
        ready = await await_ready(
            lambda: check_clickhouse_health(clickhouse),
            max_attempts=settings.STARTUP_MAX_ATTEMPTS,
            delay_ms=settings.STARTUP_DELAY_MS,
        )
        if not ready:
            logger.error("ClickHouse unavailable, exiting")
            return 1

        mcp = create_mcp_server(clickhouse)
        app = create_http_app(mcp, settings.MCP_API_KEY)

        async with serve_http(app, host=settings.MCP_HOST, port=settings.MCP_PORT,
                              log_level=settings.LOG_LEVEL) as server:
            logger.info(f"MCP server listening on port {server.port}")
            await server.wait_closed()

    logger.info("MCP server stopped")
    return 0


def main() -> None:
    """
    Configure logging, load the settings and run the server, exiting with
    the code returned by run().
    """
    try:
        settings = load_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO, i.e. every ClickHouse /ping.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # Treat SIGTERM (docker stop) like Ctrl-C so uvicorn shuts down gracefully.
    signal.signal(signal.SIGTERM, signal.default_int_handler)

    try:
        code = anyio.run(run, settings)
    except KeyboardInterrupt:
        code = 0
    except Exception:
        logger.exception("Fatal error")
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
