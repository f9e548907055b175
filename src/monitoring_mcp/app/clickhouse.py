"""
ClickHouse connectivity module.

Holds the thin async client used to talk to ClickHouse over its HTTP
interface, and the health probe built on top of it. The client is created
once by the entry point and passed explicitly to everything that needs it;
there is no module-level instance.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class ClickHouseClient:
    """
    Minimal async client for the ClickHouse HTTP interface.

    Only the native reachability check is implemented. Transport failures
    surface as httpx exceptions; callers that need a plain yes/no answer
    should go through check_clickhouse_health().
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url:       Base URL of the ClickHouse server (e.g. http://clickhouse:8123).
            timeout:   Per-request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self.url = url
        # ClickHouse sits on the internal network; never route it through HTTP(S)_PROXY.
        self._http = httpx.AsyncClient(base_url=url, timeout=timeout, transport=transport, trust_env=False)

    async def ping(self) -> bool:
        """
        Call ClickHouse's /ping endpoint.

        Returns:
            bool: True if the server answered with HTTP 200.

        Raises:
            httpx.HTTPError: On connection errors or timeouts.
        """
        response = await self._http.get("/ping")
        return response.status_code == httpx.codes.OK

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ClickHouseClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


@dataclass(frozen=True)
class HealthResult:
    """Outcome of one reachability check. Truthy when ClickHouse is reachable."""

    reachable: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.reachable


async def check_clickhouse_health(client: ClickHouseClient) -> HealthResult:
    """
    Check whether ClickHouse is reachable.

    Every failure (refused connection, timeout, non-200 answer, anything
    the client raises) is folded into a negative result, so callers never
    have to handle exceptions from this function.

    Args:
        client: The shared ClickHouse client.

    Returns:
        HealthResult: reachable=True only on an explicit successful ping.
    """
    try:
        ok = await client.ping()
    except Exception as e:
        logger.debug(f"ClickHouse ping failed: {e!r}")
        return HealthResult(reachable=False, error=str(e) or type(e).__name__)

    if ok is not True:
        return HealthResult(reachable=False, error="ping reported unhealthy")
    return HealthResult(reachable=True)
