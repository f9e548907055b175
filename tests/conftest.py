import httpx
import pytest

from monitoring_mcp.app.clickhouse import ClickHouseClient


@pytest.fixture
def anyio_backend():
    # uvicorn only runs on asyncio
    return "asyncio"


def _clickhouse(handler) -> ClickHouseClient:
    return ClickHouseClient("http://clickhouse:8123", transport=httpx.MockTransport(handler))


@pytest.fixture
def healthy_clickhouse():
    """ClickHouse answering /ping the way the real server does."""
    return _clickhouse(lambda request: httpx.Response(200, text="Ok.\n"))


@pytest.fixture
def unhealthy_clickhouse():
    return _clickhouse(lambda request: httpx.Response(503, text="Service Unavailable"))


@pytest.fixture
def unreachable_clickhouse():
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    return _clickhouse(refuse)
