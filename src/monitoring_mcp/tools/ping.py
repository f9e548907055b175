"""
Ping tool for the monitoring MCP server.

Reports whether the server can currently reach ClickHouse. Every call
re-probes the database; a successful startup check is not reused.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from monitoring_mcp.app.clickhouse import ClickHouseClient, check_clickhouse_health


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PingResult(BaseModel):
    """
    Result of the ping tool.

    `status` is derived from `reachable` and cannot be passed in, so the
    two fields can never disagree.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    reachable: bool
    timestamp: str = Field(default_factory=_utc_timestamp)

    @computed_field
    @property
    def status(self) -> Literal["ok", "error"]:
        return "ok" if self.reachable else "error"


async def ping(client: ClickHouseClient) -> PingResult:
    """
    Probe ClickHouse and wrap the outcome in a timestamped PingResult.

    Never raises: probe failures show up as status "error".
    """
    health = await check_clickhouse_health(client)
    return PingResult(reachable=health.reachable)
