"""
Startup gate.

Before the HTTP server is started, the backing store must be reachable.
ClickHouse usually comes up a few seconds after this container when both
are started by docker compose, so the probe is retried a bounded number
of times with a constant pause in between.
"""

import logging
from typing import Any, Awaitable, Callable

import anyio

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_DELAY_MS = 2000


async def await_ready(
    probe: Callable[[], Awaitable[Any]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_ms: int = DEFAULT_DELAY_MS,
    *,
    sleep: Callable[[float], Awaitable[Any]] = anyio.sleep,
) -> bool:
    """
    Poll `probe` until it reports success or the attempts run out.

    Attempts are strictly sequential: the next probe only starts after the
    previous one returned and `delay_ms` has elapsed. There is no pause
    after the final attempt.

    Args:
        probe:        Async callable returning a truthy value when the dependency is up.
        max_attempts: Total number of probes before giving up (>= 1).
        delay_ms:     Fixed pause between two probes, in milliseconds (>= 0).
        sleep:        Async sleep function, replaceable in tests.

    Returns:
        bool: True as soon as a probe succeeds, False after `max_attempts` failures.

    Raises:
        ValueError: If `max_attempts` or `delay_ms` is out of range.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    if delay_ms < 0:
        raise ValueError("delay_ms must be >= 0")

    for attempt in range(1, max_attempts + 1):
        result = await probe()
        if result:
            logger.info(f"ClickHouse healthy after {attempt} attempt(s)")
            return True

        if attempt < max_attempts:
            # HealthResult carries the failure reason; plain bools do not.
            reason = getattr(result, "error", None)
            detail = f": {reason}" if reason else ""
            logger.info(
                f"ClickHouse not ready (attempt {attempt}/{max_attempts}){detail}, "
                f"retrying in {delay_ms}ms..."
            )
            await sleep(delay_ms / 1000)

    logger.error(
        f"ClickHouse not reachable after {max_attempts} attempts "
        f"({delay_ms}ms apart)"
    )
    return False
