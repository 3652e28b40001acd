"""
Deployment waiter.

Polls a function resource until the control plane reports the submitted
generation as ready. Observations older than the submission are ignored so a
stale Ready condition from a previous generation never counts.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from ..client import ControlPlaneClient
from ..core.exceptions import DeploymentTimeoutError, FetchError, NotFoundError
from ..models import FunctionResource, Ready

logger = logging.getLogger("kubefn.waiter")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Aware UTC timestamp; naive input is taken to be UTC already."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def whole_seconds(ts: datetime) -> datetime:
    """UTC timestamp without its sub-second part (the control plane reports seconds)."""
    return as_utc(ts).replace(microsecond=0)


def is_fresh(resource: FunctionResource, submitted_at: datetime) -> bool:
    if resource.updated_at is None:
        return False
    return whole_seconds(resource.updated_at) >= whole_seconds(submitted_at)


class DeploymentWaiter:
    def __init__(
        self,
        client: ControlPlaneClient,
        poll_interval: float = 1.5,
        retry_limit: int = 3,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            client: ControlPlaneClient instance
            poll_interval: Seconds between polls
            retry_limit: Consecutive transient fetch failures tolerated
            clock: Returns the current aware UTC time
            sleep: Awaitable used between polls
        """
        self.client = client
        self.poll_interval = poll_interval
        self.retry_limit = retry_limit
        self.clock = clock
        self.sleep = sleep

    async def wait(
        self,
        name: str,
        submitted_at: datetime,
        timeout: float,
        namespace: Optional[str] = None,
    ) -> Ready:
        """
        Block until the function is ready after submitted_at.

        Returns:
            Ready for the first fresh, ready observation made within timeout

        Raises:
            NotFoundError: the function resource does not exist
            DeploymentTimeoutError: no fresh ready observation before the deadline
            FetchError: a non-transient read error, or too many consecutive transient ones
        """
        submitted_at = as_utc(submitted_at)
        attempts = 0
        failures = 0

        while True:
            attempts += 1
            resource = None
            try:
                resource = await self.client.get_function(name, namespace)
            except FetchError as exc:
                if not exc.transient:
                    raise
                failures += 1
                logger.warning(
                    f"Transient error while waiting for {name} ({failures}/{self.retry_limit}): {exc}"
                )
                if failures > self.retry_limit:
                    raise
            else:
                failures = 0
                if resource is None:
                    raise NotFoundError(name)

            now = as_utc(self.clock())
            elapsed = (now - submitted_at).total_seconds()

            if resource is not None and resource.ready and is_fresh(resource, submitted_at):
                if elapsed <= timeout:
                    logger.info(
                        f"Function {name} is ready",
                        extra={"function_name": name, "attempts": attempts},
                    )
                    return Ready(name=name, observed_at=now, attempts=attempts, resource=resource)

            if elapsed > timeout:
                raise DeploymentTimeoutError(name, timeout)

            logger.debug(f"Function {name} not ready yet (attempt {attempts})")
            await self.sleep(self.poll_interval)
