"""
Boundary operations: deploy one function, report status of several.

Composes the registry, submitter, waiter, aggregator and formatter. Typed
errors are left for the caller (the CLI) to turn into exit codes.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Dict, Iterable, List, Optional

from kubefn.common.core.http_client import HttpClientFactory

from .client import ControlPlaneClient
from .config import KubefnConfig
from .core.exceptions import AmbiguityWarning, KubefnError
from .models import FormatOptions, Ready
from .services.aggregator import Outcome, StatusAggregator
from .services.formatter import MessageFormatter
from .services.function_registry import FunctionRegistry
from .services.submitter import DeploymentSubmitter
from .services.waiter import DeploymentWaiter, utcnow, whole_seconds

logger = logging.getLogger("kubefn.operations")


@dataclass
class InfoReport:
    message: str
    results: Dict[str, Outcome] = field(default_factory=dict)

    @property
    def errors(self) -> Dict[str, KubefnError]:
        return {n: r for n, r in self.results.items() if isinstance(r, KubefnError)}

    @property
    def warnings(self) -> List[AmbiguityWarning]:
        return [
            w for r in self.results.values() if not isinstance(r, KubefnError) for w in r.warnings
        ]

    @property
    def ok(self) -> bool:
        return not self.errors


class FunctionOperations:
    def __init__(
        self,
        client: ControlPlaneClient,
        registry: FunctionRegistry,
        config: KubefnConfig,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.registry = registry
        self.config = config
        self.clock = clock
        self.submitter = DeploymentSubmitter(client, clock=clock)
        self.waiter = DeploymentWaiter(
            client,
            poll_interval=config.POLL_INTERVAL,
            retry_limit=config.FETCH_RETRY_LIMIT,
            clock=clock,
            sleep=sleep,
        )
        self.aggregator = StatusAggregator(client)

    async def deploy_function(self, name: str, timeout: Optional[float] = None) -> Ready:
        """
        Redeploy one function from the description and wait until it is live.

        Raises:
            NotFoundError: name is not in the description, or vanished while waiting
            SubmissionError: the write was rejected
            DeploymentTimeoutError: readiness not observed in time
            FetchError: the control plane could not be read
        """
        # Only the selected function is handed on; the loaded registry is not touched.
        spec = self.registry.select(name).get_spec(name)
        logger.info(f"Redeploying {name}...")

        submitted_at = whole_seconds(self.clock())
        await self.submitter.submit(spec)
        return await self.waiter.wait(
            name,
            submitted_at,
            timeout if timeout is not None else self.config.DEPLOY_TIMEOUT,
            namespace=spec.namespace,
        )

    async def info(
        self,
        names: Optional[Iterable[str]] = None,
        options: Optional[FormatOptions] = None,
    ) -> InfoReport:
        """
        Consolidated status report for names (default: every described function).

        Per-name failures are logged and kept in the report; they never abort it.
        """
        requested = list(names) if names else self.registry.names()
        namespaces = {n: self.registry.namespace_of(n) for n in requested}

        results = await self.aggregator.aggregate(requested, namespaces)

        formatter = MessageFormatter(options)
        message = ""
        for name, outcome in results.items():
            if isinstance(outcome, KubefnError):
                logger.error(
                    f"Unable to get information of {name}: {outcome}",
                    extra={"function_name": name, "error_type": type(outcome).__name__},
                )
                continue
            for warning in outcome.warnings:
                logger.warning(str(warning), extra={"function_name": name})
            message += formatter.format(outcome)

        return InfoReport(message=message, results=results)


@asynccontextmanager
async def open_operations(
    config: KubefnConfig, registry: Optional[FunctionRegistry] = None
) -> AsyncIterator[FunctionOperations]:
    """Wire a FunctionOperations to a fresh HTTP client; the client is closed on exit."""
    if registry is None:
        registry = FunctionRegistry(config.FUNCTIONS_CONFIG_PATH, config.NAMESPACE)
        registry.load_functions_config()

    factory = HttpClientFactory(config)
    async with factory.create_control_plane_client(
        config.CONTROL_PLANE_URL,
        token=config.CONTROL_PLANE_TOKEN or None,
        timeout=config.REQUEST_TIMEOUT,
    ) as http_client:
        client = ControlPlaneClient.from_config(http_client, config)
        yield FunctionOperations(client, registry, config)
