"""
Deployment submitter.

Writes the full function resource body (replace semantics) and reports the
acknowledgement. Retrying is left to the caller; the write is idempotent.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from ..client import ControlPlaneClient
from ..models import Ack, FunctionSpec

logger = logging.getLogger("kubefn.submitter")


class DeploymentSubmitter:
    def __init__(
        self,
        client: ControlPlaneClient,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.client = client
        self.clock = clock

    async def submit(self, spec: FunctionSpec) -> Ack:
        """
        PUT the function resource described by spec.

        Raises:
            SubmissionError: the write was rejected (code and message kept verbatim)
            FetchError: the control plane could not be reached
        """
        logger.info(
            f"Submitting function {spec.name}",
            extra={"function_name": spec.name, "namespace": spec.namespace},
        )
        body = await self.client.put_function(spec.to_manifest(), namespace=spec.namespace)
        metadata = body.get("metadata") or {}
        return Ack(
            name=spec.name,
            namespace=spec.namespace,
            submitted_at=self.clock(),
            resource_version=metadata.get("resourceVersion"),
        )
