import logging
from typing import Optional

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for centralized SSL verification handling.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient with configured SSL verification.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient
        """
        verify = kwargs.pop("verify", None)

        # If verify is not explicitly provided, use config default
        if verify is None:
            verify = self.config.VERIFY_SSL
        if not verify:
            logger.debug("SSL verification disabled (VERIFY_SSL=False)")

        if "limits" not in kwargs:
            kwargs["limits"] = httpx.Limits(max_keepalive_connections=5, max_connections=20)
        # Avoid leaking host HTTP(S)_PROXY/NO_PROXY into cluster calls unless explicitly requested.
        kwargs.setdefault("trust_env", False)

        return httpx.AsyncClient(verify=verify, **kwargs)

    def create_control_plane_client(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        **kwargs,
    ) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient bound to the control plane API server.

        Args:
            base_url: API server root (e.g. http://127.0.0.1:8001)
            token: Optional bearer token
            timeout: Per-request timeout in seconds
        """
        headers = dict(kwargs.pop("headers", None) or {})
        headers.setdefault("Accept", "application/json")
        if token:
            headers["Authorization"] = f"Bearer {token}"

        return self.create_async_client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            **kwargs,
        )
