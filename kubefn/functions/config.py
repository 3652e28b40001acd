"""
kubefn configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from pydantic import Field
from kubefn.common.core.config import BaseAppConfig


class KubefnConfig(BaseAppConfig):
    """
    Configuration management for function deploy/info operations.
    """

    # Control plane access
    CONTROL_PLANE_URL: str = Field(
        default="http://127.0.0.1:8001", description="API server root URL"
    )
    CONTROL_PLANE_TOKEN: str = Field(default="", description="Bearer token (optional)")
    NAMESPACE: str = Field(default="default", description="Default namespace")
    REQUEST_TIMEOUT: float = Field(default=10.0, description="Per-request timeout (seconds)")

    # API group prefixes
    CORE_API_PREFIX: str = Field(default="/api/v1", description="Services API prefix")
    FUNCTIONS_API_PREFIX: str = Field(
        default="/apis/k8s.io/v1", description="Function resource API prefix"
    )
    EXTENSIONS_API_PREFIX: str = Field(
        default="/apis/extensions/v1beta1", description="Ingress API prefix"
    )

    # Deploy-and-wait
    DEPLOY_TIMEOUT: float = Field(default=300.0, description="Readiness deadline (seconds)")
    POLL_INTERVAL: float = Field(default=1.5, ge=0, description="Readiness poll interval")
    FETCH_RETRY_LIMIT: int = Field(
        default=3, ge=0, description="Consecutive transient fetch failures tolerated"
    )

    # Paths
    FUNCTIONS_CONFIG_PATH: str = Field(
        default="serverless.yml", description="Service description file path"
    )
    LOG_CONFIG_PATH: str = Field(
        default="config/logging.yml", description="Logging dictConfig file path"
    )


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = KubefnConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
