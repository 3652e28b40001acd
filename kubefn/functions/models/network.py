"""
Network (service) and routing (ingress) records.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.exceptions import MalformedRoutingRecord


class NetworkRecord(BaseModel):
    """Cluster-internal endpoint exposing a function."""

    name: str
    namespace: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)
    cluster_ip: Optional[str] = None
    type: Optional[str] = None
    ports: List[Dict[str, Any]] = Field(default_factory=list)
    self_link: Optional[str] = None
    uid: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_manifest(cls, item: Dict[str, Any]) -> "NetworkRecord":
        metadata = item.get("metadata") or {}
        spec = item.get("spec") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace"),
            labels=metadata.get("labels") or {},
            cluster_ip=spec.get("clusterIP"),
            type=spec.get("type"),
            ports=spec.get("ports") or [],
            self_link=metadata.get("selfLink"),
            uid=metadata.get("uid"),
            created_at=metadata.get("creationTimestamp"),
        )


class RoutingRecord(BaseModel):
    """
    External routing rule (ingress) for a function.

    Nested fields are kept as received so that a malformed record can be
    reported instead of failing at parse time.
    """

    name: str
    labels: Dict[str, str] = Field(default_factory=dict)
    load_balancer: List[Any] = Field(default_factory=list)
    rules: List[Any] = Field(default_factory=list)

    @classmethod
    def from_manifest(cls, item: Dict[str, Any]) -> "RoutingRecord":
        metadata = item.get("metadata") or {}
        status = item.get("status") or {}
        spec = item.get("spec") or {}
        load_balancer = (status.get("loadBalancer") or {}).get("ingress") or []
        return cls(
            name=metadata.get("name", ""),
            labels=metadata.get("labels") or {},
            load_balancer=load_balancer if isinstance(load_balancer, list) else [],
            rules=spec.get("rules") if isinstance(spec.get("rules"), list) else [],
        )

    def url(self, function_name: str) -> str:
        """
        Load-balancer address followed by the first HTTP path.

        Raises:
            MalformedRoutingRecord: a required nested field is missing
        """
        try:
            entry = self.load_balancer[0]
            address = entry.get("ip") or entry.get("hostname")
        except (IndexError, AttributeError):
            address = None
        if not address:
            raise MalformedRoutingRecord(function_name, "status.loadBalancer.ingress[0].ip")

        try:
            path = self.rules[0]["http"]["paths"][0]["path"]
        except (IndexError, KeyError, TypeError):
            path = None
        if path is None:
            raise MalformedRoutingRecord(function_name, "spec.rules[0].http.paths[0].path")

        return f"{address}{path}"
