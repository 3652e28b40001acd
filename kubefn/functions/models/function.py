"""
Function domain models.

FunctionSpec is what the caller submits; FunctionResource is what the control
plane reports back for it.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

FUNCTION_API_VERSION = "k8s.io/v1"
FUNCTION_KIND = "Function"
DESCRIPTION_ANNOTATION = "kubeless.serverless.com/description"

HTTP_TRIGGER = "HTTP"
PUBSUB_TRIGGER = "PubSub"


class FunctionSpec(BaseModel):
    """
    Desired state of one function.

    Immutable once built; the manifest sent to the control plane is derived
    from it on every submission.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = "default"
    handler: str
    runtime: str
    deps: str = ""
    trigger_type: str = HTTP_TRIGGER
    topic: Optional[str] = None
    description: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_manifest(self) -> Dict[str, Any]:
        """Full function resource body for a replace (PUT) call."""
        labels = {"function": self.name}
        labels.update(self.labels)
        metadata: Dict[str, Any] = {
            "name": self.name,
            "namespace": self.namespace,
            "labels": labels,
        }
        if self.description:
            metadata["annotations"] = {DESCRIPTION_ANNOTATION: self.description}

        spec: Dict[str, Any] = {
            "handler": self.handler,
            "runtime": self.runtime,
            "deps": self.deps,
            "type": self.trigger_type,
        }
        if self.topic:
            spec["topic"] = self.topic

        return {
            "apiVersion": FUNCTION_API_VERSION,
            "kind": FUNCTION_KIND,
            "metadata": metadata,
            "spec": spec,
        }


def _ready_condition(conditions: List[Dict[str, Any]]) -> Tuple[bool, Optional[str]]:
    for condition in conditions:
        if condition.get("type") == "Ready":
            updated = condition.get("lastUpdateTime") or condition.get("lastTransitionTime")
            return condition.get("status") == "True", updated
    return False, None


class FunctionResource(BaseModel):
    """
    Control-plane view of a deployed function.
    """

    name: str
    namespace: Optional[str] = None
    handler: Optional[str] = None
    runtime: Optional[str] = None
    deps: Optional[str] = None
    trigger_type: Optional[str] = None
    topic: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    self_link: Optional[str] = None
    uid: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ready: bool = False

    @property
    def description(self) -> Optional[str]:
        return self.annotations.get(DESCRIPTION_ANNOTATION)

    @classmethod
    def from_manifest(cls, item: Dict[str, Any]) -> "FunctionResource":
        """Factory to create from a control plane JSON item."""
        metadata = item.get("metadata") or {}
        spec = item.get("spec") or {}
        status = item.get("status") or {}

        ready, updated = _ready_condition(status.get("conditions") or [])
        created = metadata.get("creationTimestamp")

        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace"),
            handler=spec.get("handler"),
            runtime=spec.get("runtime"),
            deps=spec.get("deps"),
            trigger_type=spec.get("type"),
            topic=spec.get("topic"),
            # Older resources carry labels/annotations at the top level.
            labels=metadata.get("labels") or item.get("labels") or {},
            annotations=metadata.get("annotations") or item.get("annotations") or {},
            self_link=metadata.get("selfLink"),
            uid=metadata.get("uid"),
            created_at=created,
            updated_at=updated or created,
            ready=ready,
        )
