"""
Deploy pipeline results.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .function import FunctionResource


@dataclass(frozen=True)
class Ack:
    """The control plane accepted a function write."""

    name: str
    namespace: str
    submitted_at: datetime
    resource_version: Optional[str] = None


@dataclass(frozen=True)
class Ready:
    """Readiness was observed for the submitted generation."""

    name: str
    observed_at: datetime
    attempts: int
    resource: FunctionResource
