"""
Consolidated per-function status.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.exceptions import AmbiguityWarning
from .function import FunctionResource
from .network import NetworkRecord, RoutingRecord


class ConsolidatedInfo(BaseModel):
    """
    Join of a function resource, its service and its optional ingress.

    Built fresh on every aggregation; never cached.
    """

    function: FunctionResource
    service: NetworkRecord
    routing: Optional[RoutingRecord] = None
    url: Optional[str] = None
    warnings: List[AmbiguityWarning] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.function.name


@dataclass(frozen=True)
class FormatOptions:
    """Display switches for MessageFormatter."""

    color: bool = True
    verbose: bool = False
