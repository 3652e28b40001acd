"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .function import FunctionResource, FunctionSpec
from .info import ConsolidatedInfo, FormatOptions
from .network import NetworkRecord, RoutingRecord
from .result import Ack, Ready

__all__ = [
    "Ack",
    "ConsolidatedInfo",
    "FormatOptions",
    "FunctionResource",
    "FunctionSpec",
    "NetworkRecord",
    "Ready",
    "RoutingRecord",
]
