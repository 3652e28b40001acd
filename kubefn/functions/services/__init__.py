"""
Services package.

Provides the deploy and status building blocks on top of ControlPlaneClient.
"""

from .aggregator import StatusAggregator
from .formatter import MessageFormatter, format_message
from .function_registry import FunctionRegistry
from .submitter import DeploymentSubmitter
from .waiter import DeploymentWaiter

__all__ = [
    "DeploymentSubmitter",
    "DeploymentWaiter",
    "FunctionRegistry",
    "MessageFormatter",
    "StatusAggregator",
    "format_message",
]
