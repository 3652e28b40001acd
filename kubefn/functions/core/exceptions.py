"""
Custom exception classes.

Represent errors raised while deploying functions or reading their status
from the control plane.
"""

from dataclasses import dataclass
from typing import Optional, Union


class KubefnError(Exception):
    """Base exception class for function operations."""

    pass


class SubmissionError(KubefnError):
    """Raised when the control plane rejects a function write."""

    def __init__(self, function_name: str, code: Optional[int], message: str):
        self.function_name = function_name
        self.code = code
        self.message = message
        super().__init__(
            f"Unable to update the function {function_name}. Received:\n"
            f"  Code: {code}\n"
            f"  Message: {message}"
        )


class DeploymentTimeoutError(KubefnError):
    """Raised when readiness is not observed before the deadline."""

    def __init__(self, function_name: str, timeout: float):
        self.function_name = function_name
        self.timeout = timeout
        super().__init__(
            f"Function {function_name} did not become ready within {timeout:g}s"
        )


class DescriptionError(KubefnError):
    """Raised when a function entry of the service description cannot be used."""

    def __init__(self, function_name: str, detail: str):
        self.function_name = function_name
        self.detail = detail
        super().__init__(f"Invalid description of function {function_name}: {detail}")


class NotFoundError(KubefnError):
    """Raised when a function is absent from one of the collections."""

    def __init__(self, function_name: str, collection: str = "functions"):
        self.function_name = function_name
        self.collection = collection
        super().__init__(f"Function not found in {collection}: {function_name}")


class FetchError(KubefnError):
    """A control plane read failed (or its retry budget was exhausted)."""

    def __init__(
        self,
        collection: str,
        cause: Union[Exception, str, None] = None,
        status_code: Optional[int] = None,
    ):
        self.collection = collection
        self.cause = cause
        self.status_code = status_code
        detail = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"Failed to fetch {collection}{detail}: {cause}")

    @property
    def transient(self) -> bool:
        """Transport failures and 5xx responses are worth retrying."""
        return self.status_code is None or self.status_code >= 500


class MalformedRoutingRecord(KubefnError):
    """Raised when a routing record lacks the fields needed to build a URL."""

    def __init__(self, function_name: str, missing: str):
        self.function_name = function_name
        self.missing = missing
        super().__init__(f"Ingress for {function_name} is missing {missing}")


@dataclass(frozen=True)
class AmbiguityWarning:
    """Several records matched where one was expected; the first one was used."""

    function_name: str
    collection: str
    count: int

    def __str__(self) -> str:
        return (
            f"{self.count} {self.collection} match function {self.function_name}; "
            f"using the first one"
        )
