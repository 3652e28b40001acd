from .exceptions import (
    AmbiguityWarning,
    DeploymentTimeoutError,
    DescriptionError,
    FetchError,
    KubefnError,
    MalformedRoutingRecord,
    NotFoundError,
    SubmissionError,
)

__all__ = [
    "AmbiguityWarning",
    "DeploymentTimeoutError",
    "DescriptionError",
    "FetchError",
    "KubefnError",
    "MalformedRoutingRecord",
    "NotFoundError",
    "SubmissionError",
]
