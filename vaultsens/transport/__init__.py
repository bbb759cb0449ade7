"""Transport module - HTTP execution and retry policy."""

from .executor import (
    API_KEY_HEADER,
    API_SECRET_HEADER,
    AttemptOutcome,
    RequestExecutor,
)
from .retry_policy import (
    DEFAULT_RETRY_ON,
    RetryPolicy,
    default_retry_policy,
    no_retry_policy,
)

__all__ = [
    "API_KEY_HEADER",
    "API_SECRET_HEADER",
    "AttemptOutcome",
    "RequestExecutor",
    "DEFAULT_RETRY_ON",
    "RetryPolicy",
    "default_retry_policy",
    "no_retry_policy",
]
