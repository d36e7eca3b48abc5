"""Operation status enumeration.

Status codes for operation results, used to classify outcomes of refreshes
and remote calls so callers can decide whether to fall back or fail.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (network, timeout, 5xx)
        PERMANENT_ERROR: Non-retryable error (validation, 4xx)
        UNAUTHORIZED: Remote service rejected the credentials
        NOT_FOUND: Remote resource not found
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
