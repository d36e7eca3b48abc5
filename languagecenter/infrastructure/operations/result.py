"""Operation result dataclass.

Refreshes of the language list and of string buckets return an
OperationResult instead of raising. The caller picks the policy: log the
failure and keep serving the stale snapshot, or raise the carried error
when there is nothing to fall back on.
"""

from dataclasses import dataclass
from typing import Any, Optional

from languagecenter.infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of a refresh or remote operation.

    Attributes:
        status: High-level outcome.
        message: Human-friendly message for logs.
        data: Payload on success (entry count, LocaleContext, summary dict);
            the original exception on failure when there was one.
        error_code: Machine error code such as "HTTP_503".
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create a failed result with an explicit status."""
        return cls(status=status, message=message, error_code=error_code, data=data)

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Failure that may clear up on the next refresh (timeouts, 5xx, 429)."""
        return cls.error(OperationStatus.TRANSIENT_ERROR, message, error_code, data)

    @classmethod
    def permanent_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Failure that will repeat until configuration or input changes."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code, data)

    def log_failure(self, log: Any, event: str, **context: Any) -> None:
        """Log a failed result as a warning. Does nothing on success.

        Args:
            log: structlog logger to write to.
            event: Event name.
            **context: Extra context bound to the event.
        """
        if self.is_success:
            return
        log.warning(
            event,
            error=self.message,
            error_code=self.error_code,
            status=self.status.value,
            **context,
        )

    def raise_for_error(self) -> None:
        """Raise the exception carried by a failed result.

        Does nothing on success, or when the failure carries no exception.
        """
        if not self.is_success and isinstance(self.data, BaseException):
            raise self.data
