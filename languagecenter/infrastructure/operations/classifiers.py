"""Error classifier for remote translation service failures.

Converts RemoteError exceptions into standardized OperationResult objects so
refresh operations can report failures without raising. The raised
exception is kept as the result's data so a caller with nothing to fall
back on can still raise it.

Usage:
    from languagecenter.infrastructure.operations.classifiers import (
        classify_remote_error,
    )

    try:
        languages = client.list_languages()
    except RemoteError as exc:
        return classify_remote_error(exc)
"""

from languagecenter.core.exceptions import RemoteError
from languagecenter.infrastructure.operations.result import OperationResult
from languagecenter.infrastructure.operations.status import OperationStatus


def classify_remote_error(exc: RemoteError) -> OperationResult:
    """Classify a RemoteError into an OperationResult.

    Status Code Mapping:
    - None: transport failure (timeout, connection) → TRANSIENT_ERROR
    - 401/403: credentials rejected → UNAUTHORIZED
    - 404: endpoint or resource missing → NOT_FOUND
    - 429 and 5xx: → TRANSIENT_ERROR
    - Other: → PERMANENT_ERROR

    Args:
        exc: RemoteError raised by the RemoteClient

    Returns:
        OperationResult with the matching status, an HTTP_<code> or
        TRANSPORT_ERROR error code, and the exception as data
    """
    status_code = exc.status_code

    if status_code is None:
        return OperationResult.transient_error(
            str(exc), error_code="TRANSPORT_ERROR", data=exc
        )

    error_code = f"HTTP_{status_code}"

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, str(exc), error_code=error_code, data=exc
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND, str(exc), error_code=error_code, data=exc
        )

    if status_code == 429 or 500 <= status_code < 600:
        return OperationResult.transient_error(
            str(exc), error_code=error_code, data=exc
        )

    return OperationResult.permanent_error(str(exc), error_code=error_code, data=exc)
