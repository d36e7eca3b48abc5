"""Operation result types and status enums.

Standardized result types for refresh operations, including the status
enum, the result dataclass and the remote error classifier.
"""

from languagecenter.infrastructure.operations.classifiers import classify_remote_error
from languagecenter.infrastructure.operations.result import OperationResult
from languagecenter.infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_remote_error",
]
