"""
Fault taxonomy and error classification.

Every failure that can happen while dispatching a tool call is reduced to a
Fault with one of four kinds. classify() is total: it accepts any value and
always returns a Fault, so the dispatch boundary never has to re-raise.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


# ============================================================================
# Enums
# ============================================================================

class FaultKind(Enum):
    """Closed set of failure kinds surfaced to callers."""
    VALIDATION_ERROR = "validation_error"      # Arguments violate the schema
    UNKNOWN_OPERATION = "unknown_operation"    # No such tool
    BACKEND_ERROR = "backend_error"            # Generation service failed
    EXECUTION_ERROR = "execution_error"        # Anything else


# Stable codes for faults raised by the engine itself
UNKNOWN_TOOL_CODE = "UNKNOWN_TOOL"
INVALID_ARGUMENTS_CODE = "INVALID_ARGUMENTS"


# ============================================================================
# Exceptions
# ============================================================================

class BackendError(Exception):
    """
    Failure reported by a generation backend.

    Carries the transport-level context (backend error code, HTTP status and
    response payload) so it survives classification.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.details = details


class MediaProcessingError(Exception):
    """Failure while fetching or preparing source media for a request."""

    def __init__(self, message: str, media_type: str, details: Optional[Any] = None):
        super().__init__(message)
        self.media_type = media_type
        self.details = details


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class Fault:
    """Classified failure, immutable once constructed."""
    kind: FaultKind
    message: str
    code: Optional[str] = None
    http_status: Optional[int] = None
    details: Optional[Any] = None

    def prefixed(self, prefix: str) -> "Fault":
        """Return a copy whose message is qualified by an operation label."""
        return replace(self, message=f"{prefix}: {self.message}")

    def to_dict(self) -> Dict[str, Any]:
        error = {"kind": self.kind.value, "message": self.message}
        if self.code:
            error["code"] = self.code
        if self.http_status is not None:
            error["http_status"] = self.http_status
        if self.details is not None:
            error["details"] = self.details
        return error


# ============================================================================
# Classification
# ============================================================================

def describe_violations(error: ValidationError) -> List[str]:
    """
    Render each pydantic violation as one line.

    Format: ``field: message (constraint: type, got: value class)``
    """
    violations = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        value_class = type(item.get("input")).__name__
        violations.append(
            f"{field}: {item.get('msg')} "
            f"(constraint: {item.get('type')}, got: {value_class})"
        )
    return violations


def validation_fault(error: ValidationError) -> Fault:
    """Build a VALIDATION_ERROR fault from a pydantic ValidationError."""
    violations = describe_violations(error)
    return Fault(
        kind=FaultKind.VALIDATION_ERROR,
        message="; ".join(violations),
        code=INVALID_ARGUMENTS_CODE,
        details={"violations": violations},
    )


def unknown_operation_fault(name: str) -> Fault:
    """Build an UNKNOWN_OPERATION fault naming the missing tool."""
    return Fault(
        kind=FaultKind.UNKNOWN_OPERATION,
        message=f"Unknown tool: {name}",
        code=UNKNOWN_TOOL_CODE,
    )


def classify(cause: Any) -> Fault:
    """
    Map any failure cause onto a Fault.

    Args:
        cause: Exception, Fault, or any other value raised/returned as failure

    Returns:
        Fault; classification itself never raises
    """
    if isinstance(cause, Fault):
        return cause

    if isinstance(cause, BackendError):
        return Fault(
            kind=FaultKind.BACKEND_ERROR,
            message=cause.message or UNKNOWN_ERROR_MESSAGE,
            code=cause.code,
            http_status=cause.http_status,
            details=cause.details,
        )

    if isinstance(cause, ValidationError):
        return validation_fault(cause)

    if isinstance(cause, Exception):
        message = str(cause) or UNKNOWN_ERROR_MESSAGE
        return Fault(kind=FaultKind.EXECUTION_ERROR, message=message)

    logger.debug(f"Classifying non-exception failure value: {cause!r}")
    return Fault(kind=FaultKind.EXECUTION_ERROR, message=UNKNOWN_ERROR_MESSAGE)
