"""Standardized tool responses."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.faults import Fault, FaultKind


@dataclass(frozen=True)
class DispatchResult:
    """Textual tool response tagged with an error flag."""
    text: str
    is_error: bool
    fault: Optional[Fault] = None

    def to_dict(self) -> Dict[str, Any]:
        response = {"text": self.text, "isError": self.is_error}
        if self.fault is not None:
            response["error"] = self.fault.to_dict()
        return response


def is_success(result: DispatchResult) -> bool:
    """Check if a dispatch succeeded."""
    return not result.is_error


def success_response(text: str) -> DispatchResult:
    """Create a successful response.

    Args:
        text: Tool output

    Returns:
        Untagged success result
    """
    return DispatchResult(text=text, is_error=False)


def render_fault(operation_name: str, fault: Fault) -> str:
    """Render a fault as the caller-visible error text.

    Args:
        operation_name: Tool that was called
        fault: Classified failure

    Returns:
        Error message prefixed with a failure marker
    """
    if fault.kind == FaultKind.UNKNOWN_OPERATION:
        return f"❌ {fault.message}"

    if fault.kind == FaultKind.VALIDATION_ERROR:
        return f"❌ Invalid arguments for {operation_name}: {fault.message}"

    message = fault.message
    if fault.code:
        message = f"{message} ({fault.code})"
    return f"❌ Error executing {operation_name}: {message}"


def error_response(operation_name: str, fault: Fault) -> DispatchResult:
    """Create an error response carrying the fault.

    Args:
        operation_name: Tool that was called
        fault: Classified failure

    Returns:
        Error result with rendered text
    """
    return DispatchResult(
        text=render_fault(operation_name, fault),
        is_error=True,
        fault=fault,
    )
