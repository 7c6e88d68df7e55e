"""Tests for fault classification."""

import pytest
from pydantic import BaseModel, ValidationError

from src.core.faults import (
    INVALID_ARGUMENTS_CODE,
    UNKNOWN_TOOL_CODE,
    BackendError,
    Fault,
    FaultKind,
    classify,
    describe_violations,
    unknown_operation_fault,
)


class Strict(BaseModel):
    count: int


def make_validation_error():
    try:
        Strict(count="many")
    except ValidationError as e:
        return e
    raise AssertionError("validation should fail")


@pytest.mark.parametrize("cause", [
    RuntimeError("boom"),
    BackendError("rejected", code="PERMISSION_DENIED", http_status=403),
    "not an exception",
    None,
    Exception(),
])
def test_classification_is_idempotent(cause):
    first = classify(cause)

    assert classify(cause) == first
    assert classify(first) is first


def test_plain_exception_is_execution_error():
    fault = classify(RuntimeError("boom"))

    assert fault == Fault(kind=FaultKind.EXECUTION_ERROR, message="boom")


def test_empty_message_and_non_exceptions_get_default_message():
    assert classify(Exception()).message == "Unknown error occurred"
    assert classify(42).message == "Unknown error occurred"
    assert classify(42).kind == FaultKind.EXECUTION_ERROR


def test_backend_error_keeps_transport_context():
    fault = classify(BackendError("quota", code="RESOURCE_EXHAUSTED", http_status=429, details={"retry": 30}))

    assert fault.kind == FaultKind.BACKEND_ERROR
    assert fault.code == "RESOURCE_EXHAUSTED"
    assert fault.http_status == 429
    assert fault.details == {"retry": 30}


def test_validation_error_lists_violations():
    error = make_validation_error()

    fault = classify(error)

    assert fault.kind == FaultKind.VALIDATION_ERROR
    assert fault.code == INVALID_ARGUMENTS_CODE
    assert describe_violations(error) == fault.details["violations"]
    assert fault.message.startswith("count: ")
    assert "(constraint: int_parsing, got: str)" in fault.message


def test_unknown_operation_fault():
    fault = unknown_operation_fault("missing_tool")

    assert fault.kind == FaultKind.UNKNOWN_OPERATION
    assert fault.code == UNKNOWN_TOOL_CODE
    assert "missing_tool" in fault.message


def test_prefixed_keeps_kind_and_code():
    fault = Fault(kind=FaultKind.BACKEND_ERROR, message="quota", code="Q")

    labeled = fault.prefixed("Video generation failed")

    assert labeled.message == "Video generation failed: quota"
    assert labeled.kind == fault.kind
    assert labeled.code == "Q"
    assert fault.message == "quota"


def test_to_dict_omits_empty_fields():
    assert Fault(kind=FaultKind.EXECUTION_ERROR, message="x").to_dict() == {
        "kind": "execution_error",
        "message": "x",
    }
