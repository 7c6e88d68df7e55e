"""
Tests for Dispatcher - tool call routing, validation and failure rendering.

Tests cover:
1. Successful dispatch returns handler text untagged
2. Unknown tools are rejected without progress ticks
3. Argument violations are rejected before execution
4. Handler failures are classified and rendered
5. Progress channel lifecycle around execution
"""

import pytest
from pydantic import Field

from src.backends import MockBackend
from src.core.dispatcher import Dispatcher, Invocation, InvocationState
from src.core.faults import BackendError, FaultKind
from src.core.result import Err
from src.managers.progress_manager import PROGRESS_COMPLETE, ProgressManager
from src.models.arguments import ToolArguments
from src.registry import OperationCategory, OperationDescriptor, OperationRegistry
from src.utils.response import is_success


# ============================================================================
# Test Fixtures
# ============================================================================

class EchoArgs(ToolArguments):
    prompt: str = Field(..., min_length=1, max_length=20)


class Spy:
    """Handler that records its calls."""

    def __init__(self, behavior=None):
        self.calls = []
        self.behavior = behavior

    async def __call__(self, args, backend, on_progress):
        self.calls.append(args)
        if self.behavior is not None:
            return await self.behavior(args, backend, on_progress)
        return args.prompt


def make_operation(name, handler, failure_label=None):
    return OperationDescriptor(
        name=name,
        category=OperationCategory.TEXT_PROCESSING,
        description=f"{name} test operation",
        arguments=EchoArgs,
        handler=handler,
        failure_label=failure_label,
    )


@pytest.fixture
def ticks():
    return []


@pytest.fixture
def progress(ticks):
    async def sender(tick):
        ticks.append(tick)
    return ProgressManager(sender=sender, interval=10.0)


@pytest.fixture
def echo_spy():
    return Spy()


@pytest.fixture
def dispatcher(echo_spy, progress):
    registry = OperationRegistry()
    registry.register(make_operation("echo", echo_spy))
    return Dispatcher(registry, MockBackend(), progress)


# ============================================================================
# Success
# ============================================================================

@pytest.mark.asyncio
async def test_echo_returns_prompt(dispatcher):
    result = await dispatcher.dispatch("echo", {"prompt": "hi"})

    assert result.text == "hi"
    assert result.is_error is False
    assert result.to_dict() == {"text": "hi", "isError": False}
    assert is_success(result)


@pytest.mark.asyncio
async def test_success_sends_start_and_completion_ticks(dispatcher, ticks):
    await dispatcher.dispatch("echo", {"prompt": "hi"}, progress_token="tok-1")

    assert [t.sequence_number for t in ticks] == [0, PROGRESS_COMPLETE]
    assert ticks[0].message == "🎨 Starting echo"
    assert ticks[-1].message == "✅ echo completed successfully!"
    assert ticks[-1].total == PROGRESS_COMPLETE
    assert all(t.token == "tok-1" for t in ticks)


@pytest.mark.asyncio
async def test_no_token_no_ticks(dispatcher, ticks):
    result = await dispatcher.dispatch("echo", {"prompt": "hi"})

    assert not result.is_error
    assert ticks == []


@pytest.mark.asyncio
async def test_token_released_after_dispatch(dispatcher, progress):
    await dispatcher.dispatch("echo", {"prompt": "hi"}, progress_token=7)

    assert not progress.is_active(7)


# ============================================================================
# Unknown operation
# ============================================================================

@pytest.mark.asyncio
async def test_missing_tool(dispatcher, ticks):
    result = await dispatcher.dispatch("missing_tool", {}, progress_token="tok")

    assert result.is_error
    assert "missing_tool" in result.text
    assert result.text == "❌ Unknown tool: missing_tool"
    assert result.fault.kind == FaultKind.UNKNOWN_OPERATION
    assert ticks == []


# ============================================================================
# Validation
# ============================================================================

@pytest.mark.asyncio
async def test_empty_prompt_never_executes(dispatcher, echo_spy, ticks):
    result = await dispatcher.dispatch("echo", {"prompt": ""}, progress_token="tok")

    assert result.is_error
    assert result.fault.kind == FaultKind.VALIDATION_ERROR
    assert result.text.startswith("❌ Invalid arguments for echo: prompt:")
    assert echo_spy.calls == []
    assert ticks == []


@pytest.mark.asyncio
async def test_too_long_prompt_never_executes(dispatcher, echo_spy):
    result = await dispatcher.dispatch("echo", {"prompt": "x" * 21})

    assert result.is_error
    assert "string_too_long" in result.text
    assert echo_spy.calls == []


@pytest.mark.asyncio
async def test_missing_arguments_never_execute(dispatcher, echo_spy):
    result = await dispatcher.dispatch("echo", None)

    assert result.is_error
    assert "prompt" in result.text
    assert echo_spy.calls == []


# ============================================================================
# Execution failures
# ============================================================================

@pytest.mark.asyncio
async def test_plain_failure_is_execution_error(progress, ticks):
    async def boom(args, backend, on_progress):
        raise RuntimeError("boom")

    registry = OperationRegistry()
    registry.register(make_operation("explode", Spy(boom)))
    dispatcher = Dispatcher(registry, MockBackend(), progress)

    result = await dispatcher.dispatch("explode", {"prompt": "hi"}, progress_token="tok")

    assert result.is_error
    assert "boom" in result.text
    assert result.text == "❌ Error executing explode: boom"
    assert result.fault.kind == FaultKind.EXECUTION_ERROR
    assert ticks[-1].message == "❌ explode failed"


@pytest.mark.asyncio
async def test_backend_error_keeps_code_and_label(progress):
    async def rejected(args, backend, on_progress):
        raise BackendError("quota exhausted", code="RESOURCE_EXHAUSTED", http_status=429)

    registry = OperationRegistry()
    registry.register(make_operation("render", Spy(rejected), failure_label="Render failed"))
    dispatcher = Dispatcher(registry, MockBackend(), progress)

    result = await dispatcher.dispatch("render", {"prompt": "hi"})

    assert result.fault.kind == FaultKind.BACKEND_ERROR
    assert result.fault.http_status == 429
    assert result.text == (
        "❌ Error executing render: Render failed: quota exhausted (RESOURCE_EXHAUSTED)"
    )


@pytest.mark.asyncio
async def test_returned_err_is_rendered(progress):
    from src.core.faults import Fault

    async def refuse(args, backend, on_progress):
        return Err(Fault(kind=FaultKind.EXECUTION_ERROR, message="refused"))

    registry = OperationRegistry()
    registry.register(make_operation("refuse", Spy(refuse)))
    dispatcher = Dispatcher(registry, MockBackend(), progress)

    result = await dispatcher.dispatch("refuse", {"prompt": "hi"})

    assert result.is_error
    assert "refused" in result.text


@pytest.mark.asyncio
async def test_progress_failure_does_not_break_dispatch(echo_spy):
    async def broken_sender(tick):
        raise ConnectionError("transport closed")

    registry = OperationRegistry()
    registry.register(make_operation("echo", echo_spy))
    dispatcher = Dispatcher(registry, MockBackend(), ProgressManager(sender=broken_sender))

    result = await dispatcher.dispatch("echo", {"prompt": "hi"}, progress_token="tok")

    assert result.text == "hi"
    assert not result.is_error


# ============================================================================
# Token reuse
# ============================================================================

@pytest.mark.asyncio
async def test_reused_token_runs_detached(progress, ticks):
    import asyncio

    release = asyncio.Event()

    async def slow(args, backend, on_progress):
        await release.wait()
        return args.prompt

    registry = OperationRegistry()
    registry.register(make_operation("slow", Spy(slow)))
    registry.register(make_operation("echo", Spy()))
    dispatcher = Dispatcher(registry, MockBackend(), progress)

    first = asyncio.create_task(dispatcher.dispatch("slow", {"prompt": "a"}, progress_token="shared"))
    await asyncio.sleep(0)
    assert progress.is_active("shared")

    second = await dispatcher.dispatch("echo", {"prompt": "b"}, progress_token="shared")
    release.set()
    first_result = await first

    assert second.text == "b"
    assert first_result.text == "a"
    # Only the first invocation's ticks were delivered
    assert [t.message for t in ticks] == ["🎨 Starting slow", "✅ slow completed successfully!"]
    assert not progress.is_active("shared")


# ============================================================================
# Invocation record
# ============================================================================

def test_invocation_tracks_status_and_state():
    invocation = Invocation(operation_name="echo", arguments={})

    invocation.update_status("Halfway there")
    invocation.transition(InvocationState.RESOLVING)

    assert invocation.latest_status == "Halfway there"
    assert invocation.state == InvocationState.RESOLVING
