"""
Dispatcher - routes tool calls through validation, execution and progress.

Each call moves through RECEIVED -> RESOLVING -> VALIDATING -> EXECUTING ->
COMPLETED and never revisits a state. dispatch() always returns a
DispatchResult; failures are classified and rendered as text instead of
being raised to the transport.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..backends.base import MediaBackend
from ..managers.progress_manager import ProgressManager, ProgressToken
from ..registry.operation_registry import OperationRegistry
from ..utils.response import DispatchResult, error_response, success_response
from .faults import Fault, classify, unknown_operation_fault, validation_fault
from .result import Ok

logger = logging.getLogger(__name__)

RESULT_PREVIEW_LENGTH = 200


class InvocationState(Enum):
    """Dispatch lifecycle states."""
    RECEIVED = "received"
    RESOLVING = "resolving"
    VALIDATING = "validating"
    EXECUTING = "executing"
    COMPLETED = "completed"


@dataclass
class Invocation:
    """Per-call record, discarded when the call completes."""
    operation_name: str
    arguments: Dict[str, Any]
    progress_token: Optional[ProgressToken] = None
    latest_status: str = ""
    active: bool = False
    state: InvocationState = InvocationState.RECEIVED
    fault: Optional[Fault] = None

    def update_status(self, status: str) -> None:
        """Progress callback handed to the running tool."""
        self.latest_status = status

    def transition(self, state: InvocationState) -> None:
        logger.debug(f"{self.operation_name}: {self.state.value} -> {state.value}")
        self.state = state


class Dispatcher:
    """Resolves, validates and executes tool calls."""

    def __init__(
        self,
        registry: OperationRegistry,
        backend: MediaBackend,
        progress: Optional[ProgressManager] = None
    ):
        """
        Initialize dispatcher.

        Args:
            registry: Populated operation registry
            backend: Backend handed to every tool
            progress: Progress manager (a silent one is created if omitted)
        """
        self.registry = registry
        self.backend = backend
        self.progress = progress or ProgressManager()

    def list_operations(self) -> List[Dict[str, Any]]:
        return self.registry.list_operations()

    def list_prompt_style_operations(self) -> List[Dict[str, Any]]:
        return self.registry.list_prompt_style()

    async def dispatch(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        progress_token: Optional[ProgressToken] = None
    ) -> DispatchResult:
        """
        Execute a tool call.

        Args:
            name: Tool name
            arguments: Raw call arguments
            progress_token: Caller-supplied token for progress notifications

        Returns:
            DispatchResult; never raises
        """
        invocation = Invocation(
            operation_name=name,
            arguments=arguments or {},
            progress_token=progress_token,
        )

        try:
            return await self._dispatch(invocation)
        except Exception as e:
            logger.exception(f"Unexpected failure dispatching {name}")
            return self._fail(invocation, classify(e))

    async def _dispatch(self, invocation: Invocation) -> DispatchResult:
        name = invocation.operation_name

        invocation.transition(InvocationState.RESOLVING)
        operation = self.registry.resolve(name)
        if operation is None:
            return self._fail(invocation, unknown_operation_fault(name))

        invocation.transition(InvocationState.VALIDATING)
        try:
            args = operation.validate(invocation.arguments)
        except ValidationError as e:
            return self._fail(invocation, validation_fault(e))

        invocation.transition(InvocationState.EXECUTING)
        logger.info(f"Tool invoked: {name}")
        logger.debug(f"{name} arguments: {json.dumps(invocation.arguments, default=str)}")

        channel = await self.progress.start(
            name,
            invocation.progress_token,
            status_source=lambda: invocation.latest_status,
        )
        invocation.active = True

        outcome = None
        try:
            outcome = await operation.execute(args, self.backend, invocation.update_status)
        finally:
            invocation.active = False
            await self.progress.stop(channel, success=isinstance(outcome, Ok))

        if isinstance(outcome, Ok):
            invocation.transition(InvocationState.COMPLETED)
            text = outcome.value
            preview = text[:RESULT_PREVIEW_LENGTH] + ("..." if len(text) > RESULT_PREVIEW_LENGTH else "")
            logger.info(f"Tool completed: {name}")
            logger.debug(f"{name} result: {preview}")
            return success_response(text)

        return self._fail(invocation, outcome.fault)

    def _fail(self, invocation: Invocation, fault: Fault) -> DispatchResult:
        invocation.fault = fault
        invocation.transition(InvocationState.COMPLETED)
        logger.error(
            f"Error in tool '{invocation.operation_name}': "
            f"[{fault.kind.value}] {fault.message}"
        )
        return error_response(invocation.operation_name, fault)
