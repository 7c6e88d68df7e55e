"""
Operation Registry - Typed catalog of media tools.

Provides:
- Immutable operation descriptors with pydantic argument models
- Catalog views for tool discovery and prompt discovery
- Uniform execution returning Ok/Err instead of raising
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from pydantic import BaseModel

from ..backends.base import MediaBackend
from ..core.faults import classify
from ..core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# Type aliases
JSONSchema = Dict[str, Any]
ProgressCallback = Callable[[str], None]
Handler = Callable[
    [BaseModel, MediaBackend, ProgressCallback],
    Awaitable[Union[str, Ok, Err]]
]


# ============================================================================
# Enums
# ============================================================================

class OperationCategory(Enum):
    """Operation categories (informational only)."""
    IMAGE_GENERATION = "image-generation"
    VIDEO_GENERATION = "video-generation"
    MEDIA_MANAGEMENT = "media-management"
    TEXT_PROCESSING = "text-processing"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class PromptArgument:
    """One argument advertised in the prompt catalog."""
    name: str
    description: str
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }


@dataclass(frozen=True)
class PromptMetadata:
    """Prompt-style description of an operation. Display only."""
    description: str
    arguments: Tuple[PromptArgument, ...] = ()


@dataclass(frozen=True)
class OperationDescriptor:
    """
    Describes a callable media tool.

    Created once at startup and never mutated.
    """
    name: str                              # Tool identifier (e.g., "generate_text")
    category: OperationCategory            # Informational grouping
    description: str                       # Human-readable description
    arguments: Type[BaseModel]             # Argument contract
    handler: Handler                       # async (args, backend, on_progress)
    prompt: Optional[PromptMetadata] = None
    failure_label: Optional[str] = None    # Prefix for fault messages
    tags: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def input_schema(self) -> JSONSchema:
        """JSON Schema of the argument model, using wire (camelCase) names."""
        return self.arguments.model_json_schema(by_alias=True)

    def validate(self, raw_arguments: Optional[Dict[str, Any]]) -> BaseModel:
        """
        Validate raw arguments against the argument model.

        Raises:
            pydantic.ValidationError: If any constraint is violated
        """
        return self.arguments.model_validate(raw_arguments or {})

    async def execute(
        self,
        args: BaseModel,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> Result:
        """
        Run the handler and normalize its outcome.

        Handlers may return text, Ok/Err, or raise; every outcome becomes
        Ok(text) or Err(fault).
        """
        try:
            outcome = await self.handler(args, backend, on_progress)
        except Exception as e:
            fault = classify(e)
        else:
            if isinstance(outcome, Ok):
                return outcome
            if not isinstance(outcome, Err):
                return Ok(outcome)
            fault = outcome.fault

        on_progress(f"Error: {fault.message}")
        if self.failure_label:
            fault = fault.prefixed(self.failure_label)
        return Err(fault)


# ============================================================================
# Exceptions
# ============================================================================

class OperationRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class OperationNotFound(OperationRegistryError):
    """Operation not found in registry."""
    pass


class OperationAlreadyRegistered(OperationRegistryError):
    """Operation already registered (strict registration only)."""
    pass


class InvalidOperationDescriptor(OperationRegistryError):
    """Invalid operation descriptor."""
    pass


class InvalidPromptArguments(OperationRegistryError):
    """Prompt requested without its required arguments."""
    pass


# ============================================================================
# Operation Registry
# ============================================================================

class OperationRegistry:
    """
    Catalog of media tools keyed by name.

    Populated by registry sources at startup and read-only afterwards.
    Duplicate names replace the earlier entry in place (last writer wins)
    unless ``strict`` is set.
    """

    def __init__(self, strict: bool = False):
        """Initialize registry."""
        self._operations: Dict[str, OperationDescriptor] = {}
        self.strict = strict

        logger.debug(f"OperationRegistry initialized (strict={strict})")

    # ========================================================================
    # Registration
    # ========================================================================

    def register(self, operation: OperationDescriptor) -> None:
        """
        Register an operation.

        Args:
            operation: Operation descriptor to register

        Raises:
            OperationAlreadyRegistered: If name exists and registry is strict
            InvalidOperationDescriptor: If descriptor validation fails
        """
        self._validate_descriptor(operation)

        if operation.name in self._operations:
            if self.strict:
                raise OperationAlreadyRegistered(
                    f"Operation '{operation.name}' already registered"
                )
            logger.warning(
                f"Operation '{operation.name}' registered twice; "
                f"replacing earlier definition"
            )

        self._operations[operation.name] = operation

        logger.info(
            f"Registered operation: {operation.name} "
            f"(category: {operation.category.value})"
        )

    def register_all(self, operations: Iterable[OperationDescriptor]) -> None:
        """
        Register every operation supplied by a registry source.

        Args:
            operations: Operation descriptors in catalog order
        """
        for operation in operations:
            self.register(operation)

    # ========================================================================
    # Retrieval
    # ========================================================================

    def resolve(self, name: str) -> Optional[OperationDescriptor]:
        """Return the descriptor for ``name`` or None."""
        return self._operations.get(name)

    def get(self, name: str) -> OperationDescriptor:
        """
        Retrieve an operation by name.

        Raises:
            OperationNotFound: If operation doesn't exist
        """
        operation = self.resolve(name)
        if operation is None:
            raise OperationNotFound(f"Operation '{name}' not found")
        return operation

    def exists(self, name: str) -> bool:
        """Check if operation exists."""
        return name in self._operations

    def names(self) -> List[str]:
        return list(self._operations)

    def list(self, category: Optional[OperationCategory] = None) -> List[OperationDescriptor]:
        """List descriptors in registration order, optionally by category."""
        operations = list(self._operations.values())
        if category:
            operations = [op for op in operations if op.category == category]
        return operations

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __len__(self) -> int:
        return len(self._operations)

    # ========================================================================
    # Catalog views
    # ========================================================================

    def list_operations(self) -> List[Dict[str, Any]]:
        """
        Tool catalog for capability discovery.

        Returns:
            [{name, description, category, inputSchema}] in registration order
        """
        return [
            {
                "name": op.name,
                "description": op.description,
                "category": op.category.value,
                "inputSchema": op.input_schema,
            }
            for op in self._operations.values()
        ]

    def list_prompt_style(self) -> List[Dict[str, Any]]:
        """
        Prompt catalog: operations that declare prompt metadata.

        Returns:
            [{name, description, arguments}] in registration order
        """
        return [
            {
                "name": op.name,
                "description": op.prompt.description,
                "arguments": [arg.to_dict() for arg in op.prompt.arguments],
            }
            for op in self._operations.values()
            if op.prompt is not None
        ]

    def get_prompt_message(
        self,
        name: str,
        arguments: Optional[Dict[str, str]] = None
    ) -> Optional[str]:
        """
        Render the user message for a prompt-style request.

        Args:
            name: Operation name
            arguments: Prompt argument values supplied by the caller

        Returns:
            Message text, or None if the operation has no prompt metadata

        Raises:
            InvalidPromptArguments: If a required argument is missing
        """
        operation = self.resolve(name)
        if operation is None or operation.prompt is None:
            return None

        arguments = arguments or {}
        missing = [
            arg.name for arg in operation.prompt.arguments
            if arg.required and not arguments.get(arg.name)
        ]
        if missing:
            raise InvalidPromptArguments(
                f"Prompt '{name}' requires arguments: {', '.join(missing)}"
            )

        lines = [f"Use the {name} tool. {operation.prompt.description}."]
        provided = [
            f"- {arg.name}: {arguments[arg.name]}"
            for arg in operation.prompt.arguments
            if arguments.get(arg.name)
        ]
        if provided:
            lines.append("")
            lines.append("Arguments:")
            lines.extend(provided)
        return "\n".join(lines)

    # ========================================================================
    # Internal Helpers
    # ========================================================================

    def _validate_descriptor(self, operation: OperationDescriptor) -> None:
        """
        Validate operation descriptor.

        Raises:
            InvalidOperationDescriptor: If validation fails
        """
        if not operation.name:
            raise InvalidOperationDescriptor("Operation name is required")

        if not operation.description:
            raise InvalidOperationDescriptor("Operation description is required")

        if operation.handler is None:
            raise InvalidOperationDescriptor("Operation handler is required")

        if not (isinstance(operation.arguments, type) and issubclass(operation.arguments, BaseModel)):
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' arguments must be a pydantic model"
            )
