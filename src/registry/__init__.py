"""
Operation Registry for the Gemini media server.

Provides typed, discoverable catalog of media tools.
"""

from .operation_registry import (
    OperationRegistry,
    OperationDescriptor,
    OperationCategory,
    PromptMetadata,
    PromptArgument,
    ProgressCallback,
    # Exceptions
    OperationNotFound,
    OperationRegistryError,
    OperationAlreadyRegistered,
    InvalidOperationDescriptor,
    InvalidPromptArguments,
)

__all__ = [
    'OperationRegistry',
    'OperationDescriptor',
    'OperationCategory',
    'PromptMetadata',
    'PromptArgument',
    'ProgressCallback',
    # Exceptions
    'OperationNotFound',
    'OperationRegistryError',
    'OperationAlreadyRegistered',
    'InvalidOperationDescriptor',
    'InvalidPromptArguments',
]
