"""
Generation backends for the Gemini media server.
"""

from .base import GenerationKind, GenerationResult, MediaBackend
from .gemini import GeminiBackend
from .mock import MockBackend

__all__ = [
    'GenerationKind',
    'GenerationResult',
    'MediaBackend',
    'GeminiBackend',
    'MockBackend',
]
