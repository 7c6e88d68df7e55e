"""
Core Layer - dispatch engine primitives for the Gemini media server.

Modules:
- faults: fault taxonomy, backend exceptions and classify()
- result: Ok/Err outcome values returned by tool execution
- media_library: in-memory catalog of uploaded and generated media
- dispatcher: tool call routing (import from src.core.dispatcher)
"""

from .faults import (
    BackendError,
    Fault,
    FaultKind,
    MediaProcessingError,
    classify,
)
from .result import Err, Ok, Result
from .media_library import MediaItem, MediaLibrary, MediaNotFound, MediaType

__all__ = [
    # Faults
    'BackendError',
    'Fault',
    'FaultKind',
    'MediaProcessingError',
    'classify',
    # Results
    'Err',
    'Ok',
    'Result',
    # Media
    'MediaItem',
    'MediaLibrary',
    'MediaNotFound',
    'MediaType',
]
