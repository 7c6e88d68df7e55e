"""
Manager components for the Gemini media server.
"""

from .progress_manager import (
    ProgressManager,
    ProgressChannel,
    ProgressTick,
    ProgressSender,
    ProgressToken,
    PROGRESS_MESSAGES,
    PROGRESS_COMPLETE,
)

__all__ = [
    'ProgressManager',
    'ProgressChannel',
    'ProgressTick',
    'ProgressSender',
    'ProgressToken',
    'PROGRESS_MESSAGES',
    'PROGRESS_COMPLETE',
]
