"""Base media backend protocol.

Defines the interface that generation backends must implement. Operations
only talk to a backend through generate() and health_check().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class GenerationKind(Enum):
    """Kinds of requests a backend can execute."""
    IMAGE = "image"
    VIDEO = "video"
    IMAGE_TO_VIDEO = "image_to_video"
    TEXT = "text"
    IMAGE_ANALYSIS = "image_analysis"


@dataclass
class GenerationResult:
    """Outcome of a backend request.

    Media kinds fill artifact_url/artifact_id; text and analysis kinds fill
    text.
    """
    artifact_url: Optional[str] = None
    artifact_id: Optional[str] = None
    text: Optional[str] = None


class MediaBackend(ABC):
    """Abstract base class for generation backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'gemini', 'mock')."""
        ...

    @abstractmethod
    async def generate(
        self,
        kind: GenerationKind,
        parameters: Dict[str, Any],
    ) -> GenerationResult:
        """Execute a generation or analysis request.

        Args:
            kind: What to produce
            parameters: Validated tool arguments for the request

        Returns:
            GenerationResult

        Raises:
            BackendError: If the backend rejects or fails the request
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if backend answered a trivial request
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
