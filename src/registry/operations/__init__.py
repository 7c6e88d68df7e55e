"""
Operation registrations for gemini-media-mcp.

Registers image, video, text and media-management operations with a
registry. Each source contributes descriptors in catalog order, so the
resulting listing is deterministic.
"""

import logging
from typing import Optional

from ...core.media_library import MediaLibrary
from ...tools.image_tools import ImageTools
from ...tools.media_tools import MediaTools
from ...tools.text_tools import TextTools
from ...tools.video_tools import VideoTools
from ..operation_registry import OperationRegistry

logger = logging.getLogger(__name__)


def register_image_operations(registry: OperationRegistry, library: Optional[MediaLibrary] = None) -> None:
    registry.register_all(ImageTools(library).get_operations())


def register_video_operations(registry: OperationRegistry, library: Optional[MediaLibrary] = None) -> None:
    registry.register_all(VideoTools(library).get_operations())


def register_text_operations(registry: OperationRegistry) -> None:
    registry.register_all(TextTools().get_operations())


def register_media_operations(registry: OperationRegistry, library: MediaLibrary) -> None:
    registry.register_all(MediaTools(library).get_operations())


def register_all_operations(registry: OperationRegistry, library: Optional[MediaLibrary] = None) -> MediaLibrary:
    """
    Register every operation.

    Args:
        registry: Registry to populate
        library: Shared media library (created when omitted)

    Returns:
        The media library the operations were bound to
    """
    library = library if library is not None else MediaLibrary()
    register_image_operations(registry, library)
    register_video_operations(registry, library)
    register_text_operations(registry)
    register_media_operations(registry, library)
    logger.info(f"Registered {len(registry)} operations")
    return library


__all__ = [
    'register_all_operations',
    'register_image_operations',
    'register_video_operations',
    'register_text_operations',
    'register_media_operations',
]
