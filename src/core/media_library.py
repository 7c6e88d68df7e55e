"""
In-memory media library.

Keeps metadata for reference images uploaded by callers and for media
produced by generation tools, so the media-management tools can list,
download and delete them. Contents live for the process lifetime only.

Usage:
    from src.core.media_library import MediaLibrary, MediaType

    library = MediaLibrary()
    item = library.add(MediaType.IMAGE, url, prompt="A lighthouse", model="imagen3")
    page = library.list(offset=0, limit=10)
    library.delete(item.id)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ..utils.ids import generate_media_id

logger = logging.getLogger(__name__)


class MediaType(Enum):
    """Kinds of stored media."""
    IMAGE = "image"
    VIDEO = "video"


@dataclass
class MediaItem:
    """Metadata tracked for each media artifact.

    Attributes:
        id: Unique media identifier
        type: Image or video
        url: Where the artifact can be fetched
        prompt: Prompt or description that produced it
        model: Model name, or "uploaded" for reference images
        created_at: Timestamp when the item was recorded
        size: Size in bytes (0 when unknown)
        metadata: Free-form attributes (title, tags, category, ...)
    """
    id: str
    type: MediaType
    url: str
    prompt: str
    model: str
    created_at: datetime
    size: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def file_name(self) -> str:
        extension = "jpg" if self.type == MediaType.IMAGE else "mp4"
        return f"{self.id}.{extension}"

    def size_label(self, unknown: str = "Unknown") -> str:
        if self.size > 0:
            return f"{self.size / 1024 / 1024:.2f} MB"
        return unknown


class MediaNotFound(Exception):
    """Requested media item does not exist."""
    pass


class MediaLibrary:
    """Insertion-ordered store of media items."""

    def __init__(self):
        self._items: Dict[str, MediaItem] = {}

    def add(
        self,
        media_type: MediaType,
        url: str,
        prompt: str,
        model: str,
        media_id: Optional[str] = None,
        size: int = 0,
        metadata: Optional[Dict[str, Any]] = None
    ) -> MediaItem:
        """
        Record a media item.

        Args:
            media_type: Image or video
            url: Artifact URL
            prompt: Prompt or description
            model: Producing model
            media_id: Existing id (generated when omitted)
            size: Size in bytes
            metadata: Extra attributes

        Returns:
            The stored MediaItem
        """
        item = MediaItem(
            id=media_id or generate_media_id("ref"),
            type=media_type,
            url=url,
            prompt=prompt,
            model=model,
            created_at=datetime.now(timezone.utc),
            size=size,
            metadata=dict(metadata or {}),
        )
        self._items[item.id] = item
        logger.debug(f"Media recorded: {item.id} ({media_type.value})")
        return item

    def get(self, media_id: str) -> MediaItem:
        """
        Retrieve an item.

        Raises:
            MediaNotFound: If no item has this id
        """
        if media_id not in self._items:
            raise MediaNotFound(f"Media item with ID {media_id} not found")
        return self._items[media_id]

    def list(self, offset: int = 0, limit: Optional[int] = None) -> List[MediaItem]:
        """Return a page of items in insertion order."""
        items = list(self._items.values())
        end = None if limit is None else offset + limit
        return items[offset:end]

    def delete(self, media_id: str) -> Optional[MediaItem]:
        """Remove an item; returns it, or None if it was absent."""
        return self._items.pop(media_id, None)

    def clear(self) -> List[MediaItem]:
        """Remove every item; returns what was removed."""
        removed = list(self._items.values())
        self._items.clear()
        return removed

    def __contains__(self, media_id: str) -> bool:
        return media_id in self._items

    def __len__(self) -> int:
        return len(self._items)
