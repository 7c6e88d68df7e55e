"""
Media management tools.

Operate on the in-memory MediaLibrary: register reference images, list the
collection, prepare downloads and delete items. No backend calls are made.
"""

import logging
from typing import List

from ..backends.base import MediaBackend
from ..core.media_library import MediaItem, MediaLibrary, MediaType
from ..models.arguments import DeleteMediaArgs, MediaManagementArgs, UploadReferenceImageArgs
from ..registry.operation_registry import (
    OperationCategory,
    OperationDescriptor,
    ProgressCallback,
)

logger = logging.getLogger(__name__)

UPLOADED_MODEL = "uploaded"


class MediaTools:
    """Media library operations."""

    def __init__(self, library: MediaLibrary):
        """
        Initialize with the shared media library.

        Args:
            library: Library shared with the generation tools
        """
        self.library = library

    def get_operations(self) -> List[OperationDescriptor]:
        category = OperationCategory.MEDIA_MANAGEMENT
        return [
            OperationDescriptor(
                name="upload_reference_image",
                category=category,
                description=(
                    "Upload and register reference images for use in image-to-image "
                    "generation and video creation. Supports common image formats."
                ),
                arguments=UploadReferenceImageArgs,
                handler=self._upload_reference_image,
                failure_label="Reference image upload failed",
            ),
            OperationDescriptor(
                name="list_generated_media",
                category=category,
                description=(
                    "List all generated images and videos with metadata. Supports "
                    "filtering by type, date, and search queries."
                ),
                arguments=MediaManagementArgs,
                handler=self._list_media,
                failure_label="Media listing failed",
            ),
            OperationDescriptor(
                name="download_media",
                category=category,
                description=(
                    "Download generated images and videos. Supports individual "
                    "files and batch downloads."
                ),
                arguments=MediaManagementArgs,
                handler=self._download_media,
                failure_label="Media download failed",
            ),
            OperationDescriptor(
                name="delete_media",
                category=category,
                description=(
                    "Delete generated images and videos from the media library. "
                    "Supports individual and batch deletion with confirmation."
                ),
                arguments=DeleteMediaArgs,
                handler=self._delete_media,
                failure_label="Media deletion failed",
            ),
        ]

    async def _upload_reference_image(
        self,
        args: UploadReferenceImageArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Processing reference image upload...")

        item = self.library.add(
            MediaType.IMAGE,
            args.image_url,
            prompt=args.description or "Reference image",
            model=UPLOADED_MODEL,
            metadata={
                "title": args.title,
                "description": args.description,
                "tags": args.tags or [],
                "category": args.category,
            },
        )

        on_progress("Reference image uploaded successfully!")

        tags = ", ".join(args.tags) if args.tags else "None"
        return f"""📤 **Reference Image Uploaded Successfully!**

**Image URL:** {args.image_url}
**Media ID:** {item.id}
**Title:** {args.title or "Untitled"}
**Description:** {args.description or "No description provided"}
**Category:** {args.category}
**Tags:** {tags}

*Reference image is now available for use in image generation and video creation*"""

    async def _list_media(
        self,
        args: MediaManagementArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Fetching media library...")

        total = len(self.library)
        page = self.library.list(offset=args.offset, limit=args.limit)
        on_progress(f"Found {total} media items")

        if not page:
            return (
                "📚 **Media Library Empty**\n\n"
                "No media files found in the library. Start generating images or "
                "videos to build your collection!"
            )

        end = args.offset + args.limit
        output = (
            f"📚 **Media Library**\n\n"
            f"**Total Items:** {total}\n"
            f"**Showing:** {args.offset + 1}-{min(end, total)} of {total}\n"
            f"**Filter:** {'All media' if args.action == 'list' else args.action}\n\n"
        )
        for number, item in enumerate(page, start=args.offset + 1):
            output += self._describe(number, item)

        if total > end:
            output += f"*Use offset {end} to see more items*"
        return output

    async def _download_media(
        self,
        args: MediaManagementArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Preparing media download...")

        if args.media_id:
            items = [self.library.get(args.media_id)]
        else:
            items = self.library.list(limit=args.limit)

        on_progress(f"Downloading {len(items)} media files...")

        output = f"📥 **Media Download Ready**\n\n**Items to Download:** {len(items)}\n\n"
        for number, item in enumerate(items, start=1):
            output += (
                f"**{number}. {item.type.value.upper()} - {item.id}**\n"
                f"- File URL: {item.url}\n"
                f"- File Name: {item.file_name}\n"
                f"- Prompt: {item.prompt}\n"
                f"- Size: {item.size_label('Streaming')}\n\n"
            )
        output += "**Note:** Links are valid for 24 hours from generation."

        on_progress("Download information prepared successfully!")
        return output

    async def _delete_media(
        self,
        args: DeleteMediaArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Processing media deletion request...")

        if not (args.confirm_delete or args.force):
            target = (
                f"- Media ID: {args.media_id}" if args.media_id
                else f"- All media items ({len(self.library)} files)"
            )
            return (
                "⚠️ **Deletion Confirmation Required**\n\n"
                "To delete media files, you must confirm the action. This operation "
                "cannot be undone.\n\n"
                "**Please confirm by setting:**\n"
                "- confirmDelete: true (to proceed with deletion)\n\n"
                f"**Files that would be deleted:**\n{target}\n\n"
                "**Alternative:** Use force: true to bypass confirmation (not recommended)."
            )

        if args.media_id:
            item = self.library.delete(args.media_id)
            deleted = [item] if item is not None else []
        else:
            deleted = self.library.clear()

        logger.info(f"Deleted {len(deleted)} media items")
        on_progress(f"Deleted {len(deleted)} media files")

        output = f"🗑️ **Media Deletion Complete**\n\n**Files Deleted:** {len(deleted)}\n\n**Deleted Items:**\n"
        for item in deleted:
            output += f"- {item.type.value} - {item.id}\n"
        output += (
            f"\n**Storage Status:**\n"
            f"- Remaining Files: {len(self.library)}\n\n"
            "**Note:** Deleted files cannot be recovered. Use with caution!"
        )
        return output

    @staticmethod
    def _describe(number: int, item: MediaItem) -> str:
        lines = [
            f"**{number}. {item.type.value.upper()} - {item.id}**",
            f"- URL: {item.url}",
            f"- Prompt: {item.prompt}",
            f"- Model: {item.model}",
            f"- Created: {item.created_at.date().isoformat()}",
            f"- Size: {item.size_label()}",
            f"- Category: {item.metadata.get('category') or 'General'}",
        ]
        if item.metadata.get("tags"):
            lines.append(f"- Tags: {', '.join(item.metadata['tags'])}")
        return "\n".join(lines) + "\n\n"
