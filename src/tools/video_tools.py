"""Video generation tools backed by Veo 3.1."""

import logging
from typing import List, Optional

from ..backends.base import GenerationKind, MediaBackend
from ..core.media_library import MediaLibrary, MediaType
from ..models.arguments import BatchVideoGenerationArgs, ImageToVideoArgs, VideoGenerationArgs
from ..registry.operation_registry import (
    OperationCategory,
    OperationDescriptor,
    ProgressCallback,
    PromptArgument,
    PromptMetadata,
)

logger = logging.getLogger(__name__)

VIDEO_MODEL = "veo-3.1"


class VideoTools:
    """Video generation operations."""

    def __init__(self, library: Optional[MediaLibrary] = None):
        self.library = library

    def get_operations(self) -> List[OperationDescriptor]:
        """Return video generation operations in catalog order."""
        category = OperationCategory.VIDEO_GENERATION
        return [
            OperationDescriptor(
                name="generate_video_veo",
                category=category,
                description=(
                    "Generate high-fidelity videos using Google's Veo 3.1 model. "
                    "Creates 8-second 720p or 1080p videos with stunning realism "
                    "and native audio."
                ),
                arguments=VideoGenerationArgs,
                handler=self._generate_video,
                failure_label="Video generation failed",
                prompt=PromptMetadata(
                    description="Generate high-quality videos using Veo 3.1 model",
                    arguments=(
                        PromptArgument("prompt", "Detailed description of the video to generate", True),
                        PromptArgument("duration", "Video duration in seconds (4-8)"),
                        PromptArgument("resolution", "Video resolution: 720p or 1080p"),
                        PromptArgument("style", "Video style: natural, cinematic, artistic, animation"),
                    ),
                ),
            ),
            OperationDescriptor(
                name="image_to_video",
                category=category,
                description=(
                    "Transform static images into dynamic videos using Veo 3.1. Add "
                    "motion, camera movement, and life to your images with AI-powered "
                    "video generation."
                ),
                arguments=ImageToVideoArgs,
                handler=self._image_to_video,
                failure_label="Image-to-video conversion failed",
                prompt=PromptMetadata(
                    description="Convert images to videos with motion and camera effects",
                    arguments=(
                        PromptArgument("imageUrl", "URL of the image to convert to video", True),
                        PromptArgument("prompt", "Description of desired motion and effects", True),
                        PromptArgument("cameraMovement", "Camera movement: static, pan, zoom, tilt, tracking"),
                        PromptArgument("duration", "Video duration in seconds (4-8)"),
                    ),
                ),
            ),
            OperationDescriptor(
                name="batch_generate_videos",
                category=category,
                description=(
                    "Generate multiple videos in a single operation. Efficient for "
                    "creating video series or multiple variations of similar concepts."
                ),
                arguments=BatchVideoGenerationArgs,
                handler=self._batch_generate,
                failure_label="Batch video generation failed",
            ),
        ]

    async def _generate_video(
        self,
        args: VideoGenerationArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Preparing video generation request...")

        result = await backend.generate(GenerationKind.VIDEO, args.model_dump())
        self._record(result.artifact_id, result.artifact_url, args.prompt)

        on_progress("Video generated successfully!")

        return f"""🎬 **Video Generated Successfully!**

**Model:** Veo 3.1 (Google's latest video generation model)
**Prompt:** {args.prompt}
**Duration:** {args.duration} seconds
**Resolution:** {args.resolution}
**Style:** {args.style}
**Aspect Ratio:** {args.aspect_ratio}
**FPS:** {args.fps}

**Generated Video URL:** {result.artifact_url}
**Media ID:** {result.artifact_id}

*Video generated using Google's Veo 3.1 model*"""

    async def _image_to_video(
        self,
        args: ImageToVideoArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Preparing image-to-video conversion...")

        result = await backend.generate(GenerationKind.IMAGE_TO_VIDEO, args.model_dump())
        self._record(result.artifact_id, result.artifact_url, args.prompt, source=args.image_url)

        on_progress("Image-to-video conversion completed!")

        motion = f"**Motion Details:** {args.motion_prompt}\n" if args.motion_prompt else ""
        return f"""🎞️ **Image Successfully Converted to Video!**

**Source Image:** {args.image_url}
**Prompt:** {args.prompt}
**Duration:** {args.duration} seconds
**Resolution:** {args.resolution}
**Camera Movement:** {args.camera_movement}
{motion}
**Generated Video URL:** {result.artifact_url}
**Media ID:** {result.artifact_id}

*Video created using Google's Veo 3.1 image-to-video model*"""

    async def _batch_generate(
        self,
        args: BatchVideoGenerationArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Starting batch video generation...")

        total = len(args.items)
        sections = []
        for index, item in enumerate(args.items, start=1):
            on_progress(f"Generating video {index}/{total}...")

            duration = item.duration or args.duration
            style = item.style or args.style
            aspect_ratio = item.aspect_ratio or args.aspect_ratio
            result = await backend.generate(GenerationKind.VIDEO, {
                "prompt": item.prompt,
                "duration": duration,
                "resolution": args.resolution,
                "fps": args.fps,
                "style": style,
                "aspect_ratio": aspect_ratio,
                "seed": item.seed,
                "reference_image": item.reference_image,
            })
            self._record(result.artifact_id, result.artifact_url, item.prompt)

            lines = [
                f"**Video {index}:**",
                f"- Prompt: {item.prompt}",
                f"- Duration: {duration} seconds",
                f"- Style: {style}",
                f"- Aspect Ratio: {aspect_ratio}",
                f"- URL: {result.artifact_url}",
                f"- Media ID: {result.artifact_id}",
            ]
            if item.reference_image:
                lines.append(f"- Source Image: {item.reference_image}")
            sections.append("\n".join(lines) + "\n")

        on_progress("All videos generated successfully!")

        header = (
            f"📹 **Batch Video Generation Complete!**\n\n"
            f"**Total Videos:** {total}\n"
            f"**Model Used:** Veo 3.1\n"
            f"**Base Resolution:** {args.resolution}\n\n"
        )
        return header + "\n".join(sections)

    def _record(self, media_id, url, prompt, source=None) -> None:
        if self.library is None or not url:
            return
        metadata = {"source": source} if source else {}
        self.library.add(MediaType.VIDEO, url, prompt, VIDEO_MODEL, media_id=media_id, metadata=metadata)
