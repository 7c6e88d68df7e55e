"""Image generation tools.

Nano Banana and Imagen generation, batch generation and prompt-driven
editing. Generated images are recorded in the media library.
"""

import logging
from typing import List, Optional

from ..backends.base import GenerationKind, MediaBackend
from ..core.media_library import MediaLibrary, MediaType
from ..models.arguments import BatchImageGenerationArgs, EditImageArgs, ImageGenerationArgs
from ..registry.operation_registry import (
    OperationCategory,
    OperationDescriptor,
    ProgressCallback,
    PromptArgument,
    PromptMetadata,
)

logger = logging.getLogger(__name__)

MODEL_LABELS = {
    "nano-banana": "Nano Banana",
    "imagen3": "Imagen 3.0",
    "imagen4": "Imagen 4.0",
}


class ImageTools:
    """Image generation operations."""

    def __init__(self, library: Optional[MediaLibrary] = None):
        """Initialize with the media library that records outputs.

        Args:
            library: Library receiving generated images (optional)
        """
        self.library = library

    def get_operations(self) -> List[OperationDescriptor]:
        """Return image generation operations in catalog order."""
        category = OperationCategory.IMAGE_GENERATION
        return [
            OperationDescriptor(
                name="generate_image_nano_banana",
                category=category,
                description=(
                    "Generate high-quality images using the Nano Banana model "
                    "(Gemini 2.5 Flash Image). Fast and efficient for most use "
                    "cases with natural styles."
                ),
                arguments=ImageGenerationArgs,
                handler=self._generate_nano_banana,
                failure_label="Nano Banana image generation failed",
                prompt=PromptMetadata(
                    description="Generate images quickly with good quality using Nano Banana model",
                    arguments=(
                        PromptArgument("prompt", "Text description of the image to generate", True),
                        PromptArgument("style", "Visual style: natural, artistic, photorealistic, cartoon, anime"),
                        PromptArgument("aspectRatio", "Image aspect ratio: 1:1, 16:9, 4:3, 3:2, 2:3, 3:4, 9:16, 21:9"),
                    ),
                ),
            ),
            OperationDescriptor(
                name="generate_image_imagen",
                category=category,
                description=(
                    "Generate high-fidelity images using Google's Imagen 3/4 models. "
                    "Best for realistic and detailed images with superior quality."
                ),
                arguments=ImageGenerationArgs,
                handler=self._generate_imagen,
                failure_label="Imagen image generation failed",
                prompt=PromptMetadata(
                    description="Generate high-quality realistic images using Imagen models",
                    arguments=(
                        PromptArgument("prompt", "Detailed text description of the image to generate", True),
                        PromptArgument("model", "Imagen model version: imagen3 or imagen4"),
                        PromptArgument("quality", "Image quality: standard or high"),
                        PromptArgument("style", "Visual style: natural, artistic, photorealistic"),
                    ),
                ),
            ),
            OperationDescriptor(
                name="batch_generate_images",
                category=category,
                description=(
                    "Generate multiple images in a single operation. Efficient for "
                    "creating image sets or variations of similar concepts."
                ),
                arguments=BatchImageGenerationArgs,
                handler=self._batch_generate,
                failure_label="Batch image generation failed",
            ),
            OperationDescriptor(
                name="edit_image_with_prompt",
                category=category,
                description=(
                    "Edit existing images using text prompts. Can modify, enhance, or "
                    "transform images while maintaining the original composition."
                ),
                arguments=EditImageArgs,
                handler=self._edit_image,
                failure_label="Image editing failed",
            ),
        ]

    # ========================================================================
    # Handlers
    # ========================================================================

    async def _generate_nano_banana(
        self,
        args: ImageGenerationArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Preparing image generation request...")

        params = args.model_dump()
        params["model"] = "nano-banana"
        result = await backend.generate(GenerationKind.IMAGE, params)
        self._record(result.artifact_id, result.artifact_url, args.prompt, "nano-banana")

        on_progress("Image generated successfully!")

        return f"""🎨 **Image Generated Successfully!**

**Model:** Nano Banana (Gemini 2.5 Flash Image)
**Prompt:** {args.prompt}
**Style:** {args.style}
**Aspect Ratio:** {args.aspect_ratio}
**Quality:** {args.quality}

**Generated Image URL:** {result.artifact_url}
**Media ID:** {result.artifact_id}

*Image generated using Google's Gemini AI via Nano Banana model*"""

    async def _generate_imagen(
        self,
        args: ImageGenerationArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Preparing high-quality image generation...")

        model = "imagen4" if args.model == "imagen4" else "imagen3"
        params = args.model_dump()
        params["model"] = model
        result = await backend.generate(GenerationKind.IMAGE, params)
        self._record(result.artifact_id, result.artifact_url, args.prompt, model)

        on_progress("High-quality image generated successfully!")

        model_label = MODEL_LABELS[model]
        return f"""🖼️ **High-Quality Image Generated!**

**Model:** {model_label}
**Prompt:** {args.prompt}
**Style:** {args.style}
**Aspect Ratio:** {args.aspect_ratio}
**Quality:** {args.quality}

**Generated Image URL:** {result.artifact_url}
**Media ID:** {result.artifact_id}

*Image generated using Google's {model_label} model*"""

    async def _batch_generate(
        self,
        args: BatchImageGenerationArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Starting batch image generation...")

        total = len(args.items)
        sections = []
        for index, item in enumerate(args.items, start=1):
            on_progress(f"Generating image {index}/{total}...")

            style = item.style or args.style
            aspect_ratio = item.aspect_ratio or args.aspect_ratio
            result = await backend.generate(GenerationKind.IMAGE, {
                "prompt": item.prompt,
                "model": args.model,
                "aspect_ratio": aspect_ratio,
                "quality": args.quality,
                "style": style,
                "seed": item.seed,
            })
            self._record(result.artifact_id, result.artifact_url, item.prompt, args.model)

            sections.append(
                f"**Image {index}:**\n"
                f"- Prompt: {item.prompt}\n"
                f"- Style: {style}\n"
                f"- Aspect Ratio: {aspect_ratio}\n"
                f"- URL: {result.artifact_url}\n"
                f"- Media ID: {result.artifact_id}\n"
            )

        on_progress("All images generated successfully!")

        header = (
            f"📦 **Batch Image Generation Complete!**\n\n"
            f"**Total Images:** {total}\n"
            f"**Model Used:** {MODEL_LABELS[args.model]}\n\n"
        )
        return header + "\n".join(sections)

    async def _edit_image(
        self,
        args: EditImageArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Preparing image editing request...")

        # Editing is expressed as a generation request describing the change
        params = args.model_dump()
        params["prompt"] = f"{args.edit_type} this image: {args.prompt}"
        result = await backend.generate(GenerationKind.IMAGE, params)
        self._record(
            result.artifact_id, result.artifact_url, args.prompt, args.model,
            source=args.image_url,
        )

        on_progress("Image edited successfully!")

        return f"""✂️ **Image Edited Successfully!**

**Original Image:** {args.image_url}
**Edit Type:** {args.edit_type}
**Edit Prompt:** {args.prompt}
**Style:** {args.style}
**Aspect Ratio:** {args.aspect_ratio}

**Edited Image URL:** {result.artifact_url}
**Media ID:** {result.artifact_id}

*Image edited using Gemini AI*"""

    def _record(self, media_id, url, prompt, model, source=None) -> None:
        if self.library is None or not url:
            return
        metadata = {"source": source} if source else {}
        self.library.add(MediaType.IMAGE, url, prompt, model, media_id=media_id, metadata=metadata)
