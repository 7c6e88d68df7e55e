"""Text generation and image analysis tools."""

import logging
from typing import List

from ..backends.base import GenerationKind, MediaBackend
from ..models.arguments import BatchImageAnalysisArgs, ImageAnalysisArgs, TextGenerationArgs
from ..registry.operation_registry import (
    OperationCategory,
    OperationDescriptor,
    ProgressCallback,
    PromptArgument,
    PromptMetadata,
)

logger = logging.getLogger(__name__)

TEXT_MODEL_LABELS = {
    "gemini-2.5-flash": "Gemini 2.5 Flash",
    "gemini-2.0-flash-exp": "Gemini 2.0 Flash",
}

ANALYSIS_TITLES = {
    "describe": "Detailed Description",
    "analyze": "Comprehensive Analysis",
    "ocr": "Text Extraction",
    "vision": "Computer Vision Analysis",
}

BATCH_ANALYSIS_TITLES = {
    "describe": "Detailed Descriptions",
    "analyze": "Comprehensive Analysis",
    "ocr": "Text Extractions",
    "vision": "Computer Vision Analysis",
}


def creativity_label(temperature: float) -> str:
    if temperature < 0.5:
        return "Focused"
    if temperature < 1.0:
        return "Balanced"
    return "Creative"


class TextTools:
    """Text processing operations. Stateless."""

    def get_operations(self) -> List[OperationDescriptor]:
        category = OperationCategory.TEXT_PROCESSING
        return [
            OperationDescriptor(
                name="generate_text",
                category=category,
                description=(
                    "Generate text content using Gemini's advanced language models. "
                    "Supports creative writing, analysis, summarization, and more."
                ),
                arguments=TextGenerationArgs,
                handler=self._generate_text,
                failure_label="Text generation failed",
                prompt=PromptMetadata(
                    description="Generate text content with customizable creativity and length",
                    arguments=(
                        PromptArgument("prompt", "Text prompt for content generation", True),
                        PromptArgument("temperature", "Creativity level (0.0-2.0, default 0.7)"),
                        PromptArgument("maxTokens", "Maximum response length in tokens"),
                    ),
                ),
            ),
            OperationDescriptor(
                name="analyze_image",
                category=category,
                description=(
                    "Analyze and describe images using advanced computer vision. Can "
                    "identify objects, text, scenes, and provide detailed insights "
                    "about image content."
                ),
                arguments=ImageAnalysisArgs,
                handler=self._analyze_image,
                failure_label="Image analysis failed",
                prompt=PromptMetadata(
                    description="Analyze image content and provide detailed descriptions",
                    arguments=(
                        PromptArgument("imageUrl", "URL of the image to analyze", True),
                        PromptArgument("analysisType", "Type of analysis: describe, analyze, ocr, vision"),
                        PromptArgument("prompt", "Custom analysis prompt or focus area"),
                    ),
                ),
            ),
            OperationDescriptor(
                name="batch_analyze_images",
                category=category,
                description=(
                    "Analyze multiple images in a single operation. Efficient for "
                    "batch processing image sets or comparing similar content."
                ),
                arguments=BatchImageAnalysisArgs,
                handler=self._batch_analyze,
                failure_label="Batch image analysis failed",
            ),
        ]

    async def _generate_text(
        self,
        args: TextGenerationArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Processing text generation request...")
        result = await backend.generate(GenerationKind.TEXT, args.model_dump())
        on_progress("Text generated successfully!")

        model_label = TEXT_MODEL_LABELS[args.model]
        return f"""✍️ **Text Generated Successfully!**

**Model:** {model_label}
**Prompt:** {args.prompt}

**Parameters:**
- Temperature: {args.temperature} ({creativity_label(args.temperature)})
- Max Tokens: {args.max_tokens}
- Top P: {args.top_p}
- Top K: {args.top_k}

**Generated Content:**

{result.text}

*Generated using {model_label}*"""

    async def _analyze_image(
        self,
        args: ImageAnalysisArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Analyzing image content...")
        result = await backend.generate(GenerationKind.IMAGE_ANALYSIS, args.model_dump())
        on_progress("Image analysis completed!")

        focus = f"**Custom Focus:** {args.prompt}\n" if args.prompt else ""
        return f"""🔍 **{ANALYSIS_TITLES[args.analysis_type]}**

**Image URL:** {args.image_url}
**Analysis Type:** {args.analysis_type}
{focus}
**Analysis Results:**

{result.text}

*Analysis performed using Gemini's computer vision capabilities*"""

    async def _batch_analyze(
        self,
        args: BatchImageAnalysisArgs,
        backend: MediaBackend,
        on_progress: ProgressCallback
    ) -> str:
        on_progress("Starting batch image analysis...")

        total = len(args.image_urls)
        sections = []
        for index, image_url in enumerate(args.image_urls, start=1):
            on_progress(f"Analyzing image {index}/{total}...")
            result = await backend.generate(GenerationKind.IMAGE_ANALYSIS, {
                "image_url": image_url,
                "prompt": args.prompt,
                "analysis_type": args.analysis_type,
            })
            sections.append(
                f"**Image {index}:**\n"
                f"- URL: {image_url}\n"
                f"- Analysis: {result.text}\n"
            )

        on_progress("Batch image analysis completed!")

        lines = [
            f"📋 **Batch {BATCH_ANALYSIS_TITLES[args.analysis_type]} Complete!**",
            "",
            f"**Total Images Analyzed:** {total}",
            f"**Analysis Type:** {args.analysis_type}",
        ]
        if args.comparison_mode:
            lines.append("**Mode:** Comparison Analysis")
        if args.prompt:
            lines.append(f"**Focus:** {args.prompt}")
        output = "\n".join(lines) + "\n\n" + "\n".join(sections)

        if args.comparison_mode and total > 1:
            output += (
                f"\n**Comparison Summary:**\n"
                f"- Total images processed: {total}\n"
            )

        return output + "\n*Analysis performed using Gemini's computer vision capabilities*"
