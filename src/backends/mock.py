"""Demo backend that returns placeholder media without network access."""

import logging
import random
from typing import Any, Dict

from .base import GenerationKind, GenerationResult, MediaBackend
from ..utils.ids import generate_media_id

logger = logging.getLogger(__name__)

SAMPLE_VIDEO_URL = "https://sample-videos.com/zip/10/mp4/SampleVideo_720x480_1mb.mp4"

DEMO_ANALYSES = {
    "describe": "This appears to be an image that has been analyzed using computer vision. The AI can see various elements and provides detailed descriptions of the visual content, objects, colors, and composition.",
    "analyze": "Comprehensive image analysis reveals multiple layers of information including object detection, scene understanding, color palette analysis, and contextual interpretation of the visual elements.",
    "ocr": "OCR analysis detects and extracts any text present in the image. In this demonstration, no specific text content was identified, but the system is capable of reading various fonts and text orientations.",
    "vision": "Computer vision analysis identifies objects, people, actions, spatial relationships, and contextual information within the image. The system provides structured insights about visual content.",
}


class MockBackend(MediaBackend):
    """Backend used in demo mode and tests.

    Every request succeeds; calls are recorded in ``calls`` for inspection.
    """

    def __init__(self):
        self.calls = []

    @property
    def name(self) -> str:
        return "mock"

    async def generate(
        self,
        kind: GenerationKind,
        parameters: Dict[str, Any],
    ) -> GenerationResult:
        self.calls.append((kind, dict(parameters)))
        logger.debug(f"Mock backend request: {kind.value}")

        if kind == GenerationKind.IMAGE:
            media_id = generate_media_id("mock_img")
            return GenerationResult(
                artifact_url=f"https://picsum.photos/800/600?random={media_id}",
                artifact_id=media_id,
            )

        if kind in (GenerationKind.VIDEO, GenerationKind.IMAGE_TO_VIDEO):
            prefix = "mock_vid" if kind == GenerationKind.VIDEO else "mock_i2v"
            return GenerationResult(
                artifact_url=SAMPLE_VIDEO_URL,
                artifact_id=generate_media_id(prefix),
            )

        if kind == GenerationKind.TEXT:
            prompt = parameters.get("prompt", "")
            responses = [
                "This is a demonstration of Gemini AI's text generation capabilities. The AI has processed your prompt and generated a thoughtful response based on the parameters you provided.",
                f"Generated content for: \"{prompt[:50]}...\" with temperature {parameters.get('temperature')}.",
                "Demo response: Your prompt has been processed and this is the generated content. In a real implementation, this would be actual AI-generated text.",
            ]
            return GenerationResult(text=random.choice(responses))

        analysis_type = parameters.get("analysis_type", "describe")
        return GenerationResult(text=DEMO_ANALYSES.get(analysis_type, DEMO_ANALYSES["describe"]))

    async def health_check(self) -> bool:
        return True
