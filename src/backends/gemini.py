"""
Gemini REST backend.

Talks to the Generative Language API over httpx. Each generation kind builds
a plain-text instruction from the validated tool arguments, posts it to the
matching model endpoint and extracts either inline media or text from the
first candidate.
"""

import base64
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from ..config.settings import Settings
from ..core.faults import BackendError, MediaProcessingError
from ..utils.ids import generate_media_id
from .base import GenerationKind, GenerationResult, MediaBackend

logger = logging.getLogger(__name__)


# API model names
GEMINI_MODELS = {
    # Image generation models
    "nano-banana": "gemini-2.5-flash-image",
    "nano-banana-preview": "gemini-2.5-flash-image-preview",
    "imagen3": "imagen-3.0-generate-002",
    "imagen4": "imagen-4.0-generate-preview-06-06",
    # Video generation models
    "veo31": "veo-3.1-generate",
    "veo31-fast": "veo-3.1-fast-generate",
    # Text generation models
    "gemini-2.5-flash": "gemini-2.5-flash",
    "gemini-2.0-flash-exp": "gemini-2.0-flash-exp",
}

ANALYSIS_MODEL = "gemini-2.5-flash"

DEFAULT_ANALYSIS_PROMPTS = {
    "analyze": "Provide a detailed analysis of this image including objects, colors, composition, and any notable features.",
    "ocr": "Extract and transcribe any text visible in this image.",
    "vision": "Analyze this image with computer vision techniques, identifying objects, people, actions, and context.",
    "describe": "Describe what you see in this image in detail.",
}

# Error code used when a request fails without a backend-supplied code
FAILURE_CODES = {
    GenerationKind.IMAGE: ("Image generation failed", "IMAGE_GENERATION_FAILED"),
    GenerationKind.VIDEO: ("Video generation failed", "VIDEO_GENERATION_FAILED"),
    GenerationKind.IMAGE_TO_VIDEO: ("Image to video generation failed", "IMAGE_TO_VIDEO_FAILED"),
    GenerationKind.TEXT: ("Text generation failed", "TEXT_GENERATION_FAILED"),
    GenerationKind.IMAGE_ANALYSIS: ("Image analysis failed", "IMAGE_ANALYSIS_FAILED"),
}

IMAGE_STORAGE_URL = "https://storage.googleapis.com/gemini-generated-images"
VIDEO_STORAGE_URL = "https://storage.googleapis.com/gemini-generated-videos"


# ============================================================================
# Prompt builders
# ============================================================================

def build_image_prompt(params: Dict[str, Any]) -> str:
    prompt = (
        f"Generate an image with the following specifications:\n"
        f"{params['prompt']}\n\n"
        f"Style: {params.get('style')}\n"
        f"Aspect Ratio: {params.get('aspect_ratio')}\n"
        f"Quality: {params.get('quality')}"
    )
    if params.get("seed") is not None:
        prompt += f"\nSeed: {params['seed']}"
    return prompt


def build_video_prompt(params: Dict[str, Any]) -> str:
    prompt = (
        f"Generate a {params.get('duration')}-second {params.get('resolution')} video "
        f"with the following specifications:\n"
        f"{params['prompt']}\n\n"
        f"Style: {params.get('style')}\n"
        f"Aspect Ratio: {params.get('aspect_ratio')}\n"
        f"FPS: {params.get('fps')}"
    )
    if params.get("seed") is not None:
        prompt += f"\nSeed: {params['seed']}"
    return prompt


def build_image_to_video_prompt(params: Dict[str, Any]) -> str:
    prompt = (
        f"Create a {params.get('duration')}-second {params.get('resolution')} video "
        f"from this image with the following specifications:\n"
        f"{params['prompt']}\n\n"
        f"Camera Movement: {params.get('camera_movement')}"
    )
    if params.get("motion_prompt"):
        prompt += f"\nMotion Details: {params['motion_prompt']}"
    return prompt


def resolve_image_model(model: Optional[str]) -> str:
    """Map a tool-level image model choice onto an API model name."""
    if model in ("imagen3", "imagen4"):
        return GEMINI_MODELS[model]
    return GEMINI_MODELS["nano-banana"]


# ============================================================================
# Backend
# ============================================================================

class GeminiBackend(MediaBackend):
    """Backend that calls the Gemini Generative Language REST API."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize Gemini backend.

        Args:
            settings: Runtime settings (API key, base URL, timeouts)
            client: Optional preconfigured HTTP client (tests inject a mock transport)

        Raises:
            ConfigurationError: If no API key is configured
        """
        self.api_key = settings.require_api_key()
        self.base_url = settings.base_url.rstrip("/")
        self.download_timeout = settings.download_timeout_seconds
        self.client = client or httpx.AsyncClient(timeout=settings.timeout_seconds)

    @property
    def name(self) -> str:
        return "gemini"

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def generate(
        self,
        kind: GenerationKind,
        parameters: Dict[str, Any],
    ) -> GenerationResult:
        handlers = {
            GenerationKind.IMAGE: self._generate_image,
            GenerationKind.VIDEO: self._generate_video,
            GenerationKind.IMAGE_TO_VIDEO: self._generate_image_to_video,
            GenerationKind.TEXT: self._generate_text,
            GenerationKind.IMAGE_ANALYSIS: self._analyze_image,
        }
        label, code = FAILURE_CODES[kind]

        try:
            return await handlers[kind](parameters)
        except BackendError:
            raise
        except httpx.HTTPStatusError as e:
            raise self._status_error(e) from e
        except (httpx.HTTPError, MediaProcessingError, KeyError, IndexError, ValueError) as e:
            raise BackendError(f"{label}: {e}", code) from e

    async def health_check(self) -> bool:
        try:
            await self._post(ANALYSIS_MODEL, "generateContent", {
                "contents": [{"parts": [{"text": "Hello"}]}]
            })
            return True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    # ========================================================================
    # Generation kinds
    # ========================================================================

    async def _generate_image(self, params: Dict[str, Any]) -> GenerationResult:
        model = resolve_image_model(params.get("model"))
        data = await self._post(model, "generateContent", {
            "contents": [{"parts": [{"text": build_image_prompt(params)}]}],
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 8192},
        })

        inline = self._find_inline_data(data, "image/")
        if inline is None:
            raise BackendError("No image generated", "NO_IMAGE_RESPONSE")

        media_id = generate_media_id()
        return GenerationResult(
            artifact_url=self._store_url(IMAGE_STORAGE_URL, media_id, "jpg"),
            artifact_id=media_id,
        )

    async def _generate_video(self, params: Dict[str, Any]) -> GenerationResult:
        data = await self._post(GEMINI_MODELS["veo31"], "generateVideo", {
            "contents": [{"parts": [{"text": build_video_prompt(params)}]}],
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 8192},
        })

        inline = self._find_inline_data(data, "video/")
        if inline is None:
            raise BackendError("No video generated", "NO_VIDEO_RESPONSE")

        media_id = generate_media_id()
        return GenerationResult(
            artifact_url=self._store_url(VIDEO_STORAGE_URL, media_id, "mp4"),
            artifact_id=media_id,
        )

    async def _generate_image_to_video(self, params: Dict[str, Any]) -> GenerationResult:
        image_data = await self._download_and_encode(params["image_url"])
        data = await self._post(GEMINI_MODELS["veo31"], "generateVideo", {
            "contents": [{"parts": [
                {"text": build_image_to_video_prompt(params)},
                {"inlineData": {"mimeType": "image/jpeg", "data": image_data}},
            ]}],
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 8192},
        })

        inline = self._find_inline_data(data, "video/")
        if inline is None:
            raise BackendError("No video generated from image", "NO_IMAGE_TO_VIDEO")

        media_id = generate_media_id()
        return GenerationResult(
            artifact_url=self._store_url(VIDEO_STORAGE_URL, media_id, "mp4"),
            artifact_id=media_id,
        )

    async def _generate_text(self, params: Dict[str, Any]) -> GenerationResult:
        model = GEMINI_MODELS.get(params.get("model"), GEMINI_MODELS["gemini-2.5-flash"])
        data = await self._post(model, "generateContent", {
            "contents": [{"parts": [{"text": params["prompt"]}]}],
            "generationConfig": {
                "temperature": params.get("temperature"),
                "maxOutputTokens": params.get("max_tokens"),
                "topP": params.get("top_p"),
                "topK": params.get("top_k"),
            },
        })
        return GenerationResult(text=self._extract_text(data))

    async def _analyze_image(self, params: Dict[str, Any]) -> GenerationResult:
        image_data = await self._download_and_encode(params["image_url"])
        prompt = params.get("prompt") or DEFAULT_ANALYSIS_PROMPTS.get(
            params.get("analysis_type"), DEFAULT_ANALYSIS_PROMPTS["describe"]
        )
        data = await self._post(ANALYSIS_MODEL, "generateContent", {
            "contents": [{"parts": [
                {"inlineData": {"mimeType": "image/jpeg", "data": image_data}},
                {"text": prompt},
            ]}],
        })
        return GenerationResult(text=self._extract_text(data))

    # ========================================================================
    # Internal Helpers
    # ========================================================================

    async def _post(self, model: str, method: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/models/{model}:{method}"
        logger.debug(f"API call: {model}:{method}")

        started = time.monotonic()
        response = await self.client.post(
            url,
            params={"key": self.api_key},
            json=body,
            headers={"Content-Type": "application/json"},
        )
        logger.debug(
            f"API response: {model}:{method} status={response.status_code} "
            f"duration={(time.monotonic() - started) * 1000:.0f}ms"
        )
        response.raise_for_status()
        return response.json()

    async def _download_and_encode(self, image_url: str) -> str:
        try:
            response = await self.client.get(image_url, timeout=self.download_timeout)
        except httpx.HTTPError as e:
            raise MediaProcessingError(f"Failed to download image: {e}", "image") from e

        if response.status_code != 200:
            raise MediaProcessingError(
                f"Failed to download image: {response.status_code}", "image"
            )
        return base64.b64encode(response.content).decode("ascii")

    @staticmethod
    def _candidate_parts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
        candidates = data.get("candidates") or []
        if not candidates:
            return []
        return candidates[0].get("content", {}).get("parts", [])

    def _find_inline_data(self, data: Dict[str, Any], mime_prefix: str) -> Optional[Dict[str, Any]]:
        for part in self._candidate_parts(data):
            inline = part.get("inlineData")
            if inline and inline.get("mimeType", "").startswith(mime_prefix):
                return inline
        return None

    def _extract_text(self, data: Dict[str, Any]) -> str:
        texts = [part["text"] for part in self._candidate_parts(data) if "text" in part]
        if not texts:
            raise BackendError("No text generated", "NO_TEXT_RESPONSE", details=data)
        return "".join(texts)

    @staticmethod
    def _store_url(base: str, media_id: str, extension: str) -> str:
        # Artifacts are not persisted; the URL names where they would live
        return f"{base}/{media_id}-{int(time.time() * 1000)}.{extension}"

    @staticmethod
    def _status_error(error: httpx.HTTPStatusError) -> BackendError:
        response = error.response
        try:
            payload = response.json()
        except ValueError:
            payload = None

        api_error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(api_error, str):
            api_error = {"message": api_error}
        elif not isinstance(api_error, dict):
            api_error = {}
        message = api_error.get("message") or str(error)
        code = api_error.get("status") or (
            str(api_error["code"]) if api_error.get("code") is not None else None
        )
        return BackendError(
            f"Gemini API error: {message}",
            code,
            response.status_code,
            payload,
        )
