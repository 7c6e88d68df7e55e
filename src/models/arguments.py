"""Argument contracts for the media tools.

Each tool validates its raw call arguments against one of these models.
Fields are snake_case in Python and camelCase on the wire
(``aspect_ratio`` <-> ``aspectRatio``); unknown keys are dropped.
"""

from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_SEED = 4294967295

ImageModel = Literal["nano-banana", "imagen3", "imagen4"]
ImageAspectRatio = Literal["1:1", "16:9", "4:3", "3:2", "2:3", "3:4", "9:16", "21:9"]
ImageQuality = Literal["standard", "high"]
ImageStyle = Literal["natural", "artistic", "photorealistic", "cartoon", "anime"]
EditType = Literal["modify", "enhance", "transform", "style_transfer"]

VideoResolution = Literal["720p", "1080p"]
VideoStyle = Literal["natural", "cinematic", "artistic", "animation"]
VideoAspectRatio = Literal["16:9", "1:1", "9:16"]
CameraMovement = Literal["static", "pan", "zoom", "tilt", "tracking"]

TextModel = Literal["gemini-2.5-flash", "gemini-2.0-flash-exp"]
AnalysisType = Literal["describe", "analyze", "ocr", "vision"]

MediaAction = Literal["list", "download", "delete", "upload"]
ReferenceCategory = Literal["portrait", "landscape", "object", "art", "photo", "other"]


def check_url(value: Optional[str]) -> Optional[str]:
    """Accept absolute URLs only (scheme and host present)."""
    if value is None:
        return value
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Valid URL required")
    return value


class ToolArguments(BaseModel):
    """Base class for tool argument models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Image generation
# =============================================================================


class ImageGenerationArgs(ToolArguments):
    prompt: str = Field(..., min_length=1, max_length=2000, description="Text description of the image")
    model: ImageModel = "nano-banana"
    aspect_ratio: ImageAspectRatio = "1:1"
    quality: ImageQuality = "standard"
    style: ImageStyle = "natural"
    seed: Optional[int] = Field(default=None, ge=0, le=MAX_SEED)


class ImageBatchItem(ToolArguments):
    prompt: str = Field(..., min_length=1, max_length=2000)
    style: Optional[ImageStyle] = None
    aspect_ratio: Optional[ImageAspectRatio] = None
    seed: Optional[int] = Field(default=None, ge=0, le=MAX_SEED)


class BatchImageGenerationArgs(ImageGenerationArgs):
    """Batch request; each item carries its own prompt."""

    prompt: Optional[str] = Field(default=None, max_length=2000)
    items: List[ImageBatchItem] = Field(..., min_length=1, max_length=10, description="Maximum 10 images per batch")


class EditImageArgs(ImageGenerationArgs):
    image_url: str = Field(..., description="Image to edit")
    edit_type: EditType = "modify"

    @field_validator("image_url")
    @classmethod
    def _validate_image_url(cls, value: str) -> str:
        return check_url(value)


# =============================================================================
# Video generation
# =============================================================================


class VideoGenerationArgs(ToolArguments):
    prompt: str = Field(..., min_length=1, max_length=2000, description="Description of the video")
    duration: int = Field(default=8, ge=4, le=8, description="Seconds")
    resolution: VideoResolution = "720p"
    fps: int = Field(default=30, ge=24, le=60)
    style: VideoStyle = "natural"
    aspect_ratio: VideoAspectRatio = "16:9"
    seed: Optional[int] = Field(default=None, ge=0, le=MAX_SEED)
    reference_image: Optional[str] = None

    @field_validator("reference_image")
    @classmethod
    def _validate_reference_image(cls, value: Optional[str]) -> Optional[str]:
        return check_url(value)


class ImageToVideoArgs(ToolArguments):
    image_url: str = Field(..., description="Source image")
    prompt: str = Field(..., min_length=1, max_length=1000)
    duration: int = Field(default=8, ge=4, le=8)
    resolution: VideoResolution = "720p"
    motion_prompt: Optional[str] = Field(default=None, max_length=500)
    camera_movement: CameraMovement = "static"

    @field_validator("image_url")
    @classmethod
    def _validate_image_url(cls, value: str) -> str:
        return check_url(value)


class VideoBatchItem(ToolArguments):
    prompt: str = Field(..., min_length=1, max_length=2000)
    duration: Optional[int] = Field(default=None, ge=4, le=8)
    style: Optional[VideoStyle] = None
    aspect_ratio: Optional[VideoAspectRatio] = None
    seed: Optional[int] = Field(default=None, ge=0, le=MAX_SEED)
    reference_image: Optional[str] = None

    @field_validator("reference_image")
    @classmethod
    def _validate_reference_image(cls, value: Optional[str]) -> Optional[str]:
        return check_url(value)


class BatchVideoGenerationArgs(VideoGenerationArgs):
    prompt: Optional[str] = Field(default=None, max_length=2000)
    items: List[VideoBatchItem] = Field(..., min_length=1, max_length=5, description="Maximum 5 videos per batch")


# =============================================================================
# Text processing
# =============================================================================


class TextGenerationArgs(ToolArguments):
    prompt: str = Field(..., min_length=1, max_length=16000)
    model: TextModel = "gemini-2.5-flash"
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = Field(default=2048, ge=1, le=8192)
    top_p: float = Field(default=0.8, ge=0, le=1)
    top_k: int = Field(default=40, ge=1, le=100)


class ImageAnalysisArgs(ToolArguments):
    image_url: str = Field(..., description="Image to analyze")
    prompt: Optional[str] = Field(default=None, max_length=1000)
    analysis_type: AnalysisType = "describe"

    @field_validator("image_url")
    @classmethod
    def _validate_image_url(cls, value: str) -> str:
        return check_url(value)


class BatchImageAnalysisArgs(ToolArguments):
    image_urls: List[str] = Field(..., min_length=1, max_length=10, description="Maximum 10 images per batch")
    prompt: Optional[str] = Field(default=None, max_length=1000)
    analysis_type: AnalysisType = "describe"
    comparison_mode: bool = False

    @field_validator("image_urls")
    @classmethod
    def _validate_image_urls(cls, value: List[str]) -> List[str]:
        return [check_url(url) for url in value]


# =============================================================================
# Media management
# =============================================================================


class UploadReferenceImageArgs(ToolArguments):
    image_url: str
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[List[str]] = Field(default=None, max_length=10)
    category: ReferenceCategory = "other"

    @field_validator("image_url")
    @classmethod
    def _validate_image_url(cls, value: str) -> str:
        return check_url(value)


class MediaManagementArgs(ToolArguments):
    action: MediaAction
    media_id: Optional[str] = None
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class DeleteMediaArgs(MediaManagementArgs):
    force: bool = False
    confirm_delete: bool = False
