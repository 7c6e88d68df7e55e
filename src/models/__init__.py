"""Argument models for the media tools.

Pydantic schemas validating raw tool-call arguments. Wire names are
camelCase; Python attributes are snake_case.
"""

from .arguments import (
    ToolArguments,
    ImageGenerationArgs,
    BatchImageGenerationArgs,
    EditImageArgs,
    VideoGenerationArgs,
    ImageToVideoArgs,
    BatchVideoGenerationArgs,
    TextGenerationArgs,
    ImageAnalysisArgs,
    BatchImageAnalysisArgs,
    UploadReferenceImageArgs,
    MediaManagementArgs,
    DeleteMediaArgs,
)

__all__ = [
    "ToolArguments",
    "ImageGenerationArgs",
    "BatchImageGenerationArgs",
    "EditImageArgs",
    "VideoGenerationArgs",
    "ImageToVideoArgs",
    "BatchVideoGenerationArgs",
    "TextGenerationArgs",
    "ImageAnalysisArgs",
    "BatchImageAnalysisArgs",
    "UploadReferenceImageArgs",
    "MediaManagementArgs",
    "DeleteMediaArgs",
]
