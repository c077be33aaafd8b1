"""
Pydantic models for API request/response schemas
"""

from .generation import (
    VideoGenerationRequest,
    CompilationArticlePayload,
    CompilationVideoRequest,
    VideoResponse,
)

__all__ = [
    "VideoGenerationRequest",
    "CompilationArticlePayload",
    "CompilationVideoRequest",
    "VideoResponse",
]
