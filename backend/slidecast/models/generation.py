"""
Request/response schemas for the video endpoints
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from slidecast.core import sanitize_display_text


class VideoGenerationRequest(BaseModel):
    """Request to turn one article into a video"""
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field("", max_length=50000)
    hook: Optional[str] = Field(None, max_length=500)
    thumbnail_text: Optional[str] = Field(None, max_length=500)
    narrate: bool = False  # synthesize a narration track with Edge TTS
    voice: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_has_visible_text(cls, value: str) -> str:
        if not sanitize_display_text(value):
            raise ValueError("title must contain visible text")
        return value


class CompilationArticlePayload(BaseModel):
    """One article inside a compilation request"""
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field("", max_length=50000)
    source: str = Field("", max_length=200)
    published_at: Optional[str] = None


class CompilationVideoRequest(BaseModel):
    """Request to build one video out of several articles"""
    articles: List[CompilationArticlePayload] = Field(..., min_length=1, max_length=20)
    compilation_title: str = Field(..., min_length=1, max_length=500)
    hook: Optional[str] = Field(None, max_length=500)
    thumbnail_text: Optional[str] = Field(None, max_length=500)
    narrate: bool = False
    voice: Optional[str] = None


class VideoResponse(BaseModel):
    """Result of a finished generation call"""
    success: bool = True
    video_path: str  # file name under /videos/
    video_url: str
    duration: float
    segment_count: int
    article_count: Optional[int] = None
    message: str
