"""
Video generation and serving routes
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from ..config import SERVED_VIDEO_EXTENSIONS
from ..core import (
    get_logger,
    assert_runtime_tools_available,
    REQUIRED_RENDER_TOOLS,
    CompositionTimeoutError,
    PipelineError,
    secure_file_path,
)
from ..models import CompilationVideoRequest, VideoGenerationRequest, VideoResponse
from ..services.pipeline import CompilationArticle, TTSEngine, VideoGenerationService, VideoResult

logger = get_logger(__name__, component="videos_route")

router = APIRouter(prefix="/videos", tags=["videos"])

# Initialize services
video_service = VideoGenerationService()


def _check_voice(voice):
    if voice and voice not in TTSEngine.VOICES:
        raise HTTPException(status_code=400, detail=f"Unknown voice: {voice}")


def _to_response(result: VideoResult, message: str) -> VideoResponse:
    return VideoResponse(
        video_path=result.relative_path,
        video_url=f"/videos/{result.relative_path}",
        duration=result.duration,
        segment_count=result.segment_count,
        article_count=result.article_count,
        message=message,
    )


def _raise_for_pipeline_error(e: PipelineError) -> None:
    if isinstance(e, CompositionTimeoutError):
        raise HTTPException(status_code=504, detail=str(e)) from e
    raise HTTPException(status_code=500, detail=f"Video generation failed: {e}") from e


@router.post("/generate", response_model=VideoResponse)
async def generate_video(request: VideoGenerationRequest):
    """Render a single-article news video and wait for it to finish"""
    assert_runtime_tools_available(REQUIRED_RENDER_TOOLS, context="video generation")
    _check_voice(request.voice)

    try:
        result = await video_service.generate_video(
            title=request.title,
            content=request.content,
            hook=request.hook,
            thumbnail_text=request.thumbnail_text,
            narrate=request.narrate,
            voice=request.voice,
        )
    except PipelineError as e:
        logger.error("Video generation failed", extra={"error": str(e)}, exc_info=True)
        _raise_for_pipeline_error(e)

    return _to_response(result, "Video generated successfully")


@router.post("/compilation", response_model=VideoResponse)
async def generate_compilation(request: CompilationVideoRequest):
    """Render one video covering several articles in the given order"""
    assert_runtime_tools_available(REQUIRED_RENDER_TOOLS, context="video generation")
    _check_voice(request.voice)

    articles = [
        CompilationArticle(
            title=article.title,
            content=article.content,
            source=article.source,
            published_at=article.published_at,
        )
        for article in request.articles
    ]

    try:
        result = await video_service.generate_compilation_video(
            articles=articles,
            compilation_title=request.compilation_title,
            hook=request.hook,
            thumbnail_text=request.thumbnail_text,
            narrate=request.narrate,
            voice=request.voice,
        )
    except PipelineError as e:
        logger.error("Compilation generation failed", extra={"error": str(e)}, exc_info=True)
        _raise_for_pipeline_error(e)

    return _to_response(result, f"Compilation video with {result.article_count} articles generated successfully")


@router.get("/voices")
async def list_voices():
    """Narration voices accepted by the generate endpoints"""
    return {"voices": TTSEngine.get_available_voices(), "default": TTSEngine.DEFAULT_VOICE}


@router.get("/{filename}")
async def get_video(filename: str):
    """Serve a generated video; only `.mp4` files inside the output directory"""
    video_path = secure_file_path(video_service.output_dir, filename)
    if video_path is None or video_path.suffix.lower() not in SERVED_VIDEO_EXTENSIONS:
        raise HTTPException(status_code=404, detail="Video not found")
    if not video_path.is_file():
        raise HTTPException(status_code=404, detail="Video not found")

    return FileResponse(str(video_path), media_type="video/mp4", filename=filename)
