"""
Video pipeline: segmentation -> rendering -> assembly
"""

from .models import (
    CompilationArticle,
    CompositionJob,
    Segment,
    SegmentKind,
    Slide,
    VideoResult,
)
from .segmentation import Segmenter
from .rendering import FrameRenderer
from .audio import TTSEngine
from .assembly import TimelineComposer, VideoGenerationService

__all__ = [
    "CompilationArticle",
    "CompositionJob",
    "Segment",
    "SegmentKind",
    "Slide",
    "VideoResult",
    "Segmenter",
    "FrameRenderer",
    "TTSEngine",
    "TimelineComposer",
    "VideoGenerationService",
]
