"""
Assembly - filter graph construction, encoding and orchestration
"""

from .composer import TimelineComposer
from .ffmpeg import run_ffmpeg
from .filter_graph import FilterChain, FilterGraph, FilterGraphError, FilterNode
from .video_generator import VideoGenerationService

__all__ = [
    "TimelineComposer",
    "run_ffmpeg",
    "FilterChain",
    "FilterGraph",
    "FilterGraphError",
    "FilterNode",
    "VideoGenerationService",
]
