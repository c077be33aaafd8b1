"""
Application configuration and settings
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .paths import APP_DIR, BACKEND_DIR, OUTPUT_DIR, WORK_DIR
from .constants import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    SERVED_VIDEO_EXTENSIONS,
)
from .video import env_int, env_float, SegmentTimings, EncoderPreset, VideoSettings

__all__ = [
    "APP_DIR",
    "BACKEND_DIR",
    "OUTPUT_DIR",
    "WORK_DIR",
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "SERVED_VIDEO_EXTENSIONS",
    "env_int",
    "env_float",
    "SegmentTimings",
    "EncoderPreset",
    "VideoSettings",
]
