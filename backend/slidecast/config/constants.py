"""
Constants configuration

API settings, CORS configuration and served file types.
"""

# API settings
API_TITLE = "Slidecast API"
API_DESCRIPTION = "Turn news articles into short slideshow videos"
API_VERSION = "1.0.0"

# CORS origins
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5000",
    "http://localhost:5173",
]

# Only finished videos are served back to clients
SERVED_VIDEO_EXTENSIONS = [".mp4"]

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "SERVED_VIDEO_EXTENSIONS",
]
