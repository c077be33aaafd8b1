"""
Slidecast - procedural news-video backend

Article text in, timed 1920x1080 slideshow video out.
"""

__version__ = "1.0.0"
