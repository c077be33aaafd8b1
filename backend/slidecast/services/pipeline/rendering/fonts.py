"""
Font discovery for slide captions
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from PIL import ImageFont

from slidecast.core import get_logger

logger = get_logger(__name__, component="fonts")

# Bold sans-serif faces commonly present on Linux and macOS hosts
CANDIDATE_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/liberation-sans/LiberationSans-Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
)


@lru_cache(maxsize=None)
def resolve_font_path(preferred: Optional[str] = None) -> Optional[str]:
    """First existing TrueType font, or None to use Pillow's bundled font"""
    candidates = ((preferred,) if preferred else ()) + CANDIDATE_FONTS
    for candidate in candidates:
        if Path(candidate).is_file():
            return candidate
    logger.warning("No TrueType font found, using Pillow default font")
    return None


@lru_cache(maxsize=256)
def load_font(size: int, preferred: Optional[str] = None) -> ImageFont.FreeTypeFont:
    path = resolve_font_path(preferred)
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            logger.warning("Could not load font", extra={"font_path": path})
    return ImageFont.load_default(size=size)
