"""
Input hardening for user-supplied captions and served file names

Caption text ends up as pixels, never inside an ffmpeg filter graph, but it is
still stripped of control characters before it reaches any pipeline stage.
Served files are restricted to `<token>.mp4` names inside the output directory.
"""

import re
import unicodedata
from pathlib import Path
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__, component="security")

VIDEO_FILENAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}\.mp4$")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_display_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Normalize user text for display on a slide

    Removes control and format characters (Unicode categories Cc/Cf, which
    covers NUL, escape sequences and zero-width characters), turns newlines
    and tabs into spaces, collapses whitespace runs and trims.

    Args:
        text: Raw caption/body text; None is treated as empty
        max_length: Optional cap on the returned length; article bodies are
            never capped here, the API schema bounds them

    Returns:
        Cleaned single-line string (possibly empty)

    Example:
        >>> sanitize_display_text("Breaking\\n\\x00news\\t ")
        'Breaking news'
    """
    if not text:
        return ""

    cleaned = []
    for char in text:
        if char in "\r\n\t\v\f":
            cleaned.append(" ")
        elif unicodedata.category(char) in ("Cc", "Cf"):
            continue
        else:
            cleaned.append(char)

    result = _WHITESPACE_RUN.sub(" ", "".join(cleaned)).strip()
    return result if max_length is None else result[:max_length]


def validate_video_filename(filename: str) -> bool:
    """
    Check that a requested file name is a plain `.mp4` file name

    Example:
        >>> validate_video_filename("video_1700000000000_a1b2c3.mp4")
        True
        >>> validate_video_filename("../secrets.mp4")
        False
    """
    is_valid = bool(VIDEO_FILENAME_PATTERN.match(filename or ""))
    if not is_valid:
        logger.warning("Rejected video file name", extra={"requested_name": filename})
    return is_valid


def validate_path_within_directory(path: Path, allowed_directory: Path) -> bool:
    """
    Validate that a path resolves inside an allowed directory

    Symlinks and relative components are resolved first, so
    `/out/../etc/passwd` is rejected for `/out`.
    """
    try:
        path = path.resolve()
        allowed_directory = allowed_directory.resolve()
    except (OSError, RuntimeError) as e:
        logger.warning("Path resolution failed", extra={"path": str(path), "error": str(e)})
        return False

    try:
        path.relative_to(allowed_directory)
        return True
    except ValueError:
        logger.warning("Path traversal attempt detected", extra={
            "path": str(path),
            "allowed_directory": str(allowed_directory),
        })
        return False


def secure_file_path(base_dir: Path, filename: str) -> Optional[Path]:
    """
    Build the path of a served video inside `base_dir`

    Returns:
        The joined path, or None when the name is not an `.mp4` file name
        or the result would escape `base_dir`
    """
    if not validate_video_filename(filename):
        return None

    path = base_dir / filename
    if not validate_path_within_directory(path, base_dir):
        return None
    return path
