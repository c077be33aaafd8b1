"""
Caption layout - greedy word wrap with shrink-to-fit
"""

from dataclasses import dataclass
from typing import List, Optional

from PIL import ImageFont

from .fonts import load_font

ELLIPSIS = "…"


@dataclass(frozen=True)
class TextBlock:
    """A caption laid out at a concrete font size"""
    lines: List[str]
    font: ImageFont.FreeTypeFont
    size: int
    line_height: float
    truncated: bool = False

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height


def text_width(text: str, font: ImageFont.FreeTypeFont) -> float:
    return font.getlength(text)


def wrap_text(text: str, font: ImageFont.FreeTypeFont, max_width: float) -> List[str]:
    """
    Greedy wrap on spaces

    A word wider than `max_width` gets a line to itself; callers decide
    whether to shrink or truncate it.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and text_width(candidate, font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def ellipsize(text: str, font: ImageFont.FreeTypeFont, max_width: float, force: bool = False) -> str:
    """Cut `text` so that it plus an ellipsis fits in `max_width`

    With `force` the ellipsis is appended even when `text` already fits.
    The cut point is binary searched.
    """
    if not force and text_width(text, font) <= max_width:
        return text

    # Largest prefix length whose text plus ellipsis still fits
    low, high = 0, len(text)
    while low < high:
        mid = (low + high + 1) // 2
        if text_width(text[:mid] + ELLIPSIS, font) <= max_width:
            low = mid
        else:
            high = mid - 1
    return text[:low].rstrip() + ELLIPSIS


def fit_text(
    text: str,
    max_width: float,
    max_height: float,
    start_size: int,
    floor_size: int = 40,
    step: int = 5,
    line_spacing: float = 1.2,
    font_path: Optional[str] = None,
) -> TextBlock:
    """
    Find the largest font size (from `start_size` down to `floor_size`) at
    which the wrapped caption fits the box

    Below the floor the caption is truncated instead: overlong words and the
    last visible line are ellipsized.
    """
    size = max(start_size, floor_size)
    while True:
        font = load_font(size, font_path)
        lines = wrap_text(text, font, max_width)
        line_height = size * line_spacing
        widest = max((text_width(line, font) for line in lines), default=0.0)
        if widest <= max_width and len(lines) * line_height <= max_height:
            return TextBlock(lines=lines, font=font, size=size, line_height=line_height)
        if size <= floor_size:
            break
        size = max(floor_size, size - step)

    max_lines = max(1, int(max_height // line_height))
    truncated = len(lines) > max_lines or widest > max_width
    fitted = [ellipsize(line, font, max_width) for line in lines[:max_lines]]
    if len(lines) > max_lines:
        fitted[-1] = ellipsize(fitted[-1].rstrip(ELLIPSIS), font, max_width, force=True)
    return TextBlock(lines=fitted, font=font, size=size, line_height=line_height, truncated=truncated)
