"""
Slide colour schemes
"""

from typing import Dict, Tuple

from ..models import SegmentKind

RGB = Tuple[int, int, int]
GradientPair = Tuple[RGB, RGB]


def hex_to_rgb(value: str) -> RGB:
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def _pair(start: str, end: str) -> GradientPair:
    return (hex_to_rgb(start), hex_to_rgb(end))


# Rotating palette for body/subtitle slides, indexed by style variant
PALETTE: Tuple[GradientPair, ...] = (
    _pair("#2d3748", "#1a202c"),
    _pair("#4444ff", "#1a1a80"),
    _pair("#1f7a4d", "#0f3d26"),
    _pair("#8e2de2", "#4a00e0"),
)

# Fixed schemes for structural slides
KIND_GRADIENTS: Dict[SegmentKind, GradientPair] = {
    SegmentKind.TITLE: _pair("#ff4444", "#cc0000"),
    SegmentKind.HOOK: _pair("#4444ff", "#0000cc"),
    SegmentKind.CTA: _pair("#ff6b35", "#f7931e"),
    SegmentKind.CLOSING: _pair("#ff4444", "#cc0000"),
    SegmentKind.NUMBERING: _pair("#8e2de2", "#4a00e0"),
    SegmentKind.SOURCE: _pair("#4a5568", "#2d3748"),
}

BANNER_COLOR = (255, 68, 68, 230)
TEXT_FILL = (255, 255, 255)
TEXT_STROKE = (0, 0, 0)
SUBTITLE_FILL = (255, 255, 255, 230)
MOTIF_FILL = (255, 255, 255, 26)


def gradient_for(kind: SegmentKind, style_variant: int) -> GradientPair:
    """Gradient for a slide; kinds without a fixed scheme rotate through PALETTE"""
    fixed = KIND_GRADIENTS.get(kind)
    if fixed is not None:
        return fixed
    return PALETTE[style_variant % len(PALETTE)]
