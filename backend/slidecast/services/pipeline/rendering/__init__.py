"""
Rendering - segments to still slides
"""

from .frame_renderer import FrameRenderer, ensure_uniform_frames
from .palette import PALETTE, KIND_GRADIENTS, gradient_for
from .text_layout import TextBlock, fit_text, wrap_text

__all__ = [
    "FrameRenderer",
    "ensure_uniform_frames",
    "PALETTE",
    "KIND_GRADIENTS",
    "gradient_for",
    "TextBlock",
    "fit_text",
    "wrap_text",
]
