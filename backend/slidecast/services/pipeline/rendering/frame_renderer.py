"""
Frame Renderer - draws one segment as a full-HD still slide

Layers, bottom to top:
1. Diagonal two-colour gradient
2. Low-opacity motif (square grid or offset dots)
3. "LIVE NEWS UPDATE" banner on body slides
4. Subtitle line and the word-wrapped, stroked caption
"""

import math
import os
from pathlib import Path
from typing import Iterable, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from slidecast.core import get_logger, RenderError

from ..models import Segment, SegmentKind, Slide
from .fonts import load_font
from .palette import (
    BANNER_COLOR,
    MOTIF_FILL,
    PALETTE,
    SUBTITLE_FILL,
    TEXT_FILL,
    TEXT_STROKE,
    GradientPair,
    gradient_for,
)
from .text_layout import fit_text

logger = get_logger(__name__, component="frame_renderer")

BANNER_TEXT = "LIVE NEWS UPDATE"

START_FONT_SIZES = {
    SegmentKind.TITLE: 120,
    SegmentKind.NUMBERING: 160,
}
DEFAULT_START_FONT_SIZE = 80
FLOOR_FONT_SIZE = 40


class FrameRenderer:
    """Renders segments into PNG slides of one fixed size"""

    def __init__(
        self,
        width: int = 1920,
        height: int = 1080,
        font_path: Optional[str] = None,
        text_width_ratio: float = 5 / 6,
    ):
        self.width = width
        self.height = height
        self.font_path = font_path
        self.max_text_width = width * text_width_ratio
        # Keep clear of the banner strip at the top and the subtitle at the bottom
        self.max_text_height = height - 2 * round(height * 0.2)

    @property
    def frame_size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @staticmethod
    def style_variant_for(segment: Segment) -> int:
        return segment.order % len(PALETTE)

    def render_frame(
        self,
        segment: Segment,
        output_path: Path,
        style_variant: Optional[int] = None,
    ) -> Slide:
        """
        Draw `segment` and write it to `output_path` as PNG

        Same segment and variant always give byte-identical files.

        Raises:
            RenderError: target directory missing or not writable, or the
                encoder failed to write the file
        """
        output_path = Path(output_path)
        variant = self.style_variant_for(segment) if style_variant is None else style_variant

        parent = output_path.parent
        if not parent.is_dir() or not os.access(parent, os.W_OK):
            raise RenderError(f"Slide directory is not writable: {parent}")

        image = self.draw(segment, variant)

        try:
            image.save(output_path, format="PNG")
        except OSError as e:
            raise RenderError(f"Failed to write slide {segment.order} to {output_path}: {e}") from e

        logger.debug("Rendered slide", extra={
            "order": segment.order,
            "kind": segment.kind.value,
            "style_variant": variant,
            "path": str(output_path),
        })
        return Slide(source_segment_order=segment.order, image_path=output_path, style_variant=variant)

    def draw(self, segment: Segment, style_variant: int) -> Image.Image:
        """Compose the slide in memory"""
        image = self._gradient(gradient_for(segment.kind, style_variant))
        image = _composite(image, self._motif(style_variant))

        if segment.kind == SegmentKind.BODY:
            image = _composite(image, self._banner())

        draw = ImageDraw.Draw(image)
        if segment.subtitle:
            self._draw_subtitle(draw, segment)
        self._draw_caption(draw, segment)
        return image

    def _gradient(self, colors: GradientPair) -> Image.Image:
        start = np.array(colors[0], dtype=np.float64)
        end = np.array(colors[1], dtype=np.float64)

        xs = np.arange(self.width, dtype=np.float64)[None, :]
        ys = np.arange(self.height, dtype=np.float64)[:, None]
        # Projection onto the top-left -> bottom-right diagonal, 0..1
        t = (xs * self.width + ys * self.height) / float(self.width ** 2 + self.height ** 2)

        pixels = start + (end - start) * t[..., None]
        return Image.fromarray(np.rint(pixels).astype(np.uint8))

    def _motif(self, style_variant: int) -> Image.Image:
        layer = Image.new("RGBA", self.frame_size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)

        if style_variant % 2 == 0:
            for x in range(0, self.width, 50):
                for y in range(0, self.height, 50):
                    draw.rectangle([x, y, x + 24, y + 24], fill=MOTIF_FILL)
        else:
            for x in range(0, self.width, 100):
                for y in range(0, self.height, 100):
                    cx = x + math.sin(y / 100) * 20
                    cy = y + math.cos(x / 100) * 20
                    draw.ellipse([cx - 25, cy - 25, cx + 25, cy + 25], fill=MOTIF_FILL)
        return layer

    def _banner(self) -> Image.Image:
        layer = Image.new("RGBA", self.frame_size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        top, bottom = 50, 130
        draw.rectangle([0, top, self.width, bottom], fill=BANNER_COLOR)
        draw.text(
            (50, (top + bottom) / 2),
            BANNER_TEXT,
            font=load_font(36, self.font_path),
            fill=TEXT_FILL + (255,),
            anchor="lm",
        )
        return layer

    def _draw_subtitle(self, draw: ImageDraw.ImageDraw, segment: Segment) -> None:
        y = 150 if segment.kind == SegmentKind.TITLE else self.height - 130
        draw.text(
            (self.width / 2, y),
            segment.subtitle,
            font=load_font(48, self.font_path),
            fill=SUBTITLE_FILL[:3],
            anchor="mm",
        )

    def _draw_caption(self, draw: ImageDraw.ImageDraw, segment: Segment) -> None:
        block = fit_text(
            segment.text,
            max_width=self.max_text_width,
            max_height=self.max_text_height,
            start_size=START_FONT_SIZES.get(segment.kind, DEFAULT_START_FONT_SIZE),
            floor_size=FLOOR_FONT_SIZE,
            font_path=self.font_path,
        )
        if block.truncated:
            logger.info("Caption truncated to fit slide", extra={"order": segment.order})

        stroke = max(2, block.size // 20)
        start_y = (self.height - block.height) / 2
        for i, line in enumerate(block.lines):
            y = start_y + i * block.line_height + block.line_height / 2
            draw.text(
                (self.width / 2, y),
                line,
                font=block.font,
                fill=TEXT_FILL,
                anchor="mm",
                stroke_width=stroke,
                stroke_fill=TEXT_STROKE,
            )


def _composite(base: Image.Image, layer: Image.Image) -> Image.Image:
    return Image.alpha_composite(base.convert("RGBA"), layer).convert("RGB")


def ensure_uniform_frames(paths: Iterable[Path], size: Tuple[int, int]) -> None:
    """
    Raise RenderError unless every slide at `paths` is exactly `size`
    """
    for path in paths:
        try:
            with Image.open(path) as image:
                actual = image.size
        except (OSError, ValueError) as e:
            raise RenderError(f"Cannot read slide {path}: {e}") from e
        if actual != tuple(size):
            raise RenderError(
                f"Slide {path} is {actual[0]}x{actual[1]}, expected {size[0]}x{size[1]}"
            )
