"""
Tests for slidecast.services.pipeline.rendering.frame_renderer

Renders real PNGs with Pillow into tmp_path.
"""

import time

import pytest
from PIL import Image

from slidecast.core import RenderError
from slidecast.services.pipeline.models import Segment, SegmentKind
from slidecast.services.pipeline.rendering import FrameRenderer, ensure_uniform_frames
from slidecast.services.pipeline.rendering.palette import PALETTE, gradient_for, hex_to_rgb

LONG_TEXT = " ".join(["Markets tumbled as investors weighed the latest economic data."] * 30)


def segment(kind=SegmentKind.BODY, text="Stocks rose sharply today", order=2, subtitle=None):
    return Segment(kind=kind, text=text, order=order, duration=8.0, subtitle=subtitle)


@pytest.fixture
def small_renderer():
    return FrameRenderer(width=192, height=108)


class TestRenderFrame:
    def test_full_hd_png(self, tmp_path):
        out = tmp_path / "slide.png"
        slide = FrameRenderer().render_frame(segment(SegmentKind.TITLE, "Big news", 0, "BREAKING NEWS"), out)

        assert slide.image_path == out
        assert slide.source_segment_order == 0
        with Image.open(out) as image:
            assert image.format == "PNG"
            assert image.mode == "RGB"
            assert image.size == (1920, 1080)

    @pytest.mark.parametrize("kind", list(SegmentKind))
    def test_every_kind_has_same_size(self, tmp_path, small_renderer, kind):
        out = tmp_path / f"{kind.value}.png"
        small_renderer.render_frame(segment(kind, LONG_TEXT, order=3, subtitle="sub"), out)

        with Image.open(out) as image:
            assert image.size == (192, 108)

    def test_identical_input_gives_identical_bytes(self, tmp_path, small_renderer):
        seg = segment(text="Same input twice")
        first = tmp_path / "a.png"
        second = tmp_path / "b.png"

        small_renderer.render_frame(seg, first, style_variant=1)
        small_renderer.render_frame(seg, second, style_variant=1)

        assert first.read_bytes() == second.read_bytes()

    def test_style_variant_defaults_to_order(self, tmp_path, small_renderer):
        slide = small_renderer.render_frame(segment(order=6), tmp_path / "s.png")
        assert slide.style_variant == 6 % len(PALETTE)

    def test_explicit_style_variant(self, tmp_path, small_renderer):
        slide = small_renderer.render_frame(segment(order=6), tmp_path / "s.png", style_variant=1)
        assert slide.style_variant == 1

    def test_unbroken_huge_token_renders(self, tmp_path):
        out = tmp_path / "s.png"
        started = time.monotonic()

        FrameRenderer().render_frame(segment(text="x" * 20000), out)

        assert time.monotonic() - started < 30
        with Image.open(out) as image:
            assert image.size == (1920, 1080)

    def test_missing_directory_raises(self, tmp_path, small_renderer):
        with pytest.raises(RenderError, match="not writable"):
            small_renderer.render_frame(segment(), tmp_path / "missing" / "s.png")

    def test_write_failure_raises(self, tmp_path, small_renderer, monkeypatch):
        def fail_save(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Image.Image, "save", fail_save)

        with pytest.raises(RenderError, match="disk full"):
            small_renderer.render_frame(segment(), tmp_path / "s.png")


class TestDraw:
    def test_gradient_runs_corner_to_corner(self, small_renderer):
        image = small_renderer._gradient(((0, 0, 0), (255, 255, 255)))

        assert image.size == (192, 108)
        assert image.getpixel((0, 0)) == (0, 0, 0)
        assert image.getpixel((191, 107))[0] >= 250

    def test_body_slide_has_banner(self):
        image = FrameRenderer().draw(segment(SegmentKind.BODY, "x", order=0), style_variant=0)
        red, green, blue = image.getpixel((1900, 70))

        assert red > 200
        assert green < 120 and blue < 120

    def test_hook_slide_has_no_banner(self):
        image = FrameRenderer().draw(segment(SegmentKind.HOOK, "x", order=1), style_variant=1)
        red, _, blue = image.getpixel((1900, 70))

        assert blue > red

    def test_kind_gradients(self):
        assert gradient_for(SegmentKind.TITLE, 3)[0] == hex_to_rgb("#ff4444")
        assert gradient_for(SegmentKind.BODY, 1) == PALETTE[1]
        assert gradient_for(SegmentKind.SUBTITLE, 5) == PALETTE[1]


class TestEnsureUniformFrames:
    def test_accepts_matching(self, tmp_path):
        paths = []
        for i in range(3):
            path = tmp_path / f"{i}.png"
            Image.new("RGB", (192, 108)).save(path)
            paths.append(path)

        ensure_uniform_frames(paths, (192, 108))

    def test_rejects_mismatch(self, tmp_path):
        good = tmp_path / "good.png"
        bad = tmp_path / "bad.png"
        Image.new("RGB", (192, 108)).save(good)
        Image.new("RGB", (100, 100)).save(bad)

        with pytest.raises(RenderError, match="100x100"):
            ensure_uniform_frames([good, bad], (192, 108))

    def test_rejects_unreadable(self, tmp_path):
        junk = tmp_path / "junk.png"
        junk.write_bytes(b"not an image")

        with pytest.raises(RenderError, match="Cannot read"):
            ensure_uniform_frames([junk], (192, 108))
