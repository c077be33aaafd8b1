"""
Video pipeline settings

Every tunable of the segment -> render -> compose pipeline lives here so the
services never read the environment themselves.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


def env_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(int(raw), minimum)
    except (TypeError, ValueError):
        return default


def env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw), minimum)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class SegmentTimings:
    """Display durations (seconds) used by the segmenter"""
    title: float = 3.0
    hook: float = 5.0
    cta: float = 3.0
    closing: float = 4.0
    numbering: float = 2.0
    subtitle: float = 5.0
    source: float = 2.0
    body_min: float = 8.0
    body_max: float = 20.0
    words_per_second: float = 2.5
    sentences_per_body: int = 2
    min_sentence_chars: int = 3


@dataclass(frozen=True)
class EncoderPreset:
    """Codec settings handed to ffmpeg"""
    video_codec: str = "libx264"
    preset: str = "veryfast"
    crf: int = 23
    pixel_format: str = "yuv420p"
    audio_codec: str = "aac"
    audio_bitrate: str = "128k"
    audio_sample_rate: int = 44100


@dataclass(frozen=True)
class VideoSettings:
    """Complete configuration for one VideoGenerationService"""
    width: int = 1920
    height: int = 1080
    fps: int = 30
    fade_seconds: float = 0.5
    encode_timeout_seconds: float = 600.0
    render_workers: int = 4
    font_path: Optional[str] = None
    closing_text: Optional[str] = None
    timings: SegmentTimings = field(default_factory=SegmentTimings)
    encoder: EncoderPreset = field(default_factory=EncoderPreset)

    @property
    def frame_size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @classmethod
    def from_env(cls) -> "VideoSettings":
        """Build settings from environment variables, falling back to defaults"""
        defaults = cls()
        timings = SegmentTimings(
            body_min=env_float("BODY_MIN_SECONDS", defaults.timings.body_min, 1.0),
            body_max=env_float("BODY_MAX_SECONDS", defaults.timings.body_max, 1.0),
            words_per_second=env_float("WORDS_PER_SECOND", defaults.timings.words_per_second, 0.1),
        )
        if timings.body_max < timings.body_min:
            timings = SegmentTimings(
                body_min=timings.body_min,
                body_max=timings.body_min,
                words_per_second=timings.words_per_second,
            )

        encoder = EncoderPreset(
            preset=os.getenv("ENCODER_PRESET", defaults.encoder.preset),
            crf=env_int("ENCODER_CRF", defaults.encoder.crf, 0),
        )

        return cls(
            fps=env_int("VIDEO_FPS", defaults.fps, 1),
            fade_seconds=env_float("FADE_SECONDS", defaults.fade_seconds, 0.0),
            encode_timeout_seconds=env_float("ENCODE_TIMEOUT_SECONDS", defaults.encode_timeout_seconds, 1.0),
            render_workers=env_int("RENDER_WORKERS", defaults.render_workers, 1),
            font_path=os.getenv("SLIDECAST_FONT_PATH") or None,
            closing_text=os.getenv("CLOSING_TEXT") or None,
            timings=timings,
            encoder=encoder,
        )


__all__ = ["env_int", "env_float", "SegmentTimings", "EncoderPreset", "VideoSettings"]
