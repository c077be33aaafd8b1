"""
Timeline Composer - turns ordered slides into one encoded video

Each still is held for its duration by clone-padding its single frame,
faded, and concatenated in input order. An optional narration track is
resampled and padded so it never ends the video early.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from slidecast.config import VideoSettings
from slidecast.core import get_logger, LogTimer, CompositionError

from ..rendering import ensure_uniform_frames
from .ffmpeg import run_ffmpeg
from .filter_graph import FilterGraph, FilterGraphError, FilterNode, format_number

logger = get_logger(__name__, component="composer")

VIDEO_OUT = "vout"
AUDIO_OUT = "aout"


class TimelineComposer:
    """Builds the ffmpeg filter graph and command for a slide timeline"""

    def __init__(self, settings: Optional[VideoSettings] = None, ffmpeg_binary: str = "ffmpeg"):
        self.settings = settings or VideoSettings()
        self.ffmpeg_binary = ffmpeg_binary

    def _slide_filters(self, index: int, count: int, duration: float) -> List[FilterNode]:
        s = self.settings
        filters = [
            FilterNode("scale", (s.width, s.height)),
            FilterNode("setsar", (1,)),
            FilterNode("setpts", ("PTS-STARTPTS",)),
            FilterNode("tpad", kwargs={"stop_mode": "clone", "stop_duration": float(duration)}),
            FilterNode("trim", kwargs={"duration": float(duration)}),
            FilterNode("setpts", ("PTS-STARTPTS",)),
        ]

        fade = min(s.fade_seconds, duration / 2)
        if fade > 0:
            filters.append(FilterNode("fade", kwargs={"t": "in", "st": 0, "d": float(fade)}))
            # First and last slides keep a hard edge at the ends of the video
            if 0 < index < count - 1:
                filters.append(FilterNode("fade", kwargs={
                    "t": "out",
                    "st": float(duration - fade),
                    "d": float(fade),
                }))
        return filters

    def build_graph(self, durations: Sequence[float], has_audio: bool = False) -> FilterGraph:
        """
        Filter graph for len(durations) image inputs (input i is slide i)
        plus, when `has_audio`, one audio input after the slides
        """
        count = len(durations)
        if count == 0:
            raise CompositionError("Cannot build a timeline without slides")

        graph = FilterGraph()
        for index, duration in enumerate(durations):
            graph.add([f"{index}:v"], self._slide_filters(index, count, duration), [f"v{index}"])

        # Left fold keeps the concat order identical to the input order
        current = "v0"
        for index in range(1, count):
            joined = f"c{index}"
            graph.add(
                [current, f"v{index}"],
                [FilterNode("concat", kwargs={"n": 2, "v": 1, "a": 0})],
                [joined],
            )
            current = joined

        graph.add(
            [current],
            [
                FilterNode("fps", (self.settings.fps,)),
                FilterNode("format", (self.settings.encoder.pixel_format,)),
            ],
            [VIDEO_OUT],
        )
        graph.outputs.append(VIDEO_OUT)

        if has_audio:
            graph.add(
                [f"{count}:a"],
                [
                    FilterNode("aresample", (self.settings.encoder.audio_sample_rate,)),
                    FilterNode("apad"),
                ],
                [AUDIO_OUT],
            )
            graph.outputs.append(AUDIO_OUT)

        return graph

    def build_command(
        self,
        slide_paths: Sequence[Path],
        durations: Sequence[float],
        output_path: Path,
        audio_path: Optional[Path] = None,
    ) -> List[str]:
        """Full ffmpeg argv for the timeline"""
        s = self.settings
        enc = s.encoder
        try:
            filter_complex = self.build_graph(durations, has_audio=audio_path is not None).serialize()
        except FilterGraphError as e:
            raise CompositionError(f"Invalid filter graph: {e}") from e

        cmd = [self.ffmpeg_binary, "-y", "-hide_banner", "-loglevel", "error"]
        for path in slide_paths:
            cmd += ["-framerate", str(s.fps), "-i", str(path)]
        if audio_path is not None:
            cmd += ["-i", str(audio_path)]

        cmd += ["-filter_complex", filter_complex, "-map", f"[{VIDEO_OUT}]"]
        if audio_path is not None:
            cmd += ["-map", f"[{AUDIO_OUT}]"]

        cmd += [
            "-c:v", enc.video_codec,
            "-preset", enc.preset,
            "-crf", str(enc.crf),
            "-pix_fmt", enc.pixel_format,
            "-r", str(s.fps),
        ]
        if audio_path is not None:
            cmd += ["-c:a", enc.audio_codec, "-b:a", enc.audio_bitrate, "-ar", str(enc.audio_sample_rate)]
        else:
            cmd += ["-an"]

        cmd += [
            "-movflags", "+faststart",
            "-t", format_number(sum(durations)),
            str(output_path),
        ]
        return cmd

    def _validate_inputs(
        self,
        slide_paths: Sequence[Path],
        durations: Sequence[float],
        audio_path: Optional[Path],
    ) -> None:
        if not slide_paths:
            raise CompositionError("No slides to compose")
        if len(slide_paths) != len(durations):
            raise CompositionError(
                f"Got {len(slide_paths)} slides but {len(durations)} durations"
            )
        for index, duration in enumerate(durations):
            if not duration > 0:
                raise CompositionError(f"Slide {index} has non-positive duration {duration}")
        missing = [str(path) for path in slide_paths if not Path(path).is_file()]
        if missing:
            raise CompositionError(f"Slide images not found: {', '.join(missing)}")
        if audio_path is not None and not Path(audio_path).is_file():
            raise CompositionError(f"Audio track not found: {audio_path}")
        ensure_uniform_frames(slide_paths, self.settings.frame_size)

    async def compose(
        self,
        slide_paths: Sequence[Path],
        durations: Sequence[float],
        output_path: Path,
        audio_path: Optional[Path] = None,
    ) -> Tuple[Path, float]:
        """
        Encode the slides, in the given order, into `output_path`

        Returns the output path and the total duration, which is the sum of
        `durations` rather than a measurement of the encoded file.

        Raises:
            CompositionError: invalid input or ffmpeg failure
            CompositionTimeoutError: encoding ran past the configured timeout
            RenderError: a slide does not have the canonical frame size
        """
        output_path = Path(output_path)
        self._validate_inputs(slide_paths, durations, audio_path)

        total = float(sum(durations))
        cmd = self.build_command(slide_paths, durations, output_path, audio_path)

        logger.info("Composing timeline", extra={
            "slides": len(slide_paths),
            "total_duration": total,
            "has_audio": audio_path is not None,
            "output": output_path.name,
        })

        try:
            with LogTimer(logger, f"compose ({len(slide_paths)} slides)"):
                await run_ffmpeg(cmd, timeout=self.settings.encode_timeout_seconds)
        except BaseException:
            # No partial files are ever left behind
            output_path.unlink(missing_ok=True)
            raise

        if not output_path.is_file():
            raise CompositionError(f"Encoder reported success but wrote no file: {output_path}")

        return output_path, total
