"""
Video Generation Service - orchestrates segment -> render -> compose

Pure orchestration; the actual work is delegated to:
- Segmenter: text to timed segments
- FrameRenderer: one PNG slide per segment
- TTSEngine: optional narration track
- TimelineComposer: filter graph and ffmpeg encode
"""

import asyncio
import dataclasses
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from slidecast.config import OUTPUT_DIR, WORK_DIR, VideoSettings
from slidecast.core import get_logger, set_job_id, LogTimer, SegmentationError

from ..audio import TTSEngine
from ..models import CompilationArticle, CompositionJob, Segment, Slide, VideoResult, new_job_id
from ..rendering import FrameRenderer
from ..segmentation import Segmenter, build_narration_script
from .composer import TimelineComposer

logger = get_logger(__name__, component="video_generator")


class VideoGenerationService:
    """
    Public entry point of the pipeline

    Each call is one independent job: slides live in a job-scoped temporary
    directory that is removed however the call ends, and the only file left
    behind is `<job id>.mp4` in the output directory.
    """

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        work_dir: Optional[Path] = None,
        settings: Optional[VideoSettings] = None,
        segmenter: Optional[Segmenter] = None,
        renderer: Optional[FrameRenderer] = None,
        composer: Optional[TimelineComposer] = None,
        tts_engine: Optional[TTSEngine] = None,
    ):
        self.settings = settings or VideoSettings.from_env()
        self.output_dir = Path(output_dir or OUTPUT_DIR)
        self.work_dir = Path(work_dir or WORK_DIR)

        s = self.settings
        self.segmenter = segmenter or Segmenter(s.timings, closing_text=s.closing_text)
        self.renderer = renderer or FrameRenderer(s.width, s.height, font_path=s.font_path)
        self.composer = composer or TimelineComposer(s)
        self._tts_engine = tts_engine

        logger.info("Initialized VideoGenerationService", extra={
            "output_dir": str(self.output_dir),
            "work_dir": str(self.work_dir),
            "render_workers": s.render_workers,
        })

    @property
    def tts_engine(self) -> TTSEngine:
        if self._tts_engine is None:
            self._tts_engine = TTSEngine()
        return self._tts_engine

    async def generate_video(
        self,
        title: str,
        content: Optional[str],
        hook: Optional[str] = None,
        thumbnail_text: Optional[str] = None,
        audio_path: Optional[Path] = None,
        narrate: bool = False,
        voice: Optional[str] = None,
    ) -> VideoResult:
        """
        Produce a single-article video

        Args:
            title: Article title
            content: Article body, any length (may be empty)
            hook: Attention line; defaults to "Breaking: <title>"
            thumbnail_text: Caption for the opening slide; defaults to title
            audio_path: Existing audio track to mux in
            narrate: Synthesize a narration track when no audio_path is given
            voice: TTS voice for narration

        Returns:
            VideoResult whose duration is the sum of the segment durations

        Raises:
            PipelineError: any stage failed; nothing is written to the output
        """
        segments = self.segmenter.segment(title, hook, content, thumbnail_text)
        script = build_narration_script(title, content, hook) if narrate else None
        return await self._run(new_job_id("video"), segments, audio_path, script, voice)

    async def generate_compilation_video(
        self,
        articles: Sequence[CompilationArticle],
        compilation_title: str,
        hook: Optional[str] = None,
        thumbnail_text: Optional[str] = None,
        audio_path: Optional[Path] = None,
        narrate: bool = False,
        voice: Optional[str] = None,
    ) -> VideoResult:
        """Produce one video covering several articles in the given order"""
        if not articles:
            raise SegmentationError("A compilation needs at least one article")

        segments = self.segmenter.segment_compilation(articles, compilation_title, hook, thumbnail_text)
        script = None
        if narrate:
            rundown = " ".join(
                f"Story {index}: {article.title}." for index, article in enumerate(articles, start=1)
            )
            script = build_narration_script(compilation_title, rundown, hook)

        result = await self._run(new_job_id("compilation"), segments, audio_path, script, voice)
        return dataclasses.replace(result, article_count=len(articles))

    async def _run(
        self,
        job_id: str,
        segments: List[Segment],
        audio_path: Optional[Path],
        narration_script: Optional[str],
        voice: Optional[str],
    ) -> VideoResult:
        set_job_id(job_id)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.work_dir.mkdir(parents=True, exist_ok=True)

        job = CompositionJob(
            id=job_id,
            output_path=self.output_dir / f"{job_id}.mp4",
            segments=segments,
            audio_path=Path(audio_path) if audio_path else None,
        )

        with LogTimer(logger, f"generate_video (job: {job_id})"):
            with tempfile.TemporaryDirectory(
                prefix=f"{job_id}_", dir=self.work_dir, ignore_cleanup_errors=True
            ) as scratch:
                scratch_dir = Path(scratch)
                job.slides = await self._render_slides(job.segments, scratch_dir)

                if narration_script and job.audio_path is None:
                    job.audio_path = await self.tts_engine.synthesize(
                        narration_script, scratch_dir / "narration.mp3", voice=voice
                    )

                output_path, duration = await self.composer.compose(
                    [slide.image_path for slide in job.slides],
                    job.durations,
                    job.output_path,
                    job.audio_path,
                )

        logger.info("Video ready", extra={
            "output": output_path.name,
            "duration": duration,
            "segment_count": len(job.segments),
        })
        return VideoResult(
            output_path=output_path,
            relative_path=output_path.name,
            duration=duration,
            segment_count=len(job.segments),
        )

    async def _render_slides(self, segments: Sequence[Segment], scratch_dir: Path) -> List[Slide]:
        """Render every segment in a bounded pool; result order equals segment order"""
        semaphore = asyncio.Semaphore(max(1, self.settings.render_workers))

        async def render(segment: Segment) -> Slide:
            async with semaphore:
                return await asyncio.to_thread(
                    self.renderer.render_frame,
                    segment,
                    scratch_dir / f"slide_{segment.order:03d}.png",
                )

        results = await asyncio.gather(*(render(segment) for segment in segments), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)
