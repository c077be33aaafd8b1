"""
End-to-end pipeline tests against a real ffmpeg binary.

Run with:
    pytest tests/integration/test_end_to_end.py -v -s

Requires ffmpeg (and ffprobe for the duration check) on PATH.
"""

import json
import shutil
import subprocess

import pytest

from slidecast.config import VideoSettings
from slidecast.services.pipeline import CompilationArticle, VideoGenerationService

# Skip entire module if ffmpeg is missing
pytestmark = pytest.mark.skipif(
    shutil.which("ffmpeg") is None,
    reason="ffmpeg not installed - skipping end-to-end encode tests"
)


def _media_info(path):
    if shutil.which("ffprobe") is None:
        pytest.skip("ffprobe not installed")
    completed = subprocess.run(
        ["ffprobe", "-v", "error", "-show_entries", "format=duration:stream=width,height,codec_type",
         "-of", "json", str(path)],
        capture_output=True, text=True, check=True,
    )
    return json.loads(completed.stdout)


@pytest.fixture
def service(tmp_path):
    settings = VideoSettings(width=320, height=180, fps=10, render_workers=2)
    return VideoGenerationService(
        output_dir=tmp_path / "videos",
        work_dir=tmp_path / "work",
        settings=settings,
    )


@pytest.mark.asyncio
async def test_single_article_video(service, tmp_path):
    result = await service.generate_video(
        title="Markets rally", content="Stocks rose. Bonds fell. Oil held steady.", hook="Big day"
    )

    assert result.output_path.is_file()
    assert result.segment_count == 5
    assert list((tmp_path / "work").iterdir()) == []

    info = _media_info(result.output_path)
    video = [s for s in info["streams"] if s["codec_type"] == "video"][0]
    assert (video["width"], video["height"]) == (320, 180)
    assert abs(float(info["format"]["duration"]) - result.duration) < 0.5


@pytest.mark.asyncio
async def test_compilation_video(service):
    result = await service.generate_compilation_video(
        [CompilationArticle(title="A", content="First."), CompilationArticle(title="B", content="Second.")],
        "Roundup",
    )

    assert result.output_path.is_file()
    assert result.article_count == 2
    info = _media_info(result.output_path)
    assert abs(float(info["format"]["duration"]) - result.duration) < 0.5
