"""
Tests for slidecast.services.pipeline.assembly.ffmpeg
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from slidecast.core import CompositionError, CompositionTimeoutError
from slidecast.services.pipeline.assembly.ffmpeg import run_ffmpeg


def _process(returncode=0, stderr=b""):
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(b"", stderr))
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.mark.asyncio
class TestRunFFmpeg:
    """Test the async process wrapper."""

    async def test_success(self):
        process = _process(stderr=b"some warning")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as mock_exec:
            output = await run_ffmpeg(["ffmpeg", "-version"], timeout=5)

        assert output == "some warning"
        assert mock_exec.call_args.args == ("ffmpeg", "-version")

    async def test_non_zero_exit_carries_stderr(self):
        process = _process(returncode=1, stderr=b"Error initializing filter 'fade'\n")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CompositionError) as exc:
                await run_ffmpeg(["ffmpeg"], timeout=5)

        assert exc.value.returncode == 1
        assert "Error initializing filter 'fade'" in exc.value.diagnostic
        assert "Error initializing filter" in str(exc.value)
        assert not isinstance(exc.value, CompositionTimeoutError)

    async def test_missing_binary(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("ffmpeg"))):
            with pytest.raises(CompositionError, match="not found"):
                await run_ffmpeg(["ffmpeg"], timeout=5)

    async def test_timeout_kills_process(self):
        process = _process()

        async def hang():
            await asyncio.sleep(10)

        process.communicate = hang

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CompositionTimeoutError):
                await run_ffmpeg(["ffmpeg"], timeout=0.05)

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    async def test_timeout_after_process_exit(self):
        process = _process()
        process.kill.side_effect = ProcessLookupError()

        async def hang():
            await asyncio.sleep(10)

        process.communicate = hang

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CompositionTimeoutError):
                await run_ffmpeg(["ffmpeg"], timeout=0.05)

        process.wait.assert_not_awaited()

    async def test_diagnostic_keeps_tail(self):
        noise = b"x" * 10000 + b"\nreal error at the end"
        process = _process(returncode=1, stderr=noise)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CompositionError) as exc:
                await run_ffmpeg(["ffmpeg"], timeout=5)

        assert exc.value.diagnostic.endswith("real error at the end")
        assert len(exc.value.diagnostic) <= 4000

    async def test_cancel_kills_process(self):
        process = _process()
        started = asyncio.Event()

        async def hang():
            started.set()
            await asyncio.sleep(10)

        process.communicate = hang

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            task = asyncio.create_task(run_ffmpeg(["ffmpeg"], timeout=30))
            await started.wait()
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()
