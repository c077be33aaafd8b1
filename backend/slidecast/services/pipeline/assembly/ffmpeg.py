"""
Async ffmpeg process runner
"""

import asyncio
from typing import List

from slidecast.core import get_logger, CompositionError, CompositionTimeoutError

logger = get_logger(__name__, component="ffmpeg")

# Keep the tail; ffmpeg prints the actual error last
MAX_DIAGNOSTIC_CHARS = 4000


def _tail(stderr: bytes) -> str:
    text = stderr.decode("utf-8", errors="replace").strip()
    return text[-MAX_DIAGNOSTIC_CHARS:]


async def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()


async def run_ffmpeg(cmd: List[str], timeout: float) -> str:
    """
    Run an ffmpeg command to completion and return its stderr text

    Raises:
        CompositionError: binary missing or non-zero exit (stderr attached)
        CompositionTimeoutError: still running after `timeout` seconds; the
            process is killed first
    """
    logger.debug("Starting ffmpeg", extra={"argc": len(cmd), "timeout": timeout})
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise CompositionError(f"Encoder executable not found: {cmd[0]}") from e

    try:
        _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(process)
        raise CompositionTimeoutError(
            f"Encoding exceeded {format(timeout, 'g')}s and was stopped",
            returncode=process.returncode,
        )
    except asyncio.CancelledError:
        await _kill(process)
        raise

    if process.returncode != 0:
        diagnostic = _tail(stderr or b"")
        logger.error("ffmpeg failed", extra={
            "returncode": process.returncode,
            "stderr_tail": diagnostic[-500:],
        })
        raise CompositionError(
            f"Encoding failed with exit code {process.returncode}",
            diagnostic=diagnostic,
            returncode=process.returncode,
        )

    return _tail(stderr or b"")
