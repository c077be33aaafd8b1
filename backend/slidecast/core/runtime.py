"""
Runtime environment checks for the encoder and the job directories.

slidecast needs an ffmpeg binary that can actually encode H.264 video and AAC
audio, plus writable output and work directories. Startup records what it
finds in a report; generation endpoints refuse with 503 when ffmpeg is gone.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException

from .logging import get_logger

logger = get_logger(__name__, component="runtime")

REQUIRED_RENDER_TOOLS = ("ffmpeg",)
REQUIRED_ENCODERS = ("libx264", "aac")


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def missing_runtime_tools(tools: Iterable[str]) -> List[str]:
    return [tool for tool in tools if shutil.which(tool) is None]


def assert_runtime_tools_available(tools: Iterable[str], *, context: str) -> None:
    missing = missing_runtime_tools(tools)
    if missing:
        missing_list = ", ".join(sorted(set(missing)))
        raise HTTPException(
            status_code=503,
            detail=f"Service unavailable: missing required runtime tools for {context}: {missing_list}",
        )


def parse_encoder_list(output: str) -> List[str]:
    """
    Encoder names from `ffmpeg -encoders` output

    The listing starts after a ` ------` separator; each row is
    `<flags> <name> <description>`.
    """
    names = []
    in_listing = False
    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith("------"):
            in_listing = True
            continue
        if not in_listing or not stripped:
            continue
        parts = stripped.split()
        if len(parts) >= 2:
            names.append(parts[1])
    return names


def missing_encoders(
    required: Iterable[str] = REQUIRED_ENCODERS,
    *,
    ffmpeg_binary: str = "ffmpeg",
    timeout: float = 15.0,
) -> List[str]:
    """
    Required encoders the local ffmpeg build does not provide

    Raises:
        RuntimeError: ffmpeg could not be run or did not list its encoders
    """
    cmd = [ffmpeg_binary, "-hide_banner", "-encoders"]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise RuntimeError(f"Could not query ffmpeg encoders: {exc}") from exc
    if result.returncode != 0:
        raise RuntimeError(f"ffmpeg -encoders exited with code {result.returncode}")

    available = set(parse_encoder_list(result.stdout))
    return [name for name in required if name not in available]


def assert_directory_writable(path: Path, *, create: bool = True) -> None:
    if create:
        path.mkdir(parents=True, exist_ok=True)
    if not path.is_dir():
        raise RuntimeError(f"Required directory is missing: {path}")

    marker = path / f".write_check_{os.getpid()}.tmp"
    try:
        marker.write_text("ok", encoding="utf-8")
        marker.unlink(missing_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Directory is not writable: {path}") from exc


def run_startup_runtime_checks(
    *,
    output_dir: Path,
    work_dir: Path,
    strict_tools: bool,
    strict_dirs: bool = True,
    font_path: Optional[str] = None,
) -> Dict[str, object]:
    """
    Check job directories, the encoder and its codecs once at startup

    Args:
        output_dir: Where finished videos are written and served from
        work_dir: Parent of the per-job scratch directories
        strict_tools: Raise when ffmpeg or a required encoder is missing
        strict_dirs: Raise when a directory cannot be created or written
        font_path: Caption font the renderer resolved, None for Pillow's
            bundled font

    Returns:
        Report with `directories`, `tools`, `encoders`, `font` and `ok`
    """
    report: Dict[str, object] = {
        "directories": {},
        "tools": {},
        "encoders": {},
        "font": {"path": font_path, "bundled_fallback": font_path is None},
        "ok": True,
    }

    for dir_name, dir_path in (("output", output_dir), ("work", work_dir)):
        entry = {"path": str(dir_path), "writable": True}
        try:
            assert_directory_writable(dir_path)
        except (OSError, RuntimeError) as exc:
            entry.update(writable=False, error=str(exc))
            report["ok"] = False
            if strict_dirs:
                raise
        report["directories"][dir_name] = entry

    missing = missing_runtime_tools(REQUIRED_RENDER_TOOLS)
    report["tools"] = {"required": list(REQUIRED_RENDER_TOOLS), "missing": missing}

    problems = [f"missing tool {tool}" for tool in missing]
    if not missing:
        try:
            absent = missing_encoders(REQUIRED_ENCODERS)
        except RuntimeError as exc:
            report["encoders"] = {"required": list(REQUIRED_ENCODERS), "error": str(exc)}
            problems.append(str(exc))
        else:
            report["encoders"] = {"required": list(REQUIRED_ENCODERS), "missing": absent}
            problems.extend(f"missing encoder {name}" for name in absent)

    if font_path is None:
        logger.warning("No TrueType caption font found; slides will use Pillow's bundled font")

    if problems:
        report["ok"] = False
        if strict_tools:
            raise RuntimeError("Encoder is not usable: " + ", ".join(problems))
        logger.warning("Encoder checks failed", extra={"problems": problems})

    return report
