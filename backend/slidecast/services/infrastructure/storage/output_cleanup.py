"""
Output cleanup service.

Deletes expired videos from the output directory and job scratch directories
that a crashed process left behind in the work directory.
"""

import asyncio
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from slidecast.config import SERVED_VIDEO_EXTENSIONS, env_float, env_int
from slidecast.core import get_logger, parse_bool_env

logger = get_logger(__name__, component="output_cleanup")


class OutputCleanupService:
    """Cleanup old videos and orphaned job scratch directories."""

    def __init__(self, output_dir: Path, work_dir: Path | None = None):
        self.output_dir = Path(output_dir)
        self.work_dir = Path(work_dir) if work_dir is not None else None

        self.enabled = parse_bool_env(os.getenv("OUTPUT_CLEANUP_ENABLED"), default=True)
        self.retention_hours = env_float("OUTPUT_RETENTION_HOURS", 168.0, 1.0)
        self.orphan_ttl_hours = env_float("ORPHAN_WORK_RETENTION_HOURS", 6.0, 1.0)
        self.max_deletions = env_int("OUTPUT_CLEANUP_MAX_DELETIONS", 100, 1)
        self.interval_minutes = env_int("OUTPUT_CLEANUP_INTERVAL_MINUTES", 60, 1)

    @staticmethod
    def _hours_since(unix_ts: float, now_ts: float) -> float:
        return max(0.0, (now_ts - unix_ts) / 3600.0)

    def _expired(self, paths: List[Path], ttl_hours: float, now_ts: float) -> List[Path]:
        """Paths older than `ttl_hours`, oldest first"""
        aged = []
        for path in paths:
            try:
                mtime = path.stat().st_mtime
            except FileNotFoundError:
                continue
            if self._hours_since(mtime, now_ts) >= ttl_hours:
                aged.append((mtime, path))
        return [path for _, path in sorted(aged)]

    def _video_files(self) -> List[Path]:
        if not self.output_dir.is_dir():
            return []
        return [
            p for p in self.output_dir.iterdir()
            if p.is_file() and p.suffix.lower() in SERVED_VIDEO_EXTENSIONS
        ]

    def _scratch_dirs(self) -> List[Path]:
        if self.work_dir is None or not self.work_dir.is_dir():
            return []
        return [p for p in self.work_dir.iterdir() if p.is_dir()]

    def run_once(self) -> Dict[str, Any]:
        """Run one cleanup pass and return summary statistics."""
        summary = {
            "enabled": self.enabled,
            "deleted_videos": 0,
            "deleted_scratch_dirs": 0,
            "errors": 0,
        }

        if not self.enabled:
            return summary

        now_ts = datetime.now().timestamp()
        deletions_left = self.max_deletions

        for video in self._expired(self._video_files(), self.retention_hours, now_ts):
            if deletions_left <= 0:
                break
            try:
                video.unlink(missing_ok=True)
                summary["deleted_videos"] += 1
                deletions_left -= 1
            except OSError as exc:
                logger.warning(
                    "Failed to remove expired video",
                    extra={"path": str(video), "error": str(exc)},
                )
                summary["errors"] += 1

        for scratch in self._expired(self._scratch_dirs(), self.orphan_ttl_hours, now_ts):
            if deletions_left <= 0:
                break
            try:
                shutil.rmtree(scratch)
                summary["deleted_scratch_dirs"] += 1
                deletions_left -= 1
            except OSError as exc:
                logger.warning(
                    "Failed to remove orphaned scratch directory",
                    extra={"path": str(scratch), "error": str(exc)},
                )
                summary["errors"] += 1

        logger.info("Output cleanup pass complete", extra=summary)
        return summary

    async def run_periodic(self) -> None:
        """Run cleanup in a periodic background loop."""
        if not self.enabled:
            logger.info("Output cleanup disabled by environment")
            return

        interval_seconds = self.interval_minutes * 60
        while True:
            try:
                await asyncio.to_thread(self.run_once)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Output cleanup loop failed", extra={"error": str(exc)}, exc_info=True)
            await asyncio.sleep(interval_seconds)
