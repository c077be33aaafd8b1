"""
Pipeline data model

Segments are created by the segmenter, slides by the frame renderer, and both
hang off a CompositionJob that lives for exactly one generate call.
"""

import secrets
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class SegmentKind(str, Enum):
    """Role a segment plays in the narrative"""
    TITLE = "title"
    HOOK = "hook"
    BODY = "body"
    NUMBERING = "numbering"
    SUBTITLE = "subtitle"
    SOURCE = "source"
    CTA = "cta"
    CLOSING = "closing"


@dataclass(frozen=True)
class Segment:
    """One displayed beat of the video"""
    kind: SegmentKind
    text: str
    order: int
    duration: float
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class Slide:
    """A rendered still frame for one segment"""
    source_segment_order: int
    image_path: Path
    style_variant: int


@dataclass(frozen=True)
class CompilationArticle:
    """A single article fed into a compilation video"""
    title: str
    content: str = ""
    source: str = ""
    published_at: Optional[str] = None


def new_job_id(prefix: str = "video") -> str:
    """Millisecond timestamp plus a short random suffix, e.g. `video_1700000000000_a1b2c3`"""
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


@dataclass
class CompositionJob:
    """Unit of work for one generate call"""
    id: str
    output_path: Path
    segments: List[Segment] = field(default_factory=list)
    slides: List[Slide] = field(default_factory=list)
    audio_path: Optional[Path] = None

    @property
    def durations(self) -> List[float]:
        return [segment.duration for segment in self.segments]

    @property
    def total_duration(self) -> float:
        return sum(self.durations)


@dataclass(frozen=True)
class VideoResult:
    """What a finished job reports back to the caller"""
    output_path: Path
    relative_path: str
    duration: float
    segment_count: int
    article_count: Optional[int] = None
