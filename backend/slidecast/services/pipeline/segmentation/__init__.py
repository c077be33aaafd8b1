"""
Segmentation - text to timed segments
"""

from .segmenter import (
    Segmenter,
    split_sentences,
    batch_sentences,
    estimate_duration,
    build_narration_script,
)

__all__ = [
    "Segmenter",
    "split_sentences",
    "batch_sentences",
    "estimate_duration",
    "build_narration_script",
]
