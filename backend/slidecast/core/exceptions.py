"""
Core Exceptions
Typed failures raised by the video pipeline and its infrastructure.
"""

from typing import Optional


class SlidecastError(Exception):
    """Base exception for all application errors."""
    pass


class PipelineError(SlidecastError):
    """Base exception for video pipeline failures. Always fatal to the job."""
    pass


class InfrastructureError(SlidecastError):
    """Missing tooling, unwritable directories and similar environment problems."""
    pass


class SegmentationError(PipelineError):
    """Internal invariant violation while building the segment sequence."""
    pass


class RenderError(PipelineError):
    """A slide could not be written, or a slide has the wrong dimensions."""
    pass


class NarrationError(PipelineError):
    """Text-to-speech synthesis for the narration track failed."""
    pass


class CompositionError(PipelineError):
    """The encoding backend rejected the job.

    `diagnostic` holds the backend's own error output.
    """

    def __init__(self, message: str, diagnostic: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.diagnostic = diagnostic
        self.returncode = returncode

    def __str__(self) -> str:
        base = super().__str__()
        if self.diagnostic:
            return f"{base}: {self.diagnostic.strip()}"
        return base


class CompositionTimeoutError(CompositionError):
    """The encoding backend exceeded its time limit and was killed."""
    pass
