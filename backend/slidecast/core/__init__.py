"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Typed pipeline and infrastructure errors
    - security.py: Caption sanitization and served-file validation
    - runtime.py: Startup checks for directories and the ffmpeg binary

Usage:
    from slidecast.core import get_logger, sanitize_display_text, RenderError
"""

from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_job_id,
    clear_context,
    LogTimer,
)

from .exceptions import (
    SlidecastError,
    PipelineError,
    InfrastructureError,
    SegmentationError,
    RenderError,
    NarrationError,
    CompositionError,
    CompositionTimeoutError,
)

from .security import (
    sanitize_display_text,
    validate_video_filename,
    validate_path_within_directory,
    secure_file_path,
)

from .runtime import (
    REQUIRED_RENDER_TOOLS,
    REQUIRED_ENCODERS,
    parse_bool_env,
    missing_runtime_tools,
    missing_encoders,
    assert_runtime_tools_available,
    assert_directory_writable,
    run_startup_runtime_checks,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_job_id",
    "clear_context",
    "LogTimer",
    # Exceptions
    "SlidecastError",
    "PipelineError",
    "InfrastructureError",
    "SegmentationError",
    "RenderError",
    "NarrationError",
    "CompositionError",
    "CompositionTimeoutError",
    # Security
    "sanitize_display_text",
    "validate_video_filename",
    "validate_path_within_directory",
    "secure_file_path",
    # Runtime guards
    "REQUIRED_RENDER_TOOLS",
    "REQUIRED_ENCODERS",
    "parse_bool_env",
    "missing_runtime_tools",
    "missing_encoders",
    "assert_runtime_tools_available",
    "assert_directory_writable",
    "run_startup_runtime_checks",
]
