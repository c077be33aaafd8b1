"""Storage hygiene for generated videos and job scratch space."""

from .output_cleanup import OutputCleanupService

__all__ = ["OutputCleanupService"]
