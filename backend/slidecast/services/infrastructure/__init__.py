"""Infrastructure services."""

from .storage import OutputCleanupService

__all__ = ["OutputCleanupService"]
