"""Infrastructure layer implementations."""

from orderdesk.infrastructure import storage

__all__ = ["storage"]
