"""Infrastructure layer implementations."""

from rentrack.infrastructure import storage

__all__ = ["storage"]
