"""Database models package."""

from .document import Document

__all__ = ["Document"]
