"""Database model exports."""

from .cache import CacheEntry

__all__ = ["CacheEntry"]
