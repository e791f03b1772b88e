"""Prefetch cache for narrator chunk audio."""

from .models import CacheEntry
from .prefetch import PrefetchCache

__all__ = ["CacheEntry", "PrefetchCache"]
