"""
LFU Cache - Thread-Safe Approximate LFU with Watermark Eviction

Usage:
    from lfucache import LFUCache

    cache = LFUCache(upper_bound=1000, lower_bound=800)
    cache.set("key", value)
    value = cache.get("key")  # Returns None on miss
"""

from .core import LFUCache
from .logging import configure_logging

__version__ = "1.0.0"
__all__ = ["LFUCache", "configure_logging"]
