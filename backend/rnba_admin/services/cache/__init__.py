"""Unified two-tier cache service."""

from .cache_manager import CacheManager

__all__ = ["CacheManager"]
