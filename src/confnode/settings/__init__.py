"""Library settings loading."""

from .app import LibrarySettings, get_settings


__all__ = ["LibrarySettings", "get_settings"]
