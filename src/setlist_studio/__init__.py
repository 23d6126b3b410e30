"""Setlist Studio: music library and setlist management for working musicians."""

__version__ = "1.0.0"
