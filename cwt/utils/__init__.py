"""Utility functions for cwt."""

from .paths import normalize_path, sanitize_name

__all__ = ["normalize_path", "sanitize_name"]
