"""Bookmark storage adapters."""
