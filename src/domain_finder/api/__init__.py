"""Presentation entrypoints."""
