"""Configuration management."""

from domain_finder.config.settings import FinderSettings

__all__ = ["FinderSettings"]
