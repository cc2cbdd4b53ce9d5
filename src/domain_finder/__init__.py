"""Domain Finder - AI-powered company domain enrichment."""

__version__ = "0.1.0"
