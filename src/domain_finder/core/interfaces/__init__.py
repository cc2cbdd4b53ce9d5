"""Protocols implemented by infrastructure adapters."""
