"""LLM-backed lookup adapters."""
