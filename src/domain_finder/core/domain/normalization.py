"""
Answer normalization for domain lookups.

The model is asked to answer with a single URL or the NOT FOUND sentinel.
These helpers turn whatever text comes back into either a URL with a scheme
or None.
"""

import re

NOT_FOUND_SENTINEL = "NOT FOUND"

_FENCE_PATTERN = re.compile(r"```\w*\n?|```")
_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_DOMAIN_PATTERN = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}(?::\d+)?(?:/\S*)?$",
    re.IGNORECASE,
)
_EMBEDDED_URL_PATTERN = re.compile(r"https?://[^\s<>\"'`)\]]+", re.IGNORECASE)
_WRAPPING_CHARS = "\"'`<>*"
_TRAILING_PUNCTUATION = ".,;:!?)"


def strip_markdown_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text).strip()


def is_not_found(text: str) -> bool:
    """True if ``text`` is the NOT FOUND sentinel, ignoring case and trailing punctuation."""
    cleaned = text.strip().strip(_WRAPPING_CHARS).rstrip(_TRAILING_PUNCTUATION).strip()
    return cleaned.upper() == NOT_FOUND_SENTINEL


def normalize_domain_answer(raw: str | None) -> str | None:
    """
    Normalize a raw model answer into a website URL.

    Rules, in order:
    - empty answer or the NOT FOUND sentinel -> None
    - answer starting with http(s):// -> kept (trailing punctuation removed)
    - bare domain such as ``www.example.com`` -> prefixed with ``https://``
    - a URL embedded in prose -> the first such URL
    - anything else -> None

    Args:
        raw: Text returned by the model

    Returns:
        URL string or None when no website was identified
    """
    if raw is None:
        return None

    text = strip_markdown_fences(raw)
    text = text.strip().strip(_WRAPPING_CHARS).strip()
    if not text or is_not_found(text):
        return None

    candidate = text.rstrip(_TRAILING_PUNCTUATION)
    if _SCHEME_PATTERN.match(candidate) and not any(c.isspace() for c in candidate):
        return candidate

    if _DOMAIN_PATTERN.match(candidate):
        return f"https://{candidate}"

    embedded = _EMBEDDED_URL_PATTERN.search(text)
    if embedded:
        return embedded.group(0).rstrip(_TRAILING_PUNCTUATION)

    return None
