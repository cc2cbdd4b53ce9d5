"""
Gemini Domain Lookup

Resolves a company name to its official website with one LiteLLM completion
against a Gemini model with Google Search grounding enabled. The answer text
is normalized into a URL (or None for NOT FOUND) and the first web grounding
citation, if any, becomes the source URL.

No retries happen here: a failed call raises LookupFailure and the caller
decides what to do with it.
"""

import os
import time
from typing import Any

import litellm
import structlog

from domain_finder.config.settings import FinderSettings
from domain_finder.core.domain.errors import ConfigurationError, LookupFailure
from domain_finder.core.domain.models import LookupResult
from domain_finder.core.domain.normalization import (
    NOT_FOUND_SENTINEL,
    normalize_domain_answer,
)

logger = structlog.get_logger()

GOOGLE_SEARCH_TOOL = {"googleSearch": {}}

PROMPT_TEMPLATE = """Task: Find the official website URL (domain) for the company "{company_name}".
Context: This company is attending the trade show or event: "{context_text}".

Instructions:
1. Use Google Search to find the official homepage.
2. Return ONLY the website URL (e.g., https://www.example.com).
3. If you cannot find a specific website for this company, return "{not_found}".
4. Do not include any explanation, markdown, or extra text. Just the URL.
"""


def build_prompt(company_name: str, context_text: str) -> str:
    return PROMPT_TEMPLATE.format(
        company_name=company_name,
        context_text=context_text,
        not_found=NOT_FOUND_SENTINEL,
    )


def _get(obj: Any, *keys: str) -> Any:
    """Read the first present key from a dict or attribute from an object."""
    for key in keys:
        if isinstance(obj, dict):
            if obj.get(key) is not None:
                return obj[key]
        elif getattr(obj, key, None) is not None:
            return getattr(obj, key)
    return None


def extract_source_url(response: Any) -> str | None:
    """
    Return the URI of the first web grounding chunk in a LiteLLM response.

    LiteLLM exposes Gemini grounding metadata as ``vertex_ai_grounding_metadata``
    (a list with one entry per candidate), either as a response attribute or
    in ``_hidden_params``.
    """
    metadata = getattr(response, "vertex_ai_grounding_metadata", None)
    if metadata is None:
        hidden = getattr(response, "_hidden_params", None) or {}
        if isinstance(hidden, dict):
            metadata = hidden.get("vertex_ai_grounding_metadata")
    if not metadata:
        return None

    candidates = metadata if isinstance(metadata, list) else [metadata]
    for candidate in candidates:
        chunks = _get(candidate, "groundingChunks", "grounding_chunks") or []
        for chunk in chunks:
            web = _get(chunk, "web")
            uri = _get(web, "uri") if web is not None else None
            if uri:
                return uri
    return None


class GeminiDomainLookup:
    """DomainLookupProtocol implementation backed by Gemini via LiteLLM."""

    def __init__(
        self,
        model: str = "gemini/gemini-2.5-flash",
        temperature: float = 0.1,
        timeout: float = 60.0,
        api_key_env: str = "GEMINI_API_KEY",
    ):
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.api_key_env = api_key_env
        self.logger = logger.bind(component="gemini_lookup", model=model)

    @classmethod
    def from_settings(cls, settings: FinderSettings) -> "GeminiDomainLookup":
        return cls(
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.request_timeout_seconds,
            api_key_env=settings.api_key_env,
        )

    def _get_api_key(self) -> str:
        api_key = os.getenv(self.api_key_env, "").strip()
        if not api_key:
            raise ConfigurationError(
                f"{self.api_key_env} environment variable is missing",
                suggestion=f"Export {self.api_key_env} or add it to a .env file",
            )
        return api_key

    async def lookup(self, company_name: str, context_text: str) -> LookupResult:
        """
        Resolve ``company_name`` to its website with one grounded completion.

        Args:
            company_name: Company to resolve
            context_text: Event or show the company attends

        Returns:
            LookupResult with a normalized URL (or None) and source citation

        Raises:
            ConfigurationError: If the API key environment variable is unset
            LookupFailure: If the call fails or the response has no message
        """
        if not company_name or not company_name.strip():
            raise LookupFailure("Company name is empty")

        api_key = self._get_api_key()
        log = self.logger.bind(company=company_name)
        start_time = time.time()

        log.debug("lookup.started")
        try:
            response = await litellm.acompletion(
                model=self.model,
                messages=[
                    {"role": "user", "content": build_prompt(company_name, context_text)}
                ],
                tools=[GOOGLE_SEARCH_TOOL],
                temperature=self.temperature,
                timeout=self.timeout,
                api_key=api_key,
                num_retries=0,
            )
        except Exception as e:
            log.error(
                "lookup.failed",
                error_type=type(e).__name__,
                error=str(e)[:200],
            )
            raise LookupFailure(str(e) or "Failed to fetch domain", company_name) from e

        raw_answer = self._extract_answer(response, company_name)
        domain = normalize_domain_answer(raw_answer)
        source_url = extract_source_url(response)
        latency_ms = int((time.time() - start_time) * 1000)

        if domain is None and raw_answer.strip() and NOT_FOUND_SENTINEL not in raw_answer.upper():
            log.warning("lookup.unrecognized_answer", answer=raw_answer[:200])

        log.info(
            "lookup.completed",
            found=domain is not None,
            has_source=source_url is not None,
            latency_ms=latency_ms,
        )
        return LookupResult(domain=domain, source_url=source_url)

    def _extract_answer(self, response: Any, company_name: str) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise LookupFailure(
                "Malformed response from lookup service: no message", company_name
            ) from e
        if content is None:
            # Grounded responses can legitimately carry no text
            return ""
        if not isinstance(content, str):
            raise LookupFailure(
                f"Malformed response from lookup service: unexpected content type "
                f"{type(content).__name__}",
                company_name,
            )
        return content
