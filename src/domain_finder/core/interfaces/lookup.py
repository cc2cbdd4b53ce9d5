"""
Domain Lookup Protocol

Defines the contract between the batch controller and whatever resolves a
company name to its website. The controller depends only on this protocol,
so tests can substitute an AsyncMock and infrastructure can swap providers.
"""

from typing import Protocol

from domain_finder.core.domain.models import LookupResult


class DomainLookupProtocol(Protocol):
    """Resolves one company name to its official website."""

    async def lookup(self, company_name: str, context_text: str) -> LookupResult:
        """
        Perform exactly one external lookup.

        Args:
            company_name: Company to resolve (non-empty)
            context_text: Event or show the company is associated with (non-empty)

        Returns:
            LookupResult; a None domain means "no official site found"

        Raises:
            ConfigurationError: If the service credential is missing
            LookupFailure: If the call fails or the response is malformed
        """
        ...
