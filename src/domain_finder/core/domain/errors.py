"""
Domain Errors

Exception hierarchy for the enrichment domain. Every error carries a
human-readable message and an optional suggestion shown to the user.
"""


class DomainFinderError(Exception):
    """Base exception for all Domain Finder errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigurationError(DomainFinderError):
    """Required configuration (such as the API credential) is missing or invalid."""


class LookupFailure(DomainFinderError):
    """An external lookup call could not be completed."""

    def __init__(self, message: str, company_name: str | None = None) -> None:
        super().__init__(message)
        self.company_name = company_name


class ValidationError(DomainFinderError):
    """A run was requested while its preconditions are not met."""


class InvalidTransitionError(DomainFinderError):
    """An entry was asked to move to a status its lifecycle does not allow."""
