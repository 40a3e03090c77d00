from typing import Optional


class PluginFinderError(Exception):
    """Base exception class for PluginFinder errors."""
    pass


class ProviderError(PluginFinderError):
    """Base class for errors raised inside a provider client."""
    def __init__(self, provider: str, message: str, original_error: Optional[Exception] = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(f"{provider}: {message}")


class NetworkFailure(ProviderError):
    """Raised when a remote call fails at the transport or HTTP level."""
    def __init__(self, provider: str, message: str, original_error: Optional[Exception] = None, status: Optional[int] = None):
        self.status = status
        super().__init__(provider, message, original_error)


class NoMatch(ProviderError):
    """Raised when a provider answered but nothing satisfied the filters."""
    pass


class MalformedResponse(ProviderError):
    """Raised when a provider response is missing an expected field."""
    pass


class ConfigError(PluginFinderError):
    """Raised when configuration operations fail."""
    pass
