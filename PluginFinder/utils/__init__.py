"""
PluginFinder Utils Package
Contains provider API clients, the result aggregator and Discord helpers
"""

from .api_clients import (
    BaseAPIClient,
    PluginProviderClient,
    ModrinthClient,
    HangarClient,
    SpigetClient
)
from .aggregator import PluginAggregator, merge_suggestions
from .config import ConfigManager
from .errors import (
    PluginFinderError,
    ProviderError,
    NetworkFailure,
    NoMatch,
    MalformedResponse,
    ConfigError
)
from .models import (
    SoftwareFlavor,
    SearchQuery,
    ProviderResult,
    LookupOutcome,
    AggregateReply,
    AutocompleteSuggestion
)
from .plugin_helpers import PluginEmbedHelper, not_found_message

__all__ = [
    'BaseAPIClient',
    'PluginProviderClient',
    'ModrinthClient',
    'HangarClient',
    'SpigetClient',
    'PluginAggregator',
    'merge_suggestions',
    'ConfigManager',
    'PluginFinderError',
    'ProviderError',
    'NetworkFailure',
    'NoMatch',
    'MalformedResponse',
    'ConfigError',
    'SoftwareFlavor',
    'SearchQuery',
    'ProviderResult',
    'LookupOutcome',
    'AggregateReply',
    'AutocompleteSuggestion',
    'PluginEmbedHelper',
    'not_found_message'
]
