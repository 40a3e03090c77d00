"""
Runs the provider clients for one request and merges what they return
"""

import asyncio
import logging
from typing import Iterable, List, Sequence

from .api_clients import PluginProviderClient
from .models import AggregateReply, AutocompleteSuggestion, LookupOutcome, SearchQuery

log = logging.getLogger("red.pluginfinder.aggregator")

# Discord accepts at most this many autocomplete choices
MAX_SUGGESTIONS = 25

# Discord drops autocomplete responses after about three seconds
SUGGEST_TIMEOUT = 2.5


def merge_suggestions(groups: Iterable[Sequence[AutocompleteSuggestion]], limit: int = MAX_SUGGESTIONS) -> List[AutocompleteSuggestion]:
    """Flatten suggestion groups in order, keeping the first of each value."""
    merged = {}
    for group in groups:
        for suggestion in group:
            if suggestion.value not in merged:
                merged[suggestion.value] = suggestion
            if len(merged) >= limit:
                return list(merged.values())
    return list(merged.values())


class PluginAggregator:
    """Queries every provider client and collects results in client order."""

    def __init__(self, clients: Sequence[PluginProviderClient], concurrent: bool = True,
                 suggest_timeout: float = SUGGEST_TIMEOUT):
        self.clients = list(clients)
        self.concurrent = concurrent
        self.suggest_timeout = suggest_timeout

    async def _run(self, calls):
        if self.concurrent:
            return await asyncio.gather(*(call() for call in calls), return_exceptions=True)

        results = []
        for call in calls:
            try:
                results.append(await call())
            except Exception as e:
                results.append(e)
        return results

    async def resolve(self, query: SearchQuery) -> AggregateReply:
        calls = [lambda client=client: client.lookup(query) for client in self.clients]
        outcomes = await self._run(calls)

        results = []
        for client, outcome in zip(self.clients, outcomes):
            if isinstance(outcome, BaseException):
                log.error(f"{client.provider_name} lookup raised unexpectedly: {outcome!r}")
                continue
            if isinstance(outcome, LookupOutcome) and outcome.found:
                results.append(outcome.result)

        log.debug(
            f"Resolved {query.plugin_name!r} ({query.software_label} {query.game_version}): "
            f"{[r.platform_name for r in results]}"
        )
        return AggregateReply(query=query, results=tuple(results))

    async def suggest(self, partial_name: str) -> List[AutocompleteSuggestion]:
        partial_name = (partial_name or "").strip()
        if not partial_name:
            return []

        # Suggestions are always fetched concurrently, each bounded by suggest_timeout
        outcomes = await asyncio.gather(
            *(asyncio.wait_for(client.suggest(partial_name), self.suggest_timeout) for client in self.clients),
            return_exceptions=True
        )
        groups = []
        for client, suggestions in zip(self.clients, outcomes):
            if isinstance(suggestions, asyncio.TimeoutError):
                log.warning(f"{client.provider_name} suggestions timed out after {self.suggest_timeout}s")
                continue
            if isinstance(suggestions, BaseException):
                log.warning(f"{client.provider_name} suggestions raised: {suggestions!r}")
                continue
            groups.append(suggestions)
        return merge_suggestions(groups)
