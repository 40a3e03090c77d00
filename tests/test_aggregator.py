"""
Tests for PluginAggregator.resolve/suggest and merge_suggestions.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from PluginFinder.utils.aggregator import MAX_SUGGESTIONS, PluginAggregator, merge_suggestions
from PluginFinder.utils.api_clients import HangarClient, ModrinthClient, SpigetClient
from PluginFinder.utils.errors import NoMatch
from PluginFinder.utils.models import AutocompleteSuggestion, LookupOutcome, ProviderResult, SearchQuery

from conftest import route_requests


def _result(platform):
    return ProviderResult(platform_name=platform, title=f"{platform} plugin", url=f"https://{platform.lower()}.example")


def _client(cls, outcome=None, delay=0.0, suggestions=None, suggest_error=None):
    """A provider client whose lookup/suggest are replaced by coroutines."""
    client = cls()

    async def lookup(query):
        await asyncio.sleep(delay)
        if outcome is None:
            return LookupOutcome(client.provider_name, error=NoMatch(client.provider_name, "nothing"))
        return LookupOutcome(client.provider_name, result=outcome)

    async def suggest(partial_name):
        await asyncio.sleep(delay)
        if suggest_error:
            raise suggest_error
        return [AutocompleteSuggestion.from_name(name) for name in (suggestions or [])]

    client.lookup = AsyncMock(side_effect=lookup)
    client.suggest = AsyncMock(side_effect=suggest)
    return client


@pytest.fixture
def query():
    return SearchQuery("WorldEdit", "1.20.1")


# ══════════════════════════════════════════════════════════════════════════════
#  1. RESOLVE
# ══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [True, False])
async def test_resolve_keeps_provider_order_regardless_of_latency(query, concurrent):
    clients = [
        _client(ModrinthClient, _result("Modrinth"), delay=0.05),
        _client(HangarClient, _result("Hangar"), delay=0.02),
        _client(SpigetClient, _result("SpigotMC"), delay=0.0),
    ]

    reply = await PluginAggregator(clients, concurrent=concurrent).resolve(query)

    assert [r.platform_name for r in reply.results] == ["Modrinth", "Hangar", "SpigotMC"]
    assert len(reply) == 3
    assert reply.query is query


@pytest.mark.asyncio
async def test_resolve_excludes_absent_provider_only(query):
    clients = [
        _client(ModrinthClient, _result("Modrinth")),
        _client(HangarClient, None),
        _client(SpigetClient, _result("SpigotMC")),
    ]

    reply = await PluginAggregator(clients).resolve(query)

    assert [r.platform_name for r in reply.results] == ["Modrinth", "SpigotMC"]


@pytest.mark.asyncio
async def test_resolve_survives_unexpected_exception(query):
    broken = ModrinthClient()
    broken.lookup = AsyncMock(side_effect=RuntimeError("boom"))
    clients = [broken, _client(HangarClient, _result("Hangar"))]

    for concurrent in (True, False):
        reply = await PluginAggregator(clients, concurrent=concurrent).resolve(query)
        assert [r.platform_name for r in reply.results] == ["Hangar"]


@pytest.mark.asyncio
async def test_resolve_all_empty_is_empty_reply(query):
    clients = [_client(ModrinthClient), _client(HangarClient), _client(SpigetClient)]

    reply = await PluginAggregator(clients).resolve(query)

    assert reply.is_empty
    assert reply.results == ()


@pytest.mark.asyncio
async def test_resolve_is_idempotent(query):
    clients = [
        _client(ModrinthClient, _result("Modrinth")),
        _client(HangarClient, None),
        _client(SpigetClient, _result("SpigotMC")),
    ]
    aggregator = PluginAggregator(clients)

    first = await aggregator.resolve(query)
    second = await aggregator.resolve(query)

    assert first == second


@pytest.mark.asyncio
async def test_resolve_worldedit_scenario_with_real_clients(
    worldedit_query, modrinth_search, modrinth_versions
):
    modrinth = ModrinthClient()
    route_requests(modrinth, {
        "/search": modrinth_search,
        "/project/1u6JkXh5/version": modrinth_versions,
    })
    hangar = HangarClient()
    route_requests(hangar, {"/projects/search": {"result": []}})
    spiget = SpigetClient()
    route_requests(spiget, {"/search/resources/WorldEdit": []})

    reply = await PluginAggregator([modrinth, hangar, spiget]).resolve(worldedit_query)

    assert len(reply) == 1
    result = reply.results[0]
    assert result.platform_name == "Modrinth"
    assert dict(result.extra_fields)["Download"] == f"[Click here]({modrinth_versions[0]['files'][0]['url']})"


@pytest.mark.asyncio
async def test_resolve_with_no_clients_is_empty(query):
    reply = await PluginAggregator([]).resolve(query)
    assert reply.is_empty


# ══════════════════════════════════════════════════════════════════════════════
#  2. SUGGEST
# ══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_suggest_merges_in_provider_order_and_dedupes():
    clients = [
        _client(ModrinthClient, suggestions=["WorldEdit", "WorldGuard"], delay=0.03),
        _client(HangarClient, suggestions=["WorldEdit", "WorldBorder"]),
        _client(SpigetClient, suggestions=["WorldGuard", "Worlds"]),
    ]

    suggestions = await PluginAggregator(clients).suggest("World")

    assert [s.value for s in suggestions] == ["WorldEdit", "WorldGuard", "WorldBorder", "Worlds"]


@pytest.mark.asyncio
async def test_suggest_ignores_failing_provider():
    clients = [
        _client(ModrinthClient, suggest_error=RuntimeError("down")),
        _client(HangarClient, suggestions=["WorldEdit"]),
    ]

    suggestions = await PluginAggregator(clients, concurrent=False).suggest("World")

    assert [s.value for s in suggestions] == ["WorldEdit"]


@pytest.mark.asyncio
async def test_suggest_blank_input_makes_no_calls():
    client = _client(ModrinthClient, suggestions=["WorldEdit"])

    assert await PluginAggregator([client]).suggest("   ") == []
    client.suggest.assert_not_called()


def test_merge_suggestions_caps_at_limit():
    groups = [
        [AutocompleteSuggestion.from_name(f"p{g}-{i}") for i in range(10)]
        for g in range(4)
    ]

    merged = merge_suggestions(groups)

    assert len(merged) == MAX_SUGGESTIONS == 25
    assert len({s.value for s in merged}) == len(merged)
    assert merged[0].value == "p0-0"
    assert merged[-1].value == "p2-4"


def test_merge_suggestions_keeps_first_label_for_duplicate_value():
    first = AutocompleteSuggestion(label="WorldEdit (Modrinth)", value="WorldEdit")
    second = AutocompleteSuggestion(label="WorldEdit (Hangar)", value="WorldEdit")

    assert merge_suggestions([[first], [second]]) == [first]


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [True, False])
async def test_suggest_drops_slow_provider(concurrent):
    clients = [
        _client(ModrinthClient, suggestions=["WorldEdit"], delay=1.0),
        _client(HangarClient, suggestions=["WorldGuard"]),
        _client(SpigetClient, suggestions=["WorldBorder"], delay=1.0),
    ]
    aggregator = PluginAggregator(clients, concurrent=concurrent, suggest_timeout=0.05)

    loop = asyncio.get_running_loop()
    started = loop.time()
    suggestions = await aggregator.suggest("World")

    assert [s.value for s in suggestions] == ["WorldGuard"]
    assert loop.time() - started < 0.5
