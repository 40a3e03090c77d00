"""
Shared fixtures for the PluginFinder test suite.

Provider HTTP calls are replaced by routing ``_request`` through a dict of
endpoint -> payload, so no test touches the network.
"""

import copy
from unittest.mock import AsyncMock, patch

import pytest

from PluginFinder.utils.errors import NetworkFailure
from PluginFinder.utils.models import SearchQuery, SoftwareFlavor


def route_requests(client, routes):
    """Patch ``client._request`` to answer from ``routes``.

    Values that are exceptions are raised; missing endpoints raise a 404
    NetworkFailure, like a real provider would.
    """

    async def fake_request(method, endpoint, **kwargs):
        if endpoint not in routes:
            raise NetworkFailure(client.provider_name, f"HTTP 404 from {endpoint}", status=404)
        payload = routes[endpoint]
        if isinstance(payload, Exception):
            raise payload
        return payload

    client._request = AsyncMock(side_effect=fake_request)
    return client._request


@pytest.fixture
def worldedit_query():
    return SearchQuery("WorldEdit", "1.20.1", SoftwareFlavor.PAPER)


@pytest.fixture
def modrinth_search():
    return {
        "hits": [
            {
                "title": "WorldEdit Extras",
                "slug": "worldedit-extras",
                "project_id": "extra123",
                "description": "Not the one",
            },
            {
                "title": "WorldEdit",
                "slug": "worldedit",
                "project_id": "1u6JkXh5",
                "description": "In-game Minecraft map editor",
            },
        ]
    }


@pytest.fixture
def modrinth_versions():
    return [
        {
            "name": "7.2.15",
            "files": [
                {"url": "https://cdn.modrinth.com/data/1u6JkXh5/versions/7.2.15/worldedit-bukkit-7.2.15.jar"},
                {"url": "https://cdn.modrinth.com/data/1u6JkXh5/versions/7.2.15/sources.jar"},
            ],
        },
        {
            "name": "7.2.14",
            "files": [{"url": "https://cdn.modrinth.com/data/1u6JkXh5/versions/7.2.14/worldedit-bukkit-7.2.14.jar"}],
        },
    ]


@pytest.fixture
def hangar_search():
    return {
        "result": [
            {
                "name": "WorldEdit",
                "slug": "WorldEdit",
                "namespace": {"owner": "EngineHub"},
                "description": "",
            }
        ]
    }


@pytest.fixture
def hangar_versions():
    return [
        {"name": "7.3.0", "minecraftVersions": ["1.20.4"], "platforms": ["PAPER"]},
        {"name": "7.2.15", "minecraftVersions": ["1.20", "1.20.1"], "platforms": ["PAPER"]},
    ]


@pytest.fixture
def spiget_search():
    return [{"id": 13932, "name": "WorldEdit"}, {"id": 1, "name": "WorldEditSUI"}]


@pytest.fixture
def spiget_resource():
    return {"id": 13932, "name": "WorldEdit", "tag": "A Minecraft map editor... that runs in-game!"}


class _ValueContext:
    """Awaitable / async context manager returned by ``FakeConfig.<key>()``."""

    def __init__(self, store, key):
        self._store = store
        self._key = key

    def __await__(self):
        return self._get().__await__()

    async def _get(self):
        return copy.deepcopy(self._store[self._key])

    async def __aenter__(self):
        self._value = self._store[self._key]
        return self._value

    async def __aexit__(self, *exc):
        self._store[self._key] = self._value
        return False


class _Value:
    def __init__(self, store, key):
        self._store = store
        self._key = key

    def __call__(self):
        return _ValueContext(self._store, self._key)

    async def set(self, value):
        self._store[self._key] = value


class FakeConfig:
    """In-memory stand-in for Red's global Config scope."""

    def __init__(self):
        self._store = {}

    def register_global(self, **defaults):
        for key, value in defaults.items():
            self._store.setdefault(key, copy.deepcopy(value))

    def __getattr__(self, key):
        if key.startswith("_"):
            raise AttributeError(key)
        return _Value(self._store, key)

    async def all(self):
        return copy.deepcopy(self._store)


@pytest.fixture
def fake_config():
    with patch("PluginFinder.utils.config.Config", FakeConfig):
        yield FakeConfig()
