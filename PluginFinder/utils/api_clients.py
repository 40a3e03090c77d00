"""
API Client classes for PluginFinder cog
Handles communication with Modrinth, Hangar and Spiget (SpigotMC)
"""

import aiohttp
import asyncio
from abc import ABC, abstractmethod
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .errors import MalformedResponse, NetworkFailure, NoMatch, ProviderError
from .models import AutocompleteSuggestion, LookupOutcome, ProviderResult, SearchQuery
from .normalizers import normalize_hangar, normalize_modrinth, normalize_spiget, safe_normalize

log = logging.getLogger("red.pluginfinder.api_clients")

USER_AGENT = "PluginFinder-RedCog/1.0"
SUGGESTION_LIMIT = 5

# Raised while walking a payload that does not have the expected shape
PAYLOAD_ERRORS = (KeyError, TypeError, IndexError, AttributeError, ValueError)


class BaseAPIClient:
    """Base API client with common functionality"""

    provider_name = "api"

    def __init__(self, base_url: str, headers: Dict[str, str] = None, timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.headers = {'User-Agent': USER_AGENT}
        self.headers.update(headers or {})
        self.timeout = timeout
        self.session = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout, headers=self.headers)
        return self.session

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Make HTTP request to API and return the decoded JSON body"""
        session = await self._get_session()
        url = f"{self.base_url}{endpoint}"

        try:
            async with session.request(method, url, **kwargs) as response:
                response.raise_for_status()
                return await response.json()
        except aiohttp.ContentTypeError as e:
            raise MalformedResponse(self.provider_name, f"non-JSON response from {endpoint}", e)
        except aiohttp.ClientResponseError as e:
            raise NetworkFailure(self.provider_name, f"HTTP {e.status} from {endpoint}", e, status=e.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkFailure(self.provider_name, f"request to {endpoint} failed: {e!r}", e)
        except json.JSONDecodeError as e:
            raise MalformedResponse(self.provider_name, f"invalid JSON from {endpoint}", e)

    async def close(self):
        """Close the session"""
        if self.session and not self.session.closed:
            await self.session.close()


class PluginProviderClient(BaseAPIClient, ABC):
    """Shared lookup/suggest flow for plugin hosting services.

    Subclasses implement ``fetch`` (raising ProviderError subclasses) and
    ``search_names``. ``lookup`` and ``suggest`` never raise.
    """

    provider_name = "provider"
    base = ""

    def __init__(self, timeout: float = 30):
        super().__init__(self.base, timeout=timeout)

    @abstractmethod
    async def fetch(self, query: SearchQuery) -> ProviderResult:
        """Resolve a query to a result, raising ProviderError subclasses."""
        pass

    @abstractmethod
    async def search_names(self, partial_name: str, limit: int) -> List[str]:
        """Names of the first search hits for a partial name."""
        pass

    async def lookup(self, query: SearchQuery) -> LookupOutcome:
        """Look a plugin up, converting every failure into an empty outcome."""
        try:
            result = await self.fetch(query)
        except NoMatch as e:
            log.debug(f"{self.provider_name}: no match for {query.plugin_name!r}: {e}")
            return LookupOutcome(self.provider_name, error=e)
        except ProviderError as e:
            log.warning(f"{self.provider_name} lookup failed: {e}")
            return LookupOutcome(self.provider_name, error=e)
        except PAYLOAD_ERRORS as e:
            error = MalformedResponse(self.provider_name, f"unexpected payload: {e!r}", e)
            log.warning(f"{self.provider_name} lookup failed: {error}")
            return LookupOutcome(self.provider_name, error=error)
        return LookupOutcome(self.provider_name, result=result)

    async def suggest(self, partial_name: str) -> List[AutocompleteSuggestion]:
        """Return at most five name suggestions, or none on failure."""
        try:
            names = await self.search_names(partial_name, SUGGESTION_LIMIT)
        except NoMatch:
            return []
        except ProviderError as e:
            log.warning(f"{self.provider_name} suggestions failed: {e}")
            return []
        except PAYLOAD_ERRORS as e:
            log.warning(f"{self.provider_name} suggestions failed: unexpected payload: {e!r}")
            return []

        suggestions = [
            AutocompleteSuggestion.from_name(name)
            for name in names
            if isinstance(name, str) and name.strip()
        ]
        return suggestions[:SUGGESTION_LIMIT]

    def _select(self, candidates: Any, query: SearchQuery, key: str) -> Dict[str, Any]:
        """Pick the search hit to use: exact name match, or the first hit."""
        if not isinstance(candidates, list):
            raise MalformedResponse(self.provider_name, "search results are not a list")
        if not candidates:
            raise NoMatch(self.provider_name, f"no search hits for {query.plugin_name!r}")

        if not query.exact_match:
            return candidates[0]

        for candidate in candidates:
            if query.matches_name(candidate.get(key)):
                return candidate
        raise NoMatch(self.provider_name, f"no hit named exactly {query.plugin_name!r}")

    def _normalized(self, normalizer, *args) -> ProviderResult:
        result = safe_normalize(self.provider_name, normalizer, *args)
        if result is None:
            raise MalformedResponse(self.provider_name, "could not build a result from the response")
        return result


class ModrinthClient(PluginProviderClient):
    """Modrinth API v2 client"""

    provider_name = "Modrinth"
    base = "https://api.modrinth.com/v2"

    async def search(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {'query': query}
        if limit:
            params['limit'] = limit
        response = await self._request('GET', '/search', params=params)
        return response['hits']

    async def get_versions(self, project_id: str, game_version: str, loader: Optional[str] = None) -> List[Dict[str, Any]]:
        """Versions of a project filtered by game version and, optionally, loader"""
        params = {'game_versions': json.dumps([game_version])}
        if loader:
            params['loaders'] = json.dumps([loader])
        return await self._request('GET', f'/project/{quote(project_id, safe="")}/version', params=params)

    async def fetch(self, query: SearchQuery) -> ProviderResult:
        hit = self._select(await self.search(query.plugin_name), query, 'title')
        loader = query.software.loader if query.software else None
        versions = await self.get_versions(hit['project_id'], query.game_version, loader)
        if not versions:
            raise NoMatch(self.provider_name, f"no version of {hit['title']!r} for {query.software_label} {query.game_version}")
        return self._normalized(normalize_modrinth, hit, versions[0], query)

    async def search_names(self, partial_name: str, limit: int) -> List[str]:
        hits = await self.search(partial_name, limit=limit)
        return [hit.get('title') for hit in hits[:limit]]


class HangarClient(PluginProviderClient):
    """Hangar (PaperMC) API v1 client"""

    provider_name = "Hangar"
    base = "https://hangar.papermc.io/api/v1"

    async def search(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {'query': query}
        if limit:
            params['limit'] = limit
        response = await self._request('GET', '/projects/search', params=params)
        return response['result']

    async def get_versions(self, owner: str, slug: str) -> List[Dict[str, Any]]:
        response = await self._request('GET', f'/projects/{quote(owner, safe="")}/{quote(slug, safe="")}/versions')
        # Paginated responses wrap the list
        if isinstance(response, dict):
            return response['result']
        return response

    @staticmethod
    def version_matches(version: Dict[str, Any], query: SearchQuery) -> bool:
        """True when a version supports the game version and the requested platform"""
        dependencies = version.get('platformDependencies')
        if isinstance(dependencies, dict) and 'minecraftVersions' not in version:
            platforms = list(dependencies)
            if query.software:
                game_versions = dependencies.get(query.software.platform) or []
            else:
                game_versions = [v for versions in dependencies.values() for v in versions]
        else:
            game_versions = version['minecraftVersions']
            platforms = version.get('platforms') or []

        if query.game_version not in game_versions:
            return False
        if query.software is None:
            return True
        return query.software.platform in [str(p).upper() for p in platforms]

    async def fetch(self, query: SearchQuery) -> ProviderResult:
        project = self._select(await self.search(query.plugin_name), query, 'name')
        owner = project['namespace']['owner']
        versions = await self.get_versions(owner, project['slug'])
        match = next((v for v in versions if self.version_matches(v, query)), None)
        if match is None:
            raise NoMatch(self.provider_name, f"no version of {project['name']!r} for {query.software_label} {query.game_version}")
        return self._normalized(normalize_hangar, project, match, query)

    async def search_names(self, partial_name: str, limit: int) -> List[str]:
        projects = await self.search(partial_name, limit=limit)
        return [project.get('name') for project in projects[:limit]]


class SpigetClient(PluginProviderClient):
    """Spiget (SpigotMC mirror) API v2 client

    Spiget exposes no server-version or software filter, so a name match is
    always returned with a manual-check note.
    """

    provider_name = "Spiget"
    base = "https://api.spiget.org/v2"

    async def search(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {'size': limit} if limit else None
        try:
            return await self._request('GET', f'/search/resources/{quote(query, safe="")}', params=params)
        except NetworkFailure as e:
            # Spiget answers 404 when nothing matches
            if e.status == 404:
                raise NoMatch(self.provider_name, f"no search hits for {query!r}")
            raise

    async def get_resource(self, resource_id: Any) -> Dict[str, Any]:
        return await self._request('GET', f'/resources/{resource_id}')

    async def fetch(self, query: SearchQuery) -> ProviderResult:
        hit = self._select(await self.search(query.plugin_name), query, 'name')
        resource_id = hit['id']
        resource = await self.get_resource(resource_id)
        return self._normalized(normalize_spiget, resource_id, resource, query)

    async def search_names(self, partial_name: str, limit: int) -> List[str]:
        resources = await self.search(partial_name, limit=limit)
        return [resource.get('name') for resource in resources[:limit]]
