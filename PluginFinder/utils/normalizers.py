"""
Mapping from raw provider payloads to ProviderResult records
"""

import logging
from typing import Any, Callable, Dict, Optional

from .models import DEFAULT_DESCRIPTION, ProviderResult, SearchQuery

log = logging.getLogger("red.pluginfinder.normalizers")

MODRINTH_COLOR = 0x1BD96A
HANGAR_COLOR = 0xFFCC00
SPIGOT_COLOR = 0x00AFFF

MODRINTH_PAGE = "https://modrinth.com/plugin/{slug}"
HANGAR_PAGE = "https://hangar.papermc.io/{owner}/{slug}"
HANGAR_DOWNLOAD = "https://hangar.papermc.io/api/v1/projects/{owner}/{slug}/versions/{version}"
SPIGOT_PAGE = "https://www.spigotmc.org/resources/{id}/"
SPIGOT_DOWNLOAD = "https://api.spiget.org/v2/resources/{id}/download"

SPIGOT_VERSION_NOTE = "Not filtered, manual check required"


def _description(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_DESCRIPTION


def _download_link(url: str) -> str:
    return f"[Click here]({url})"


def normalize_modrinth(hit: Dict[str, Any], version: Dict[str, Any], query: SearchQuery) -> ProviderResult:
    download_url = version["files"][0]["url"]
    return ProviderResult(
        platform_name="Modrinth",
        title=hit["title"],
        url=MODRINTH_PAGE.format(slug=hit["slug"]),
        description=_description(hit.get("description")),
        accent_color=MODRINTH_COLOR,
        extra_fields=(
            ("Platform", "Modrinth"),
            ("Software", query.software_label),
            ("Version", query.game_version),
            ("Download", _download_link(download_url)),
        ),
    )


def normalize_hangar(project: Dict[str, Any], version: Dict[str, Any], query: SearchQuery) -> ProviderResult:
    owner = project["namespace"]["owner"]
    slug = project["slug"]
    download_url = HANGAR_DOWNLOAD.format(owner=owner, slug=slug, version=version["name"])
    if query.software:
        download_url += f"/{query.software.platform}"
    download_url += "/download"

    return ProviderResult(
        platform_name="Hangar",
        title=project["name"],
        url=HANGAR_PAGE.format(owner=owner, slug=slug),
        description=_description(project.get("description")),
        accent_color=HANGAR_COLOR,
        extra_fields=(
            ("Platform", "Hangar"),
            ("Software", query.software_label),
            ("Version", query.game_version),
            ("Download", _download_link(download_url)),
        ),
    )


def normalize_spiget(resource_id: Any, resource: Dict[str, Any], query: SearchQuery) -> ProviderResult:
    return ProviderResult(
        platform_name="SpigotMC",
        title=resource["name"],
        url=SPIGOT_PAGE.format(id=resource_id),
        description=_description(resource.get("tag")),
        accent_color=SPIGOT_COLOR,
        extra_fields=(
            ("Platform", "SpigotMC"),
            ("Software", query.software_label),
            ("Version", SPIGOT_VERSION_NOTE),
            ("Download", _download_link(SPIGOT_DOWNLOAD.format(id=resource_id))),
        ),
    )


def safe_normalize(provider: str, normalizer: Callable[..., ProviderResult], *args: Any) -> Optional[ProviderResult]:
    """Run a normalizer, turning any mapping error into "no result"."""
    try:
        return normalizer(*args)
    except Exception as e:
        log.warning(f"Could not normalize {provider} payload: {e!r}")
        return None
