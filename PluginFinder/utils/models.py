"""
Request-scoped data structures shared by the provider clients, the
aggregator and the Discord rendering helpers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .errors import ProviderError

DEFAULT_DESCRIPTION = "No description."

# Discord rejects autocomplete choices longer than this
CHOICE_MAX_LENGTH = 100


class SoftwareFlavor(Enum):
    """Server software a plugin can target."""

    PAPER = "paper"
    SPIGOT = "spigot"
    BUNGEECORD = "bungeecord"
    WATERFALL = "waterfall"

    @property
    def loader(self) -> str:
        """Modrinth loader name."""
        return self.value

    @property
    def platform(self) -> str:
        """Hangar platform name."""
        return self.value.upper()

    @property
    def display_name(self) -> str:
        return {
            SoftwareFlavor.PAPER: "Paper",
            SoftwareFlavor.SPIGOT: "Spigot",
            SoftwareFlavor.BUNGEECORD: "BungeeCord",
            SoftwareFlavor.WATERFALL: "Waterfall",
        }[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SoftwareFlavor"]:
        """Return the flavor for ``value`` or None when no flavor was given."""
        if value is None or not str(value).strip():
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown server software: {value}") from None


@dataclass(frozen=True)
class SearchQuery:
    """A single plugin lookup request."""

    plugin_name: str
    game_version: str
    software: Optional[SoftwareFlavor] = None
    exact_match: bool = True

    def __post_init__(self) -> None:
        name = (self.plugin_name or "").strip()
        version = (self.game_version or "").strip()
        if not name:
            raise ValueError("Plugin name must not be empty")
        if not version:
            raise ValueError("Game version must not be empty")
        object.__setattr__(self, "plugin_name", name)
        object.__setattr__(self, "game_version", version)

    @property
    def software_label(self) -> str:
        return self.software.display_name if self.software else "Any"

    def matches_name(self, candidate: Optional[str]) -> bool:
        """Case-insensitive exact comparison against the requested name."""
        if not candidate:
            return False
        return candidate.strip().casefold() == self.plugin_name.casefold()


@dataclass(frozen=True)
class ProviderResult:
    """Normalised display record for one provider match."""

    platform_name: str
    title: str
    url: str
    description: str = DEFAULT_DESCRIPTION
    accent_color: int = 0x99AAB5
    extra_fields: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class LookupOutcome:
    """Result of one provider lookup: either a result, or the reason for none."""

    provider: str
    result: Optional[ProviderResult] = None
    error: Optional[ProviderError] = None

    @property
    def found(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class AggregateReply:
    """Ordered results for a query (Modrinth, Hangar, Spigot)."""

    query: SearchQuery
    results: Tuple[ProviderResult, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.results

    def __len__(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class AutocompleteSuggestion:
    """One autocomplete choice."""

    label: str
    value: str

    @classmethod
    def from_name(cls, name: str) -> "AutocompleteSuggestion":
        trimmed = name.strip()[:CHOICE_MAX_LENGTH]
        return cls(label=trimmed, value=trimmed)
