from redbot.core import Config
from typing import Dict, Any
from .errors import ConfigError

PROVIDERS = ("modrinth", "hangar", "spiget")

MIN_TIMEOUT = 5
MAX_TIMEOUT = 120

defaults = {
    "providers": {name: True for name in PROVIDERS},
    "concurrent": True,
    "exact_match": True,
    "request_timeout": 30,
}


class ConfigManager:
    """Manages configuration for PluginFinder."""

    def __init__(self, bot_config: Config):
        """Initialize config manager.

        Args:
            bot_config: Red bot Config instance
        """
        if not isinstance(bot_config, Config):
            raise ConfigError("Invalid config object provided")
        self.config = bot_config
        self.config.register_global(**defaults)

    async def get_settings(self) -> Dict[str, Any]:
        """Get all global settings."""
        return await self.config.all()

    async def get_enabled_providers(self) -> Dict[str, bool]:
        return await self.config.providers()

    async def toggle_provider(self, provider: str) -> bool:
        """Toggle a provider and return its new state."""
        provider = provider.lower()
        if provider not in PROVIDERS:
            raise ConfigError(f"Unknown provider '{provider}'. Valid providers: {', '.join(PROVIDERS)}")
        try:
            async with self.config.providers() as providers:
                providers[provider] = not providers.get(provider, True)
                return providers[provider]
        except Exception as e:
            raise ConfigError(f"Failed to toggle provider: {str(e)}")

    async def is_concurrent(self) -> bool:
        return await self.config.concurrent()

    async def set_concurrent(self, value: bool) -> None:
        await self.config.concurrent.set(bool(value))

    async def is_exact_match(self) -> bool:
        return await self.config.exact_match()

    async def set_exact_match(self, value: bool) -> None:
        await self.config.exact_match.set(bool(value))

    async def get_timeout(self) -> int:
        return await self.config.request_timeout()

    async def set_timeout(self, seconds: int) -> None:
        """Set the per-request timeout in seconds."""
        if not MIN_TIMEOUT <= seconds <= MAX_TIMEOUT:
            raise ConfigError(f"Timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds")
        await self.config.request_timeout.set(seconds)
