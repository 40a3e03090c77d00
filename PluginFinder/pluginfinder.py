"""
🔌 PluginFinder - Find Minecraft plugins without leaving Discord!
Created by DevelopmentCats with EXTREME FELINE PRECISION 🐱

Searches Modrinth, Hangar and SpigotMC for a plugin and replies with
whatever each of them has for your server software and version.
"""

import discord
from redbot.core import commands, Config, app_commands
from redbot.core.bot import Red
from typing import Optional, List
import logging

from .utils import (
    ModrinthClient, HangarClient, SpigetClient, PluginAggregator,
    ConfigManager, ConfigError, SearchQuery, SoftwareFlavor, PluginEmbedHelper
)
from .utils.config import PROVIDERS

log = logging.getLogger("red.pluginfinder")

CLIENT_CLASSES = {
    'modrinth': ModrinthClient,
    'hangar': HangarClient,
    'spiget': SpigetClient
}

ERROR_MESSAGE = "❌ An error occurred while executing this command."


class PluginFinder(commands.Cog):
    """🔌 Search Modrinth, Hangar and SpigotMC for Minecraft plugins"""

    def __init__(self, bot: Red):
        self.bot = bot
        self.config = Config.get_conf(self, identifier=260120231749, force_registration=True)
        self.settings = ConfigManager(self.config)

        # Created on first use, rebuilt when the timeout changes
        self.clients = {name: None for name in PROVIDERS}

    async def cog_unload(self) -> None:
        """Cleanup method that will be called when the cog unloads."""
        await self._close_clients()

    async def _close_clients(self) -> None:
        for name, client in self.clients.items():
            if client is not None:
                await client.close()
            self.clients[name] = None

    async def _get_client(self, provider: str):
        """Get or create API client for a provider"""
        timeout = await self.settings.get_timeout()
        # No await between the check and the assignment
        if self.clients[provider] is None:
            self.clients[provider] = CLIENT_CLASSES[provider](timeout=timeout)
        return self.clients[provider]

    async def _get_aggregator(self) -> PluginAggregator:
        enabled = await self.settings.get_enabled_providers()
        clients = [
            await self._get_client(name)
            for name in PROVIDERS
            if enabled.get(name, True)
        ]
        return PluginAggregator(clients, concurrent=await self.settings.is_concurrent())

    @app_commands.command(name="plugin", description="Search for a Minecraft plugin across Modrinth, Hangar, and SpigotMC")
    @app_commands.describe(
        name="Plugin name",
        version="Minecraft version (e.g. 1.20.1)",
        software="Server software the plugin has to support"
    )
    @app_commands.choices(software=[
        app_commands.Choice(name=flavor.display_name, value=flavor.value)
        for flavor in SoftwareFlavor
    ])
    async def plugin(
        self,
        interaction: discord.Interaction,
        name: str,
        version: str,
        software: Optional[app_commands.Choice[str]] = None
    ) -> None:
        """Search for a Minecraft plugin across Modrinth, Hangar, and SpigotMC"""
        await interaction.response.defer()

        try:
            query = SearchQuery(
                plugin_name=name,
                game_version=version,
                software=SoftwareFlavor.parse(software.value if software else None),
                exact_match=await self.settings.is_exact_match()
            )
        except ValueError as e:
            await interaction.followup.send(f"❌ {e}")
            return

        aggregator = await self._get_aggregator()
        reply = await aggregator.resolve(query)
        content, embeds = PluginEmbedHelper.build_reply(reply)

        if embeds:
            await interaction.followup.send(embeds=embeds)
        else:
            await interaction.followup.send(content)

    @plugin.autocomplete("name")
    async def plugin_name_autocomplete(
        self,
        interaction: discord.Interaction,
        current: str
    ) -> List[app_commands.Choice[str]]:
        aggregator = await self._get_aggregator()
        suggestions = await aggregator.suggest(current)
        return [app_commands.Choice(name=s.label, value=s.value) for s in suggestions]

    async def cog_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ) -> None:
        log.error(f"Error in /{interaction.command.name if interaction.command else '?'}: {error}", exc_info=error)
        try:
            if interaction.response.is_done():
                await interaction.followup.send(ERROR_MESSAGE, ephemeral=True)
            else:
                await interaction.response.send_message(ERROR_MESSAGE, ephemeral=True)
        except discord.HTTPException as e:
            log.error(f"Could not report command error: {e}")

    # Configuration commands
    @commands.group(name="pluginfinder", aliases=["pf"])
    @commands.is_owner()
    async def pluginfinder(self, ctx: commands.Context):
        """⚙️ Configuration commands for PluginFinder"""
        if ctx.invoked_subcommand is None:
            await ctx.send_help()

    @pluginfinder.command(name="settings")
    async def show_settings(self, ctx: commands.Context):
        """Show current PluginFinder settings"""
        settings = await self.settings.get_settings()
        await ctx.send(embed=PluginEmbedHelper.create_settings_embed(settings))

    @pluginfinder.command(name="toggle")
    async def toggle_provider(self, ctx: commands.Context, provider: str):
        """Enable or disable a provider

        Usage:
        `[p]pf toggle spiget`
        """
        try:
            enabled = await self.settings.toggle_provider(provider)
        except ConfigError as e:
            await ctx.send(f"❌ {e}")
            return
        state = "enabled ✅" if enabled else "disabled ❌"
        await ctx.send(f"{provider.title()} is now {state}")

    @pluginfinder.command(name="concurrent")
    async def set_concurrent(self, ctx: commands.Context, enabled: bool):
        """Query providers at the same time instead of one after another"""
        await self.settings.set_concurrent(enabled)
        await ctx.send(f"✅ Concurrent lookups {'enabled' if enabled else 'disabled'}")

    @pluginfinder.command(name="exactmatch")
    async def set_exact_match(self, ctx: commands.Context, enabled: bool):
        """Require plugin names to match exactly (case-insensitive)

        When disabled the first search hit of each provider is used.
        """
        await self.settings.set_exact_match(enabled)
        mode = "exact name match" if enabled else "first search hit"
        await ctx.send(f"✅ Lookups now use the {mode}")

    @pluginfinder.command(name="timeout")
    async def set_timeout(self, ctx: commands.Context, seconds: int):
        """Set the HTTP timeout for provider requests (5-120 seconds)"""
        try:
            await self.settings.set_timeout(seconds)
        except ConfigError as e:
            await ctx.send(f"❌ {e}")
            return
        await self._close_clients()
        await ctx.send(f"✅ Request timeout set to {seconds}s")
