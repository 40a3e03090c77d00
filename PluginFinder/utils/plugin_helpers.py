"""
Helper classes for PluginFinder
Handles Discord embeds and reply text for plugin lookups
"""

import discord
from typing import Any, Dict, List, Tuple
import logging

from .models import AggregateReply, ProviderResult, SearchQuery

log = logging.getLogger("red.pluginfinder.plugin_helpers")


def not_found_message(query: SearchQuery) -> str:
    """Fallback text when no provider returned anything"""
    software = f"{query.software.display_name} " if query.software else ""
    return f"❌ No plugin found named **{query.plugin_name}** for {software}{query.game_version}."


class PluginEmbedHelper:
    """Helper class for creating Discord embeds for plugin lookups"""

    @staticmethod
    def create_result_embed(result: ProviderResult) -> discord.Embed:
        """Create an embed for one provider result"""
        description = result.description
        if len(description) > 500:
            description = description[:500] + '...'

        embed = discord.Embed(
            title=result.title[:256],
            url=result.url,
            description=description,
            color=result.accent_color
        )
        for label, value in result.extra_fields:
            embed.add_field(name=label, value=value, inline=True)
        return embed

    @staticmethod
    def build_reply(reply: AggregateReply) -> Tuple[str, List[discord.Embed]]:
        """Return the (content, embeds) pair to send for an aggregate reply.

        An empty reply becomes the plain-text not-found message, never an
        empty embed list.
        """
        if reply.is_empty:
            log.debug(f"No provider matched {reply.query.plugin_name!r} for {reply.query.software_label} {reply.query.game_version}")
            return not_found_message(reply.query), []
        return "", [PluginEmbedHelper.create_result_embed(result) for result in reply.results]

    @staticmethod
    def create_settings_embed(settings: Dict[str, Any]) -> discord.Embed:
        """Create embed showing the current cog settings"""
        embed = discord.Embed(
            title="🔌 PluginFinder Settings",
            color=discord.Color.blue()
        )

        providers = settings.get('providers', {})
        provider_lines = [
            f"{name.title()}: {'Enabled ✅' if enabled else 'Disabled ❌'}"
            for name, enabled in providers.items()
        ]
        embed.add_field(name="Providers", value="\n".join(provider_lines) or "None", inline=False)
        embed.add_field(
            name="Concurrent Lookups",
            value="Enabled ✅" if settings.get('concurrent') else "Disabled ❌",
            inline=True
        )
        embed.add_field(
            name="Name Matching",
            value="Exact" if settings.get('exact_match') else "First hit",
            inline=True
        )
        embed.add_field(name="Request Timeout", value=f"{settings.get('request_timeout')}s", inline=True)
        return embed
