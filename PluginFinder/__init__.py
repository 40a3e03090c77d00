"""
🔌 PluginFinder - Find Minecraft plugins without leaving Discord!
Created by DevelopmentCats with EXTREME FELINE PRECISION 🐱

A Red-DiscordBot cog that searches Modrinth, Hangar and SpigotMC for a
plugin matching your server software and Minecraft version.
"""

from redbot.core.bot import Red
from redbot.core.utils import get_end_user_data_statement

__author__ = 'DevelopmentCats'
__version__ = '1.0.0'

# Define requirements for the cog
requirements = [
    "aiohttp>=3.8.0"
]

from .pluginfinder import PluginFinder

__red_end_user_data_statement__ = get_end_user_data_statement(__file__)

async def setup(bot: Red) -> None:
    """This function is called by Red when loading the cog"""
    cog = PluginFinder(bot)
    await bot.add_cog(cog)
