"""Discord bot client setup."""

import discord
from discord.ext import commands

BOT_DESCRIPTION = "Flashcard minigames: quiz, match and swipe."


def create_bot() -> commands.Bot:
    """Create and configure the flashcard bot.

    Answers arrive through slash commands, so neither message content nor
    member intents are requested.
    """
    intents = discord.Intents.default()
    intents.guilds = True

    return commands.Bot(
        command_prefix='!',  # required even though only slash commands are registered
        intents=intents,
        description=BOT_DESCRIPTION,
        activity=discord.Game(name="/flash_start"),
    )
