"""Discord bot event handlers."""

import logging

import discord
from discord import app_commands
from discord.ext import commands

logger = logging.getLogger(__name__)


def setup_events(bot: commands.Bot):
    """Set up event handlers for the bot."""

    @bot.event
    async def on_ready():
        """Called when bot is ready."""
        logger.info("%s has connected to Discord (%d guilds)", bot.user, len(bot.guilds))

        # Per-guild sync is instant; global sync can take up to an hour
        for guild in bot.guilds:
            try:
                bot.tree.copy_global_to(guild=guild)
                synced = await bot.tree.sync(guild=guild)
                logger.info("Synced %d command(s) to guild: %s", len(synced), guild.name)
            except discord.HTTPException:
                logger.exception("Failed to sync commands to %s", guild.name)

        try:
            synced = await bot.tree.sync()
            logger.info("Synced %d command(s) globally", len(synced))
        except discord.HTTPException:
            logger.exception("Failed to sync commands globally")

    @bot.event
    async def on_error(event, *args, **kwargs):
        """Handle errors."""
        logger.exception("Error in %s", event)

    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handle application command errors."""
        if isinstance(error, app_commands.CheckFailure):
            await interaction.response.send_message("You don't have permission to use this command.", ephemeral=True)
        elif isinstance(error, app_commands.CommandOnCooldown):
            await interaction.response.send_message(
                f"This command is on cooldown. Try again in {error.retry_after:.1f} seconds.", ephemeral=True
            )
        else:
            logger.error("Command failed", exc_info=error)
            if not interaction.response.is_done():
                await interaction.response.send_message("An error occurred while executing this command.", ephemeral=True)
