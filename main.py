"""Main entry point for the Flashcard Game Bot."""

import asyncio
import logging
import os

from dotenv import load_dotenv

import config
from bot.client import create_bot
from bot.events import setup_events
from database.migrations import initialize_database

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


async def main():
    """Main function to start the bot."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    await initialize_database()

    bot = create_bot()
    setup_events(bot)
    await bot.load_extension('cogs.flashcard_commands')

    token = os.getenv("DISCORD_TOKEN")
    if not token:
        logger.error("DISCORD_TOKEN not found in environment variables!")
        logger.error("Please create a .env file with your Discord bot token.")
        return

    logger.info("Starting bot...")
    async with bot:
        await bot.start(token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user.")
