"""Flashcard game commands."""

import asyncio
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from data.word_pools import get_categories, get_word_count, get_word_pool
from database.manager import db_manager
from game.errors import ConfigurationError, InsufficientContentError
from game.events import GameEvent
from game.models import EndOutcome, GameVariant, mode_from_name
from game.session import GameEnded, GameSession
from game.session_manager import session_manager
from utils.embeds import (
    create_answer_embed,
    create_categories_embed,
    create_game_over_embed,
    create_game_started_embed,
    create_leaderboard_embed,
    create_no_content_embed,
    create_round_embed,
)
from utils.text_similarity import matches_answer, resolve_option

logger = logging.getLogger(__name__)

VARIANT_CHOICES = [
    app_commands.Choice(name="Quiz", value="quiz"),
    app_commands.Choice(name="Match", value="match"),
    app_commands.Choice(name="Swipe", value="swipe"),
]

MODE_CHOICES = [
    app_commands.Choice(name="Practice", value="practice"),
    app_commands.Choice(name="Survival", value="survival"),
    app_commands.Choice(name="Time", value="time"),
]


class FlashcardCommands(commands.Cog):
    """Slash commands that drive flashcard game sessions."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self._tasks = set()

    @app_commands.command(name="flash_start", description="Start a flashcard game")
    @app_commands.describe(
        variant="Minigame to play",
        mode="Game mode",
        category="Deck to draw words from (default: all)",
        lives="Lives for survival mode",
        duration="Seconds for time mode"
    )
    @app_commands.choices(variant=VARIANT_CHOICES, mode=MODE_CHOICES)
    async def start(
        self,
        interaction: discord.Interaction,
        variant: str = "quiz",
        mode: str = "practice",
        category: Optional[str] = None,
        lives: Optional[int] = None,
        duration: Optional[float] = None
    ):
        """Start a flashcard game."""
        player_id = str(interaction.user.id)
        channel_id = str(interaction.channel_id)

        if session_manager.is_active(player_id, channel_id):
            await interaction.response.send_message(
                "❌ You already have a game running here! Use `/flash_quit` first.", ephemeral=True
            )
            return

        game_variant = GameVariant(variant)
        pool = get_word_pool(category)

        try:
            game_mode = mode_from_name(mode, lives=lives, duration=duration)
            session = session_manager.create_session(player_id, channel_id, pool, game_variant)
            self._watch(session, interaction, category)
            first_round = session.start(game_mode)
        except ConfigurationError as e:
            session_manager.end_session(player_id, channel_id)
            await interaction.response.send_message(f"❌ {e}", ephemeral=True)
            return
        except InsufficientContentError as e:
            session_manager.end_session(player_id, channel_id)
            await interaction.response.send_message(
                embed=create_no_content_embed(category, e.available, e.required), ephemeral=True
            )
            return

        embeds = [
            create_game_started_embed(interaction.user.display_name, game_variant, game_mode, category),
            create_round_embed(first_round, session.survival_state, session.time_state),
        ]
        await interaction.response.send_message(embeds=embeds)

    @app_commands.command(name="flash_answer", description="Answer the current quiz or match card")
    @app_commands.describe(answer="Option number or the translation")
    async def answer(self, interaction: discord.Interaction, answer: str):
        """Answer the current quiz or match card."""
        session = await self._require_session(interaction)
        if not session:
            return

        rnd = session.current_round
        if rnd is None:
            await interaction.response.send_message("❌ No card to answer right now.", ephemeral=True)
            return

        if rnd.variant is GameVariant.QUIZ:
            index = resolve_option(answer, rnd.options)
            if index is None:
                await interaction.response.send_message(
                    f"❓ Pick an option number between 1 and {len(rnd.options)}.", ephemeral=True
                )
                return
            submitted = index
        elif rnd.variant is GameVariant.MATCH:
            typed = rnd.correct_answer if matches_answer(answer, rnd.correct_answer) else answer
            submitted = (rnd.prompt_text, typed)
        else:
            await interaction.response.send_message("👆 This is a swipe game: use `/flash_swipe`.", ephemeral=True)
            return

        await self._submit(interaction, session, submitted, rnd.round_id)

    @app_commands.command(name="flash_swipe", description="Judge the current swipe card")
    @app_commands.describe(verdict="Do the two words belong together?")
    @app_commands.choices(verdict=[
        app_commands.Choice(name="Yes", value="yes"),
        app_commands.Choice(name="No", value="no"),
    ])
    async def swipe(self, interaction: discord.Interaction, verdict: str):
        """Judge the current swipe card."""
        session = await self._require_session(interaction)
        if not session:
            return

        rnd = session.current_round
        if rnd is None or rnd.variant is not GameVariant.SWIPE:
            await interaction.response.send_message("❌ There is no swipe card to judge.", ephemeral=True)
            return

        await self._submit(interaction, session, verdict == "yes", rnd.round_id)

    @app_commands.command(name="flash_quit", description="Quit the current game without saving")
    async def quit(self, interaction: discord.Interaction):
        """Quit the current game."""
        session = session_manager.end_session(str(interaction.user.id), str(interaction.channel_id))
        if not session:
            await interaction.response.send_message("❌ You don't have a game running!", ephemeral=True)
            return
        await interaction.response.send_message("👋 Game abandoned. No results were saved.")

    @app_commands.command(name="flash_categories", description="List the available decks")
    async def categories(self, interaction: discord.Interaction):
        """List the available decks."""
        counts = {name: get_word_count(name) for name in get_categories()}
        await interaction.response.send_message(embed=create_categories_embed(counts))

    @app_commands.command(name="flash_stats", description="View player statistics")
    @app_commands.describe(user="User to view stats for (default: yourself)")
    async def stats(self, interaction: discord.Interaction, user: Optional[discord.Member] = None):
        """View player statistics."""
        target_user = user or interaction.user
        stats = await db_manager.get_player_stats(str(target_user.id))

        if not stats:
            await interaction.response.send_message(f"❌ No statistics found for {target_user.mention}!", ephemeral=True)
            return

        embed = discord.Embed(
            title=f"📊 {target_user.display_name}'s Statistics",
            color=discord.Color.blue()
        )
        avg_score = stats['total_score'] / stats['games_played'] if stats['games_played'] > 0 else 0
        embed.add_field(
            name="Overall Performance",
            value=(
                f"**Games Played:** {stats['games_played']}\n"
                f"**Total Score:** {stats['total_score']:,} points\n"
                f"**Average Score:** {avg_score:.0f} points per game\n"
                f"**Best Score:** {stats['best_score']:,} points\n"
                f"**Best Streak:** {stats['best_streak']}"
            ),
            inline=False
        )

        variant_text = ""
        for variant in GameVariant:
            vs = stats['variant_stats'].get(variant.value)
            if vs:
                variant_text += (
                    f"**{variant.value.capitalize()}:** "
                    f"{vs['avg_accuracy'] * 100:.1f}% accuracy "
                    f"({vs['games']} games, best {vs['best_score']:,})\n"
                )
        if variant_text:
            embed.add_field(name="By Minigame", value=variant_text, inline=False)

        embed.set_footer(text=f"Last played: {stats.get('last_played') or 'Never'}")
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="flash_leaderboard", description="View leaderboards")
    @app_commands.describe(variant="Filter by minigame")
    @app_commands.choices(variant=VARIANT_CHOICES)
    async def leaderboard(self, interaction: discord.Interaction, variant: Optional[str] = None):
        """View leaderboards."""
        leaderboard = await db_manager.get_leaderboard(variant=variant)
        if not leaderboard:
            await interaction.response.send_message("❌ No leaderboard data available yet!", ephemeral=True)
            return

        user_rank = await db_manager.get_player_rank(str(interaction.user.id), variant)
        await interaction.response.send_message(embed=create_leaderboard_embed(leaderboard, variant, user_rank))

    # Helpers

    async def _require_session(self, interaction: discord.Interaction) -> Optional[GameSession]:
        session = session_manager.get_session(str(interaction.user.id), str(interaction.channel_id))
        if not session:
            await interaction.response.send_message(
                "❌ You don't have a game running! Start one with `/flash_start`.", ephemeral=True
            )
        return session

    async def _submit(self, interaction: discord.Interaction, session: GameSession, answer, round_id: int):
        outcome = session.submit_answer(answer, round_id=round_id)
        if outcome is None:
            await interaction.response.send_message("⏰ Too late, that card is gone!", ephemeral=True)
            return

        embeds = [create_answer_embed(outcome, session.stats.total_score, session.stats.current_streak)]
        if session.current_round is not None:
            embeds.append(create_round_embed(session.current_round, session.survival_state, session.time_state))
        await interaction.response.send_message(embeds=embeds)

    def _watch(self, session: GameSession, interaction: discord.Interaction, category: Optional[str]) -> None:
        """Post results when the game ends, whatever ended it."""
        player_id = str(interaction.user.id)
        channel_id = str(interaction.channel_id)
        server_id = str(interaction.guild.id) if interaction.guild else "DM"

        def on_game_ended(ended: GameEnded):
            session_manager.discard(player_id, channel_id, session)
            if ended.outcome is EndOutcome.DISCARD:
                return
            task = asyncio.get_running_loop().create_task(
                self._announce_results(interaction, session, ended, server_id, category)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        session.subscribe(GameEvent.GAME_ENDED, on_game_ended)

    async def _announce_results(
        self,
        interaction: discord.Interaction,
        session: GameSession,
        ended: GameEnded,
        server_id: str,
        category: Optional[str] = None
    ):
        user_id = str(interaction.user.id)
        rank = None

        if ended.outcome is EndOutcome.SHOW_RESULTS:
            await db_manager.get_or_create_player(user_id, interaction.user.display_name)
            await db_manager.save_game_result(
                user_id,
                session.generator.variant,
                session.mode,
                ended.reason,
                session.stats,
                server_id=server_id,
                channel_id=str(interaction.channel_id)
            )
            rank = await db_manager.get_player_rank(user_id, session.generator.variant.value)

        embed = create_game_over_embed(ended, category, rank)
        if interaction.channel is not None:
            await interaction.channel.send(content=interaction.user.mention, embed=embed)


async def setup(bot: commands.Bot):
    """Load the cog."""
    await bot.add_cog(FlashcardCommands(bot))
