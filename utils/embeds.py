"""Discord embed builders for bot responses."""

import discord
from typing import Dict, List, Optional

from game.models import EndOutcome, EndReason, GameMode, GameVariant, Round, SurvivalState, TimeState, ValidationResult
from game.session import AnswerOutcome, GameEnded
from utils.formatters import (
    format_lives,
    format_options,
    format_percentage,
    format_score,
    format_score_change,
    format_time,
)

VARIANT_TITLES = {
    GameVariant.QUIZ: "🧠 Quiz",
    GameVariant.MATCH: "🔗 Match",
    GameVariant.SWIPE: "👆 Swipe",
}

END_TITLES = {
    EndReason.TIME_UP: "⏰ Time's Up!",
    EndReason.NO_LIVES: "💔 Out of Lives!",
    EndReason.USER_QUIT: "👋 Game Abandoned",
}


def create_game_started_embed(
    player_name: str,
    variant: GameVariant,
    mode: GameMode,
    category: Optional[str] = None
) -> discord.Embed:
    """Create embed for game started message."""
    embed = discord.Embed(
        title=f"{VARIANT_TITLES[variant]} - {mode.name.capitalize()} Mode",
        color=discord.Color.green()
    )
    embed.add_field(name="Player", value=player_name, inline=True)
    embed.add_field(name="Deck", value=(category or "all").capitalize(), inline=True)

    if mode.name == 'survival':
        embed.add_field(name="Lives", value=str(mode.max_lives), inline=True)
    elif mode.name == 'time':
        embed.add_field(name="Time", value=format_time(mode.duration), inline=True)

    embed.set_footer(text="Answer with /flash_answer (or /flash_swipe). Quit with /flash_quit.")
    return embed


def create_round_embed(
    rnd: Round,
    survival: Optional[SurvivalState] = None,
    time_state: Optional[TimeState] = None
) -> discord.Embed:
    """Create embed for a new round."""
    color = discord.Color.gold() if rnd.is_special else discord.Color.blue()
    title = f"{VARIANT_TITLES[rnd.variant]} #{rnd.round_id}"
    if rnd.is_special:
        title += " ✨ Special card!"

    embed = discord.Embed(title=title, color=color)

    if rnd.variant is GameVariant.QUIZ:
        embed.add_field(name="Translate:", value=f"**{rnd.prompt_text}**", inline=False)
        embed.add_field(name="Options", value=format_options(list(rnd.options)), inline=False)
    elif rnd.variant is GameVariant.MATCH:
        embed.add_field(name="Match this word:", value=f"**{rnd.prompt_text}**", inline=False)
        embed.set_footer(text="Type the translation with /flash_answer")
    else:
        embed.add_field(
            name="Do these belong together?",
            value=f"**{rnd.prompt_text}** ↔ **{rnd.shown_answer}**",
            inline=False
        )
        embed.set_footer(text="Swipe with /flash_swipe yes or /flash_swipe no")

    if survival:
        embed.add_field(
            name="Lives",
            value=format_lives(survival.lives_remaining, survival.initial_lives),
            inline=True
        )
    if time_state:
        embed.add_field(name="Time Left", value=format_time(time_state.remaining), inline=True)

    return embed


def create_answer_embed(outcome: AnswerOutcome, total_score: int, streak: int) -> discord.Embed:
    """Create embed for the result of one answer."""
    correct = outcome.result is ValidationResult.CORRECT
    embed = discord.Embed(
        title="✅ Correct!" if correct else "❌ Not quite",
        color=discord.Color.green() if correct else discord.Color.red()
    )

    if not correct:
        embed.add_field(
            name="Answer",
            value=f"**{outcome.round.prompt_text}** → **{outcome.round.correct_answer}**",
            inline=False
        )

    embed.add_field(name="Points", value=format_score_change(outcome.event.value), inline=True)
    embed.add_field(name="Time", value=format_time(outcome.response_time), inline=True)
    embed.add_field(name="Streak", value=f"🔥 {streak}", inline=True)

    if correct and outcome.event.bonus_flags:
        bonuses = ", ".join(sorted(flag.value.replace('_', ' ') for flag in outcome.event.bonus_flags))
        embed.set_footer(text=f"Bonus: {bonuses} | Total: {format_score(total_score)}")
    else:
        embed.set_footer(text=f"Total: {format_score(total_score)}")

    return embed


def create_results_embed(reason: EndReason, stats: Dict, server_rank: Optional[int] = None) -> discord.Embed:
    """Create embed for game over."""
    embed = discord.Embed(
        title=END_TITLES.get(reason, "🏁 Game Over"),
        color=discord.Color.gold()
    )

    answered = stats['total_answers']
    embed.add_field(
        name="📊 Final Stats",
        value=(
            f"**Score:** {format_score(stats['total_score'])} points\n"
            f"**Accuracy:** {format_percentage(stats['accuracy'])} ({stats['correct']}/{answered})\n"
            f"**Best Streak:** {stats['best_streak']}\n"
            f"**Average Time:** {format_time(stats['average_response_time'])}"
        ),
        inline=False
    )

    if server_rank:
        embed.add_field(name="📈 Rank", value=f"**#{server_rank}**", inline=True)

    embed.set_footer(text="Great job! 🎉 Play again to beat your score!")
    return embed


def create_no_content_embed(
    category: Optional[str],
    available: Optional[int] = None,
    required: Optional[int] = None,
    stats: Optional[Dict] = None
) -> discord.Embed:
    """Create embed shown when a deck is too small to start or to go on."""
    deck = (category or 'all').capitalize()
    if available is not None and required is not None:
        description = f"The **{deck}** deck has {available} word(s); this game needs at least {required}."
    else:
        description = f"The **{deck}** deck ran out of words to ask. This game was not scored."

    embed = discord.Embed(title="📭 Not Enough Words", description=description, color=discord.Color.orange())
    if stats:
        embed.add_field(
            name="Answered",
            value=f"{stats['correct']}/{stats['total_answers']} correct",
            inline=True
        )
    embed.set_footer(text="Pick another deck with /flash_categories")
    return embed


def create_game_over_embed(ended: GameEnded, category: Optional[str] = None,
                           server_rank: Optional[int] = None) -> discord.Embed:
    """Results for a finished game, or the no-content notice when the deck ran dry."""
    if ended.outcome is EndOutcome.NO_CONTENT:
        return create_no_content_embed(category, stats=ended.stats)
    return create_results_embed(ended.reason, ended.stats, server_rank)


def create_categories_embed(categories: Dict[str, int]) -> discord.Embed:
    """Create embed listing the available decks."""
    embed = discord.Embed(title="📚 Decks", color=discord.Color.blue())
    embed.description = "\n".join(
        f"• **{name.capitalize()}** ({count} words)" for name, count in categories.items()
    )
    embed.set_footer(text="Start a game with /flash_start")
    return embed


def create_leaderboard_embed(
    leaderboard: List[Dict],
    variant: Optional[str] = None,
    user_rank: Optional[int] = None
) -> discord.Embed:
    """Create embed for leaderboards."""
    title = "🏆 Leaderboard"
    if variant:
        title += f" - {variant.capitalize()}"

    embed = discord.Embed(title=title, color=discord.Color.gold())

    medals = ["👑", "🥈", "🥉"]
    lines = []
    for i, entry in enumerate(leaderboard, 1):
        medal = medals[i - 1] if i <= 3 else f"{i}."
        lines.append(
            f"{medal} **{entry['username']}** - {entry['total_score']:,} pts\n"
            f"   Best: {entry['best_score']:,} | Games: {entry['games']} | Avg: {entry['avg_accuracy']:.1f}%"
        )
    embed.description = "\n".join(lines)[:4096]  # Discord limit

    if user_rank:
        embed.set_footer(text=f"Your rank: #{user_rank}")
    else:
        embed.set_footer(text="Play to get on the leaderboard!")
    return embed
