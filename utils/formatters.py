"""Text formatting helpers."""

from typing import List


def format_time(seconds: float) -> str:
    """Format time in seconds to readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def format_score(score: int) -> str:
    """Format score with commas."""
    return f"{score:,}"


def format_score_change(value: int) -> str:
    return f"{value:+,}"


def format_percentage(ratio: float, decimals: int = 1) -> str:
    """Format a 0..1 ratio as a percentage."""
    return f"{ratio * 100:.{decimals}f}%"


def format_lives(remaining: int, total: int) -> str:
    return "❤️" * remaining + "🖤" * max(0, total - remaining)


def format_options(options: List[str]) -> str:
    """Number quiz options for display, starting at 1."""
    return "\n".join(f"**{i}.** {option}" for i, option in enumerate(options, 1))
