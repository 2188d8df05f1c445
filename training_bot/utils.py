"""Utility functions for the Telegram bot."""

from typing import Iterable, List

from training_bot.service.session_analysis.common.data_models import BodyPartUsage


def escape_markdown(text: str) -> str:
    """Escape the characters that break legacy Telegram Markdown."""
    for char in ("_", "*", "`", "["):
        text = text.replace(char, f"\\{char}")
    return text


def intensity_bar(average_intensity: float, width: int = 3) -> str:
    """Render an average intensity (0-3) as a small bar of filled and empty blocks."""
    filled = min(width, int(round(average_intensity)))
    return "▰" * filled + "▱" * (width - filled)


def group_usage_by_category(usages: Iterable[BodyPartUsage]) -> dict[str, List[BodyPartUsage]]:
    """Group body part usage records by category, keeping catalog order within each group."""
    grouped: dict[str, List[BodyPartUsage]] = {}
    for usage in usages:
        grouped.setdefault(usage.category.value, []).append(usage)
    return grouped
