"""Streak and consistency calculation over a trailing window."""

import datetime as dt

from loguru import logger

from training_bot.service.session_analysis.common.constants import WindowDefaults
from training_bot.service.session_analysis.common.data_models import StreakSummary
from training_bot.service.session_analysis.common.sources import SessionsByDay


class StreakCalculator:
    """Calculate current and longest runs of consecutive active days."""

    def calculate(
        self, sessions_by_day: SessionsByDay, today: dt.date, window_days: int = WindowDefaults.STREAK_DAYS
    ) -> StreakSummary:
        """
        Calculate streaks, walking from today (offset 0) back to the oldest day of the window.

        Args:
            sessions_by_day: Events grouped by calendar day
            today: The day the window ends on
            window_days: Number of days in the window, today included

        Returns:
            StreakSummary for the window
        """
        if window_days < 1:
            raise ValueError(f"window_days must be positive, got {window_days}")

        current_streak = 0
        longest_streak = 0
        running_streak = 0
        active_days = 0
        total_sessions = 0
        current_run_open = True

        for offset in range(window_days):
            events = sessions_by_day.get(today - dt.timedelta(days=offset), [])
            if events:
                active_days += 1
                total_sessions += len(events)
                running_streak += 1
                if current_run_open:
                    current_streak += 1
            else:
                longest_streak = max(longest_streak, running_streak)
                running_streak = 0
                current_run_open = False

        # The last run may reach the start of the window without a gap
        longest_streak = max(longest_streak, running_streak)

        logger.debug(
            f"Streaks over {window_days} days: current={current_streak}, longest={longest_streak}, "
            f"active_days={active_days}"
        )
        return StreakSummary(
            current_streak=current_streak,
            longest_streak=longest_streak,
            active_days=active_days,
            total_sessions=total_sessions,
        )
