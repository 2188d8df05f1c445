"""
Session trend analysis module.

This module provides the activity breakdowns shown next to the correlation
analysis: daily counts, session type frequency, weekly consistency, weekday
averages and a monthly breakdown.
"""

import calendar
import datetime as dt
import math
from typing import Dict, List

from training_bot.service.session_analysis.common.constants import WindowDefaults
from training_bot.service.session_analysis.common.data_models import (
    DailySessionCount,
    MonthlyBreakdown,
    SessionTrends,
    SessionTypeFrequency,
    WeekdayAverage,
    WeeklyConsistency,
)
from training_bot.service.session_analysis.common.sources import SessionsByDay


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _shift_month(day: dt.date, months_back: int) -> dt.date:
    """First day of the month `months_back` months before the month of `day`."""
    month_index = day.year * 12 + (day.month - 1) - months_back
    return dt.date(month_index // 12, month_index % 12 + 1, 1)


class SessionTrendsCalculator:
    """Calculate activity trends anchored at a given day."""

    def calculate(
        self, sessions_by_day: SessionsByDay, today: dt.date, window_days: int = WindowDefaults.TRENDS_DAYS
    ) -> SessionTrends:
        """
        Calculate all trends.

        Args:
            sessions_by_day: Events grouped by calendar day, covering at least
                earliest_date_needed(today, window_days)
            today: The day the trends are anchored at
            window_days: Window for the type frequency and weekday averages

        Returns:
            SessionTrends
        """
        if window_days < 1:
            raise ValueError(f"window_days must be positive, got {window_days}")

        window = self._window_days(today, window_days)
        return SessionTrends(
            sessions_over_time=self.sessions_over_time(sessions_by_day, today),
            type_frequency=self.session_type_frequency(sessions_by_day, today, window_days),
            weekly_consistency=self.weekly_consistency(sessions_by_day, today),
            weekday_averages=self.weekday_averages(sessions_by_day, today, window_days),
            monthly_breakdown=self.monthly_breakdown(sessions_by_day, today),
            total_sessions=sum(len(sessions_by_day.get(day, [])) for day in window),
        )

    @staticmethod
    def earliest_date_needed(today: dt.date, window_days: int = WindowDefaults.TRENDS_DAYS) -> dt.date:
        """Oldest day any of the trends looks at."""
        week_start = today - dt.timedelta(days=today.weekday())
        return min(
            today - dt.timedelta(days=window_days - 1),
            today - dt.timedelta(days=WindowDefaults.SESSIONS_OVER_TIME_DAYS - 1),
            week_start - dt.timedelta(weeks=WindowDefaults.WEEKLY_CONSISTENCY_WEEKS - 1),
            _shift_month(today, WindowDefaults.MONTHLY_BREAKDOWN_MONTHS - 1),
        )

    def sessions_over_time(
        self, sessions_by_day: SessionsByDay, today: dt.date, days: int = WindowDefaults.SESSIONS_OVER_TIME_DAYS
    ) -> List[DailySessionCount]:
        return [
            DailySessionCount(date=day, count=len(sessions_by_day.get(day, [])))
            for day in reversed(self._window_days(today, days))
        ]

    def session_type_frequency(
        self, sessions_by_day: SessionsByDay, today: dt.date, window_days: int = WindowDefaults.TRENDS_DAYS
    ) -> List[SessionTypeFrequency]:
        counts: Dict[str, int] = {}
        # Most recent day first, which decides the order of equal counts
        for day in self._window_days(today, window_days):
            for event in sessions_by_day.get(day, []):
                counts[event.session_type] = counts.get(event.session_type, 0) + 1

        total = sum(counts.values())
        frequencies = [
            SessionTypeFrequency(
                session_type=session_type,
                count=count,
                percentage=int(_round_half_up(count / total * 100)) if total else 0,
            )
            for session_type, count in counts.items()
        ]
        return sorted(frequencies, key=lambda f: f.count, reverse=True)

    def weekly_consistency(
        self, sessions_by_day: SessionsByDay, today: dt.date, weeks: int = WindowDefaults.WEEKLY_CONSISTENCY_WEEKS
    ) -> List[WeeklyConsistency]:
        current_week_start = today - dt.timedelta(days=today.weekday())
        result = []
        for week in range(weeks - 1, -1, -1):
            week_start = current_week_start - dt.timedelta(weeks=week)
            sessions = sum(len(sessions_by_day.get(week_start + dt.timedelta(days=d), [])) for d in range(7))
            result.append(WeeklyConsistency(week_start=week_start, sessions=sessions))
        return result

    def weekday_averages(
        self, sessions_by_day: SessionsByDay, today: dt.date, window_days: int = WindowDefaults.TRENDS_DAYS
    ) -> List[WeekdayAverage]:
        totals = [0] * 7
        days = [0] * 7
        for day in self._window_days(today, window_days):
            totals[day.weekday()] += len(sessions_by_day.get(day, []))
            days[day.weekday()] += 1

        return [
            WeekdayAverage(
                weekday=calendar.day_name[weekday],
                total=totals[weekday],
                days=days[weekday],
                average=_round_half_up(totals[weekday] / days[weekday], 1) if days[weekday] else 0.0,
            )
            for weekday in range(7)
        ]

    def monthly_breakdown(
        self, sessions_by_day: SessionsByDay, today: dt.date, months: int = WindowDefaults.MONTHLY_BREAKDOWN_MONTHS
    ) -> List[MonthlyBreakdown]:
        result = []
        for months_back in range(months - 1, -1, -1):
            month_start = _shift_month(today, months_back)
            days_in_month = calendar.monthrange(month_start.year, month_start.month)[1]

            counts: Dict[str, int] = {}
            for d in range(days_in_month):
                for event in sessions_by_day.get(month_start + dt.timedelta(days=d), []):
                    counts[event.session_type] = counts.get(event.session_type, 0) + 1

            # max() keeps the first of equal counts, i.e. the earliest logged type
            top_type = max(counts, key=counts.get) if counts else None
            result.append(
                MonthlyBreakdown(month_start=month_start, sessions=sum(counts.values()), top_type=top_type)
            )
        return result

    @staticmethod
    def _window_days(today: dt.date, window_days: int) -> List[dt.date]:
        """Days of the window, today first."""
        return [today - dt.timedelta(days=offset) for offset in range(window_days)]
