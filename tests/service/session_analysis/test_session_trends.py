"""
Unit tests for the session trends calculator.

2026-10-19 is a Monday, which keeps the week arithmetic easy to follow.
"""

import datetime as dt

import pytest

from tests import build_sessions_by_day
from training_bot.service.session_analysis.activity.session_trends import SessionTrendsCalculator

TODAY = dt.date(2026, 10, 19)


class TestSessionTrendsCalculator:
    @pytest.fixture
    def calculator(self):
        return SessionTrendsCalculator()

    @pytest.fixture
    def sessions(self):
        return build_sessions_by_day(
            {
                TODAY: ["Handstands", "Yin yoga"],
                dt.date(2026, 10, 18): ["Yin yoga"],
                dt.date(2026, 10, 9): ["Pilates"],
                dt.date(2026, 5, 3): ["Pilates"],
            }
        )

    def test_sessions_over_time(self, calculator, sessions):
        daily = calculator.sessions_over_time(sessions, TODAY)

        assert len(daily) == 30
        assert daily[0].date == dt.date(2026, 9, 20)
        assert daily[-1].date == TODAY
        assert daily[-1].count == 2
        assert daily[-2].count == 1
        assert sum(day.count for day in daily) == 4

    def test_session_type_frequency(self, calculator, sessions):
        frequency = calculator.session_type_frequency(sessions, TODAY)

        assert [(f.session_type, f.count, f.percentage) for f in frequency] == [
            ("Yin yoga", 2, 50),
            ("Handstands", 1, 25),
            ("Pilates", 1, 25),
        ]

    def test_type_frequency_percentages_round_half_up(self, calculator):
        sessions = build_sessions_by_day({TODAY: ["A"] * 7 + ["B"]})

        frequency = calculator.session_type_frequency(sessions, TODAY)

        # 87.5% and 12.5%
        assert [f.percentage for f in frequency] == [88, 13]

    def test_weekly_consistency(self, calculator, sessions):
        weeks = calculator.weekly_consistency(sessions, TODAY)

        assert len(weeks) == 12
        assert weeks[0].week_start == dt.date(2026, 8, 3)
        assert weeks[-1].week_start == TODAY
        assert [w.sessions for w in weeks[-3:]] == [1, 1, 2]
        assert all(w.week_start.weekday() == 0 for w in weeks)

    def test_weekday_averages(self, calculator, sessions):
        averages = calculator.weekday_averages(sessions, TODAY)

        assert [a.weekday for a in averages][:2] == ["Monday", "Tuesday"]
        assert sum(a.days for a in averages) == 90
        monday = averages[0]
        assert monday.total == 2
        assert monday.days == 13
        assert monday.average == pytest.approx(0.2)
        assert averages[1].days == 12

    def test_monthly_breakdown(self, calculator, sessions):
        months = calculator.monthly_breakdown(sessions, TODAY)

        assert [m.month_start for m in months] == [
            dt.date(2026, 5, 1),
            dt.date(2026, 6, 1),
            dt.date(2026, 7, 1),
            dt.date(2026, 8, 1),
            dt.date(2026, 9, 1),
            dt.date(2026, 10, 1),
        ]
        assert months[0].sessions == 1
        assert months[0].top_type == "Pilates"
        assert months[1].sessions == 0
        assert months[1].top_type is None
        assert months[-1].sessions == 4
        assert months[-1].top_type == "Yin yoga"

    def test_monthly_breakdown_crosses_year_boundary(self, calculator):
        months = calculator.monthly_breakdown({}, dt.date(2026, 2, 15))

        assert months[0].month_start == dt.date(2025, 9, 1)
        assert months[-1].month_start == dt.date(2026, 2, 1)

    def test_earliest_date_needed(self):
        assert SessionTrendsCalculator.earliest_date_needed(TODAY) == dt.date(2026, 5, 1)
        assert SessionTrendsCalculator.earliest_date_needed(TODAY, 365) == TODAY - dt.timedelta(days=364)

    def test_calculate(self, calculator, sessions):
        trends = calculator.calculate(sessions, TODAY)

        assert trends.total_sessions == 4
        assert len(trends.sessions_over_time) == 30
        assert len(trends.weekday_averages) == 7
        assert trends.type_frequency[0].session_type == "Yin yoga"

    def test_calculate_rejects_invalid_window(self, calculator):
        with pytest.raises(ValueError):
            calculator.calculate({}, TODAY, window_days=0)
