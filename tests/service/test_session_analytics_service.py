"""
Tests for the session analytics service.

The first group runs against an in-memory fake of the collaborator interfaces. The
second loads tests/data/sample_sessions.json into a DuckDB store and checks the full
pipeline end to end.
"""

import datetime as dt
import json

import duckdb
import pytest

from tests import SESSION_TEST_DATA_DIR, build_sessions_by_day
from training_bot.config import AnalyticsSettings
from training_bot.service.session_analysis.body_parts.default_catalog import (
    DEFAULT_BODY_PARTS,
    DEFAULT_SESSION_TYPES,
    build_default_mappings,
)
from training_bot.service.session_analysis.common.data_models import InsightType, SessionTypeTag
from training_bot.service.session_analysis.common.sources import (
    BodyPartMappingSource,
    SessionEventSource,
    SessionTypeCatalog,
)
from training_bot.service.session_analysis.insights.recommendation_generator import (
    RECOVERY_RECOMMENDATION,
    SHOULDER_HANDSTAND_GAP_RECOMMENDATION,
)
from training_bot.service.session_analytics_service import SessionAnalyticsService
from training_bot.service.session_store import SessionStore

TODAY = dt.date(2026, 10, 19)


class InMemorySessionSource(SessionEventSource, SessionTypeCatalog, BodyPartMappingSource):
    """Returns the whole history for any window and records what was asked for."""

    def __init__(self, sessions_by_day, session_types=None, session_tags=None):
        self.sessions_by_day = sessions_by_day
        self.session_types = session_types or [t.name for t in DEFAULT_SESSION_TYPES]
        self.session_tags = session_tags or {}
        self.requested_windows = []

    def get_events_for_window(self, start_date, end_date):
        self.requested_windows.append((start_date, end_date))
        return self.sessions_by_day

    def get_configured_types(self):
        return self.session_types

    def get_session_tags(self):
        return self.session_tags

    def get_mappings(self):
        return build_default_mappings()

    def get_body_part_catalog(self):
        return DEFAULT_BODY_PARTS


def make_service(source, settings=None):
    return SessionAnalyticsService(source, source, source, settings)


class TestSessionAnalyticsService:
    def test_correlation_window_defaults_to_sixty_days(self):
        source = InMemorySessionSource({})

        make_service(source).analyze_correlations(today=TODAY)

        assert source.requested_windows == [(TODAY - dt.timedelta(days=59), TODAY)]

    def test_window_from_settings(self):
        source = InMemorySessionSource({})

        make_service(source, AnalyticsSettings(correlation_window_days=14)).analyze_correlations(today=TODAY)

        assert source.requested_windows == [(TODAY - dt.timedelta(days=13), TODAY)]

    def test_empty_history(self):
        analysis = make_service(InMemorySessionSource({})).analyze_correlations(today=TODAY)

        assert analysis.correlations == []
        assert analysis.insights == []
        assert analysis.recommendations == [SHOULDER_HANDSTAND_GAP_RECOMMENDATION, RECOVERY_RECOMMENDATION]
        assert analysis.analysis_date == TODAY

    def test_events_outside_window_are_ignored(self):
        sessions = build_sessions_by_day(
            {
                TODAY - dt.timedelta(days=10): ["Handstands", "Yin yoga"],
                TODAY - dt.timedelta(days=70): ["Pilates", "Yin yoga"],
                TODAY + dt.timedelta(days=1): ["Pilates", "Handstands"],
            }
        )

        analysis = make_service(InMemorySessionSource(sessions)).analyze_correlations(today=TODAY)

        assert [(c.session_a, c.session_b) for c in analysis.correlations] == [("Handstands", "Yin yoga")]

    def test_analysis_is_repeatable(self):
        sessions = build_sessions_by_day(
            {TODAY - dt.timedelta(days=offset): ["Mobility: Spine", "Press handstand"] for offset in range(8)}
        )
        service = make_service(InMemorySessionSource(sessions))

        assert service.analyze_correlations(today=TODAY) == service.analyze_correlations(today=TODAY)

    @pytest.mark.parametrize("window_days", [0, -1])
    def test_invalid_window(self, window_days):
        service = make_service(InMemorySessionSource({}))

        with pytest.raises(ValueError):
            service.analyze_correlations(window_days=window_days, today=TODAY)
        with pytest.raises(ValueError):
            service.compute_streaks(window_days=window_days, today=TODAY)

    def test_session_tags_are_opt_in(self):
        sessions = build_sessions_by_day(
            {TODAY - dt.timedelta(days=offset): ["Warm-up flow" if offset % 2 else "Single leg squat"] for offset in range(6)}
        )
        tags = {"Warm-up flow": SessionTypeTag.PREPARATION, "Single leg squat": SessionTypeTag.STRENGTH}
        source = InMemorySessionSource(sessions, session_types=["Warm-up flow", "Single leg squat"], session_tags=tags)

        keyword_only = make_service(source).analyze_correlations(today=TODAY)
        tagged = make_service(source, AnalyticsSettings(use_session_tags=True)).analyze_correlations(today=TODAY)

        assert keyword_only.insights == []
        assert [insight.type for insight in tagged.insights] == [InsightType.PREPARATION]

    def test_body_part_usage_window(self):
        sessions = build_sessions_by_day(
            {
                TODAY: ["Handstands"],
                TODAY - dt.timedelta(days=30): ["Handstands"],
            }
        )
        source = InMemorySessionSource(sessions)

        usage = make_service(source).get_body_part_usage(today=TODAY)

        assert source.requested_windows == [(TODAY - dt.timedelta(days=29), TODAY)]
        shoulders = next(u for u in usage if u.body_part_id == "shoulders")
        assert shoulders.session_count == 1
        assert len(usage) == len(DEFAULT_BODY_PARTS)

    def test_compute_streaks(self):
        sessions = build_sessions_by_day({TODAY: ["Pilates"], TODAY - dt.timedelta(days=1): ["Yin yoga"]})

        streaks = make_service(InMemorySessionSource(sessions)).compute_streaks(today=TODAY)

        assert streaks.current_streak == 2
        assert streaks.longest_streak == 2

    def test_compute_trends_fetches_enough_history(self):
        source = InMemorySessionSource({})

        trends = make_service(source).compute_trends(today=TODAY)

        assert source.requested_windows == [(dt.date(2026, 5, 1), TODAY)]
        assert trends.total_sessions == 0
        assert len(trends.monthly_breakdown) == 6


class TestSessionAnalyticsServiceEndToEnd:
    @pytest.fixture
    def sample_data(self):
        with open(SESSION_TEST_DATA_DIR / "sample_sessions.json", "r") as f:
            return json.load(f)

    @pytest.fixture
    def service(self, sample_data):
        store = SessionStore(duckdb.connect(":memory:"))
        user_id = sample_data["user_id"]
        store.seed_defaults(user_id)
        for session in sample_data["sessions"]:
            store.add_session(user_id, session["session_type"], dt.datetime.fromisoformat(session["timestamp"]))

        yield SessionAnalyticsService.for_repository(store.for_user(user_id))
        store.close()

    @pytest.fixture
    def today(self, sample_data):
        return dt.date.fromisoformat(sample_data["today"])

    def test_correlations(self, service, today):
        analysis = service.analyze_correlations(today=today)

        pairs = [(c.session_a, c.session_b) for c in analysis.correlations]
        assert pairs == [
            ("Mobility: Shoulder, elbow, and wrist", "Handstands"),
            ("Handstands", "Yin yoga"),
            ("Mobility: Shoulder, elbow, and wrist", "Yin yoga"),
        ]

        mobility_handstands = analysis.correlations[0]
        assert mobility_handstands.same_day_count == 5
        assert mobility_handstands.sequence_count == 4
        assert mobility_handstands.success_rate == pytest.approx(1.5)
        assert mobility_handstands.confidence == pytest.approx(0.6)

        handstands_yin = analysis.correlations[1]
        assert handstands_yin.same_day_count == 1
        # Handstands on 10/10, 14/10 and 15/10 are followed by Yin yoga within two active days
        assert handstands_yin.sequence_count == 3
        assert handstands_yin.success_rate == pytest.approx(4 / 6)
        assert handstands_yin.confidence == pytest.approx(0.6)

        mobility_yin = analysis.correlations[2]
        assert mobility_yin.sequence_count == 2
        assert mobility_yin.confidence == pytest.approx(0.5)

    def test_insights_and_recommendations(self, service, today):
        analysis = service.analyze_correlations(today=today)

        assert [insight.type for insight in analysis.insights] == [
            InsightType.COMBINATION,
            InsightType.PREPARATION,
            InsightType.SEQUENCE,
        ]
        assert "most often paired with Mobility: Shoulder, elbow, and wrist" in analysis.insights[2].description
        # Shoulder work is paired with handstands and Yin yoga follows them, nothing to suggest
        assert analysis.recommendations == []

    def test_body_part_usage(self, service, today):
        usage = {u.body_part_id: u for u in service.get_body_part_usage(today=today)}

        assert usage["shoulders"].session_count == 11
        assert usage["shoulders"].average_intensity == pytest.approx(28 / 11)
        assert usage["shoulders"].last_trained == dt.datetime(2026, 10, 19, 7, 45)
        assert usage["elbows"].session_count == 5
        assert usage["elbows"].average_intensity == pytest.approx(2.0)
        assert usage["abs"].average_intensity == pytest.approx(3.0)
        assert usage["spine"].session_count == 2
        assert usage["spine"].last_trained == dt.datetime(2026, 10, 17, 19, 0)
        assert usage["knees"].session_count == 0

    def test_streaks(self, service, today):
        streaks = service.compute_streaks(today=today)

        assert streaks.current_streak == 3
        assert streaks.longest_streak == 3
        assert streaks.active_days == 7
        assert streaks.total_sessions == 13

    def test_trends(self, service, today):
        trends = service.compute_trends(today=today)

        assert trends.total_sessions == 13
        assert trends.type_frequency[0].session_type == "Handstands"
        assert trends.type_frequency[0].count == 6
        assert trends.monthly_breakdown[-1].top_type == "Handstands"
