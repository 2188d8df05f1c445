"""Unit tests for body part usage aggregation."""

import datetime as dt

import pytest

from tests import build_sessions_by_day
from training_bot.service.session_analysis.body_parts.default_catalog import (
    DEFAULT_BODY_PARTS,
    build_default_mappings,
)
from training_bot.service.session_analysis.body_parts.usage_aggregator import BodyPartUsageAggregator
from training_bot.service.session_analysis.common.data_models import (
    BodyPart,
    BodyPartCategory,
    IntensityTier,
    Position,
    SessionEvent,
    SessionTypeMapping,
)

SHOULDERS = BodyPart(id="shoulders", name="Shoulders", category=BodyPartCategory.UPPER, position=Position(x=50, y=20))
WRISTS = BodyPart(id="wrists", name="Wrists", category=BodyPartCategory.UPPER, position=Position(x=30, y=35))
KNEES = BodyPart(id="knees", name="Knees", category=BodyPartCategory.LOWER, position=Position(x=50, y=75))


class TestBodyPartUsageAggregator:
    @pytest.fixture
    def aggregator(self):
        return BodyPartUsageAggregator()

    @pytest.fixture
    def catalog(self):
        return [SHOULDERS, WRISTS, KNEES]

    @pytest.fixture
    def mappings(self):
        return [
            SessionTypeMapping(session_type="Handstands", body_parts=[SHOULDERS, WRISTS], intensity=IntensityTier.HIGH),
            SessionTypeMapping(session_type="Wrist prep", body_parts=[WRISTS], intensity=IntensityTier.LOW),
        ]

    def test_counts_and_intensity_per_body_part(self, aggregator, catalog, mappings):
        sessions = build_sessions_by_day(
            {
                dt.date(2026, 10, 10): ["Handstands"],
                dt.date(2026, 10, 12): ["Handstands"],
            }
        )

        usage = aggregator.aggregate(sessions, mappings, catalog)

        assert [u.body_part_id for u in usage] == ["shoulders", "wrists", "knees"]
        shoulders, wrists, knees = usage
        assert shoulders.session_count == 2
        assert shoulders.average_intensity == pytest.approx(3.0)
        assert shoulders.last_trained == dt.datetime(2026, 10, 12, 8)
        assert wrists.session_count == 2
        assert knees.session_count == 0
        assert knees.average_intensity == 0.0
        assert knees.last_trained is None
        assert knees.position == Position(x=50, y=75)

    def test_mixed_intensity_is_averaged(self, aggregator, catalog, mappings):
        sessions = build_sessions_by_day({dt.date(2026, 10, 10): ["Handstands", "Wrist prep"]})

        wrists = aggregator.aggregate(sessions, mappings, catalog)[1]

        assert wrists.session_count == 2
        assert wrists.average_intensity == pytest.approx(2.0)

    def test_last_trained_is_latest_timestamp_within_a_day(self, aggregator, catalog, mappings):
        day = dt.date(2026, 10, 10)
        sessions = {
            day: [
                SessionEvent(id="late", session_type="Handstands", timestamp=dt.datetime(2026, 10, 10, 19)),
                SessionEvent(id="early", session_type="Handstands", timestamp=dt.datetime(2026, 10, 10, 7)),
            ]
        }

        shoulders = aggregator.aggregate(sessions, mappings, catalog)[0]

        assert shoulders.last_trained == dt.datetime(2026, 10, 10, 19)

    def test_unmapped_session_types_are_skipped(self, aggregator, catalog, mappings):
        sessions = build_sessions_by_day({dt.date(2026, 10, 10): ["Juggling", "Wrist prep"]})

        usage = aggregator.aggregate(sessions, mappings, catalog)

        assert sum(u.session_count for u in usage) == 1
        assert usage[1].session_count == 1

    def test_mapped_parts_outside_catalog_are_ignored(self, aggregator, mappings):
        sessions = build_sessions_by_day({dt.date(2026, 10, 10): ["Handstands"]})

        usage = aggregator.aggregate(sessions, mappings, [KNEES])

        assert len(usage) == 1
        assert usage[0].session_count == 0

    def test_empty_window_reports_every_body_part(self, aggregator):
        usage = aggregator.aggregate({}, build_default_mappings(), DEFAULT_BODY_PARTS)

        assert len(usage) == len(DEFAULT_BODY_PARTS)
        assert all(u.session_count == 0 and u.last_trained is None for u in usage)

    def test_default_configuration(self, aggregator):
        sessions = build_sessions_by_day({dt.date(2026, 10, 10): ["Yin yoga", "Abs and glutes"]})

        usage = {u.body_part_id: u for u in aggregator.aggregate(sessions, build_default_mappings(), DEFAULT_BODY_PARTS)}

        assert usage["spine"].average_intensity == pytest.approx(1.0)
        assert usage["glutes"].average_intensity == pytest.approx(3.0)
        assert usage["hips"].session_count == 1
        assert usage["shoulders"].session_count == 0
