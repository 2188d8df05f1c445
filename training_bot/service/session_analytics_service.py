import datetime as dt
from typing import List, Optional

from loguru import logger

from training_bot.config import AnalyticsSettings
from training_bot.service.session_analysis.activity.session_trends import SessionTrendsCalculator
from training_bot.service.session_analysis.activity.streak_calculator import StreakCalculator
from training_bot.service.session_analysis.body_parts.usage_aggregator import BodyPartUsageAggregator
from training_bot.service.session_analysis.common.data_models import (
    BodyPartUsage,
    CorrelationAnalysis,
    SessionTrends,
    StreakSummary,
)
from training_bot.service.session_analysis.common.sources import (
    BodyPartMappingSource,
    SessionEventSource,
    SessionsByDay,
    SessionTypeCatalog,
)
from training_bot.service.session_analysis.correlations.correlation_analyzer import CorrelationAnalyzer
from training_bot.service.session_analysis.insights.insight_classifier import InsightClassifier
from training_bot.service.session_analysis.insights.recommendation_generator import RecommendationGenerator
from training_bot.service.session_store import UserSessionRepository


class SessionAnalyticsService:
    """Query operations over a user's training sessions.

    The service fetches a windowed snapshot of events and the user's configuration
    from its collaborators and runs the pure analysis calculators over it. Nothing is
    cached between calls, so every query reflects the current snapshot.
    """

    def __init__(
        self,
        event_source: SessionEventSource,
        type_catalog: SessionTypeCatalog,
        mapping_source: BodyPartMappingSource,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self.event_source = event_source
        self.type_catalog = type_catalog
        self.mapping_source = mapping_source
        self.settings = settings or AnalyticsSettings()

        self.correlation_analyzer = CorrelationAnalyzer()
        self.recommendation_generator = RecommendationGenerator()
        self.usage_aggregator = BodyPartUsageAggregator()
        self.streak_calculator = StreakCalculator()
        self.trends_calculator = SessionTrendsCalculator()

    @classmethod
    def for_repository(
        cls, repository: UserSessionRepository, settings: Optional[AnalyticsSettings] = None
    ) -> "SessionAnalyticsService":
        return cls(repository, repository, repository, settings)

    def analyze_correlations(
        self, window_days: Optional[int] = None, today: Optional[dt.date] = None
    ) -> CorrelationAnalysis:
        """
        Run the correlation -> insight -> recommendation pipeline.

        Args:
            window_days: Days in the lookback window. Defaults to the configured 60.
            today: Last day of the window. Defaults to the current date.

        Returns:
            CorrelationAnalysis dated `today`
        """
        window_days = self._resolve_window(window_days, self.settings.correlation_window_days)
        today = today or dt.date.today()

        sessions_by_day = self._fetch_window(today, window_days)
        session_types = self.type_catalog.get_configured_types()

        correlations = self.correlation_analyzer.analyze(sessions_by_day, session_types)
        session_tags = self.type_catalog.get_session_tags() if self.settings.use_session_tags else None
        insights = InsightClassifier(session_tags).classify(correlations)
        recommendations = self.recommendation_generator.generate(insights, correlations)

        logger.info(
            f"Correlation analysis over {window_days} days ending {today}: {len(correlations)} correlations, "
            f"{len(insights)} insights, {len(recommendations)} recommendations"
        )
        return CorrelationAnalysis(
            correlations=correlations,
            insights=insights,
            recommendations=recommendations,
            analysis_date=today,
        )

    def get_body_part_usage(
        self, window_days: Optional[int] = None, today: Optional[dt.date] = None
    ) -> List[BodyPartUsage]:
        window_days = self._resolve_window(window_days, self.settings.body_part_window_days)
        today = today or dt.date.today()

        sessions_by_day = self._fetch_window(today, window_days)
        return self.usage_aggregator.aggregate(
            sessions_by_day,
            self.mapping_source.get_mappings(),
            self.mapping_source.get_body_part_catalog(),
        )

    def compute_streaks(self, window_days: Optional[int] = None, today: Optional[dt.date] = None) -> StreakSummary:
        window_days = self._resolve_window(window_days, self.settings.streak_window_days)
        today = today or dt.date.today()

        sessions_by_day = self._fetch_window(today, window_days)
        return self.streak_calculator.calculate(sessions_by_day, today, window_days)

    def compute_trends(self, window_days: Optional[int] = None, today: Optional[dt.date] = None) -> SessionTrends:
        window_days = self._resolve_window(window_days, self.settings.trends_window_days)
        today = today or dt.date.today()

        start_date = SessionTrendsCalculator.earliest_date_needed(today, window_days)
        sessions_by_day = self.event_source.get_events_for_window(start_date, today)
        return self.trends_calculator.calculate(sessions_by_day, today, window_days)

    def _fetch_window(self, today: dt.date, window_days: int) -> SessionsByDay:
        start_date = today - dt.timedelta(days=window_days - 1)
        sessions_by_day = self.event_source.get_events_for_window(start_date, today)
        # Drop anything a collaborator returned outside the window
        return {day: events for day, events in sessions_by_day.items() if start_date <= day <= today and events}

    @staticmethod
    def _resolve_window(window_days: Optional[int], default: int) -> int:
        if window_days is None:
            return default
        if window_days < 1:
            raise ValueError(f"window_days must be positive, got {window_days}")
        return window_days
