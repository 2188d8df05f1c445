"""
Session correlation analysis module.

This module provides pairwise co-occurrence analysis between configured session
types: how often two types are trained on the same day, and how often one is
followed by the other within the next few active days.
"""

from typing import List, Sequence, Set

from loguru import logger

from training_bot.service.session_analysis.common.constants import CorrelationConfig
from training_bot.service.session_analysis.common.data_models import SessionCorrelation
from training_bot.service.session_analysis.common.sources import SessionsByDay


class CorrelationAnalyzer:
    """
    Calculate same-day and sequential co-occurrence statistics for session type pairs.

    Every unordered pair of configured session types is analysed, not only the types
    that were actually logged. Pairs that never co-occur are not emitted.
    """

    def __init__(
        self,
        min_opportunities: int = CorrelationConfig.MIN_OPPORTUNITIES,
        confidence_saturation: int = CorrelationConfig.CONFIDENCE_SATURATION,
        lookahead_days: int = CorrelationConfig.SEQUENCE_LOOKAHEAD_DAYS,
    ):
        """
        Initialize the correlation analyzer.

        Args:
            min_opportunities: Opportunities required before confidence is non-zero
            confidence_saturation: Opportunities at which confidence reaches 1.0
            lookahead_days: Number of following active days checked for a sequence
        """
        self.min_opportunities = min_opportunities
        self.confidence_saturation = confidence_saturation
        self.lookahead_days = lookahead_days

    def analyze(self, sessions_by_day: SessionsByDay, session_types: Sequence[str]) -> List[SessionCorrelation]:
        """
        Analyse all pairs of configured session types over a windowed snapshot.

        Args:
            sessions_by_day: Events grouped by calendar day, already restricted to the window
            session_types: Configured session type names in display order

        Returns:
            Correlations sorted descending by success rate. Ties keep the order of the
            configured type list.
        """
        # Types logged on each active day, chronologically
        active_days = sorted(day for day, events in sessions_by_day.items() if events)
        types_per_day: List[Set[str]] = [
            {event.session_type for event in sessions_by_day[day]} for day in active_days
        ]

        if not active_days:
            logger.info("No active days in window, no correlations to compute")
            return []

        # Duplicate configured names would produce A == B pairs
        unique_types = list(dict.fromkeys(session_types))

        correlations = []
        for i, session_a in enumerate(unique_types):
            for session_b in unique_types[i + 1 :]:
                correlation = self._analyze_pair(session_a, session_b, types_per_day)
                if correlation is not None:
                    correlations.append(correlation)

        logger.debug(
            f"Analysed {len(unique_types)} session types over {len(active_days)} active days, "
            f"{len(correlations)} correlated pairs"
        )

        # sorted() is stable, so equal rates keep the configured pair order
        return sorted(correlations, key=lambda c: c.success_rate, reverse=True)

    def calculate_confidence(self, opportunities: int) -> float:
        """
        Calculate the confidence score for a number of opportunities.

        Args:
            opportunities: The larger of the day counts of the two session types

        Returns:
            0.0 below the minimum number of opportunities, otherwise
            opportunities / saturation capped at 1.0
        """
        if opportunities < self.min_opportunities:
            return 0.0
        return min(1.0, opportunities / self.confidence_saturation)

    def _analyze_pair(self, session_a: str, session_b: str, types_per_day: List[Set[str]]):
        same_day_count = 0
        sequence_count = 0
        total_days_with_a = 0
        total_days_with_b = 0

        for day_index, day_types in enumerate(types_per_day):
            has_a = session_a in day_types
            has_b = session_b in day_types

            if has_a:
                total_days_with_a += 1
            if has_b:
                total_days_with_b += 1

            if has_a and has_b:
                same_day_count += 1

            # A followed by B within the next active days (not calendar days)
            if has_a:
                following = types_per_day[day_index + 1 : day_index + 1 + self.lookahead_days]
                if any(session_b in next_types for next_types in following):
                    sequence_count += 1

        if same_day_count == 0 and sequence_count == 0:
            return None

        opportunities = max(total_days_with_a, total_days_with_b)
        # A day pair can count towards both terms, so the rate may exceed 1.0
        actual_combinations = same_day_count + sequence_count
        success_rate = actual_combinations / opportunities if opportunities > 0 else 0.0

        return SessionCorrelation(
            session_a=session_a,
            session_b=session_b,
            same_day_count=same_day_count,
            sequence_count=sequence_count,
            success_rate=success_rate,
            confidence=self.calculate_confidence(opportunities),
        )

