"""
Insight classification module.

Turns the correlation set into typed, human-readable insights. Classification uses
keyword matching against session type names, optionally widened by structured
session type tags.
"""

import uuid
from typing import List, Mapping, Optional, Sequence

from loguru import logger

from training_bot.service.session_analysis.common.constants import InsightRules
from training_bot.service.session_analysis.common.data_models import (
    InsightType,
    SessionCorrelation,
    SessionInsight,
    SessionTypeTag,
)

_INSIGHT_ID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "training-bot/session-insight")


def make_insight_id(insight_type: InsightType, sessions: Sequence[str]) -> str:
    """Deterministic id for an insight, so repeated analyses produce identical output."""
    return str(uuid.uuid5(_INSIGHT_ID_NAMESPACE, "|".join([insight_type.value, *sessions])))


class InsightClassifier:
    """
    Classify correlations into combination, preparation and sequence insights.

    All rules are evaluated independently over the same correlation list; each rule
    may emit zero or more insights.
    """

    def __init__(self, session_tags: Optional[Mapping[str, SessionTypeTag]] = None):
        """
        Initialize the insight classifier.

        Args:
            session_tags: Optional structured tags per session type. Without tags the
                classifier uses keyword matching only.
        """
        self.session_tags = dict(session_tags or {})

    def classify(self, correlations: Sequence[SessionCorrelation]) -> List[SessionInsight]:
        """
        Derive insights from correlations.

        Args:
            correlations: Correlations sorted descending by success rate

        Returns:
            Insights sorted descending by confidence
        """
        insights: List[SessionInsight] = []
        insights.extend(self._combination_insights(correlations))
        insights.extend(self._preparation_insights(correlations))
        insights.extend(self._handstand_sequence_insight(correlations))

        logger.debug(f"Classified {len(correlations)} correlations into {len(insights)} insights")
        return sorted(insights, key=lambda insight: insight.confidence, reverse=True)

    def is_preparation_type(self, session_type: str) -> bool:
        if self.session_tags.get(session_type) == SessionTypeTag.PREPARATION:
            return True
        return InsightRules.PREPARATION_KEYWORD in session_type.lower()

    def is_strength_type(self, session_type: str) -> bool:
        if self.session_tags.get(session_type) == SessionTypeTag.STRENGTH:
            return True
        name = session_type.lower()
        return any(keyword in name for keyword in InsightRules.STRENGTH_KEYWORDS)

    def _combination_insights(self, correlations: Sequence[SessionCorrelation]) -> List[SessionInsight]:
        insights = []
        for correlation in correlations:
            if (
                correlation.same_day_count < InsightRules.COMBINATION_MIN_SAME_DAY
                or correlation.confidence <= InsightRules.COMBINATION_MIN_CONFIDENCE
            ):
                continue

            sessions = [correlation.session_a, correlation.session_b]
            insights.append(
                SessionInsight(
                    id=make_insight_id(InsightType.COMBINATION, sessions),
                    type=InsightType.COMBINATION,
                    title="Strong Same-Day Pairing",
                    description=(
                        f"You often do {correlation.session_a} and {correlation.session_b} on the same day "
                        f"({correlation.same_day_count} times). This combination might be working well for you."
                    ),
                    sessions=sessions,
                    confidence=correlation.confidence,
                    timing_recommendation=InsightRules.SAME_DAY_TIMING,
                )
            )
        return insights

    def _preparation_insights(self, correlations: Sequence[SessionCorrelation]) -> List[SessionInsight]:
        insights = []
        for correlation in correlations:
            if not (
                self.is_preparation_type(correlation.session_a)
                and self.is_strength_type(correlation.session_b)
                and correlation.sequence_count >= InsightRules.PREPARATION_MIN_SEQUENCE
            ):
                continue

            sessions = [correlation.session_a, correlation.session_b]
            insights.append(
                SessionInsight(
                    id=make_insight_id(InsightType.PREPARATION, sessions),
                    type=InsightType.PREPARATION,
                    title="Preparation Pattern",
                    description=(
                        f"{correlation.session_a} followed by {correlation.session_b} within 2 days has occurred "
                        f"{correlation.sequence_count} times. This suggests good preparation sequencing."
                    ),
                    sessions=sessions,
                    confidence=correlation.confidence,
                    timing_recommendation=InsightRules.PREPARATION_TIMING,
                )
            )
        return insights

    def _handstand_sequence_insight(self, correlations: Sequence[SessionCorrelation]) -> List[SessionInsight]:
        keyword = InsightRules.HANDSTAND_KEYWORD
        candidates = [
            c
            for c in correlations
            if (keyword in c.session_a.lower() or keyword in c.session_b.lower())
            and c.same_day_count >= InsightRules.HANDSTAND_MIN_SAME_DAY
        ]
        if not candidates:
            return []

        # Input is ranked by success rate, so the first candidate is the best one
        top_pair = candidates[0]
        partner = top_pair.session_b if keyword in top_pair.session_a.lower() else top_pair.session_a
        sessions = [top_pair.session_a, top_pair.session_b]
        return [
            SessionInsight(
                id=make_insight_id(InsightType.SEQUENCE, sessions),
                type=InsightType.SEQUENCE,
                title="Handstand Training Pattern",
                description=(
                    f"Your handstand sessions are most often paired with {partner}. "
                    f"This suggests a successful training approach."
                ),
                sessions=sessions,
                confidence=top_pair.confidence,
                timing_recommendation=InsightRules.SAME_DAY_TIMING,
            )
        ]
