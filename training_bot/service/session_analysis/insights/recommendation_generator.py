"""
Recommendation generation module.

Derives a short, ordered list of textual training recommendations from insights and
from gaps in the correlation set.
"""

from typing import Callable, List, Sequence

from loguru import logger

from training_bot.service.session_analysis.common.constants import InsightRules
from training_bot.service.session_analysis.common.data_models import InsightType, SessionCorrelation, SessionInsight

SHOULDER_HANDSTAND_GAP_RECOMMENDATION = (
    "Try combining shoulder mobility work with handstand practice for better preparation."
)
RECOVERY_RECOMMENDATION = "Consider adding Yin yoga or gentle mobility work after intense handstand sessions."


def _pairs(correlation: SessionCorrelation, first: Callable[[str], bool], second: Callable[[str], bool]) -> bool:
    """Whether the correlation pairs a type matching `first` with one matching `second`, in either order."""
    a, b = correlation.session_a, correlation.session_b
    return (first(a) and second(b)) or (first(b) and second(a))


def _is_shoulder_mobility(session_type: str) -> bool:
    return InsightRules.SHOULDER_MOBILITY_KEYWORD in session_type.lower()


def _is_handstand(session_type: str) -> bool:
    return InsightRules.HANDSTAND_KEYWORD in session_type.lower()


def _is_high_intensity(session_type: str) -> bool:
    return session_type in InsightRules.HIGH_INTENSITY_SESSIONS


def _is_recovery(session_type: str) -> bool:
    return InsightRules.RECOVERY_KEYWORD in session_type.lower()


class RecommendationGenerator:
    """
    Generate recommendations by applying rules in a fixed order.

    Rules append on match and the result is never re-sorted; it is truncated to the
    first `max_recommendations` entries.
    """

    def __init__(self, max_recommendations: int = InsightRules.MAX_RECOMMENDATIONS):
        self.max_recommendations = max_recommendations

    def generate(
        self, insights: Sequence[SessionInsight], correlations: Sequence[SessionCorrelation]
    ) -> List[str]:
        """
        Generate recommendations.

        Args:
            insights: Insights sorted descending by confidence
            correlations: Correlations the insights were derived from

        Returns:
            At most `max_recommendations` recommendation sentences
        """
        recommendations: List[str] = []

        # 1. Confident insights
        for insight in insights:
            if insight.confidence <= InsightRules.RECOMMENDATION_MIN_CONFIDENCE:
                continue
            first, second = insight.sessions[0], insight.sessions[-1]
            if insight.type == InsightType.PREPARATION:
                recommendations.append(f"Consider doing {first} before {second} for optimal preparation.")
            elif insight.type == InsightType.COMBINATION:
                recommendations.append(f"{first} and {second} work well together on the same day.")

        # 2. Shoulder mobility and handstands are rarely trained together
        has_shoulder_handstand_pairing = any(
            _pairs(c, _is_shoulder_mobility, _is_handstand) and c.same_day_count >= InsightRules.GAP_MIN_SAME_DAY
            for c in correlations
        )
        if not has_shoulder_handstand_pairing:
            recommendations.append(SHOULDER_HANDSTAND_GAP_RECOMMENDATION)

        # 3. No recovery work around intense handstand sessions
        has_recovery_pattern = any(_pairs(c, _is_high_intensity, _is_recovery) for c in correlations)
        if not has_recovery_pattern:
            recommendations.append(RECOVERY_RECOMMENDATION)

        logger.debug(f"Generated {len(recommendations)} recommendations, keeping {self.max_recommendations}")
        return recommendations[: self.max_recommendations]
