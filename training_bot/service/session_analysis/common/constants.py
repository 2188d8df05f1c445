"""
Constants for the training session analysis framework.

This module defines constants used throughout the analysis framework, including:
- Thresholds for correlation confidence scoring
- Keyword sets and thresholds for insight classification
- Intensity tier weights for body part usage
- Default lookback windows for each analysis
"""


# Correlation scoring configuration
class CorrelationConfig:
    """Configuration for pairwise session correlation analysis."""

    MIN_OPPORTUNITIES = 5  # Below this many opportunities confidence is forced to 0
    CONFIDENCE_SATURATION = 10  # Opportunities at which confidence reaches 1.0
    SEQUENCE_LOOKAHEAD_DAYS = 2  # Number of following active days checked for a sequence


# Insight and recommendation rules
class InsightRules:
    """Thresholds and keyword sets used to classify correlations into insights."""

    # Combination insights
    COMBINATION_MIN_SAME_DAY = 3
    COMBINATION_MIN_CONFIDENCE = 0.5

    # Preparation insights (mobility followed by strength work)
    PREPARATION_KEYWORD = "mobility"
    STRENGTH_KEYWORDS = ("handstand", "press", "abs")
    PREPARATION_MIN_SEQUENCE = 2
    PREPARATION_TIMING = "within 48 hours"

    # Handstand sequence insight
    HANDSTAND_KEYWORD = "handstand"
    HANDSTAND_MIN_SAME_DAY = 2
    SAME_DAY_TIMING = "same day"

    # Recommendations
    RECOMMENDATION_MIN_CONFIDENCE = 0.7
    SHOULDER_MOBILITY_KEYWORD = "mobility: shoulder"
    GAP_MIN_SAME_DAY = 2
    HIGH_INTENSITY_SESSIONS = ("Handstands", "Press handstand", "Handstand push-up")
    RECOVERY_KEYWORD = "yin"
    MAX_RECOMMENDATIONS = 5


# Intensity tier weights
class IntensityWeights:
    """Weight assigned to each intensity tier when averaging body part load."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


# Default lookback windows
class WindowDefaults:
    """Default number of days for each analysis window."""

    CORRELATION_DAYS = 60  # Pairwise correlation analysis
    BODY_PART_DAYS = 30  # Body part usage heatmap
    STREAK_DAYS = 90  # Streak and consistency calculation
    TRENDS_DAYS = 90  # Type frequency and weekday averages

    SESSIONS_OVER_TIME_DAYS = 30  # Daily session count chart
    WEEKLY_CONSISTENCY_WEEKS = 12  # Weeks in the consistency chart
    MONTHLY_BREAKDOWN_MONTHS = 6  # Months in the monthly breakdown
