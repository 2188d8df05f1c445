"""
Data models for the training session analysis framework.

This module provides Pydantic models for:
- Logged session events and the configuration they are analysed against
- Derived correlation, insight and recommendation structures
- Body part usage, streak and trend outputs
"""

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class IntensityTier(str, Enum):
    """Training intensity of a session type for the body parts it exercises."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BodyPartCategory(str, Enum):
    """Region of the body a body part belongs to."""

    UPPER = "upper"
    CORE = "core"
    LOWER = "lower"


class SessionTypeTag(str, Enum):
    """Structured category attached to a configured session type."""

    PREPARATION = "preparation"
    STRENGTH = "strength"
    RECOVERY = "recovery"
    FLEXIBILITY = "flexibility"


# Configuration models


class Position(BaseModel):
    """Position on the body diagram, in percent of width and height."""

    x: float
    y: float


class BodyPart(BaseModel):
    """A body part that can be trained."""

    id: str
    name: str
    category: BodyPartCategory
    position: Position


class SessionTypeMapping(BaseModel):
    """Body parts exercised by a session type and how hard."""

    session_type: str
    body_parts: List[BodyPart] = Field(default_factory=list)
    intensity: IntensityTier = IntensityTier.MEDIUM


class ConfiguredSessionType(BaseModel):
    """A session type a user can log, with an optional structured tag."""

    name: str
    tag: Optional[SessionTypeTag] = None


class SessionEvent(BaseModel):
    """A single logged training session."""

    model_config = ConfigDict(frozen=True)

    id: str
    session_type: str
    timestamp: dt.datetime

    @property
    def date_key(self) -> dt.date:
        """Calendar day the session is grouped under."""
        return self.timestamp.date()


# Correlation analysis models


class SessionCorrelation(BaseModel):
    """Co-occurrence statistics for an unordered pair of session types."""

    model_config = ConfigDict(frozen=True)

    session_a: str
    session_b: str
    same_day_count: int = Field(ge=0)  # Active days with both A and B
    sequence_count: int = Field(ge=0)  # Days with A followed by B within the lookahead
    success_rate: float = Field(ge=0.0)  # Not capped at 1.0, see double counting
    confidence: float = Field(ge=0.0, le=1.0)


class InsightType(str, Enum):
    """Kinds of insight derived from correlations."""

    PREPARATION = "preparation"
    COMBINATION = "combination"
    SEQUENCE = "sequence"
    RECOVERY = "recovery"


class SessionInsight(BaseModel):
    """A human-readable pattern found in the correlations."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: InsightType
    title: str
    description: str
    sessions: List[str]
    confidence: float = Field(ge=0.0, le=1.0)
    timing_recommendation: Optional[str] = None


class CorrelationAnalysis(BaseModel):
    """Result of one correlation analysis run."""

    model_config = ConfigDict(frozen=True)

    correlations: List[SessionCorrelation] = Field(default_factory=list)
    insights: List[SessionInsight] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    analysis_date: dt.date


# Body part and activity models


class BodyPartUsage(BaseModel):
    """How often and how hard a body part was trained over the window."""

    model_config = ConfigDict(frozen=True)

    body_part_id: str
    name: str
    category: BodyPartCategory
    session_count: int = Field(ge=0)
    last_trained: Optional[dt.datetime] = None
    average_intensity: float = Field(ge=0.0)
    position: Position


class StreakSummary(BaseModel):
    """Activity streaks over a trailing window."""

    model_config = ConfigDict(frozen=True)

    current_streak: int = 0
    longest_streak: int = 0
    active_days: int = 0
    total_sessions: int = 0


# Trend models


class DailySessionCount(BaseModel):
    """Number of sessions logged on one day."""

    date: dt.date
    count: int


class SessionTypeFrequency(BaseModel):
    """How many sessions of one type were logged."""

    session_type: str
    count: int
    percentage: int  # Share of all sessions, rounded to a whole percent


class WeeklyConsistency(BaseModel):
    """Sessions logged in one Monday-based week."""

    week_start: dt.date
    sessions: int


class WeekdayAverage(BaseModel):
    """Average sessions per occurrence of a weekday."""

    weekday: str
    total: int
    days: int
    average: float


class MonthlyBreakdown(BaseModel):
    """Sessions logged in one calendar month."""

    month_start: dt.date
    sessions: int
    top_type: Optional[str] = None


class SessionTrends(BaseModel):
    """Activity trends over the trends window."""

    model_config = ConfigDict(frozen=True)

    sessions_over_time: List[DailySessionCount] = Field(default_factory=list)
    type_frequency: List[SessionTypeFrequency] = Field(default_factory=list)
    weekly_consistency: List[WeeklyConsistency] = Field(default_factory=list)
    weekday_averages: List[WeekdayAverage] = Field(default_factory=list)
    monthly_breakdown: List[MonthlyBreakdown] = Field(default_factory=list)
    total_sessions: int = 0
