"""
Body part usage analysis module.

This module walks a windowed snapshot of logged sessions through the session type
mappings to count how often each body part was trained, how hard on average, and
when it was last trained.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from loguru import logger

from training_bot.service.session_analysis.common.constants import IntensityWeights
from training_bot.service.session_analysis.common.data_models import (
    BodyPart,
    BodyPartUsage,
    IntensityTier,
    SessionTypeMapping,
)
from training_bot.service.session_analysis.common.sources import SessionsByDay

INTENSITY_WEIGHTS: Dict[IntensityTier, int] = {
    IntensityTier.LOW: IntensityWeights.LOW,
    IntensityTier.MEDIUM: IntensityWeights.MEDIUM,
    IntensityTier.HIGH: IntensityWeights.HIGH,
}


@dataclass
class _UsageAccumulator:
    count: int = 0
    weight_sum: int = 0
    last_trained: Optional[dt.datetime] = None


class BodyPartUsageAggregator:
    """
    Aggregate per-body-part training counts and intensity over a window.

    Produces exactly one BodyPartUsage per catalog body part, in catalog order,
    including body parts that were not trained at all.
    """

    def aggregate(
        self,
        sessions_by_day: SessionsByDay,
        mappings: Sequence[SessionTypeMapping],
        catalog: Sequence[BodyPart],
    ) -> List[BodyPartUsage]:
        """
        Aggregate body part usage.

        Args:
            sessions_by_day: Events grouped by calendar day, already restricted to the window
            mappings: Session type to body part mappings. Unmapped session types are skipped.
            catalog: The body parts to report on

        Returns:
            One BodyPartUsage per catalog entry
        """
        mappings_by_type = {mapping.session_type: mapping for mapping in mappings}
        stats: Dict[str, _UsageAccumulator] = {part.id: _UsageAccumulator() for part in catalog}

        skipped = 0
        # Most recent day first
        for day in sorted(sessions_by_day, reverse=True):
            for event in sessions_by_day[day]:
                mapping = mappings_by_type.get(event.session_type)
                if mapping is None:
                    skipped += 1
                    continue

                weight = INTENSITY_WEIGHTS[mapping.intensity]
                for body_part in mapping.body_parts:
                    accumulator = stats.get(body_part.id)
                    if accumulator is None:
                        continue
                    accumulator.count += 1
                    accumulator.weight_sum += weight
                    # Events within a day are not ordered newest first, so keep the max
                    if accumulator.last_trained is None or event.timestamp > accumulator.last_trained:
                        accumulator.last_trained = event.timestamp

        if skipped:
            logger.debug(f"Skipped {skipped} events with unmapped session types")

        return [self._to_usage(part, stats[part.id]) for part in catalog]

    @staticmethod
    def _to_usage(part: BodyPart, accumulator: _UsageAccumulator) -> BodyPartUsage:
        average_intensity = accumulator.weight_sum / accumulator.count if accumulator.count > 0 else 0.0
        return BodyPartUsage(
            body_part_id=part.id,
            name=part.name,
            category=part.category,
            session_count=accumulator.count,
            last_trained=accumulator.last_trained,
            average_intensity=average_intensity,
            position=part.position,
        )
