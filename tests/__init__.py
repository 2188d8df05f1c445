import datetime as dt
from pathlib import Path
from typing import Dict, List

from training_bot.service.session_analysis.common.data_models import SessionEvent
from training_bot.service.session_analysis.common.sources import SessionsByDay

SESSION_TEST_DATA_DIR = Path(__file__).parent / "data"


def build_sessions_by_day(days: Dict[dt.date, List[str]]) -> SessionsByDay:
    """Build a snapshot with one event per listed session type, an hour apart from 08:00."""
    return {
        day: [
            SessionEvent(
                id=f"{day.isoformat()}-{i}",
                session_type=session_type,
                timestamp=dt.datetime.combine(day, dt.time(8 + i)),
            )
            for i, session_type in enumerate(session_types)
        ]
        for day, session_types in days.items()
    }


def count_days_with_type(sessions_by_day: SessionsByDay) -> Dict[str, int]:
    """Count the active days on which each session type was logged."""
    counts: Dict[str, int] = {}
    for events in sessions_by_day.values():
        for session_type in {event.session_type for event in events}:
            counts[session_type] = counts.get(session_type, 0) + 1
    return counts
