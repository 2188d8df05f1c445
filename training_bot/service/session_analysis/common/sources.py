"""
Read-only collaborator interfaces consumed by the session analysis framework.

The analysis code never performs I/O itself. Callers fetch a windowed snapshot of
events and the user's configuration through these interfaces and pass the data
into the pure calculators.
"""

import datetime as dt
from abc import ABC, abstractmethod
from typing import Dict, List

from training_bot.service.session_analysis.common.data_models import (
    BodyPart,
    SessionEvent,
    SessionTypeMapping,
    SessionTypeTag,
)

# Events grouped by calendar day
SessionsByDay = Dict[dt.date, List[SessionEvent]]


class SessionEventSource(ABC):
    @abstractmethod
    def get_events_for_window(self, start_date: dt.date, end_date: dt.date) -> SessionsByDay:
        """Return events logged between start_date and end_date (inclusive), grouped by day."""
        raise NotImplementedError


class SessionTypeCatalog(ABC):
    @abstractmethod
    def get_configured_types(self) -> List[str]:
        """Return the configured session type names in their display order."""
        raise NotImplementedError

    def get_session_tags(self) -> Dict[str, SessionTypeTag]:
        """Return structured tags for the configured types that have one."""
        return {}


class BodyPartMappingSource(ABC):
    @abstractmethod
    def get_mappings(self) -> List[SessionTypeMapping]:
        raise NotImplementedError

    @abstractmethod
    def get_body_part_catalog(self) -> List[BodyPart]:
        raise NotImplementedError
