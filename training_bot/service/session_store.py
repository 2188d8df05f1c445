"""
DuckDB-backed storage for logged training sessions and per-user configuration.

The store owns persistence only. It implements the read-only collaborator
interfaces the analysis framework consumes through UserSessionRepository.
"""

import datetime as dt
import json
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import duckdb
from loguru import logger

from training_bot.service.db_utils import execute_query, transaction
from training_bot.service.session_analysis.body_parts.default_catalog import (
    DEFAULT_BODY_PARTS,
    DEFAULT_SESSION_TYPES,
    build_default_mappings,
)
from training_bot.service.session_analysis.common.data_models import (
    BodyPart,
    ConfiguredSessionType,
    Position,
    SessionEvent,
    SessionTypeMapping,
    SessionTypeTag,
)
from training_bot.service.session_analysis.common.sources import (
    BodyPartMappingSource,
    SessionEventSource,
    SessionsByDay,
    SessionTypeCatalog,
)


class UnknownSessionTypeError(ValueError):
    """Raised when logging a session whose type is not configured for the user."""


class SessionStore:
    _EVENTS_TABLE_NAME = "session_events"
    _SESSION_TYPES_TABLE_NAME = "session_types"
    _BODY_PARTS_TABLE_NAME = "body_parts"
    _MAPPINGS_TABLE_NAME = "body_part_mappings"

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self.conn = conn
        self._initialize_tables()

    @classmethod
    def from_out_dir(cls, out_dir: Path) -> "SessionStore":
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        db_path = out_dir / "sessions.duckdb"
        logger.info(f"Opening session store at {db_path}")
        return cls(duckdb.connect(str(db_path)))

    def close(self) -> None:
        self.conn.close()

    def _initialize_tables(self) -> None:
        """Initialize all database tables on store creation."""
        logger.info("Initializing session store tables")
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._EVENTS_TABLE_NAME} (
                id VARCHAR PRIMARY KEY,
                user_id BIGINT,
                session_type VARCHAR,
                date_key DATE,
                timestamp TIMESTAMP
            )
            """
        )
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._SESSION_TYPES_TABLE_NAME} (
                user_id BIGINT,
                position INTEGER,
                name VARCHAR,
                tag VARCHAR,
                PRIMARY KEY (user_id, name)
            )
            """
        )
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._BODY_PARTS_TABLE_NAME} (
                user_id BIGINT,
                position INTEGER,
                id VARCHAR,
                name VARCHAR,
                category VARCHAR,
                pos_x DOUBLE,
                pos_y DOUBLE,
                PRIMARY KEY (user_id, id)
            )
            """
        )
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._MAPPINGS_TABLE_NAME} (
                user_id BIGINT,
                session_type VARCHAR,
                body_part_ids JSON,
                intensity VARCHAR,
                PRIMARY KEY (user_id, session_type)
            )
            """
        )

    # Configuration

    def has_configuration(self, user_id: int) -> bool:
        rows = execute_query(
            self.conn,
            f"SELECT COUNT(*) AS n FROM {self._SESSION_TYPES_TABLE_NAME} WHERE user_id = ?",
            (user_id,),
        )
        return rows[0]["n"] > 0

    def seed_defaults(self, user_id: int) -> bool:
        """
        Copy the default configuration to a user that has none.

        Args:
            user_id: Telegram user ID

        Returns:
            True if the defaults were written, False if the user was already configured.
        """
        if self.has_configuration(user_id):
            return False

        logger.info(f"Seeding default session configuration for user {user_id}")
        self.set_body_part_catalog(user_id, DEFAULT_BODY_PARTS)
        self.set_session_types(user_id, DEFAULT_SESSION_TYPES)
        self.set_mappings(user_id, build_default_mappings(DEFAULT_BODY_PARTS))
        return True

    def set_session_types(self, user_id: int, session_types: Sequence[ConfiguredSessionType]) -> None:
        with transaction(self.conn) as txn:
            execute_query(
                txn, f"DELETE FROM {self._SESSION_TYPES_TABLE_NAME} WHERE user_id = ?", (user_id,), fetch=False
            )
            for position, session_type in enumerate(session_types):
                execute_query(
                    txn,
                    f"INSERT INTO {self._SESSION_TYPES_TABLE_NAME} (user_id, position, name, tag) VALUES (?, ?, ?, ?)",
                    (user_id, position, session_type.name, session_type.tag.value if session_type.tag else None),
                    fetch=False,
                )
        logger.info(f"Stored {len(session_types)} session types for user {user_id}")

    def set_body_part_catalog(self, user_id: int, body_parts: Sequence[BodyPart]) -> None:
        with transaction(self.conn) as txn:
            execute_query(
                txn, f"DELETE FROM {self._BODY_PARTS_TABLE_NAME} WHERE user_id = ?", (user_id,), fetch=False
            )
            for position, part in enumerate(body_parts):
                execute_query(
                    txn,
                    f"""
                    INSERT INTO {self._BODY_PARTS_TABLE_NAME} (user_id, position, id, name, category, pos_x, pos_y)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, position, part.id, part.name, part.category.value, part.position.x, part.position.y),
                    fetch=False,
                )
        logger.info(f"Stored {len(body_parts)} body parts for user {user_id}")

    def set_mappings(self, user_id: int, mappings: Sequence[SessionTypeMapping]) -> None:
        with transaction(self.conn) as txn:
            execute_query(txn, f"DELETE FROM {self._MAPPINGS_TABLE_NAME} WHERE user_id = ?", (user_id,), fetch=False)
            for mapping in mappings:
                execute_query(
                    txn,
                    f"""
                    INSERT INTO {self._MAPPINGS_TABLE_NAME} (user_id, session_type, body_part_ids, intensity)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        mapping.session_type,
                        json.dumps([part.id for part in mapping.body_parts]),
                        mapping.intensity.value,
                    ),
                    fetch=False,
                )
        logger.info(f"Stored {len(mappings)} body part mappings for user {user_id}")

    def get_session_types(self, user_id: int) -> List[ConfiguredSessionType]:
        rows = execute_query(
            self.conn,
            f"SELECT name, tag FROM {self._SESSION_TYPES_TABLE_NAME} WHERE user_id = ? ORDER BY position",
            (user_id,),
        )
        return [
            ConfiguredSessionType(name=row["name"], tag=SessionTypeTag(row["tag"]) if row["tag"] else None)
            for row in rows
        ]

    def get_body_part_catalog(self, user_id: int) -> List[BodyPart]:
        rows = execute_query(
            self.conn,
            f"""
            SELECT id, name, category, pos_x, pos_y
            FROM {self._BODY_PARTS_TABLE_NAME}
            WHERE user_id = ?
            ORDER BY position
            """,
            (user_id,),
        )
        return [
            BodyPart(
                id=row["id"],
                name=row["name"],
                category=row["category"],
                position=Position(x=row["pos_x"], y=row["pos_y"]),
            )
            for row in rows
        ]

    def get_mappings(self, user_id: int) -> List[SessionTypeMapping]:
        """
        Get the user's session type mappings with body parts resolved against their catalog.

        Body part ids that are no longer in the catalog are dropped.
        """
        parts_by_id = {part.id: part for part in self.get_body_part_catalog(user_id)}
        rows = execute_query(
            self.conn,
            f"""
            SELECT session_type, body_part_ids, intensity
            FROM {self._MAPPINGS_TABLE_NAME}
            WHERE user_id = ?
            ORDER BY session_type
            """,
            (user_id,),
        )
        mappings = []
        for row in rows:
            part_ids = json.loads(row["body_part_ids"]) if row["body_part_ids"] else []
            mappings.append(
                SessionTypeMapping(
                    session_type=row["session_type"],
                    body_parts=[parts_by_id[part_id] for part_id in part_ids if part_id in parts_by_id],
                    intensity=row["intensity"],
                )
            )
        return mappings

    # Session events

    def add_session(
        self, user_id: int, session_type: str, timestamp: Optional[dt.datetime] = None
    ) -> SessionEvent:
        """
        Log a training session.

        Args:
            user_id: Telegram user ID
            session_type: Name of a configured session type
            timestamp: When the session happened. Defaults to now.

        Returns:
            The stored SessionEvent

        Raises:
            UnknownSessionTypeError: If session_type is not configured for the user
        """
        configured = {session_type.name for session_type in self.get_session_types(user_id)}
        if session_type not in configured:
            raise UnknownSessionTypeError(f"Session type '{session_type}' is not configured")

        event = SessionEvent(
            id=uuid.uuid4().hex,
            session_type=session_type,
            timestamp=timestamp or dt.datetime.now(),
        )
        logger.info(f"Adding session {event.id} ({session_type}) for user {user_id}")
        execute_query(
            self.conn,
            f"""
            INSERT INTO {self._EVENTS_TABLE_NAME} (id, user_id, session_type, date_key, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (event.id, user_id, event.session_type, event.date_key, event.timestamp),
            fetch=False,
        )
        return event

    def remove_session(self, user_id: int, session_id: str) -> bool:
        """Delete a logged session. Returns False if the user has no session with that id."""
        rows = execute_query(
            self.conn,
            f"SELECT COUNT(*) AS n FROM {self._EVENTS_TABLE_NAME} WHERE user_id = ? AND id = ?",
            (user_id, session_id),
        )
        if rows[0]["n"] == 0:
            logger.info(f"No session {session_id} to remove for user {user_id}")
            return False

        logger.info(f"Removing session {session_id} for user {user_id}")
        execute_query(
            self.conn,
            f"DELETE FROM {self._EVENTS_TABLE_NAME} WHERE user_id = ? AND id = ?",
            (user_id, session_id),
            fetch=False,
        )
        return True

    def list_sessions(self, user_id: int, limit: int = 10) -> List[SessionEvent]:
        rows = execute_query(
            self.conn,
            f"""
            SELECT id, session_type, timestamp
            FROM {self._EVENTS_TABLE_NAME}
            WHERE user_id = ?
            ORDER BY timestamp DESC, id
            LIMIT {max(1, int(limit))}
            """,
            (user_id,),
        )
        return [SessionEvent(**row) for row in rows]

    def get_events_for_window(self, user_id: int, start_date: dt.date, end_date: dt.date) -> SessionsByDay:
        """
        Get a user's sessions between two dates (inclusive), grouped by day.

        Days without sessions are absent from the result. Sessions within a day are in
        timestamp order.
        """
        rows = execute_query(
            self.conn,
            f"""
            SELECT id, session_type, timestamp, date_key
            FROM {self._EVENTS_TABLE_NAME}
            WHERE user_id = ?
              AND date_key BETWEEN ? AND ?
            ORDER BY date_key, timestamp, id
            """,
            (user_id, start_date, end_date),
        )
        sessions_by_day: Dict[dt.date, List[SessionEvent]] = {}
        for row in rows:
            date_key = row.pop("date_key")
            sessions_by_day.setdefault(date_key, []).append(SessionEvent(**row))
        return sessions_by_day

    def for_user(self, user_id: int) -> "UserSessionRepository":
        return UserSessionRepository(self, user_id)


class UserSessionRepository(SessionEventSource, SessionTypeCatalog, BodyPartMappingSource):
    """One user's view of the store, as consumed by the analytics service."""

    def __init__(self, store: SessionStore, user_id: int) -> None:
        self.store = store
        self.user_id = user_id

    def get_events_for_window(self, start_date: dt.date, end_date: dt.date) -> SessionsByDay:
        return self.store.get_events_for_window(self.user_id, start_date, end_date)

    def get_configured_types(self) -> List[str]:
        return [session_type.name for session_type in self.store.get_session_types(self.user_id)]

    def get_session_tags(self) -> Dict[str, SessionTypeTag]:
        return {
            session_type.name: session_type.tag
            for session_type in self.store.get_session_types(self.user_id)
            if session_type.tag is not None
        }

    def get_mappings(self) -> List[SessionTypeMapping]:
        return self.store.get_mappings(self.user_id)

    def get_body_part_catalog(self) -> List[BodyPart]:
        return self.store.get_body_part_catalog(self.user_id)
