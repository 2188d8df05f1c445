from abc import ABC
from typing import Optional

from telegram import Update

from training_bot.config import AnalyticsSettings
from training_bot.handlers.base.private_handler import PrivateHandler
from training_bot.service.session_analytics_service import SessionAnalyticsService
from training_bot.service.session_store import SessionStore, UserSessionRepository


class SessionHandler(PrivateHandler, ABC):
    """Private handler with access to the session store and the user's analytics."""

    def __init__(
        self,
        session_store: SessionStore,
        analytics_settings: AnalyticsSettings = None,
        owner_id: Optional[int] = None,
    ) -> None:
        super().__init__(owner_id)
        self.session_store = session_store
        self.analytics_settings = analytics_settings or AnalyticsSettings()

    def _repository(self, update: Update) -> UserSessionRepository:
        user_id = update.effective_user.id
        # First contact gets the default session types, body parts and mappings
        self.session_store.seed_defaults(user_id)
        return self.session_store.for_user(user_id)

    def _analytics(self, update: Update) -> SessionAnalyticsService:
        return SessionAnalyticsService.for_repository(self._repository(update), self.analytics_settings)
