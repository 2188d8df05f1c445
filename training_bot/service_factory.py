from functools import cached_property

from training_bot.config import BotSettings
from training_bot.service.session_store import SessionStore


class ServiceFactory:
    def __init__(self, bot_settings: BotSettings):
        self.bot_settings = bot_settings

    @cached_property
    def session_store(self) -> SessionStore:
        return SessionStore.from_out_dir(self.bot_settings.out_dir)
