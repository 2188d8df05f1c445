import os
from abc import ABC, abstractmethod
from typing import Any, Optional

from loguru import logger
from telegram import Update
from telegram.ext import CallbackContext

OWNER_ID_ENV_VAR = "MY_TELEGRAM_USER_ID"


class PrivateHandler(ABC):
    """
    Base class for handlers that only answer the bot owner.

    Updates from anyone else get a short refusal and never reach `_handle`. Errors
    raised while handling are reported back in the chat and logged with traceback,
    so a failed analysis does not leave the owner without a reply.
    """

    def __init__(self, owner_id: Optional[int] = None) -> None:
        if owner_id is None:
            env_owner_id = os.getenv(OWNER_ID_ENV_VAR)
            if env_owner_id is None:
                raise ValueError(f"{OWNER_ID_ENV_VAR} is not set in .env file")
            owner_id = int(env_owner_id)
        self.owner_id = owner_id

    async def handle(self, update: Update, context: CallbackContext) -> Any:
        user = update.effective_user
        logger.debug(f"{type(self).__name__} received {update.message.text!r} from {user.name} (id: {user.id})")
        if user.id != self.owner_id:
            logger.warning(f"Rejected update from user {user.id}")
            await update.message.reply_text("⛔ This bot is private.")
            return None
        try:
            return await self._handle(update, context)
        except Exception as e:
            await update.message.reply_text(f"Exception has occurred!\n{e}")
            logger.exception(e)

    @abstractmethod
    async def _handle(self, update: Update, context: CallbackContext) -> Any:
        raise NotImplementedError
