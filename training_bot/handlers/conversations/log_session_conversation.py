from loguru import logger
from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.constants import ParseMode
from telegram.ext import CallbackContext, CommandHandler, ContextTypes, ConversationHandler, MessageHandler, filters

from training_bot.handlers.base.session_handler import SessionHandler
from training_bot.service.session_store import SessionStore, UnknownSessionTypeError
from training_bot.utils import escape_markdown

SESSION_TYPE = 0
KEYBOARD_COLUMNS = 2


def build_session_type_keyboard(session_types: list[str]) -> list[list[str]]:
    return [session_types[i : i + KEYBOARD_COLUMNS] for i in range(0, len(session_types), KEYBOARD_COLUMNS)]


class StartHandler(SessionHandler):
    async def _handle(self, update: Update, context: CallbackContext) -> int:
        session_types = self._repository(update).get_configured_types()
        if not session_types:
            await update.message.reply_text(
                "❌ *No session types configured!*", parse_mode=ParseMode.MARKDOWN
            )
            return ConversationHandler.END

        await update.message.reply_text(
            "🤸 *SESSION LOGGING* 🤸\n\nWhich session did you do?",
            reply_markup=ReplyKeyboardMarkup(
                build_session_type_keyboard(session_types),
                one_time_keyboard=True,
                input_field_placeholder="Session type",
            ),
            parse_mode=ParseMode.MARKDOWN,
        )
        return SESSION_TYPE


class SessionTypeHandler(SessionHandler):
    async def _handle(self, update: Update, context: CallbackContext) -> int:
        session_type = (update.message.text or "").strip()
        if not session_type:
            await update.message.reply_text("❌ *Session type cannot be empty!*", parse_mode=ParseMode.MARKDOWN)
            return SESSION_TYPE

        try:
            event = self.session_store.add_session(update.effective_user.id, session_type)
        except UnknownSessionTypeError:
            await update.message.reply_text(
                f"❌ *Unknown session type:* {escape_markdown(session_type)}\n\nPick one from the keyboard.",
                parse_mode=ParseMode.MARKDOWN,
            )
            return SESSION_TYPE

        await update.message.reply_text(
            f"✅ *{escape_markdown(event.session_type)} logged!* ✅\n\n"
            f"🆔 `{event.id}`\n"
            "Use /list\\_sessions to view your sessions or /training\\_insights for analysis.",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Cancels and ends the conversation."""
    user = update.message.from_user
    logger.info(f"User {user.first_name} canceled the conversation.")
    await update.message.reply_text(
        "⚠️ *Session logging cancelled* ⚠️\n\nNo problem! You can start again anytime with /log\\_session.",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=ReplyKeyboardRemove(),
    )

    return ConversationHandler.END


def get_session_log_handler(session_store: SessionStore) -> ConversationHandler:
    return ConversationHandler(
        entry_points=[CommandHandler("log_session", StartHandler(session_store).handle)],
        states={
            SESSION_TYPE: [MessageHandler(filters.TEXT & ~filters.COMMAND, SessionTypeHandler(session_store).handle)],
        },
        fallbacks=[CommandHandler("cancel", cancel)],
    )
