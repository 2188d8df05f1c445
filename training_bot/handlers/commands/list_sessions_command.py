from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import CallbackContext, CommandHandler

from training_bot.handlers.base.session_handler import SessionHandler
from training_bot.service.session_store import SessionStore
from training_bot.utils import escape_markdown

DEFAULT_LIST_LIMIT = 10


class ListSessionsHandler(SessionHandler):
    async def _handle(self, update: Update, context: CallbackContext) -> None:
        limit = DEFAULT_LIST_LIMIT
        if context.args:
            try:
                limit = max(1, int(context.args[0]))
            except ValueError:
                await update.message.reply_text(
                    "❌ *Usage:* /list\\_sessions <n>\n\nn is how many recent sessions to show.",
                    parse_mode=ParseMode.MARKDOWN,
                )
                return

        reply = ["🤸 *YOUR TRAINING LOG* 🤸\n"]

        sessions = self.session_store.list_sessions(update.effective_user.id, limit)
        if not sessions:
            reply.append("_No sessions found. Use /log\\_session to add some!_")
        else:
            for event in sessions:
                reply.append(
                    f"🕒 `{event.timestamp:%Y-%m-%d %H:%M}` - *{escape_markdown(event.session_type)}*\n"
                    f"🆔 `{event.id}`\n"
                )

        await update.message.reply_text("\n".join(reply), parse_mode=ParseMode.MARKDOWN)


class DeleteSessionHandler(SessionHandler):
    async def _handle(self, update: Update, context: CallbackContext) -> None:
        if not context.args:
            await update.message.reply_text(
                "❌ *Usage:* /delete\\_session <id>\n\nUse /list\\_sessions to find the id.",
                parse_mode=ParseMode.MARKDOWN,
            )
            return

        session_id = context.args[0]
        if self.session_store.remove_session(update.effective_user.id, session_id):
            await update.message.reply_text("🗑️ *Session deleted* 🗑️", parse_mode=ParseMode.MARKDOWN)
        else:
            await update.message.reply_text(
                f"❌ *No session with id* `{session_id}`", parse_mode=ParseMode.MARKDOWN
            )


def get_list_sessions_command(session_store: SessionStore) -> CommandHandler:
    return CommandHandler("list_sessions", ListSessionsHandler(session_store).handle)


def get_delete_session_command(session_store: SessionStore) -> CommandHandler:
    return CommandHandler("delete_session", DeleteSessionHandler(session_store).handle)
