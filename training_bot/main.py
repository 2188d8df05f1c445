from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger
from telegram import BotCommand, BotCommandScopeAllPrivateChats, BotCommandScopeDefault
from telegram.ext import Application, ApplicationBuilder

from training_bot.config import BotSettings
from training_bot.handlers.commands.list_sessions_command import get_delete_session_command, get_list_sessions_command
from training_bot.handlers.commands.training_commands import (
    get_body_parts_command,
    get_training_insights_command,
    get_training_streaks_command,
    get_training_trends_command,
)
from training_bot.handlers.conversations.log_session_conversation import get_session_log_handler
from training_bot.service_factory import ServiceFactory


def setup_logger(out_dir: Path) -> None:
    log_dir = out_dir / "log"
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(log_dir / "debug.log", rotation="100 MB", retention="7 days", level="DEBUG")
    logger.add(log_dir / "error.log", rotation="100 MB", retention="7 days", level="ERROR")
    logger.info("logger initialised")


def _build_commands() -> list[BotCommand]:
    return [
        BotCommand("log_session", "Log a training session"),
        BotCommand("list_sessions", "View your training sessions"),
        BotCommand("delete_session", "Delete a training session by id"),
        BotCommand("training_insights", "Session pairings, insights and recommendations"),
        BotCommand("body_parts", "Body part focus over the last weeks"),
        BotCommand("training_streaks", "Current and longest training streaks"),
        BotCommand("training_trends", "Weekly consistency and favourite sessions"),
        BotCommand("cancel", "Cancel current conversation"),
    ]


async def _post_init(application: Application) -> None:
    commands = _build_commands()

    matrix: list[tuple[list[BotCommand], object, str | None]] = [
        (commands, BotCommandScopeAllPrivateChats(), None),
        (commands, BotCommandScopeDefault(), None),
        (commands, BotCommandScopeDefault(), "en"),
    ]

    await asyncio.gather(
        *(application.bot.set_my_commands(cmds, scope=scope, language_code=lang) for cmds, scope, lang in matrix)
    )
    logger.info("Bot commands registered.")


def _build_app(bot_settings: BotSettings) -> Application:
    application = (
        ApplicationBuilder()
        .token(bot_settings.telegram_bot_api_key)
        .concurrent_updates(True)
        .read_timeout(bot_settings.read_timeout_s)
        .write_timeout(bot_settings.write_timeout_s)
        .post_init(_post_init)
        .build()
    )
    return application


def _setup_handlers(app: Application, service_factory: ServiceFactory) -> None:
    session_store = service_factory.session_store
    analytics_settings = service_factory.bot_settings.analytics

    app.add_handler(get_session_log_handler(session_store))
    app.add_handler(get_list_sessions_command(session_store))
    app.add_handler(get_delete_session_command(session_store))

    app.add_handler(get_training_insights_command(session_store, analytics_settings))
    app.add_handler(get_body_parts_command(session_store, analytics_settings))
    app.add_handler(get_training_streaks_command(session_store, analytics_settings))
    app.add_handler(get_training_trends_command(session_store, analytics_settings))


def build_configured_application(bot_settings: BotSettings | None = None) -> Application:
    bot_settings = bot_settings or BotSettings()
    if not bot_settings.out_dir.exists():
        bot_settings.out_dir.mkdir(parents=True)
    setup_logger(bot_settings.out_dir)
    application = _build_app(bot_settings)

    _setup_handlers(application, ServiceFactory(bot_settings))
    return application


def main() -> None:  # pragma: no cover
    application = build_configured_application()
    logger.info("Starting polling …")
    application.run_polling(allowed_updates="*")


if __name__ == "__main__":
    main()
