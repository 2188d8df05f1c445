#!/usr/bin/env python3
"""
Command handlers for training session analytics.

This module provides command handlers that run the session analysis for the
requesting user and render the results as Telegram messages.
"""

from typing import List

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import CallbackContext, CommandHandler

from training_bot.config import AnalyticsSettings
from training_bot.handlers.base.session_handler import SessionHandler
from training_bot.service.session_analysis.common.data_models import (
    BodyPartUsage,
    CorrelationAnalysis,
    SessionTrends,
    StreakSummary,
)
from training_bot.service.session_store import SessionStore
from training_bot.utils import escape_markdown, group_usage_by_category, intensity_bar

TOP_CORRELATIONS = 5
CATEGORY_ICONS = {"upper": "💪", "core": "🧘", "lower": "🦵"}


def format_correlation_analysis(analysis: CorrelationAnalysis) -> str:
    reply = [f"🔗 *TRAINING INSIGHTS* 🔗\n_Analysis of {analysis.analysis_date.isoformat()}_\n"]

    if not analysis.correlations:
        reply.append("_No session pairs found yet. Keep logging with /log\\_session!_\n")
    else:
        reply.append("*Top pairings*")
        for correlation in analysis.correlations[:TOP_CORRELATIONS]:
            reply.append(
                f"• {escape_markdown(correlation.session_a)} + {escape_markdown(correlation.session_b)}: "
                f"`{correlation.success_rate:.0%}` "
                f"(same day {correlation.same_day_count}, sequence {correlation.sequence_count}, "
                f"confidence {correlation.confidence:.0%})"
            )
        reply.append("")

    if analysis.insights:
        reply.append("*Insights*")
        for insight in analysis.insights:
            timing = f" ⏱️ _{insight.timing_recommendation}_" if insight.timing_recommendation else ""
            reply.append(f"💡 *{insight.title}*{timing}\n{escape_markdown(insight.description)}")
        reply.append("")

    if analysis.recommendations:
        reply.append("*Recommendations*")
        for recommendation in analysis.recommendations:
            reply.append(f"👉 {escape_markdown(recommendation)}")

    return "\n".join(reply)


def format_body_part_usage(usages: List[BodyPartUsage], window_days: int) -> str:
    reply = [f"🫀 *BODY PART FOCUS* 🫀\n_Last {window_days} days_\n"]
    for category, category_usages in group_usage_by_category(usages).items():
        reply.append(f"{CATEGORY_ICONS.get(category, '•')} *{category.capitalize()}*")
        for usage in category_usages:
            last = f"{usage.last_trained:%Y-%m-%d}" if usage.last_trained else "never"
            reply.append(
                f"  {intensity_bar(usage.average_intensity)} {escape_markdown(usage.name)}: "
                f"`{usage.session_count}` sessions, last {last}"
            )
        reply.append("")
    return "\n".join(reply).rstrip()


def format_streaks(streaks: StreakSummary, window_days: int) -> str:
    return (
        f"🔥 *TRAINING STREAKS* 🔥\n_Last {window_days} days_\n\n"
        f"Current streak: `{streaks.current_streak}` days\n"
        f"Longest streak: `{streaks.longest_streak}` days\n"
        f"Active days: `{streaks.active_days}`\n"
        f"Total sessions: `{streaks.total_sessions}`"
    )


def format_trends(trends: SessionTrends) -> str:
    reply = ["📈 *TRAINING TRENDS* 📈\n", "*Weekly consistency*"]
    for week in trends.weekly_consistency:
        reply.append(f"`{week.week_start:%d/%m}` {'▮' * week.sessions or '·'} {week.sessions}")

    reply.append("\n*Most frequent sessions*")
    if not trends.type_frequency:
        reply.append("_No sessions logged yet._")
    for frequency in trends.type_frequency:
        reply.append(f"• {escape_markdown(frequency.session_type)}: `{frequency.count}` ({frequency.percentage}%)")

    reply.append("\n*Busiest weekdays*")
    for weekday in trends.weekday_averages:
        reply.append(f"• {weekday.weekday}: `{weekday.average}` per day")
    return "\n".join(reply)


class TrainingInsightsHandler(SessionHandler):
    """
    Handler for the /training_insights command.

    Runs the correlation analysis for the user and replies with pairings, insights
    and recommendations.
    """

    async def _handle(self, update: Update, context: CallbackContext) -> None:
        analysis = self._analytics(update).analyze_correlations()
        await update.message.reply_text(format_correlation_analysis(analysis), parse_mode=ParseMode.MARKDOWN)


class BodyPartsHandler(SessionHandler):
    """Handler for the /body_parts command."""

    async def _handle(self, update: Update, context: CallbackContext) -> None:
        window_days = self.analytics_settings.body_part_window_days
        usages = self._analytics(update).get_body_part_usage(window_days)
        await update.message.reply_text(format_body_part_usage(usages, window_days), parse_mode=ParseMode.MARKDOWN)


class TrainingStreaksHandler(SessionHandler):
    """Handler for the /training_streaks command."""

    async def _handle(self, update: Update, context: CallbackContext) -> None:
        window_days = self.analytics_settings.streak_window_days
        streaks = self._analytics(update).compute_streaks(window_days)
        await update.message.reply_text(format_streaks(streaks, window_days), parse_mode=ParseMode.MARKDOWN)


class TrainingTrendsHandler(SessionHandler):
    """Handler for the /training_trends command."""

    async def _handle(self, update: Update, context: CallbackContext) -> None:
        trends = self._analytics(update).compute_trends()
        await update.message.reply_text(format_trends(trends), parse_mode=ParseMode.MARKDOWN)


def get_training_insights_command(session_store: SessionStore, settings: AnalyticsSettings) -> CommandHandler:
    return CommandHandler("training_insights", TrainingInsightsHandler(session_store, settings).handle)


def get_body_parts_command(session_store: SessionStore, settings: AnalyticsSettings) -> CommandHandler:
    return CommandHandler("body_parts", BodyPartsHandler(session_store, settings).handle)


def get_training_streaks_command(session_store: SessionStore, settings: AnalyticsSettings) -> CommandHandler:
    return CommandHandler("training_streaks", TrainingStreaksHandler(session_store, settings).handle)


def get_training_trends_command(session_store: SessionStore, settings: AnalyticsSettings) -> CommandHandler:
    return CommandHandler("training_trends", TrainingTrendsHandler(session_store, settings).handle)
