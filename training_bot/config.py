from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from training_bot.service.session_analysis.common.constants import WindowDefaults


class AnalyticsSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    correlation_window_days: int = Field(default=WindowDefaults.CORRELATION_DAYS, ge=1)
    body_part_window_days: int = Field(default=WindowDefaults.BODY_PART_DAYS, ge=1)
    streak_window_days: int = Field(default=WindowDefaults.STREAK_DAYS, ge=1)
    trends_window_days: int = Field(default=WindowDefaults.TRENDS_DAYS, ge=1)
    use_session_tags: bool = False


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__")

    telegram_bot_api_key: str
    my_telegram_user_id: int
    read_timeout_s: int = 30
    write_timeout_s: int = 30
    out_dir: Path = Path("./out")
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
