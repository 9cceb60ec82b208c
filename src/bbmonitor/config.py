"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Bybit public market-data connection settings."""

    model_config = SettingsConfigDict(env_prefix="BYBIT_")

    testnet: bool = False
    demo_trading: bool = False
    enable_rate_limit: bool = True


class ScannerSettings(BaseSettings):
    """Pair selection and candle fetch parameters."""

    model_config = SettingsConfigDict(env_prefix="SCANNER_")

    quote_suffix: str = "USDT"
    min_turnover_24h: Decimal = Decimal("10000000")  # 10M USDT
    timeframe: str = "1m"
    candle_limit: int = 1000  # Bybit kline max per call
    batch_size: int = 120  # max concurrent kline requests
    batch_delay: float = 0.1  # seconds between batches


class BandSettings(BaseSettings):
    """Bollinger Band parameters."""

    model_config = SettingsConfigDict(env_prefix="BANDS_")

    period: int = 20
    multiplier: float = 2.0


class RecordSettings(BaseSettings):
    """All-time record persistence."""

    model_config = SettingsConfigDict(env_prefix="RECORDS_")

    path: str = "all_time_records.json"


class TelegramSettings(BaseSettings):
    """Telegram Bot API delivery settings.

    Delivery is skipped (with a warning) when either the token or the
    chat id is empty.
    """

    model_config = SettingsConfigDict(env_prefix="TELEGRAM_")

    bot_token: SecretStr = SecretStr("")
    chat_id: str = ""
    parse_mode: str = "HTML"
    timeout: float = 10.0


class SchedulerSettings(BaseSettings):
    """Minute-aligned cycle scheduler."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    second_offset: int = 3  # fire at HH:MM:03
    poll_interval: float = 1.0
    trigger_window: int = 5  # seconds after offset a missed tick may still fire


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_file: str = "bb_analysis.log"  # empty string disables file logging
    exchange: ExchangeSettings = ExchangeSettings()
    scanner: ScannerSettings = ScannerSettings()
    bands: BandSettings = BandSettings()
    records: RecordSettings = RecordSettings()
    telegram: TelegramSettings = TelegramSettings()
    scheduler: SchedulerSettings = SchedulerSettings()
