"""Shared test fixtures for the Bollinger Band extremes monitor."""

from collections.abc import Callable

import pytest

from bbmonitor.config import AppSettings, ScannerSettings, TelegramSettings
from bbmonitor.models import Candle

BASE_TS_MS = 1_700_000_000_000  # 2023-11-14T22:13:20Z
MINUTE_MS = 60_000


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (no batch delay, dummy Telegram)."""
    return AppSettings(
        log_level="DEBUG",
        log_file="",
        scanner=ScannerSettings(batch_delay=0.0),
        telegram=TelegramSettings(
            bot_token="test-token",  # type: ignore[arg-type]
            chat_id="-100123",
        ),
    )


@pytest.fixture
def make_candles() -> Callable[..., list[Candle]]:
    """Factory building 1-minute candles from a list of closes, oldest first."""

    def _make(closes: list[float], start_ms: int = BASE_TS_MS) -> list[Candle]:
        return [
            Candle(
                timestamp_ms=start_ms + i * MINUTE_MS,
                open=close,
                high=close,
                low=close,
                close=close,
                volume=1.0,
            )
            for i, close in enumerate(closes)
        ]

    return _make
