"""Bybit exchange client implementation via ccxt async.

Wraps ccxt.async_support.bybit with market loading and async cleanup.
Only public endpoints are used, so no API credentials are configured.
"""

import ccxt.async_support as ccxt_async

from bbmonitor.config import ExchangeSettings
from bbmonitor.exchange.client import ExchangeClient
from bbmonitor.logging import get_logger

logger = get_logger(__name__)


class BybitClient(ExchangeClient):
    """Concrete Bybit market-data client using ccxt async."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings

        config: dict = {
            "enableRateLimit": settings.enable_rate_limit,
            "options": {
                "defaultType": "swap",
            },
        }

        # Override URLs for Bybit Demo Trading API
        if settings.demo_trading:
            config["urls"] = {
                "api": {
                    "public": "https://api-demo.bybit.com",
                    "private": "https://api-demo.bybit.com",
                },
            }

        self._exchange = ccxt_async.bybit(config)
        if settings.testnet:
            self._exchange.set_sandbox_mode(True)
        self._markets: dict = {}

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info(
            "connecting_to_bybit",
            testnet=self._settings.testnet,
            demo=self._settings.demo_trading,
        )
        self._markets = await self._exchange.load_markets()
        logger.info("bybit_connected", market_count=len(self._markets))

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_bybit_connection")
        await self._exchange.close()
        logger.info("bybit_connection_closed")

    async def fetch_tickers(
        self, symbols: list[str] | None = None, params: dict | None = None
    ) -> dict:
        """Fetch ticker data for multiple symbols."""
        return await self._exchange.fetch_tickers(symbols, params=params or {})

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int = 1000,
        params: dict | None = None,
    ) -> list[list]:
        """Fetch OHLCV candles via ccxt."""
        return await self._exchange.fetch_ohlcv(
            symbol, timeframe, since, limit, params=params or {}
        )
