"""Batched 1-minute candle fetcher.

Fans out one kline request per symbol in bounded batches. Each batch is an
asyncio.TaskGroup joined before the next one starts, followed by a short
delay to stay under Bybit's public rate limit.

A symbol whose request fails (network error or exchange error code) gets an
empty candle list; it never aborts the batch.
"""

import asyncio

from bbmonitor.config import ScannerSettings
from bbmonitor.exchange.client import ExchangeClient
from bbmonitor.logging import get_logger
from bbmonitor.models import Candle

logger = get_logger(__name__)


def parse_ohlcv(rows: list[list]) -> list[Candle]:
    """Convert ccxt OHLCV rows to Candles sorted oldest-first.

    Bybit's raw kline endpoint is newest-first; sorting here makes the
    ordering independent of what the client library does.
    """
    candles = [
        Candle(
            timestamp_ms=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
        )
        for row in rows
    ]
    candles.sort(key=lambda c: c.timestamp_ms)
    return candles


class CandleSource:
    """Fetches recent candles for many symbols with bounded concurrency.

    Usage:
        source = CandleSource(exchange, settings.scanner)
        candles = await source.fetch_all(["BTC/USDT:USDT", "ETH/USDT:USDT"])
    """

    def __init__(self, exchange: ExchangeClient, settings: ScannerSettings) -> None:
        self._exchange = exchange
        self._settings = settings

    async def fetch_candles(self, symbol: str) -> list[Candle]:
        """Fetch up to ``candle_limit`` most recent candles for one symbol."""
        try:
            rows = await self._exchange.fetch_ohlcv(
                symbol,
                timeframe=self._settings.timeframe,
                limit=self._settings.candle_limit,
            )
        except Exception as e:
            logger.warning("candle_fetch_failed", symbol=symbol, error=str(e))
            return []

        try:
            return parse_ohlcv(rows or [])
        except (TypeError, ValueError, IndexError) as e:
            logger.warning("candle_parse_failed", symbol=symbol, error=str(e))
            return []

    async def fetch_all(self, symbols: list[str]) -> dict[str, list[Candle]]:
        """Fetch candles for every symbol, ``batch_size`` requests at a time.

        Returns a dict with an entry for every requested symbol.
        """
        results: dict[str, list[Candle]] = {}
        batch_size = max(1, self._settings.batch_size)

        for start in range(0, len(symbols), batch_size):
            batch = symbols[start : start + batch_size]

            async with asyncio.TaskGroup() as tg:
                tasks = {
                    symbol: tg.create_task(self.fetch_candles(symbol))
                    for symbol in batch
                }

            for symbol, task in tasks.items():
                results[symbol] = task.result()

            if start + batch_size < len(symbols):
                await asyncio.sleep(self._settings.batch_delay)

        empty = sum(1 for candles in results.values() if not candles)
        logger.debug("candles_fetched", symbols=len(symbols), empty=empty)
        return results
