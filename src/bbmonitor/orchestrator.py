"""Analysis cycle -- wires market data, indicators, records and alerts.

Each cycle:
  1. SCAN: fetch linear tickers and select active USDT pairs
  2. FETCH: batched 1-minute candles for every selected pair
  3. MEASURE: Bollinger Bands per pair, distance of the last closed candle
  4. REDUCE: strongest positive and negative deviation across pairs
  5. RECORD: compare with all-time records, persist if beaten
  6. ALERT: format and deliver the message

All per-cycle values are local and returned in a CycleResult; nothing is
kept on the instance between cycles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bbmonitor.alerts.formatter import format_alert
from bbmonitor.config import AppSettings
from bbmonitor.data.records import RecordStore, apply_extremes
from bbmonitor.exchange.client import ExchangeClient
from bbmonitor.logging import get_logger
from bbmonitor.market_data.candle_source import CandleSource
from bbmonitor.market_data.pair_selector import select_active_pairs
from bbmonitor.models import CycleResult, SymbolReading
from bbmonitor.signals.bollinger import compute_bands
from bbmonitor.signals.extremes import find_extremes, ms_to_iso, read_closed_band

if TYPE_CHECKING:
    from bbmonitor.alerts.telegram import TelegramNotifier
    from bbmonitor.models import Candle, MarketPair

logger = get_logger(__name__)


class BandMonitor:
    """Runs one full Bollinger Band extremes analysis per call.

    Args:
        settings: Application-wide settings.
        exchange_client: Exchange API client (tickers).
        candle_source: Batched candle fetcher.
        record_store: All-time records persistence.
        notifier: Alert delivery.
    """

    def __init__(
        self,
        settings: AppSettings,
        exchange_client: ExchangeClient,
        candle_source: CandleSource,
        record_store: RecordStore,
        notifier: TelegramNotifier,
    ) -> None:
        self._settings = settings
        self._exchange_client = exchange_client
        self._candle_source = candle_source
        self._record_store = record_store
        self._notifier = notifier

    async def run_cycle(self) -> CycleResult | None:
        """Run one analysis cycle.

        Returns:
            The cycle result, or None when no pair produced a closed band
            reading (nothing is compared, persisted or sent in that case).

        Raises:
            Exception: Ticker fetch failures propagate to the scheduler,
            which logs them and moves on to the next minute.
        """
        tickers = await self._exchange_client.fetch_tickers(
            params={"category": "linear"}
        )
        pairs = select_active_pairs(
            tickers,
            min_turnover_24h=self._settings.scanner.min_turnover_24h,
            quote_suffix=self._settings.scanner.quote_suffix,
        )

        candles_by_symbol = await self._candle_source.fetch_all(
            [pair.symbol for pair in pairs]
        )

        logger.info("analysis_started", symbols=len(pairs))
        readings = self._measure(pairs, candles_by_symbol)
        logger.info("analysis_completed", symbols=len(pairs), readings=len(readings))

        extremes = find_extremes(readings)
        if extremes is None:
            logger.info("no_qualifying_symbols", symbols=len(pairs))
            return None

        previous = self._record_store.read()
        update = apply_extremes(previous, extremes)
        message = format_alert(
            extremes, previous, update.new_positive, update.new_negative
        )

        if update.new_positive:
            logger.info(
                "new_all_time_high_positive",
                symbol=extremes.positive.symbol,
                distance=round(extremes.positive.distance, 2),
                at=extremes.positive.timestamp,
            )
        if update.new_negative:
            logger.info(
                "new_all_time_high_negative",
                symbol=extremes.negative.symbol,
                distance=round(extremes.negative.distance, 2),
                at=extremes.negative.timestamp,
            )
        if update.changed:
            self._record_store.write(update.records)

        delivered = await self._notifier.send(message)
        logger.info(
            "alert_sent" if delivered else "alert_not_delivered",
            positive=extremes.positive.symbol,
            positive_distance=round(extremes.positive.distance, 2),
            negative=extremes.negative.symbol,
            negative_distance=round(extremes.negative.distance, 2),
        )

        return CycleResult(
            extremes=extremes,
            previous=previous,
            update=update,
            message=message,
            delivered=delivered,
        )

    def _measure(
        self,
        pairs: list[MarketPair],
        candles_by_symbol: dict[str, list[Candle]],
    ) -> list[SymbolReading]:
        """Compute bands per pair and log one line per pair."""
        period = self._settings.bands.period
        multiplier = self._settings.bands.multiplier
        readings: list[SymbolReading] = []

        for pair in pairs:
            bands = compute_bands(
                candles_by_symbol.get(pair.symbol, []), period, multiplier
            )
            reading = read_closed_band(pair.market_id, bands)

            if reading is None:
                logger.info(
                    "no_band_data",
                    symbol=pair.market_id,
                    bands=len(bands),
                    note="need at least 2 band points with a positive close",
                )
                continue

            band = reading.band
            logger.info(
                "band_snapshot",
                symbol=pair.market_id,
                candle=ms_to_iso(band.timestamp_ms),
                upper=f"{band.upper:.6f}",
                middle=f"{band.middle:.6f}",
                lower=f"{band.lower:.6f}",
                close=f"{band.close:.6f}",
                distance=f"{reading.distance:.2f}%",
            )
            readings.append(reading)

        return readings
