"""Entry point for the Bollinger Band extremes monitor.

Wires all components together and runs the minute scheduler until the
process is killed. SIGINT/SIGTERM stop the scheduler and close the
exchange connection.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. ExchangeClient (BybitClient, public endpoints only)
4. CandleSource (batched kline fetcher)
5. RecordStore (all-time records file)
6. TelegramNotifier (alert delivery)
7. BandMonitor (analysis cycle)
8. MinuteScheduler (fires the cycle every minute)
"""

import asyncio
import signal
from typing import Any

from bbmonitor.alerts.telegram import TelegramNotifier
from bbmonitor.config import AppSettings
from bbmonitor.data.records import RecordStore
from bbmonitor.exchange.bybit_client import BybitClient
from bbmonitor.logging import get_logger, setup_logging
from bbmonitor.market_data.candle_source import CandleSource
from bbmonitor.orchestrator import BandMonitor
from bbmonitor.scheduler import MinuteScheduler


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all components from settings.

    Note: Does NOT call exchange_client.connect() -- that happens in run().

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    logger = get_logger("bbmonitor.main")

    exchange_client = BybitClient(settings.exchange)
    candle_source = CandleSource(exchange_client, settings.scanner)
    record_store = RecordStore(settings.records.path)

    notifier = TelegramNotifier(settings.telegram)
    if not notifier.is_configured:
        logger.warning(
            "telegram_not_configured",
            note="Analysis will run and records will persist, but no alerts are sent.",
        )

    monitor = BandMonitor(
        settings=settings,
        exchange_client=exchange_client,
        candle_source=candle_source,
        record_store=record_store,
        notifier=notifier,
    )
    scheduler = MinuteScheduler(monitor.run_cycle, settings.scheduler)

    return {
        "exchange_client": exchange_client,
        "candle_source": candle_source,
        "record_store": record_store,
        "notifier": notifier,
        "monitor": monitor,
        "scheduler": scheduler,
    }


def _setup_signal_handlers(scheduler: MinuteScheduler) -> None:
    """Register SIGINT/SIGTERM to stop the scheduler gracefully.

    Must be called after the asyncio event loop is running.
    """
    logger = get_logger("bbmonitor.main")
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task] = set()  # type: ignore[type-arg]

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        task = asyncio.create_task(scheduler.stop())
        pending.add(task)
        task.add_done_callback(pending.discard)

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


async def run() -> None:
    """Run the monitor until a shutdown signal arrives."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level, settings.log_file or None)
    logger = get_logger("bbmonitor.main")

    # 3-8. Build all components
    components = _build_components(settings)
    _setup_signal_handlers(components["scheduler"])

    logger.info(
        "bb_monitor_starting",
        period=settings.bands.period,
        multiplier=settings.bands.multiplier,
        min_turnover_24h=str(settings.scanner.min_turnover_24h),
        second_offset=settings.scheduler.second_offset,
        records=settings.records.path,
    )

    try:
        await components["exchange_client"].connect()
        await components["scheduler"].start()
    finally:
        await components["scheduler"].stop()
        await components["exchange_client"].close()
        logger.info("bb_monitor_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
