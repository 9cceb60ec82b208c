"""Exchange client layer -- Bybit public market data via ccxt."""

from bbmonitor.exchange.bybit_client import BybitClient
from bbmonitor.exchange.client import ExchangeClient

__all__ = ["BybitClient", "ExchangeClient"]
