"""Pair selection for band analysis.

Selects actively traded USDT linear perpetuals from a ccxt ticker snapshot
taken with ``params={"category": "linear"}``.
"""

from decimal import Decimal, InvalidOperation

from bbmonitor.logging import get_logger
from bbmonitor.models import MarketPair

logger = get_logger(__name__)


def select_active_pairs(
    tickers: dict,
    min_turnover_24h: Decimal = Decimal("10000000"),
    quote_suffix: str = "USDT",
) -> list[MarketPair]:
    """Select pairs whose exchange id ends with ``quote_suffix`` and whose
    24-hour turnover is strictly above ``min_turnover_24h``.

    Exchange order is preserved; it decides tie-breaks downstream.

    Args:
        tickers: ccxt fetch_tickers() result keyed by unified symbol.
        min_turnover_24h: Minimum quote-currency turnover over 24h.
        quote_suffix: Required suffix of the raw exchange symbol (e.g. "BTCUSDT").

    Returns:
        List of MarketPair in ticker order.
    """
    pairs: list[MarketPair] = []

    for symbol, ticker in tickers.items():
        info = ticker.get("info", {})
        market_id = info.get("symbol", "")
        if not market_id.endswith(quote_suffix):
            continue

        try:
            turnover = Decimal(str(info.get("turnover24h", 0)))
        except InvalidOperation:
            logger.warning(
                "invalid_turnover", symbol=symbol, raw=info.get("turnover24h")
            )
            continue

        if turnover > min_turnover_24h:
            pairs.append(
                MarketPair(symbol=symbol, market_id=market_id, turnover_24h=turnover)
            )

    logger.debug("selected_active_pairs", total=len(tickers), selected=len(pairs))
    return pairs
