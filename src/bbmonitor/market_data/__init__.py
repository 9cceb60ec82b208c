"""Market data layer -- pair selection and batched candle fetching."""

from bbmonitor.market_data.candle_source import CandleSource, parse_ohlcv
from bbmonitor.market_data.pair_selector import select_active_pairs

__all__ = ["CandleSource", "parse_ohlcv", "select_active_pairs"]
