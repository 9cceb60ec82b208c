"""Shared data models for the Bollinger Band extremes monitor.

Prices are floats: they come from the exchange as floats via ccxt and only
ever flow into indicator arithmetic. Turnover is Decimal because it is
compared against a configured USDT threshold.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Candle:
    """A single 1-minute OHLCV candle. ``timestamp_ms`` is the candle open time."""

    timestamp_ms: int
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class BandPoint:
    """Bollinger Band values for the window ending at one candle."""

    timestamp_ms: int
    middle: float
    upper: float
    lower: float
    close: float


@dataclass(frozen=True)
class MarketPair:
    """A tradable linear perpetual selected for analysis."""

    symbol: str  # ccxt unified, e.g. "BTC/USDT:USDT"
    market_id: str  # exchange id, e.g. "BTCUSDT"
    turnover_24h: Decimal = Decimal("0")


@dataclass(frozen=True)
class ExtremeRecord:
    """A signed distance-from-midline extreme and where it happened.

    An empty record (all fields None) means no extreme has been seen yet.
    Symbol, distance and timestamp are always replaced together.
    """

    symbol: str | None = None
    distance: float | None = None  # signed percentage
    timestamp: str | None = None  # ISO-8601 UTC

    @property
    def is_empty(self) -> bool:
        return self.distance is None


@dataclass(frozen=True)
class Records:
    """The all-time record pair, the only state persisted across restarts."""

    highest_positive: ExtremeRecord = field(default_factory=ExtremeRecord)
    highest_negative: ExtremeRecord = field(default_factory=ExtremeRecord)


@dataclass(frozen=True)
class SymbolReading:
    """A symbol's last fully closed band point and its distance to the midline."""

    symbol: str
    band: BandPoint
    distance: float


@dataclass(frozen=True)
class CycleExtremes:
    """The strongest upward and downward deviations found in one cycle."""

    positive: ExtremeRecord
    negative: ExtremeRecord
    evaluated: int = 0  # symbols that contributed a reading


@dataclass(frozen=True)
class RecordUpdate:
    """Outcome of comparing a cycle's extremes against the stored records."""

    records: Records
    new_positive: bool = False
    new_negative: bool = False

    @property
    def changed(self) -> bool:
        return self.new_positive or self.new_negative


@dataclass(frozen=True)
class CycleResult:
    """Everything one analysis cycle produced."""

    extremes: CycleExtremes
    previous: Records
    update: RecordUpdate
    message: str
    delivered: bool = False
