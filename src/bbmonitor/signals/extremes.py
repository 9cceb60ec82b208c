"""Per-cycle extreme tracking across all analysed symbols.

Each symbol contributes the distance of its last fully closed candle's close
from the middle band. The most recent band point is skipped because its
candle may still be forming.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from bbmonitor.models import BandPoint, CycleExtremes, ExtremeRecord, SymbolReading


def ms_to_iso(timestamp_ms: int) -> str:
    """Render epoch milliseconds as ISO-8601 UTC, e.g. 2024-05-01T12:34:00.000Z."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def distance_to_middle(point: BandPoint) -> float:
    """Signed percentage distance of the close from the middle band.

    Positive means the close is above the midline, negative below:
        ((close - middle) / close) * 100
    """
    return (point.close - point.middle) / point.close * 100


def read_closed_band(
    symbol: str, bands: Sequence[BandPoint] | None
) -> SymbolReading | None:
    """Return the reading for the second-to-last band point.

    Returns None when fewer than two band points exist or when the close is
    not positive (distance undefined). Both cases exclude the symbol from
    the cycle's reduction.
    """
    if not bands or len(bands) < 2:
        return None

    closed = bands[-2]
    if closed.close <= 0:
        return None

    return SymbolReading(symbol=symbol, band=closed, distance=distance_to_middle(closed))


def find_extremes(readings: Iterable[SymbolReading]) -> CycleExtremes | None:
    """Find the strictly greatest and strictly least distance.

    Ties keep the first symbol encountered, so iteration order matters.

    Returns:
        CycleExtremes, or None if there were no readings at all.
    """
    positive: SymbolReading | None = None
    negative: SymbolReading | None = None
    evaluated = 0

    for reading in readings:
        evaluated += 1
        if positive is None or reading.distance > positive.distance:
            positive = reading
        if negative is None or reading.distance < negative.distance:
            negative = reading

    if positive is None or negative is None:
        return None

    return CycleExtremes(
        positive=_to_record(positive),
        negative=_to_record(negative),
        evaluated=evaluated,
    )


def _to_record(reading: SymbolReading) -> ExtremeRecord:
    return ExtremeRecord(
        symbol=reading.symbol,
        distance=reading.distance,
        timestamp=ms_to_iso(reading.band.timestamp_ms),
    )
