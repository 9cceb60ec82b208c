"""Bollinger Band computation over closing prices.

Middle band is the simple moving average of ``period`` closes; the outer
bands sit ``multiplier`` sample standard deviations (Bessel-corrected,
divide by period - 1) above and below it.
"""

import math
from collections.abc import Sequence

from bbmonitor.models import BandPoint, Candle


def compute_bands(
    candles: Sequence[Candle],
    period: int = 20,
    multiplier: float = 2.0,
) -> list[BandPoint]:
    """Compute one BandPoint per full window of ``period`` candles.

    Graceful degradation: returns an empty list when fewer than ``period``
    candles are supplied. Insufficient history is normal for freshly listed
    pairs and is not an error.

    Args:
        candles: Candles ordered oldest-first.
        period: Window length for the moving average and deviation.
        multiplier: Number of standard deviations for the outer bands.

    Returns:
        BandPoints in input order, ``len(candles) - period + 1`` of them.
        Each carries the timestamp and close of the last candle in its window.

    Raises:
        ValueError: If ``period`` is below 2 (sample deviation undefined).
    """
    if period < 2:
        raise ValueError(f"period must be at least 2, got {period}")

    if len(candles) < period:
        return []

    closes = [c.close for c in candles]
    bands: list[BandPoint] = []

    for i in range(period - 1, len(candles)):
        window = closes[i - period + 1 : i + 1]
        mean = sum(window) / period
        variance = sum((close - mean) ** 2 for close in window) / (period - 1)
        deviation = math.sqrt(variance)

        bands.append(
            BandPoint(
                timestamp_ms=candles[i].timestamp_ms,
                middle=mean,
                upper=mean + multiplier * deviation,
                lower=mean - multiplier * deviation,
                close=candles[i].close,
            )
        )

    return bands
