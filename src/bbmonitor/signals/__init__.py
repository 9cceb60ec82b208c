"""Indicator computation and per-cycle extreme tracking."""

from bbmonitor.signals.bollinger import compute_bands
from bbmonitor.signals.extremes import (
    distance_to_middle,
    find_extremes,
    ms_to_iso,
    read_closed_band,
)

__all__ = [
    "compute_bands",
    "distance_to_middle",
    "find_extremes",
    "ms_to_iso",
    "read_closed_band",
]
