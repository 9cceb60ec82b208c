"""All-time record persistence and update policy."""

from bbmonitor.data.records import (
    RecordStore,
    apply_extremes,
    records_from_dict,
    records_to_dict,
)

__all__ = [
    "RecordStore",
    "apply_extremes",
    "records_from_dict",
    "records_to_dict",
]
