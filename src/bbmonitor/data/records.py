"""All-time extreme records: JSON persistence and update policy.

The document keeps the original on-disk layout so existing files stay
readable:

    {
      "highestPositive": {"symbol": "BTCUSDT", "distance": 4.21, "timestamp": "..."},
      "highestNegative": {"symbol": "ETHUSDT", "distance": -2.1, "timestamp": "..."}
    }

An absent, null, or non-finite distance loads as an empty record. Reads and
writes never raise: failures are logged and the cycle carries on with
defaults or without persisting.
"""

import json
import math
import os
from pathlib import Path

from bbmonitor.exceptions import RecordStoreError
from bbmonitor.logging import get_logger
from bbmonitor.models import CycleExtremes, ExtremeRecord, RecordUpdate, Records

logger = get_logger(__name__)

POSITIVE_KEY = "highestPositive"
NEGATIVE_KEY = "highestNegative"


def apply_extremes(stored: Records, current: CycleExtremes) -> RecordUpdate:
    """Compare a cycle's extremes with the stored records.

    The positive record is replaced iff it is empty or the current distance
    is strictly greater; the negative record iff it is empty or the current
    distance is strictly less. Equal values never count as a new record.
    """
    positive = stored.highest_positive
    negative = stored.highest_negative

    new_positive = current.positive.distance is not None and (
        positive.distance is None or current.positive.distance > positive.distance
    )
    new_negative = current.negative.distance is not None and (
        negative.distance is None or current.negative.distance < negative.distance
    )

    return RecordUpdate(
        records=Records(
            highest_positive=current.positive if new_positive else positive,
            highest_negative=current.negative if new_negative else negative,
        ),
        new_positive=new_positive,
        new_negative=new_negative,
    )


def records_to_dict(records: Records) -> dict:
    return {
        POSITIVE_KEY: _record_to_dict(records.highest_positive),
        NEGATIVE_KEY: _record_to_dict(records.highest_negative),
    }


def records_from_dict(data: object) -> Records:
    """Build Records from a decoded JSON document.

    Raises:
        RecordStoreError: If the document is not shaped like a record pair.
    """
    if not isinstance(data, dict):
        raise RecordStoreError(f"expected an object, got {type(data).__name__}")

    return Records(
        highest_positive=_record_from_dict(data.get(POSITIVE_KEY)),
        highest_negative=_record_from_dict(data.get(NEGATIVE_KEY)),
    )


def _record_to_dict(record: ExtremeRecord) -> dict:
    return {
        "symbol": record.symbol,
        "distance": record.distance,
        "timestamp": record.timestamp,
    }


def _record_from_dict(entry: object) -> ExtremeRecord:
    if entry is None:
        return ExtremeRecord()
    if not isinstance(entry, dict):
        raise RecordStoreError(f"expected a record object, got {type(entry).__name__}")

    raw_distance = entry.get("distance")
    if raw_distance is None:
        return ExtremeRecord()

    try:
        distance = float(raw_distance)
    except (TypeError, ValueError) as e:
        raise RecordStoreError(f"invalid distance {raw_distance!r}") from e

    # -Infinity/Infinity were the old "no record yet" sentinels
    if not math.isfinite(distance):
        return ExtremeRecord()

    symbol = entry.get("symbol")
    timestamp = entry.get("timestamp")
    for name, value in (("symbol", symbol), ("timestamp", timestamp)):
        if value is not None and not isinstance(value, str):
            raise RecordStoreError(f"invalid {name} {value!r}")

    return ExtremeRecord(symbol=symbol, distance=distance, timestamp=timestamp)


class RecordStore:
    """JSON-file store for the all-time record pair.

    Whole-document reads and writes; single process, single writer.

    Usage:
        store = RecordStore("all_time_records.json")
        records = store.read()
        store.write(update.records)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Records:
        """Load the stored records, falling back to empty records on any failure."""
        if not self._path.exists():
            logger.debug("records_file_missing", path=str(self._path))
            return Records()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return records_from_dict(data)
        except (OSError, ValueError, RecordStoreError) as e:
            logger.error("records_read_failed", path=str(self._path), error=str(e))
            return Records()

    def write(self, records: Records) -> None:
        """Overwrite the stored records. Failures are logged, not raised."""
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(
                json.dumps(records_to_dict(records), indent=2), encoding="utf-8"
            )
            # os.replace is atomic; a partial write never reaches the target
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            logger.error("records_write_failed", path=str(self._path), error=str(e))
            return

        logger.debug("records_written", path=str(self._path))
