"""Alert message composition.

Pure formatting only: delivery and record persistence belong to the caller.
"""

from datetime import datetime, timezone

from bbmonitor.models import CycleExtremes, ExtremeRecord, Records

NEW_RECORD_MARKER = "🚨 NEW ALL-TIME RECORD! 🚨"


def format_timestamp(timestamp: str) -> str:
    """Render a stored ISO-8601 timestamp as ``YYYY-MM-DD HH:MM:SS UTC``.

    Unparseable values are returned as text unchanged.
    """
    try:
        dt = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return str(timestamp)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _alltime_line(label: str, record: ExtremeRecord) -> str:
    line = f"All-time high {label}: {record.symbol} {record.distance:.2f}%"
    if record.timestamp:
        line += f" ({format_timestamp(record.timestamp)})"
    return line


def format_alert(
    current: CycleExtremes,
    alltime: Records,
    is_new_positive: bool,
    is_new_negative: bool,
) -> str:
    """Compose the alert for one cycle.

    Args:
        current: This cycle's strongest positive and negative deviations.
        alltime: The records as stored BEFORE this cycle's update.
        is_new_positive: Whether ``current.positive`` beats the stored record.
        is_new_negative: Whether ``current.negative`` beats the stored record.

    Returns:
        The message text. All-time lines appear only for records that have a
        symbol; the marker line appears iff either flag is set.
    """
    positive = current.positive
    negative = current.negative

    message = (
        f"{positive.symbol} {positive.distance:.2f}% above\n\n"
        f"{negative.symbol} {negative.distance:.2f}% below\n\n"
    )

    alltime_lines = []
    if alltime.highest_positive.symbol and not alltime.highest_positive.is_empty:
        alltime_lines.append(_alltime_line("above", alltime.highest_positive))
    if alltime.highest_negative.symbol and not alltime.highest_negative.is_empty:
        alltime_lines.append(_alltime_line("below", alltime.highest_negative))
    message += "\n".join(alltime_lines)

    if is_new_positive or is_new_negative:
        message += f"\n\n{NEW_RECORD_MARKER}"

    return message
