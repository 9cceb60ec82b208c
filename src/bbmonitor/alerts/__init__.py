"""Alert formatting and delivery."""

from bbmonitor.alerts.formatter import NEW_RECORD_MARKER, format_alert, format_timestamp
from bbmonitor.alerts.telegram import TelegramNotifier

__all__ = ["NEW_RECORD_MARKER", "TelegramNotifier", "format_alert", "format_timestamp"]
