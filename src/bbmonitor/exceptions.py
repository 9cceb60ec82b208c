"""Custom exceptions for the Bollinger Band extremes monitor.

Each exception is raised inside one component and handled at that
component's boundary; none of them is allowed to abort an analysis cycle.
"""


class MonitorError(Exception):
    """Base exception for all monitor errors."""


class RecordStoreError(MonitorError):
    """Raised when the all-time records document cannot be parsed."""


class NotificationError(MonitorError):
    """Raised when the notification endpoint rejects a message."""
