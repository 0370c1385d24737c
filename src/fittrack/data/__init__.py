"""Log file loading."""

from fittrack.data.log_loader import LogFileError, TrackingLog, load_log

__all__ = ["LogFileError", "TrackingLog", "load_log"]
