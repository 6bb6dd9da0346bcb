from __future__ import annotations


class QCError(Exception):
    """Base class for every error raised by resistor_qc."""


class BandDecodeError(QCError, ValueError):
    pass


class InvalidSelection(QCError, ValueError):
    pass


class InvalidDate(QCError, ValueError):
    pass


class InvalidMeasurement(QCError, ValueError):
    pass


class RecordFormatError(QCError):
    pass


class StoreNotFoundError(QCError):
    def __init__(self, path):
        super().__init__(f"Log file not found: {path}")
        self.path = path


class ConfigError(QCError):
    pass


class UserExit(Exception):
    """Raised when the user picks an Exit entry from any menu."""
