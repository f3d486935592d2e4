"""
QThread worker for fetching calibration data.

The worker calls a pure loader function and emits the result via signals.
It does NOT touch camera state - the FSpyCamera receiving the signal does.
"""

from __future__ import annotations

from PySide6.QtCore import QThread, Signal

from .errors import FSpyCameraError, FetchError
from .loader import DEFAULT_TIMEOUT, fetch_calibration


class CalibrationFetchWorker(QThread):
    """Fetch an fSpy JSON file from a path or URL."""

    calibration_loaded = Signal(object)  # CalibrationRecord
    error = Signal(object)  # FSpyCameraError

    def __init__(self, location: str, timeout: float = DEFAULT_TIMEOUT):
        super().__init__()
        self.location = location
        self.timeout = timeout

    def run(self):
        try:
            record = fetch_calibration(self.location, timeout=self.timeout)
            self.calibration_loaded.emit(record)
        except FSpyCameraError as e:
            self.error.emit(e)
        except Exception as e:
            error = FetchError(f"Unexpected error loading {self.location}: {e}")
            error.__cause__ = e
            self.error.emit(error)
