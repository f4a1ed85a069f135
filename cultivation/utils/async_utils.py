# cultivation/utils/async_utils.py
import sys
import traceback
from typing import Any, Callable
from PyQt6.QtCore import QObject, pyqtSignal, QRunnable


class WorkerSignals(QObject):
    """
    Defines the signals available from a running worker thread.
    Supported signals are:
    - finished: No data
    - error: tuple (exctype, value, traceback.format_exc())
    - result: object data returned from processing
    """

    finished = pyqtSignal()
    error = pyqtSignal(tuple)  # exctype, value, traceback
    result = pyqtSignal(object)


class Worker(QRunnable):
    """A generic, reusable worker thread for running any function."""

    def __init__(self, fn: Callable, *args: Any, **kwargs: Any):
        super().__init__()
        # --- Store task and arguments ---
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()

    def run(self):
        """Execute the worker's task."""
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception:
            # Capture the failure and hand it to the error slot
            exctype, value = sys.exc_info()[:2]
            tb = traceback.format_exc()
            self.signals.error.emit((exctype, value, tb))
        else:
            self.signals.result.emit(result)
        finally:
            self.signals.finished.emit()
