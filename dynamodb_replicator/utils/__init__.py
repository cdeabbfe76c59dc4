from .logging import configure_logging
from .progress import (
    CallbackProgress,
    NullProgress,
    ProgressReporter,
    ProgressSink,
    create_progress,
)

__all__ = [
    "configure_logging",
    "CallbackProgress",
    "NullProgress",
    "ProgressReporter",
    "ProgressSink",
    "create_progress",
]
