"""
Progress reporting for replication runs.

The replicator only knows how many items a scan page holds, never the grand
total of a table, so every sink is reinitialized per page via ``init`` and
then advanced with cumulative ``update`` calls at each chunk boundary.

Sinks are pure presentation. A broken or missing display never fails a run.
"""

import logging
import sys
from typing import Callable, Optional, Protocol, TextIO, runtime_checkable

from tqdm import tqdm

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@runtime_checkable
class ProgressSink(Protocol):
    """What the replication engine drives while it writes.

    ``init`` starts a new scan page of ``total`` items; ``update`` reports the
    cumulative count written for that page; ``close`` ends the phase. Sinks
    must not raise.
    """

    def init(self, total: int, label: str = "Current progress: ") -> None: ...

    def update(self, current: int, total: Optional[int] = None) -> None: ...

    def close(self) -> None: ...


class NullProgress:
    """Progress sink that draws nothing. Used headless and in tests."""

    def init(self, total: int, label: str = "Current progress: ") -> None:
        pass

    def update(self, current: int, total: Optional[int] = None) -> None:
        pass

    def close(self) -> None:
        pass


class CallbackProgress(NullProgress):
    """Forwards every update to a ``(current, total, label)`` callable."""

    def __init__(self, callback: ProgressCallback):
        self.callback = callback
        self.total = 0
        self.label = ""

    def init(self, total: int, label: str = "Current progress: ") -> None:
        self.total = total
        self.label = label
        self.update(0)

    def update(self, current: int, total: Optional[int] = None) -> None:
        if total is not None:
            self.total = total
        try:
            self.callback(current, self.total, self.label)
        except Exception as e:
            logger.debug(f"Progress callback failed: {e}")


class ProgressReporter(NullProgress):
    """
    Terminal progress bar, one bar per scan page.

    Rendered with tqdm using ``dynamic_ncols`` so the bar width is re-derived
    from the terminal on every draw: available columns minus the label and the
    fixed ``[...] | 100.00%`` decoration. The bar is closed when it reaches
    100%, which finalizes the line.

    Args:
        stream: Output stream, stdout by default
        disable: True to draw nothing, None to draw only on a TTY
    """

    BAR_FORMAT = "{desc}[{bar}] | {percentage:.2f}%"
    BAR_CHARS = "░█"

    def __init__(self, stream: Optional[TextIO] = None, disable: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.disable = disable
        self.total = 0
        self.current = 0
        self._bar: Optional[tqdm] = None

    def init(self, total: int, label: str = "Current progress: ") -> None:
        self.close()
        self.total = total
        self.current = 0
        if total <= 0:
            return
        try:
            self._bar = tqdm(
                total=total,
                desc=label,
                bar_format=self.BAR_FORMAT,
                ascii=self.BAR_CHARS,
                dynamic_ncols=True,
                file=self.stream,
                disable=self.disable,
                leave=True,
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Progress display unavailable: {e}")
            self._bar = None

    def update(self, current: int, total: Optional[int] = None) -> None:
        if total is not None and total != self.total:
            self.total = total
            if self._bar is not None:
                self._bar.total = total
        self.current = min(current, self.total) if self.total else current
        if self._bar is None:
            return
        try:
            self._bar.n = self.current
            self._bar.refresh()
            if self.current >= self.total:
                self.close()
        except (OSError, ValueError) as e:
            logger.debug(f"Progress display unavailable: {e}")
            self._bar = None

    def close(self) -> None:
        if self._bar is None:
            return
        bar, self._bar = self._bar, None
        try:
            bar.close()
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to close progress bar: {e}")


def create_progress(enabled: bool = True, callback: Optional[ProgressCallback] = None) -> ProgressSink:
    """Pick a progress sink: a callback wins, then the terminal bar, else nothing."""
    if callback is not None:
        return CallbackProgress(callback)
    if enabled:
        return ProgressReporter()
    return NullProgress()
