from typing import Callable
from gi.repository import GLib  # pyright: ignore


class TimeoutHandle:
    """A pending GLib timeout that can be cancelled until it fires."""

    def __init__(self):
        self.source_id = 0
        self.fired = False

    @property
    def active(self) -> bool:
        return bool(self.source_id) and not self.fired

    def cancel(self) -> None:
        if self.active:
            GLib.source_remove(self.source_id)
        self.source_id = 0


class GLibClock:
    """Schedules one-shot callbacks on the GLib main loop."""

    def after(self, delay_ms: int, fn: Callable[[], None]) -> TimeoutHandle:
        handle = TimeoutHandle()

        def run_once():
            handle.fired = True
            handle.source_id = 0
            fn()
            return GLib.SOURCE_REMOVE

        handle.source_id = GLib.timeout_add(int(delay_ms), run_once)
        return handle
