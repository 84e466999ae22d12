from typing import Any, Callable


class Debouncer:
    """
    Coalesces bursts of notify() calls into a single on_fire() call, run
    once `delay_ms` has passed without another notify().
    """

    def __init__(self, clock: Any, delay_ms: int, on_fire: Callable[[], None]):
        self._clock = clock
        self._delay_ms = delay_ms
        self._on_fire = on_fire
        self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def notify(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._clock.after(self._delay_ms, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._on_fire()
