from typing import Any, Callable, List, Optional

import structlog

from ._debouncer import Debouncer
from ._menu_projector import MenuProjector
from ._models import ACTIVE_CONNECTIONS_CHANGED, CONNECTIONS_CHANGED
from ._vlan_filter import filter_vlans

DEFAULT_REFRESH_DELAY_MS = 100
DEFAULT_SETTINGS_COMMAND = "nm-connection-editor"


class IndicatorController:
    """
    Owns the indicator lifecycle: builds the menu on enable(), keeps it in
    step with the connection source and tears everything down on disable().
    Both enable() and disable() may be called repeatedly.
    """

    def __init__(
        self,
        source: Any,
        menu_factory: Callable[[], Any],
        clock: Any,
        notifier: Callable[[str, str], None],
        spawner: Callable[[Any], Any],
        settings_command: Any = DEFAULT_SETTINGS_COMMAND,
        refresh_delay_ms: int = DEFAULT_REFRESH_DELAY_MS,
        logger: Any = None,
    ):
        self.source = source
        self.menu_factory = menu_factory
        self.clock = clock
        self.notifier = notifier
        self.spawner = spawner
        self.settings_command = settings_command
        self.refresh_delay_ms = refresh_delay_ms
        self.logger = logger or structlog.get_logger(__name__)
        self.menu: Optional[Any] = None
        self._debouncer: Optional[Debouncer] = None
        self._projector: Optional[MenuProjector] = None
        self._tokens: List[Any] = []

    @property
    def enabled(self) -> bool:
        return self.menu is not None

    def enable(self) -> None:
        if self.enabled:
            self.logger.debug("VLAN indicator already enabled.")
            return
        self.menu = menu = self.menu_factory()
        self._debouncer = Debouncer(self.clock, self.refresh_delay_ms, self.refresh)
        for event in (ACTIVE_CONNECTIONS_CHANGED, CONNECTIONS_CHANGED):
            self._tokens.append(self.source.subscribe(event, self.queue_refresh))
        # opening the menu always shows fresh state, skipping the debounce
        self.menu.connect_open(self.refresh)
        self._projector = MenuProjector(
            menu=self.menu,
            source=self.source,
            notifier=self.notifier,
            spawner=self.spawner,
            request_refresh=self.queue_refresh,
            # completions from an older enable() cycle must not touch this menu
            is_alive=lambda: self.menu is menu,
            settings_command=self.settings_command,
            logger=self.logger,
        )
        self.logger.info("VLAN indicator enabled.")
        self.refresh()

    def queue_refresh(self) -> None:
        if self._debouncer is not None:
            self._debouncer.notify()

    def refresh(self) -> None:
        if self._projector is None:
            return
        pairs = filter_vlans(
            self.source.get_connections(), self.source.get_active_connections()
        )
        self.logger.debug(f"Rendering {len(pairs)} VLAN connection(s).")
        self._projector.render(pairs)

    def disable(self) -> None:
        while self._tokens:
            self.source.unsubscribe(self._tokens.pop())
        if self._debouncer is not None:
            self._debouncer.cancel()
            self._debouncer = None
        self._projector = None
        if self.menu is not None:
            self.menu.destroy()
            self.menu = None
            self.logger.info("VLAN indicator disabled.")
