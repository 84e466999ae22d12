import itertools
from typing import Any, Callable, Dict, List, Optional, Tuple

import gi

gi.require_version("NM", "1.0")
from gi.repository import GLib, NM  # pyright: ignore # noqa: E402

from ._models import (  # noqa: E402
    ACTIVE_CONNECTIONS_CHANGED,
    CONNECTIONS_CHANGED,
    EVENTS,
    ActiveConnection,
    ActiveConnectionState,
    Connection,
)

DoneCallback = Callable[[Optional[str]], None]


class NMConnectionSource:
    """
    Connection source backed by NM.Client. Snapshots are converted to plain
    Connection/ActiveConnection records; commands look the NetworkManager
    objects up again by id so that stale snapshots never reach libnm.
    """

    def __init__(self, logger, client: Any = None):
        self.logger = logger
        self.client = client if client is not None else NM.Client.new(None)
        self._listeners: Dict[int, Tuple[str, Callable[[], None]]] = {}
        self._tokens = itertools.count(1)
        self._client_handler_ids: List[int] = []
        self._state_handlers: List[Tuple[Any, int]] = []

    def get_connections(self) -> List[Connection]:
        connections = []
        for remote in self.client.get_connections() or []:
            uuid = remote.get_uuid() if remote else None
            if not uuid:
                continue
            connections.append(
                Connection(
                    id=uuid,
                    display_name=remote.get_id() or "",
                    type=remote.get_connection_type() or "",
                )
            )
        return connections

    def get_active_connections(self) -> List[ActiveConnection]:
        return [
            ActiveConnection(
                id=active.get_path(),
                connection_id=active.get_uuid(),
                connection_type=active.get_connection_type(),
                state=ActiveConnectionState.from_value(active.get_state()),
            )
            for active in self.client.get_active_connections() or []
            if active is not None
        ]

    def subscribe(self, event: str, handler: Callable[[], None]) -> int:
        if event not in EVENTS:
            raise ValueError(f"Unknown connection source event: {event}")
        if not self._listeners:
            self._attach()
        token = next(self._tokens)
        self._listeners[token] = (event, handler)
        return token

    def unsubscribe(self, token: int) -> None:
        if self._listeners.pop(token, None) is None:
            return
        if not self._listeners:
            self._detach()

    def _attach(self) -> None:
        self.logger.debug("Attaching to NetworkManager client signals.")
        self._client_handler_ids = [
            self.client.connect(
                "notify::connections",
                lambda *_: self._emit(CONNECTIONS_CHANGED),
            ),
            self.client.connect(
                "notify::active-connections",
                lambda *_: self._on_active_connections_changed(),
            ),
        ]
        self._watch_active_states()

    def _detach(self) -> None:
        self.logger.debug("Detaching from NetworkManager client signals.")
        for handler_id in self._client_handler_ids:
            self.client.disconnect(handler_id)
        self._client_handler_ids = []
        self._unwatch_active_states()

    def _watch_active_states(self) -> None:
        """Follows state transitions of the current active connections."""
        self._unwatch_active_states()
        for active in self.client.get_active_connections() or []:
            handler_id = active.connect(
                "notify::state", lambda *_: self._emit(ACTIVE_CONNECTIONS_CHANGED)
            )
            self._state_handlers.append((active, handler_id))

    def _unwatch_active_states(self) -> None:
        for active, handler_id in self._state_handlers:
            active.disconnect(handler_id)
        self._state_handlers = []

    def _on_active_connections_changed(self) -> None:
        self._watch_active_states()
        self._emit(ACTIVE_CONNECTIONS_CHANGED)

    def _emit(self, event: str) -> None:
        for listener_event, handler in list(self._listeners.values()):
            if listener_event == event:
                handler()

    def _find_active(self, active_id: str) -> Optional[Any]:
        for active in self.client.get_active_connections() or []:
            if active is not None and active.get_path() == active_id:
                return active
        return None

    def activate_async(self, connection_id: str, done: DoneCallback) -> None:
        remote = self.client.get_connection_by_uuid(connection_id)
        if remote is None:
            done(f"Connection {connection_id} not found")
            return

        def on_finish(client, result, *args):
            try:
                client.activate_connection_finish(result)
            except GLib.Error as e:
                done(e.message)
                return
            done(None)

        self.client.activate_connection_async(remote, None, None, None, on_finish)

    def deactivate_async(self, active_id: str, done: DoneCallback) -> None:
        active = self._find_active(active_id)
        if active is None:
            done(f"Active connection {active_id} not found")
            return

        def on_finish(client, result, *args):
            try:
                client.deactivate_connection_finish(result)
            except GLib.Error as e:
                done(e.message)
                return
            done(None)

        self.client.deactivate_connection_async(active, None, on_finish)
