from typing import Any, Callable, Optional, Sequence

from vlanpanel.shared.i18n import _
from ._models import ActiveConnection, ActiveConnectionState, Connection, MenuEntry
from ._vlan_filter import VlanPair

ON_STATES = (
    ActiveConnectionState.ACTIVATED,
    ActiveConnectionState.ACTIVATING,
    ActiveConnectionState.DEACTIVATING,
)
SETTLED_STATES = (
    ActiveConnectionState.ACTIVATED,
    ActiveConnectionState.DEACTIVATED,
)


def status_text(active: Optional[ActiveConnection]) -> Optional[str]:
    if active is None:
        return None
    if active.state == ActiveConnectionState.ACTIVATING:
        return _("connecting…")
    if active.state == ActiveConnectionState.DEACTIVATING:
        return _("disconnecting…")
    return None


def project_entry(
    connection: Connection, active: Optional[ActiveConnection]
) -> MenuEntry:
    """Derives what the menu shows for one VLAN connection."""
    state = active.state if active is not None else None
    return MenuEntry(
        label=connection.display_name,
        is_on=state in ON_STATES,
        # no toggling while a transition is in flight
        is_enabled=state is None or state in SETTLED_STATES,
        status_text=status_text(active),
    )


class MenuProjector:
    """
    Renders VLAN pairs into an indicator menu and turns switch toggles into
    NetworkManager activate/deactivate requests.
    """

    def __init__(
        self,
        menu: Any,
        source: Any,
        notifier: Callable[[str, str], None],
        spawner: Callable[[Any], Any],
        request_refresh: Callable[[], None],
        is_alive: Callable[[], bool],
        settings_command: Any,
        logger: Any,
    ):
        self.menu = menu
        self.source = source
        self.notifier = notifier
        self.spawner = spawner
        self.request_refresh = request_refresh
        self.is_alive = is_alive
        self.settings_command = settings_command
        self.logger = logger

    def render(self, pairs: Sequence[VlanPair]) -> None:
        self.menu.remove_all()
        if not pairs:
            self.menu.add_info_item(_("No VLAN found"))
        for connection, active in pairs:
            self._add_item(connection, active)
        self.menu.add_separator()
        self.menu.add_action_item(
            _("Advanced Network Settings…"), self.open_advanced_settings
        )

    def _add_item(
        self, connection: Connection, active: Optional[ActiveConnection]
    ) -> None:
        entry = project_entry(connection, active)
        item = self.menu.add_toggle_item(entry.label, entry.is_on)
        item.set_enabled(entry.is_enabled)
        item.set_status_text(entry.status_text)
        item.connect_toggled(lambda *_args: self.toggle(connection, active))

    def open_advanced_settings(self, *_args) -> None:
        self.spawner(self.settings_command)
        self.menu.close()

    def toggle(
        self, connection: Connection, active: Optional[ActiveConnection]
    ) -> None:
        if active is not None:
            self.logger.info(f"Deactivating VLAN {connection.display_name}")
            self.source.deactivate_async(
                active.id,
                lambda error: self._on_command_done(
                    connection, error, _("VLAN Deactivation Failed")
                ),
            )
        else:
            self.logger.info(f"Activating VLAN {connection.display_name}")
            self.source.activate_async(
                connection.id,
                lambda error: self._on_command_done(
                    connection, error, _("VLAN Activation Failed")
                ),
            )

    def _on_command_done(
        self, connection: Connection, error: Optional[str], title: str
    ) -> None:
        if error is None:
            self.logger.debug(f"Request for {connection.display_name} accepted.")
            return
        self.logger.error(f"{title}: {connection.display_name}: {error}")
        if not self.is_alive():
            return
        self.notifier(title, error)
        self.request_refresh()
