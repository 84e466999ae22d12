def get_plugin_metadata(_):
    about = """
            Lists the VLAN connection profiles known to NetworkManager in a
            panel popover and switches each of them on or off. Also opens the
            advanced network settings editor.
            """
    return {
        "id": "org.vlanpanel.plugin.vlan_indicator",
        "name": "VLAN Indicator",
        "version": "1.0.0",
        "enabled": True,
        "container": "top-panel-systray",
        "deps": [],
        "description": about,
    }


def get_plugin_class():
    from vlanpanel.plugins.core._base import BasePlugin
    from vlanpanel.core.clock import GLibClock
    from vlanpanel.shared.i18n import _
    from ._controller import (
        DEFAULT_REFRESH_DELAY_MS,
        DEFAULT_SETTINGS_COMMAND,
        IndicatorController,
    )
    from ._gtk_menu import IndicatorButton
    from ._nm_source import NMConnectionSource

    class VlanIndicator(BasePlugin):
        def __init__(self, panel_instance):
            super().__init__(panel_instance)
            self.icon_name = self.get_plugin_setting(
                "icon_name", "network-wired-symbolic"
            )
            self.notification_icon = self.get_plugin_setting(
                "notification_icon", "network-wired-disconnected-symbolic"
            )
            self.source = NMConnectionSource(self.logger)
            self.controller = IndicatorController(
                source=self.source,
                menu_factory=self.create_menu,
                clock=GLibClock(),
                notifier=self.notify_failure,
                spawner=self.cmd.spawn,
                settings_command=self.get_plugin_setting(
                    "settings_command", DEFAULT_SETTINGS_COMMAND
                ),
                refresh_delay_ms=self.get_plugin_setting(
                    "refresh_delay_ms", DEFAULT_REFRESH_DELAY_MS
                ),
                logger=self.logger,
            )

        def create_menu(self):
            return IndicatorButton(self.icon_name, _("VLAN Indicator"))

        def notify_failure(self, title: str, message: str) -> None:
            self.notify_send(title, message, self.notification_icon)

        def on_enable(self):
            self.controller.enable()
            self.main_widget = (self.controller.menu.widget, "append")

        def on_disable(self):
            self.controller.disable()

    return VlanIndicator
