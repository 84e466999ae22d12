from gi.repository import Gio, GLib  # pyright: ignore

NOTIFY_SIGNATURE = "(susssasa{sv}i)"
EXPIRE_TIMEOUT_MS = 5000


class Notifier:
    """Sends desktop notifications through org.freedesktop.Notifications."""

    def __init__(self, logger, app_name: str = "vlanpanel"):
        self.logger = logger
        self.app_name = app_name

    def build_parameters(self, title: str, message: str, icon: str) -> GLib.Variant:
        """Arguments of the Notify() call: a new notification without actions or hints."""
        return GLib.Variant(
            NOTIFY_SIGNATURE,
            (self.app_name, 0, icon, title, message, [], {}, EXPIRE_TIMEOUT_MS),
        )

    def _on_notification_sent(self, proxy, result, *args):
        try:
            proxy.call_finish(result)
        except GLib.Error as e:
            self.logger.error(f"Error sending notification: {e.message}")

    def _on_bus_acquired(self, source_object, result, user_data):
        title, message, icon = user_data
        try:
            connection = Gio.bus_get_finish(result)
            proxy = Gio.DBusProxy.new_sync(
                connection,
                Gio.DBusProxyFlags.NONE,
                None,
                "org.freedesktop.Notifications",
                "/org/freedesktop/Notifications",
                "org.freedesktop.Notifications",
                None,
            )
        except GLib.Error as e:
            self.logger.error(f"Error preparing notification: {e.message}")
            return
        proxy.call(
            "Notify",
            self.build_parameters(title, message, icon),
            Gio.DBusCallFlags.NONE,
            -1,
            None,
            self._on_notification_sent,
        )

    def notify_send(self, title: str, message: str, icon: str = ""):
        """
        Sends a desktop notification without blocking the main loop.
        Args:
            title (str): The summary text.
            message (str): The body text.
            icon (str): Icon name (e.g., 'network-wired-disconnected-symbolic').
        """
        self.logger.debug(f"Sending notification: {title}")
        Gio.bus_get(
            Gio.BusType.SESSION,
            None,
            self._on_bus_acquired,
            (title, message, icon),
        )
