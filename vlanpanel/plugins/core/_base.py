import functools
import inspect
import os
import sys
import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk  # pyright: ignore # noqa: E402
from vlanpanel.shared.notify_send import Notifier  # noqa: E402
from vlanpanel.shared.config_handler import ConfigHandler  # noqa: E402
from vlanpanel.shared.command_runner import CommandRunner  # noqa: E402
from typing import Any, Callable, Dict, Optional  # noqa: E402

WIDGET_ACTIONS = ("append", "prepend")


class PluginLogAdapter:
    """
    Wraps the panel logger and adds the calling plugin's file, package,
    function and line number to the `extra` of every record.
    """

    LEVELS = ("debug", "info", "warning", "error", "exception", "critical")

    def __init__(self, logger):
        self._logger = logger

    @staticmethod
    def _caller_context() -> Dict[str, Any]:
        frame = inspect.currentframe()
        try:
            caller = frame.f_back if frame else None
            while caller and caller.f_code.co_filename == __file__:
                caller = caller.f_back
            if caller is None:
                return {}
            return {
                "file": os.path.basename(caller.f_code.co_filename),
                "package": caller.f_globals.get("__package__") or "unknown",
                "func": caller.f_code.co_name,
                "line": caller.f_lineno,
            }
        finally:
            del frame

    def _log(self, level: str, message: str, **kwargs):
        context = self._caller_context()
        extra = kwargs.get("extra")
        kwargs["extra"] = {**context, **extra} if isinstance(extra, dict) else context
        getattr(self._logger, level)(message, **kwargs)

    def __getattr__(self, name):
        if name in self.LEVELS:
            return functools.partial(self._log, name)
        return getattr(self._logger, name)


class BasePlugin:
    """
    Base class for vlanpanel plugins.

    Gives every plugin a logger adapter, a config handler scoped to the
    plugin's metadata id, a desktop notifier and a command runner. The loader
    calls enable(), then places `main_widget`, a (Gtk.Widget, action) tuple,
    into the container named by the plugin metadata. disable() takes the
    widget off the panel again before running on_disable().
    """

    def __init__(self, panel_instance: Any):
        self._panel_instance = panel_instance
        self._logger_adapter = PluginLogAdapter(panel_instance.logger)
        self._notifier = Notifier(self._logger_adapter)
        self._cmd = CommandRunner(self._logger_adapter)
        self.main_widget: Optional[tuple] = None
        metadata = self.get_plugin_metadata() or {}
        self.plugin_id: Optional[str] = metadata.get("id")
        self._config_handler = panel_instance.config_handler.for_plugin(
            self.plugin_id
        )

    def get_plugin_metadata(self) -> Optional[Dict[str, Any]]:
        module = sys.modules.get(self.__module__)
        factory = getattr(module, "get_plugin_metadata", None)
        if factory is None:
            return None
        return factory(self._panel_instance)

    @property
    def get_plugin_setting(self) -> Callable[..., Any]:
        """(key, default) -> value from this plugin's config section."""
        return self.config_handler.get_plugin_setting

    @property
    def logger(self) -> PluginLogAdapter:
        return self._logger_adapter

    @property
    def notify_send(self):
        return self._notifier.notify_send

    @property
    def config_handler(self) -> ConfigHandler:
        return self._config_handler

    @property
    def cmd(self) -> CommandRunner:
        return self._cmd

    def enable(self) -> None:
        self.on_enable()

    def disable(self) -> None:
        try:
            if self.main_widget:
                self.remove_widget(self.main_widget[0])
            self.on_disable()
        except Exception as e:
            self.logger.error(
                f"Error disabling plugin {self.plugin_id}: {e}", exc_info=True
            )
        self.main_widget = None

    def remove_widget(self, widget: Any) -> bool:
        if not isinstance(widget, Gtk.Widget):
            self.logger.error(f"Cannot remove {widget!r}: not a Gtk.Widget.")
            return False
        parent = widget.get_parent()
        if parent is None:
            return False
        parent.remove(widget)
        self.logger.debug(f"Removed {self.plugin_id} widget from the panel.")
        return True

    def on_enable(self):
        """Build widgets and start watching here."""

    def on_disable(self):
        """Release everything on_enable() acquired."""

    def set_widget(self) -> Optional[tuple]:
        """
        Returns `main_widget` when it is a (Gtk.Widget, "append"|"prepend")
        tuple the loader can place, otherwise logs why and returns None.
        """
        name = self.__class__.__name__
        if not isinstance(self.main_widget, tuple) or len(self.main_widget) != 2:
            self.logger.error(
                f"{name}: main_widget must be a (widget, action) tuple after "
                f"on_enable(), got {self.main_widget!r}."
            )
            return None
        widget, action = self.main_widget
        if not isinstance(widget, Gtk.Widget):
            self.logger.error(f"{name}: {widget!r} is not a Gtk.Widget.")
            return None
        if action not in WIDGET_ACTIONS:
            self.logger.error(
                f"{name}: unknown action {action!r}, expected one of {WIDGET_ACTIONS}."
            )
            return None
        if widget.get_parent() is not None:
            self.logger.warning(f"{name}: widget already has a parent.")
        return self.main_widget
