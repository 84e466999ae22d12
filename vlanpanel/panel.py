import lazy_loader as lazy
import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, GLib, Gtk  # pyright: ignore # noqa: E402
from vlanpanel.shared.config_handler import ConfigHandler  # noqa: E402
from vlanpanel.shared.config_template import PANEL_SECTION  # noqa: E402

LOG_SETUP_MODULE = lazy.load("vlanpanel.core.log_setup")
PLUGIN_LOADER_MODULE = lazy.load("vlanpanel.core.plugin_loader")
I18N_MODULE = lazy.load("vlanpanel.shared.i18n")


class Panel(Adw.Application):
    def __init__(self, logger, application_id=None):
        """
        Loads the configuration and prepares the plugin loader. The panel
        window and the plugins are built on activation.
        Args:
            logger: structlog logger returned by setup_logging().
            application_id (str): The application ID.
        """
        super().__init__(application_id=application_id)
        self.logger = logger
        self.window = None
        self.containers = {}
        self.config_handler = ConfigHandler(self)
        self.apply_log_level()
        I18N_MODULE.init_translations()  # pyright: ignore
        self.plugin_loader = PLUGIN_LOADER_MODULE.PluginLoader(self)  # pyright: ignore
        self.config_handler.connect_reload(self.on_config_reloaded)
        self.connect("activate", self.on_activate)
        self.connect("shutdown", self.on_shutdown)

    def get_config(self, key_path, default=None):
        """Safely retrieves a configuration value using a list of keys."""
        return self.config_handler.get_root_setting(key_path, default)

    @property
    def status_area(self) -> str:
        return self.get_config([PANEL_SECTION, "status_area"], "top-panel-systray")

    def apply_log_level(self):
        level = LOG_SETUP_MODULE.level_from_name(  # pyright: ignore
            self.get_config(["logging", "level"], "INFO")
        )
        LOG_SETUP_MODULE.set_level(level)  # pyright: ignore

    def get_container(self, name):
        return self.containers.get(name)

    def on_activate(self, *__):
        if self.window is not None:
            self.window.present()
            return
        self.logger.info("Activating application...")
        self.setup_panel()
        self.config_handler.start_watcher()
        GLib.idle_add(self._load_plugins)
        self.logger.info("Application activation completed.")

    def _load_plugins(self):
        self.plugin_loader.load_plugins()
        return False

    def setup_panel(self):
        """
        Builds the top panel window: an empty left area and the status area
        that indicator plugins append their buttons to.
        """
        height = self.get_config([PANEL_SECTION, "height"], 32)
        self.window = Gtk.ApplicationWindow(application=self)
        self.window.set_title("vlanpanel")
        self.window.set_default_size(-1, height)
        self.window.add_css_class("top-panel")
        box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=0)
        spacer = Gtk.Box()
        spacer.set_hexpand(True)
        systray = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
        systray.add_css_class("top-panel-systray")
        box.append(spacer)
        box.append(systray)
        self.containers[self.status_area] = systray
        self.window.set_child(box)
        if self.get_config([PANEL_SECTION, "layer_shell"], True):
            self._setup_layer_shell(self.window, height)
        self.window.present()

    def _setup_layer_shell(self, window, height):
        try:
            gi.require_version("Gtk4LayerShell", "1.0")
            from gi.repository import Gtk4LayerShell as LayerShell  # pyright: ignore
        except (ValueError, ImportError) as e:
            self.logger.warning(
                f"gtk4-layer-shell is not available, using a plain window: {e}"
            )
            return
        LayerShell.init_for_window(window)
        LayerShell.set_namespace(window, "vlanpanel")
        LayerShell.set_layer(window, LayerShell.Layer.TOP)
        for edge in ("TOP", "LEFT", "RIGHT"):
            LayerShell.set_anchor(window, getattr(LayerShell.Edge, edge), True)
        LayerShell.set_exclusive_zone(window, height)

    def on_config_reloaded(self, _config_data):
        self.apply_log_level()
        self.plugin_loader.reload_plugins()

    def on_shutdown(self, *__):
        self.logger.info("Shutting down vlanpanel...")
        self.config_handler.stop_watcher()
        self.plugin_loader.disable_all()
