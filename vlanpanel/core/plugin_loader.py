import importlib
from typing import Any, Dict, List

PLUGINS_PACKAGE = "vlanpanel.plugins"


class PluginLoader:
    """
    Imports the plugins listed in the [plugins] config section, builds them
    through their get_plugin_class() factory and places their main widget in
    the panel container named by their metadata.
    A plugin that fails to import, build or enable is logged and skipped.
    """

    def __init__(self, panel_instance):
        self.panel_instance = panel_instance
        self.logger = panel_instance.logger
        self.config_handler = panel_instance.config_handler
        self.plugins: Dict[str, Any] = {}
        self.plugins_import: Dict[str, Any] = {}
        self.plugin_metadata_map: Dict[str, Dict[str, Any]] = {}

    def plugin_module_path(self, plugin_name: str) -> str:
        return f"{PLUGINS_PACKAGE}.{plugin_name}.{plugin_name}"

    def enabled_plugin_names(self) -> List[str]:
        enabled = self.config_handler.get_root_setting(["plugins", "enabled"], [])
        disabled = self.config_handler.get_root_setting(["plugins", "disabled"], [])
        if not isinstance(enabled, list):
            self.logger.error(
                f"[plugins] enabled must be a list of plugin names, got {enabled!r}."
            )
            return []
        if not isinstance(disabled, list):
            disabled = []
        return [name for name in enabled if name not in disabled]

    def load_plugins(self) -> None:
        names = self.enabled_plugin_names()
        self.logger.info(f"Loading plugins: {', '.join(names) or 'none'}")
        for plugin_name in names:
            self.load_plugin(plugin_name)
        self.logger.info(f"Plugins loading finished ({len(self.plugins)} active).")

    def load_plugin(self, plugin_name: str) -> bool:
        module_path = self.plugin_module_path(plugin_name)
        try:
            module = importlib.import_module(module_path)
        except Exception as e:
            self.logger.error(
                f"Failed to import plugin {plugin_name} ({module_path}): {e}",
                exc_info=True,
            )
            return False
        if not hasattr(module, "get_plugin_metadata") or not hasattr(
            module, "get_plugin_class"
        ):
            self.logger.error(
                f"Plugin {plugin_name} must define get_plugin_metadata() and get_plugin_class()."
            )
            return False
        metadata = module.get_plugin_metadata(self.panel_instance) or {}
        if not metadata.get("enabled", True):
            self.logger.info(f"Plugin {plugin_name} is disabled by its metadata.")
            return False
        missing = [dep for dep in metadata.get("deps", []) if dep not in self.plugins]
        if missing:
            self.logger.error(
                f"Plugin {plugin_name} skipped, missing dependencies: {', '.join(missing)}"
            )
            return False
        self.plugins_import[plugin_name] = module
        self.plugin_metadata_map[plugin_name] = metadata
        return self.enable_plugin(plugin_name)

    def enable_plugin(self, plugin_name: str) -> bool:
        if plugin_name in self.plugins:
            self.logger.warning(f"Plugin {plugin_name} is already enabled.")
            return True
        module = self.plugins_import.get(plugin_name)
        if module is None:
            self.logger.error(f"Plugin {plugin_name} was never loaded.")
            return False
        try:
            plugin_class = module.get_plugin_class()
            plugin = plugin_class(self.panel_instance)
            plugin.enable()
        except Exception as e:
            self.logger.error(f"Failed to enable plugin {plugin_name}: {e}", exc_info=True)
            return False
        self.plugins[plugin_name] = plugin
        self._place_widget(plugin_name, plugin)
        self.logger.info(f"Plugin {plugin_name} enabled.")
        return True

    def _place_widget(self, plugin_name: str, plugin: Any) -> None:
        main_widget = plugin.set_widget()
        if main_widget is None:
            return
        widget, action = main_widget
        metadata = self.plugin_metadata_map.get(plugin_name, {})
        container_name = metadata.get("container") or self.panel_instance.status_area
        container = self.panel_instance.get_container(container_name)
        if container is None:
            self.logger.error(
                f"Container {container_name} not found for plugin {plugin_name}."
            )
            return
        getattr(container, action)(widget)

    def disable_plugin(self, plugin_name: str) -> None:
        plugin = self.plugins.pop(plugin_name, None)
        if plugin is None:
            self.logger.debug(f"Plugin {plugin_name} is not enabled.")
            return
        plugin.disable()
        self.logger.info(f"Plugin {plugin_name} disabled.")

    def reload_plugin(self, plugin_name: str) -> bool:
        """Rebuilds a plugin so that it picks up changed settings."""
        self.disable_plugin(plugin_name)
        return self.enable_plugin(plugin_name)

    def reload_plugins(self) -> None:
        for plugin_name in list(self.plugins):
            self.reload_plugin(plugin_name)

    def disable_all(self) -> None:
        for plugin_name in reversed(list(self.plugins)):
            self.disable_plugin(plugin_name)
