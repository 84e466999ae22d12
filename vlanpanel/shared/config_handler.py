import copy
import os
import toml
import time
from pathlib import Path
from typing import Any, List, Optional, Dict, Union
from vlanpanel.shared import config_template
from vlanpanel.shared.path_handler import PathHandler

_MISSING_SETTING_SENTINEL = object()


class ConfigHandler:
    """
    Manages the application's configuration file (config.toml) and provides
    a layered access interface.
    Handles file I/O, merging with defaults, optional file change monitoring
    (via GIO) and plugin-scoped settings.
    """

    def __init__(
        self,
        panel_instance: Any,
        plugin_id: Optional[str] = None,
        config_file: Optional[Union[str, Path]] = None,
        default_config: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            panel_instance: Object exposing a `logger`, usually the Panel.
            plugin_id: Section used by the plugin-scoped accessors.
            config_file: Path of the TOML file; defaults to the XDG location.
            default_config: Defaults (with hints) to merge into the file.
        """
        self.logger = panel_instance.logger
        self.plugin_id = plugin_id
        self.panel_instance = panel_instance
        self.default_config = copy.deepcopy(
            default_config
            if default_config is not None
            else config_template.default_config
        )
        if config_file is None:
            config_file = PathHandler().get_config_file()
        self.config_file = Path(config_file)
        self.config_path: str = self.config_file.parent.as_posix()
        self.config_monitor: Any = None
        self._cached_config: Optional[Dict[str, Any]] = None
        self._last_mod_time: float = 0.0
        self._load_successful: bool = False
        self._reload_callbacks: List[Any] = []
        self.config_data = self.load_config()

    def for_plugin(self, plugin_id: str) -> "ConfigHandler":
        """
        Returns a handler scoped to `plugin_id` that shares this handler's
        live configuration, file and watcher.
        """
        view = copy.copy(self)
        view.plugin_id = plugin_id
        return view

    def _on_config_file_changed(self, monitor, file, other_file, event_type) -> None:
        """
        Callback triggered by the GIO file monitor when config.toml changes.
        Debounces changes using file modification time before reloading.
        """
        from gi.repository import Gio  # pyright: ignore

        if event_type not in (
            Gio.FileMonitorEvent.CHANGES_DONE_HINT,
            Gio.FileMonitorEvent.MOVED,
            Gio.FileMonitorEvent.CHANGED,
        ):
            return
        try:
            current_mod_time = os.path.getmtime(self.config_file)
        except FileNotFoundError:
            self.logger.warning("Config file not found during GIO change check.")
            return
        if current_mod_time <= self._last_mod_time:
            self.logger.debug("Change event received but ignored due to debounce.")
            return
        self.logger.info("Configuration file modified. Reloading...")
        self.reload_config()
        self._last_mod_time = current_mod_time

    def connect_reload(self, callback) -> None:
        """Registers a callable invoked with the new data after each reload."""
        self._reload_callbacks.append(callback)

    def _strip_hints(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively removes keys ending with '_hint' (including section hints)
        so that only configuration values reach the TOML file.
        """
        stripped_data = {}
        for key, value in data.items():
            if key.endswith("_hint"):
                continue
            if isinstance(value, dict):
                stripped_data[key] = self._strip_hints(value)
            else:
                stripped_data[key] = copy.deepcopy(value)
        return stripped_data

    @property
    def default_config_stripped(self) -> Dict[str, Any]:
        """Returns the default config without any metadata hints."""
        return self._strip_hints(self.default_config)

    def _recursive_merge(
        self,
        user_config: Dict[str, Any],
        default_config: Dict[str, Any],
    ) -> bool:
        """
        Recursively merges missing keys from `default_config` into `user_config`.
        Returns:
            True if any key was added, indicating a write-back is needed.
        """
        write_back_needed = False
        for key, default_value in default_config.items():
            if key not in user_config:
                user_config[key] = default_value
                write_back_needed = True
            elif isinstance(default_value, dict) and isinstance(
                user_config.get(key), dict
            ):
                if self._recursive_merge(user_config[key], default_value):
                    write_back_needed = True
        return write_back_needed

    def save_config(self, data: Optional[Dict[str, Any]] = None) -> bool:
        """Writes `data` (default: the live configuration) to the TOML file."""
        if not self._load_successful:
            self.logger.warning(
                "Skipping configuration save: config.toml failed to load. Please fix it manually."
            )
            return False
        if data is None:
            data = self.config_data
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                toml.dump(data, f)
            self._last_mod_time = os.path.getmtime(self.config_file)
            self.logger.info("Configuration saved successfully.")
            return True
        except OSError as e:
            self.logger.error(f"Failed to save configuration to file: {e}")
            return False

    def reload_config(self) -> None:
        """Loads the configuration from the file, updating the live data in place."""
        new_config = self.load_config(force_reload=True)
        self.config_data.clear()
        self.config_data.update(new_config)
        self._cached_config = self.config_data
        self.logger.info("Configuration reloaded from file.")
        for callback in self._reload_callbacks:
            try:
                callback(self.config_data)
            except Exception as e:
                self.logger.error(f"Config reload callback failed: {e}", exc_info=True)

    def _read_file(self, attempts: int = 3, delay: float = 0.1) -> Optional[Dict[str, Any]]:
        """
        Parses config.toml, retrying briefly because editors often write the
        file in several steps. Returns None when every attempt failed.
        """
        for attempt in range(1, attempts + 1):
            try:
                with open(self.config_file, "r") as f:
                    data = toml.load(f)
                self._last_mod_time = os.path.getmtime(self.config_file)
                return data
            except (OSError, toml.TomlDecodeError) as e:
                self.logger.error(
                    f"Could not read {self.config_file} (attempt {attempt}/{attempts}): {e}"
                )
                time.sleep(delay)
        return None

    def load_config(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Returns the configuration merged with the defaults. A missing file is
        created from the defaults; an unreadable file is left untouched and
        the defaults are used until it is fixed.
        """
        if self._cached_config and not force_reload:
            return self._cached_config
        missing = not self.config_file.exists()
        if missing:
            self.logger.info(f"{self.config_file} does not exist, creating it.")
            data: Optional[Dict[str, Any]] = {}
        else:
            data = self._read_file()
        self._load_successful = data is not None
        if data is None:
            self.logger.error(
                "Using the default configuration; config.toml will not be "
                "written until it parses again."
            )
            data = {}
        self._recursive_merge(data, self.default_config_stripped)
        if missing:
            self.save_config(data)
        self._cached_config = data
        return data

    def start_watcher(self) -> None:
        """Starts the GIO file monitor for real-time config updates."""
        from gi.repository import Gio  # pyright: ignore

        try:
            gio_file = Gio.File.new_for_path(str(self.config_file))
            self.config_monitor = gio_file.monitor_file(Gio.FileMonitorFlags.NONE, None)
            self.config_monitor.connect("changed", self._on_config_file_changed)
        except Exception as e:
            self.logger.error(f"Failed to start Gio.FileMonitor: {e}")

    def stop_watcher(self) -> None:
        if self.config_monitor is not None:
            self.config_monitor.cancel()
            self.config_monitor = None

    def set_root_setting(self, key_path: List[str], new_value: Any) -> bool:
        """
        Sets a configuration value, creating intermediate sections, and saves.
        """
        if not key_path:
            self.logger.error("Configuration key path cannot be empty.")
            return False
        if not self._load_successful:
            self.logger.warning(
                f"Update to key {' -> '.join(key_path)} skipped: Config file failed to load. Please fix config.toml manually."
            )
            return False
        current_data = self.config_data
        for key in key_path[:-1]:
            if key not in current_data or not isinstance(current_data[key], dict):
                current_data[key] = {}
            current_data = current_data[key]
        current_data[key_path[-1]] = new_value
        self.logger.info(
            f"Set and saved config key {' -> '.join(key_path)} to {new_value}."
        )
        return self.save_config()

    def _resolve(self, key_path: List[str]):
        """Returns (parent dict, last key) for `key_path`, or (None, None)."""
        node = self.config_data
        for key in key_path[:-1]:
            node = node.get(key) if isinstance(node, dict) else None
        if not isinstance(node, dict):
            return None, None
        return node, key_path[-1]

    def get_root_setting(self, key_path: List[str], default_value: Any = None) -> Any:
        """Value at `key_path` (e.g. ['logging', 'level']) or `default_value`."""
        if not key_path:
            return default_value
        parent, key = self._resolve(key_path)
        if parent is None or key not in parent:
            self.logger.debug(
                f"No config value at {' -> '.join(key_path)}, using {default_value!r}."
            )
            return default_value
        return parent[key]

    def remove_root_setting(self, key: Union[str, List[str]]) -> None:
        """Deletes the value at `key` and saves the file."""
        key_path = [key] if isinstance(key, str) else list(key or [])
        if not key_path:
            self.logger.error("Cannot remove a setting without a key.")
            return
        parent, last = self._resolve(key_path)
        if parent is None or last not in parent:
            self.logger.warning(f"No config value at {' -> '.join(key_path)} to remove.")
            return
        del parent[last]
        self.save_config()
        self.logger.info(f"Removed {' -> '.join(key_path)} from the configuration.")

    def get_plugin_setting(
        self, key: Optional[Union[str, List[str]]] = None, default_value: Any = None
    ) -> Any:
        """
        Retrieves a value from this plugin's section. Without `key` the whole
        section is returned. A missing setting with a non-None default is
        written back so that it shows up in config.toml.
        """
        if not self.plugin_id:
            return default_value
        key_path = [self.plugin_id]
        if isinstance(key, str):
            key_path.append(key)
        elif isinstance(key, list):
            key_path.extend(key)
        result = self.get_root_setting(key_path, _MISSING_SETTING_SENTINEL)
        if result is _MISSING_SETTING_SENTINEL:
            if default_value is not None:
                self.set_root_setting(key_path, default_value)
            return default_value
        return result

    def set_plugin_setting(self, key: Union[str, List[str]], value: Any) -> bool:
        """Sets and saves a plugin-specific setting."""
        if not self.plugin_id:
            self.logger.error("Plugin ID is not set, cannot save setting.")
            return False
        key_path: List[str] = [self.plugin_id]
        if isinstance(key, str):
            key_path.append(key)
        else:
            key_path.extend(key)
        return self.set_root_setting(key_path, value)
