import os
from pathlib import Path

APP_NAME = "vlanpanel"


class PathHandler:
    """
    Resolves the XDG config directory used by vlanpanel and creates it on
    first use.
    """

    def __init__(self, app_name: str = APP_NAME):
        self.app_name = app_name
        self._home = Path.home()

    def _get_xdg_base_dir(self, env_var: str, default_path: Path) -> Path:
        """Helper to get XDG base directory with fallback."""
        path_str = os.getenv(env_var)
        if path_str:
            return Path(path_str)
        return default_path

    def get_config_dir(self) -> Path:
        """
        Returns $XDG_CONFIG_HOME/vlanpanel or ~/.config/vlanpanel,
        creating it if it does not exist.
        """
        config_home = self._get_xdg_base_dir("XDG_CONFIG_HOME", self._home / ".config")
        config_dir = config_home / self.app_name
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir

    def get_config_file(self) -> Path:
        return self.get_config_dir() / "config.toml"
