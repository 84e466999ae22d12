PANEL_SECTION = "org.vlanpanel.panel"
VLAN_INDICATOR_SECTION = "org.vlanpanel.plugin.vlan_indicator"

default_config = {
    "_section_hint": (
        "General configuration settings for vlanpanel, a small panel that "
        "lists NetworkManager VLAN connections and toggles them."
    ),
    "logging": {
        "_section_hint": "Logging output of the panel.",
        "level": "INFO",
        "level_hint": (
            "Minimum level written to the console and to "
            "$XDG_STATE_HOME/vlanpanel/vlanpanel.log "
            "(DEBUG, INFO, WARNING, ERROR, CRITICAL)."
        ),
    },
    "plugins": {
        "_section_hint": "Configuration for loading and managing panel plugins.",
        "enabled": ["vlan_indicator"],
        "enabled_hint": (
            "Plugins to load, by module name (e.g., 'vlan_indicator'). "
            "Loaded in the order given."
        ),
        "disabled": [],
        "disabled_hint": (
            "Plugins that are skipped even when listed in 'enabled'."
        ),
    },
    PANEL_SECTION: {
        "_section_hint": "Settings for the panel window.",
        "layer_shell": True,
        "layer_shell_hint": (
            "Anchor the panel to the top edge with gtk4-layer-shell. "
            "Set to false to get a plain window (useful under X11)."
        ),
        "height": 32,
        "height_hint": "The fixed height (in pixels) of the panel.",
        "status_area": "top-panel-systray",
        "status_area_hint": (
            "Name of the container that receives indicator buttons."
        ),
    },
    VLAN_INDICATOR_SECTION: {
        "_section_hint": (
            "Settings for the VLAN indicator, which lists VLAN connections "
            "and switches them on or off through NetworkManager."
        ),
        "refresh_delay_ms": 100,
        "refresh_delay_ms_hint": (
            "Quiet period (in milliseconds) after the last NetworkManager "
            "change notification before the menu is rebuilt."
        ),
        "settings_command": "nm-connection-editor",
        "settings_command_hint": (
            "Command launched by 'Advanced Network Settings…'."
        ),
        "icon_name": "network-wired-symbolic",
        "icon_name_hint": "Icon shown on the panel button.",
        "notification_icon": "network-wired-disconnected-symbolic",
        "notification_icon_hint": (
            "Icon used for activation/deactivation failure notifications."
        ),
    },
}
