from typing import Callable, List, Optional

import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk  # pyright: ignore # noqa: E402


class ToggleItem:
    """A menu row with a label, an optional status text and a Gtk.Switch."""

    def __init__(self, label: str, is_on: bool):
        self.widget = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=12)
        self.widget.add_css_class("vlan-indicator-item")
        self.label = Gtk.Label(label=label)
        self.label.set_halign(Gtk.Align.START)
        self.label.set_hexpand(True)
        self.status = Gtk.Label()
        self.status.add_css_class("dim-label")
        self.status.set_visible(False)
        self.switch = Gtk.Switch()
        self.switch.set_active(is_on)
        self.switch.set_valign(Gtk.Align.CENTER)
        self.widget.append(self.label)
        self.widget.append(self.status)
        self.widget.append(self.switch)

    def set_enabled(self, enabled: bool) -> None:
        self.switch.set_sensitive(enabled)

    def set_status_text(self, text: Optional[str]) -> None:
        self.status.set_label(text or "")
        self.status.set_visible(bool(text))

    def connect_toggled(self, handler: Callable[[], None]) -> None:
        self.switch.connect("notify::active", lambda *_: handler())


class IndicatorButton:
    """
    Panel button with a popover menu. The popover is rebuilt from scratch by
    the caller; becoming visible is reported through connect_open().
    """

    def __init__(self, icon_name: str, accessible_name: str):
        self._open_handlers: List[Callable[[], None]] = []
        self.widget = Gtk.MenuButton()
        self.widget.set_icon_name(icon_name)
        self.widget.set_tooltip_text(accessible_name)
        self.widget.update_property([Gtk.AccessibleProperty.LABEL], [accessible_name])
        self.widget.add_css_class("vlan-indicator-button")
        self.popover = Gtk.Popover()
        self.popover.set_has_arrow(False)
        self.popover.add_css_class("vlan-indicator-popover")
        self.box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        self.box.set_margin_top(10)
        self.box.set_margin_bottom(10)
        self.box.set_margin_start(10)
        self.box.set_margin_end(10)
        self.popover.set_child(self.box)
        self.widget.set_popover(self.popover)
        self.popover.connect("notify::visible", self._on_visible_changed)

    def _on_visible_changed(self, popover, _param) -> None:
        if not popover.get_visible():
            return
        for handler in list(self._open_handlers):
            handler()

    def connect_open(self, handler: Callable[[], None]) -> None:
        self._open_handlers.append(handler)

    def remove_all(self) -> None:
        while child := self.box.get_first_child():
            self.box.remove(child)

    def add_info_item(self, text: str) -> None:
        label = Gtk.Label(label=text)
        label.set_halign(Gtk.Align.START)
        label.set_sensitive(False)
        self.box.append(label)

    def add_separator(self) -> None:
        self.box.append(Gtk.Separator(orientation=Gtk.Orientation.HORIZONTAL))

    def add_toggle_item(self, label: str, is_on: bool) -> ToggleItem:
        item = ToggleItem(label, is_on)
        self.box.append(item.widget)
        return item

    def add_action_item(self, label: str, callback: Callable[[], None]) -> None:
        button = Gtk.Button(label=label)
        button.add_css_class("flat")
        button.connect("clicked", lambda *_: callback())
        self.box.append(button)

    def close(self) -> None:
        self.popover.popdown()

    def destroy(self) -> None:
        self._open_handlers.clear()
        self.popover.popdown()
        parent = self.widget.get_parent()
        if parent is not None:
            parent.remove(self.widget)
