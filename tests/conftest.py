"""
Pytest configuration and shared fixtures for vlanpanel tests.

The fakes below stand in for the GTK menu, the NetworkManager client and the
GLib main loop, so the indicator logic runs without a display or a system bus.
"""

import itertools
import logging

import pytest

from vlanpanel.plugins.vlan_indicator._models import (
    EVENTS,
    ActiveConnection,
    ActiveConnectionState,
    Connection,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without GTK or D-Bus")


class FakeTimeout:
    def __init__(self, due_ms, fn):
        self.due_ms = due_ms
        self.fn = fn
        self.cancelled = False
        self.fired = False

    @property
    def active(self):
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Manual clock: timers only run when the test calls advance()."""

    def __init__(self):
        self.now_ms = 0
        self.timeouts = []

    def after(self, delay_ms, fn):
        timeout = FakeTimeout(self.now_ms + delay_ms, fn)
        self.timeouts.append(timeout)
        return timeout

    @property
    def pending(self):
        return [t for t in self.timeouts if t.active]

    def advance(self, ms):
        target = self.now_ms + ms
        while True:
            due = sorted(
                (t for t in self.pending if t.due_ms <= target), key=lambda t: t.due_ms
            )
            if not due:
                break
            timeout = due[0]
            self.now_ms = timeout.due_ms
            timeout.fired = True
            timeout.fn()
        self.now_ms = target


class FakeConnectionSource:
    """Records subscriptions and commands; completions are driven by the test."""

    def __init__(self, connections=None, active_connections=None):
        self.connections = list(connections or [])
        self.active_connections = list(active_connections or [])
        self.listeners = {}
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0
        self.activate_calls = []
        self.deactivate_calls = []
        self._tokens = itertools.count(1)

    def get_connections(self):
        return self.connections

    def get_active_connections(self):
        return self.active_connections

    def subscribe(self, event, handler):
        assert event in EVENTS
        self.subscribe_calls += 1
        token = next(self._tokens)
        self.listeners[token] = (event, handler)
        return token

    def unsubscribe(self, token):
        self.unsubscribe_calls += 1
        self.listeners.pop(token, None)

    def emit(self, event):
        for listener_event, handler in list(self.listeners.values()):
            if listener_event == event:
                handler()

    def activate_async(self, connection_id, done):
        self.activate_calls.append((connection_id, done))

    def deactivate_async(self, active_id, done):
        self.deactivate_calls.append((active_id, done))


class FakeToggleItem:
    def __init__(self, label, is_on):
        self.label = label
        self.is_on = is_on
        self.enabled = True
        self.status_text = None
        self.handlers = []

    def set_enabled(self, enabled):
        self.enabled = enabled

    def set_status_text(self, text):
        self.status_text = text

    def connect_toggled(self, handler):
        self.handlers.append(handler)

    def toggle(self):
        self.is_on = not self.is_on
        for handler in self.handlers:
            handler()


class FakeMenu:
    def __init__(self):
        self.items = []
        self.open_handlers = []
        self.close_calls = 0
        self.destroyed = False
        self.render_count = 0

    def connect_open(self, handler):
        self.open_handlers.append(handler)

    def open(self):
        for handler in self.open_handlers:
            handler()

    def remove_all(self):
        self.render_count += 1
        self.items = []

    def add_info_item(self, text):
        self.items.append(("info", text))

    def add_separator(self):
        self.items.append(("separator", None))

    def add_toggle_item(self, label, is_on):
        item = FakeToggleItem(label, is_on)
        self.items.append(("toggle", item))
        return item

    def add_action_item(self, label, callback):
        self.items.append(("action", (label, callback)))

    def close(self):
        self.close_calls += 1

    def destroy(self):
        self.destroyed = True

    @property
    def toggles(self):
        return [item for kind, item in self.items if kind == "toggle"]

    @property
    def labels(self):
        return [item.label for item in self.toggles]

    def action(self, label):
        for kind, item in self.items:
            if kind == "action" and item[0] == label:
                return item[1]
        raise KeyError(label)


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


def vlan(uuid, name):
    return Connection(id=uuid, display_name=name, type="vlan")


def active(path, uuid, state, connection_type="vlan"):
    return ActiveConnection(
        id=path,
        connection_id=uuid,
        connection_type=connection_type,
        state=ActiveConnectionState(state),
    )


@pytest.fixture
def logger():
    return logging.getLogger("vlanpanel.tests")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return FakeConnectionSource()


@pytest.fixture
def notifier():
    return Recorder()


@pytest.fixture
def spawner():
    return Recorder()
