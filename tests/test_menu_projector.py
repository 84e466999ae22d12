"""
Unit tests for vlanpanel/plugins/vlan_indicator/_menu_projector.py

Tests the switch state derived from each active-connection state, the menu
layout and the activate/deactivate requests sent on toggle.
"""

import pytest

from vlanpanel.plugins.vlan_indicator._menu_projector import (
    MenuProjector,
    project_entry,
)
from vlanpanel.plugins.vlan_indicator._models import (
    ActiveConnectionState as State,
)

from conftest import FakeMenu, Recorder, active, vlan


@pytest.mark.unit
@pytest.mark.parametrize(
    "state, is_on, is_enabled, status",
    [
        (None, False, True, None),
        (State.ACTIVATING, True, False, "connecting…"),
        (State.ACTIVATED, True, True, None),
        (State.DEACTIVATING, True, False, "disconnecting…"),
        (State.DEACTIVATED, False, True, None),
        (State.UNKNOWN, False, False, None),
    ],
)
def test_project_entry(state, is_on, is_enabled, status):
    connection = vlan("u1", "vlan1")
    active_connection = None if state is None else active("/ac/1", "u1", state)
    entry = project_entry(connection, active_connection)
    assert entry.label == "vlan1"
    assert entry.is_on is is_on
    assert entry.is_enabled is is_enabled
    assert entry.status_text == status


@pytest.fixture
def menu():
    return FakeMenu()


@pytest.fixture
def refreshes():
    return Recorder()


@pytest.fixture
def alive():
    return {"value": True}


@pytest.fixture
def projector(menu, source, notifier, spawner, refreshes, alive, logger):
    return MenuProjector(
        menu=menu,
        source=source,
        notifier=notifier,
        spawner=spawner,
        request_refresh=refreshes,
        is_alive=lambda: alive["value"],
        settings_command="nm-connection-editor",
        logger=logger,
    )


@pytest.mark.unit
class TestRender:
    def test_empty_list_shows_placeholder_and_settings(self, projector, menu):
        projector.render([])
        kinds = [kind for kind, _ in menu.items]
        assert kinds == ["info", "separator", "action"]
        assert menu.items[0][1] == "No VLAN found"
        assert menu.items[2][1][0] == "Advanced Network Settings…"

    def test_one_switch_per_vlan_in_given_order(self, projector, menu):
        pairs = [
            (vlan("u1", "vlan1"), None),
            (vlan("u2", "vlan2"), active("/ac/2", "u2", State.ACTIVATED)),
        ]
        projector.render(pairs)
        assert menu.labels == ["vlan1", "vlan2"]
        assert [t.is_on for t in menu.toggles] == [False, True]
        assert [kind for kind, _ in menu.items][-2:] == ["separator", "action"]

    def test_rerender_replaces_previous_items(self, projector, menu):
        projector.render([(vlan("u1", "vlan1"), None)])
        projector.render([(vlan("u2", "vlan2"), None)])
        assert menu.labels == ["vlan2"]
        assert menu.render_count == 2

    def test_transitional_state_disables_switch(self, projector, menu):
        projector.render(
            [(vlan("u1", "vlan1"), active("/ac/1", "u1", State.ACTIVATING))]
        )
        item = menu.toggles[0]
        assert item.enabled is False
        assert item.status_text == "connecting…"

    def test_advanced_settings_spawns_editor_and_closes(
        self, projector, menu, spawner
    ):
        projector.render([])
        menu.action("Advanced Network Settings…")()
        assert spawner.calls == [("nm-connection-editor",)]
        assert menu.close_calls == 1


@pytest.mark.unit
class TestToggle:
    def test_inactive_vlan_is_activated_by_uuid(self, projector, menu, source):
        projector.render([(vlan("u1", "vlan1"), None)])
        menu.toggles[0].toggle()
        assert [call[0] for call in source.activate_calls] == ["u1"]
        assert source.deactivate_calls == []

    def test_active_vlan_is_deactivated_by_path(self, projector, menu, source):
        projector.render(
            [(vlan("u1", "vlan1"), active("/ac/1", "u1", State.ACTIVATED))]
        )
        menu.toggles[0].toggle()
        assert [call[0] for call in source.deactivate_calls] == ["/ac/1"]
        assert source.activate_calls == []

    def test_success_neither_notifies_nor_refreshes(
        self, projector, menu, source, notifier, refreshes
    ):
        projector.render([(vlan("u1", "vlan1"), None)])
        menu.toggles[0].toggle()
        source.activate_calls[0][1](None)
        assert notifier.calls == []
        assert refreshes.calls == []

    def test_activation_failure_notifies_and_refreshes(
        self, projector, menu, source, notifier, refreshes
    ):
        projector.render([(vlan("u1", "vlan1"), None)])
        menu.toggles[0].toggle()
        source.activate_calls[0][1]("No suitable device found")
        assert notifier.calls == [
            ("VLAN Activation Failed", "No suitable device found")
        ]
        assert len(refreshes.calls) == 1

    def test_deactivation_failure_title(
        self, projector, menu, source, notifier
    ):
        projector.render(
            [(vlan("u1", "vlan1"), active("/ac/1", "u1", State.ACTIVATED))]
        )
        menu.toggles[0].toggle()
        source.deactivate_calls[0][1]("Not authorized")
        assert notifier.calls == [("VLAN Deactivation Failed", "Not authorized")]

    def test_failure_after_teardown_is_only_logged(
        self, projector, menu, source, notifier, refreshes, alive
    ):
        projector.render([(vlan("u1", "vlan1"), None)])
        menu.toggles[0].toggle()
        alive["value"] = False
        source.activate_calls[0][1]("No suitable device found")
        assert notifier.calls == []
        assert refreshes.calls == []
