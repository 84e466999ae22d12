"""
Unit tests for vlanpanel/plugins/vlan_indicator/_vlan_filter.py

Tests VLAN selection, active-connection pairing and name ordering.
"""

import pytest

from vlanpanel.plugins.vlan_indicator._models import (
    ActiveConnectionState,
    Connection,
)
from vlanpanel.plugins.vlan_indicator._vlan_filter import (
    collation_key,
    filter_vlans,
    index_active_vlans,
)

from conftest import active, vlan


@pytest.mark.unit
class TestCollationKey:
    def test_numeric_runs_compare_by_value(self):
        assert collation_key("vlan2") < collation_key("vlan10")

    def test_case_and_accents_are_ignored(self):
        assert collation_key("VLAN1") == collation_key("vlán1")

    def test_base_letters_still_differ(self):
        assert collation_key("vlan-a") < collation_key("vlan-b")

    def test_prefix_sorts_first(self):
        assert collation_key("office") < collation_key("office2")

    def test_empty_name(self):
        assert collation_key("") == ()

    def test_letters_without_decomposition_keep_their_identity(self):
        assert collation_key("vlan-ø") != collation_key("vlan-o")
        assert collation_key("vlan-o") < collation_key("vlan-ø")


@pytest.mark.unit
class TestFilterVlans:
    def test_only_vlan_connections_are_kept(self):
        connections = [
            vlan("u1", "vlan10"),
            Connection(id="u2", display_name="Wired", type="802-3-ethernet"),
            Connection(id="u3", display_name="Home", type="802-11-wireless"),
        ]
        pairs = filter_vlans(connections, [])
        assert [c.id for c, _ in pairs] == ["u1"]

    def test_sorted_naturally_and_case_insensitively(self):
        connections = [
            vlan("u1", "vlan10"),
            vlan("u2", "Vlan2"),
            vlan("u3", "vlan1"),
        ]
        pairs = filter_vlans(connections, [])
        assert [c.display_name for c, _ in pairs] == ["vlan1", "Vlan2", "vlan10"]

    def test_equal_keys_keep_input_order(self):
        connections = [vlan("u1", "VLAN1"), vlan("u2", "vlan1")]
        pairs = filter_vlans(connections, [])
        assert [c.id for c, _ in pairs] == ["u1", "u2"]

    def test_pairs_with_active_connection(self):
        connections = [vlan("u1", "vlan1"), vlan("u2", "vlan2")]
        actives = [active("/ac/7", "u2", ActiveConnectionState.ACTIVATED)]
        pairs = filter_vlans(connections, actives)
        assert pairs[0][1] is None
        assert pairs[1][1].id == "/ac/7"

    def test_non_vlan_active_connection_is_ignored(self):
        connections = [vlan("u1", "vlan1")]
        actives = [
            active("/ac/1", "u1", ActiveConnectionState.ACTIVATED, "802-3-ethernet")
        ]
        assert filter_vlans(connections, actives) == [(connections[0], None)]

    def test_absent_inputs_mean_no_vlans(self):
        assert filter_vlans(None, None) == []
        assert filter_vlans([], [active("/ac/1", "u1", 2)]) == []

    def test_absent_active_list_pairs_nothing(self):
        connections = [vlan("u1", "vlan1")]
        assert filter_vlans(connections, None) == [(connections[0], None)]


@pytest.mark.unit
class TestIndexActiveVlans:
    def test_later_duplicate_wins(self):
        actives = [
            active("/ac/1", "u1", ActiveConnectionState.DEACTIVATING),
            active("/ac/2", "u1", ActiveConnectionState.ACTIVATING),
        ]
        assert index_active_vlans(actives)["u1"].id == "/ac/2"

    def test_entries_without_connection_id_are_skipped(self):
        actives = [active("/ac/1", None, ActiveConnectionState.ACTIVATED), None]
        assert index_active_vlans(actives) == {}
