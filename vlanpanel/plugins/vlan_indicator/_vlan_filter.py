import re
import unicodedata
from typing import Dict, Iterable, List, Optional, Tuple

from ._models import VLAN_TYPE, ActiveConnection, Connection

VlanPair = Tuple[Connection, Optional[ActiveConnection]]

_DIGIT_RUNS = re.compile(r"([0-9]+)")


def collation_key(name: str) -> tuple:
    """
    Locale-independent sort key approximating a numeric collator with base
    sensitivity: digit runs compare by value, case is folded and combining
    accents are dropped, so "vlan2" < "vlan10" and "VLAN1" == "vlán1".
    Letters without a decomposition (e.g. "ø", "ł") are not folded into a base
    letter and the remaining text compares by code point, not by locale rules.
    """
    decomposed = unicodedata.normalize("NFKD", name or "")
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    key = []
    for index, part in enumerate(_DIGIT_RUNS.split(base)):
        if not part:
            continue
        # split() with a capture group puts the digit runs at odd indexes
        if index % 2:
            key.append((0, int(part), ""))
        else:
            key.append((1, 0, part))
    return tuple(key)


def index_active_vlans(
    active_connections: Optional[Iterable[ActiveConnection]],
) -> Dict[str, ActiveConnection]:
    """Maps connection id to its active VLAN record; a later duplicate wins."""
    active_vlans: Dict[str, ActiveConnection] = {}
    for active in active_connections or ():
        if active is None or not active.connection_id:
            continue
        if active.connection_type != VLAN_TYPE:
            continue
        active_vlans[active.connection_id] = active
    return active_vlans


def filter_vlans(
    connections: Optional[Iterable[Connection]],
    active_connections: Optional[Iterable[ActiveConnection]],
) -> List[VlanPair]:
    """
    Returns the VLAN connections sorted by display name, each paired with its
    active connection or None.
    """
    active_vlans = index_active_vlans(active_connections)
    vlans = sorted(
        (c for c in connections or () if c is not None and c.type == VLAN_TYPE),
        key=lambda c: collation_key(c.display_name),
    )
    return [(vlan, active_vlans.get(vlan.id)) for vlan in vlans]
