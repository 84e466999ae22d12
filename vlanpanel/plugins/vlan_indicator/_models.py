import enum
from dataclasses import dataclass
from typing import Optional

VLAN_TYPE = "vlan"

CONNECTIONS_CHANGED = "connections-changed"
ACTIVE_CONNECTIONS_CHANGED = "active-connections-changed"
EVENTS = (CONNECTIONS_CHANGED, ACTIVE_CONNECTIONS_CHANGED)


class ActiveConnectionState(enum.IntEnum):
    """Same values as NM.ActiveConnectionState."""

    UNKNOWN = 0
    ACTIVATING = 1
    ACTIVATED = 2
    DEACTIVATING = 3
    DEACTIVATED = 4

    @classmethod
    def from_value(cls, value) -> "ActiveConnectionState":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNKNOWN


@dataclass(frozen=True)
class Connection:
    id: str
    display_name: str
    type: str


@dataclass(frozen=True)
class ActiveConnection:
    id: str
    connection_id: Optional[str]
    connection_type: Optional[str]
    state: ActiveConnectionState


@dataclass(frozen=True)
class MenuEntry:
    label: str
    is_on: bool
    is_enabled: bool
    status_text: Optional[str] = None
