"""Enumerations shared by the relay server."""

from enum import Enum


class RetentionPolicy(str, Enum):
    """What happens to a player's session when its connection drops."""
    EPHEMERAL = "ephemeral"    # purge and announce player-left
    PERSISTENT = "persistent"  # keep silently until process restart


class ChatProtocol(str, Enum):
    """Chat protocol generation spoken by the deployed clients."""
    BROADCAST = "broadcast"
    DIRECTED = "directed"


class ChatMode(str, Enum):
    """Routing mode of a single decoded chat message."""
    BROADCAST = "broadcast"
    DIRECTED = "directed"


class ConnectionState(str, Enum):
    """Lifecycle of one transport connection."""
    CONNECTED = "connected"
    ACTIVE = "active"
    DISCONNECTED = "disconnected"
