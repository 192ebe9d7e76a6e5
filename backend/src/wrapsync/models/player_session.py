"""PlayerSession data model - the server-side record of one connected car."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

SPAWN_POSITION = {"x": 0, "y": 2, "z": 0}
IDENTITY_ROTATION = {"x": 0, "y": 0, "z": 0, "w": 1}
ZERO_VELOCITY = {"x": 0, "y": 0, "z": 0}


def default_display_name(player_id: str) -> str:
    """Label shown for players that never picked a name."""
    return f"Player {player_id[:4]}"


@dataclass
class PlayerSession:
    """Transient state and appearance of a player.

    Transform fields hold whatever the client reported; the relay never
    checks them.
    """
    id: str
    position: Dict[str, Any] = field(default_factory=lambda: dict(SPAWN_POSITION))
    rotation: Dict[str, Any] = field(default_factory=lambda: dict(IDENTITY_ROTATION))
    velocity: Dict[str, Any] = field(default_factory=lambda: dict(ZERO_VELOCITY))
    color: Optional[str] = None
    wrap_texture: Optional[str] = None
    display_name: Optional[str] = None

    def __post_init__(self):
        if not self.display_name:
            self.display_name = default_display_name(self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation used by current-players and player-joined."""
        return {
            "id": self.id,
            "position": dict(self.position),
            "rotation": dict(self.rotation),
            "velocity": dict(self.velocity),
            "color": self.color,
            "wrapTexture": self.wrap_texture,
            "displayName": self.display_name,
        }
