"""In-memory registry of player sessions.

The registry is the only shared mutable state of the relay. Every public
method runs under one coarse lock, so a session is never observed half
written and concurrent writers to the same session resolve as
last-writer-wins per field.

Lookups for ids that were never joined (or were already removed) are
no-ops that return None; they never raise.
"""

import copy
import logging
import threading
from typing import Any, Dict, Optional

from wrapsync.models.player_session import PlayerSession, default_display_name

logger = logging.getLogger(__name__)


class PlayerRegistry:
    """Keyed store of PlayerSession records, owned by one relay server."""

    def __init__(self):
        self._players: Dict[str, PlayerSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._players)

    def __contains__(self, player_id: str) -> bool:
        with self._lock:
            return player_id in self._players

    def get(self, player_id: str) -> Optional[Dict[str, Any]]:
        """Return a copy of one session in wire form, or None."""
        with self._lock:
            player = self._players.get(player_id)
            return player.to_dict() if player else None

    # =========================================================================
    # Mutations
    # =========================================================================

    def upsert_on_join(
        self,
        player_id: str,
        color: Optional[str] = None,
        wrap_texture: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create (or overwrite) a session at the spawn point.

        Position, rotation and velocity always start at spawn defaults;
        only appearance and name come from the join payload.
        """
        player = PlayerSession(
            id=player_id,
            color=color,
            wrap_texture=wrap_texture,
            display_name=display_name,
        )
        with self._lock:
            if player_id in self._players:
                logger.debug("[Registry] Overwriting session on re-join | id=%s", player_id)
            self._players[player_id] = player
            return player.to_dict()

    def apply_state_update(
        self,
        player_id: str,
        position: Dict[str, Any],
        rotation: Dict[str, Any],
        velocity: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Replace the physics state of a session verbatim."""
        with self._lock:
            player = self._players.get(player_id)
            if player is None:
                return None
            player.position = copy.deepcopy(position)
            player.rotation = copy.deepcopy(rotation)
            player.velocity = copy.deepcopy(velocity)
            return player.to_dict()

    def apply_appearance_update(
        self,
        player_id: str,
        color: Optional[str],
        wrap_texture: Optional[str],
    ) -> Optional[Dict[str, Any]]:
        """Replace both appearance fields; the caller supplies both."""
        with self._lock:
            player = self._players.get(player_id)
            if player is None:
                return None
            player.color = color
            player.wrap_texture = wrap_texture
            return player.to_dict()

    def apply_name_update(self, player_id: str, display_name: Optional[str]) -> Optional[Dict[str, Any]]:
        """Replace the display name; None restores the id-derived default."""
        with self._lock:
            player = self._players.get(player_id)
            if player is None:
                return None
            player.display_name = display_name or default_display_name(player_id)
            return player.to_dict()

    def remove(self, player_id: str) -> bool:
        """Delete a session. Returns True if one was removed."""
        with self._lock:
            return self._players.pop(player_id, None) is not None

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot_all(self) -> Dict[str, Dict[str, Any]]:
        """Consistent copy of every session, keyed by id."""
        with self._lock:
            return {player_id: player.to_dict() for player_id, player in self._players.items()}
