from .event_dispatcher import PlayerEventDispatcher, now_ms
from .player_registry import PlayerRegistry

__all__ = ["PlayerEventDispatcher", "PlayerRegistry", "now_ms"]
