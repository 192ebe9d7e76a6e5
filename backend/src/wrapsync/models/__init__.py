from .chat_intent import ChatIntent
from .connection_info import ConnectionInfo
from .enums import ChatMode, ChatProtocol, ConnectionState, RetentionPolicy
from .player_session import PlayerSession, default_display_name

__all__ = [
    "ChatIntent",
    "ChatMode",
    "ChatProtocol",
    "ConnectionInfo",
    "ConnectionState",
    "PlayerSession",
    "RetentionPolicy",
    "default_display_name",
]
