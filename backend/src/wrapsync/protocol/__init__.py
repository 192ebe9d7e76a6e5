from . import events
from .payloads import (
    AppearancePayload,
    DirectedChatPayload,
    JoinPayload,
    PayloadError,
    StatePayload,
    decode_appearance,
    decode_chat,
    decode_join,
    decode_name,
    decode_state,
)

__all__ = [
    "events",
    "AppearancePayload",
    "DirectedChatPayload",
    "JoinPayload",
    "PayloadError",
    "StatePayload",
    "decode_appearance",
    "decode_chat",
    "decode_join",
    "decode_name",
    "decode_state",
]
