"""
Pydantic schemas and decoders for inbound relay payloads.

Every decoder either returns a canonical Python value or raises
PayloadError. Handlers treat PayloadError as "drop the event".
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from wrapsync.models.chat_intent import ChatIntent
from wrapsync.models.enums import ChatMode


class PayloadError(ValueError):
    """Raised when an inbound payload cannot be decoded."""


class JoinPayload(BaseModel):
    """Initial customization sent with `join`.

    A field of the wrong type is discarded on its own so the player still
    joins with that field at its default.
    """
    model_config = ConfigDict(extra="ignore")

    color: Optional[str] = None
    wrapTexture: Optional[str] = None
    displayName: Optional[str] = None

    @field_validator("color", "wrapTexture", "displayName", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("displayName")
    @classmethod
    def strip_display_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class StatePayload(BaseModel):
    """Client-simulated physics state sent with `update-state`.

    The vectors are stored as sent; only their container type is checked.
    """
    model_config = ConfigDict(extra="ignore")

    position: Dict[str, Any]
    rotation: Dict[str, Any]
    velocity: Dict[str, Any]


class AppearancePayload(BaseModel):
    """Paint and wrap sent with `update-appearance`."""
    model_config = ConfigDict(extra="ignore")

    color: Optional[str] = None
    wrapTexture: Optional[str] = None


class DirectedChatPayload(BaseModel):
    """Private chat message addressed to another player."""
    model_config = ConfigDict(extra="ignore")

    to: str
    text: str

    @field_validator("to", "text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        # Blank check only; both values are relayed exactly as sent.
        if not v.strip():
            raise ValueError("must not be empty")
        return v


def _validate(model: type, payload: Any):
    if not isinstance(payload, dict):
        raise PayloadError(f"{model.__name__} expects an object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise PayloadError(str(e)) from e


def decode_join(payload: Any) -> JoinPayload:
    """Decode a `join` payload; a missing payload means no overrides."""
    if payload is None:
        return JoinPayload()
    return _validate(JoinPayload, payload)


def decode_state(payload: Any) -> StatePayload:
    return _validate(StatePayload, payload)


def decode_appearance(payload: Any) -> AppearancePayload:
    return _validate(AppearancePayload, payload)


def decode_name(payload: Any) -> Optional[str]:
    """Decode an `update-name` payload.

    Returns the trimmed name, or None when the player cleared it.
    """
    if not isinstance(payload, str):
        raise PayloadError(f"update-name expects a string, got {type(payload).__name__}")
    return payload.strip() or None


def decode_chat(payload: Any) -> ChatIntent:
    """Decode either chat generation into a ChatIntent.

    A bare string is a broadcast message and is relayed as is, even when
    blank. An object with non-blank `to` and `text` is a directed message.
    """
    if isinstance(payload, str):
        return ChatIntent(mode=ChatMode.BROADCAST, text=payload)

    directed = _validate(DirectedChatPayload, payload)
    return ChatIntent(mode=ChatMode.DIRECTED, text=directed.text, to=directed.to)
