"""Event dispatcher for the multiplayer relay.

Translates inbound Socket.IO events into PlayerRegistry mutations and
fans the results out to the right audience:

- join:              current-players to the sender, player-joined to everyone else
- update-state:      player-update to everyone except the sender
- update-appearance: player-appearance-update to everyone, sender included
- update-name:       player-name-update to everyone, sender included
- chat-message:      broadcast to everyone, or echo to sender plus unicast to target
- disconnect:        player-left to everyone (ephemeral retention only)

Handlers never raise on bad input. Unknown sessions, early or late events
and malformed payloads are dropped with a debug log line.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

from wrapsync.connection.player_registry import PlayerRegistry
from wrapsync.models.chat_intent import ChatIntent
from wrapsync.models.connection_info import ConnectionInfo
from wrapsync.models.enums import ChatProtocol, ConnectionState, RetentionPolicy
from wrapsync.protocol import events
from wrapsync.protocol.payloads import (
    PayloadError,
    decode_appearance,
    decode_chat,
    decode_join,
    decode_name,
    decode_state,
)

logger = logging.getLogger(__name__)


class Emitter(Protocol):
    """The slice of socketio.AsyncServer the dispatcher talks to."""

    async def emit(self, event: str, data: Any = None, to: Optional[str] = None,
                   skip_sid: Optional[str] = None, namespace: Optional[str] = None) -> None:
        ...


def now_ms() -> int:
    """Milliseconds since the Unix epoch, the chat timestamp unit."""
    return int(time.time() * 1000)


class PlayerEventDispatcher:
    """Per-connection protocol state machine over a shared PlayerRegistry."""

    def __init__(
        self,
        registry: PlayerRegistry,
        emitter: Emitter,
        retention_policy: RetentionPolicy = RetentionPolicy.PERSISTENT,
        chat_protocol: ChatProtocol = ChatProtocol.DIRECTED,
        namespace: str = "/",
        clock: Optional[Callable[[], int]] = None,
    ):
        self.registry = registry
        self.retention_policy = RetentionPolicy(retention_policy)
        self.chat_protocol = ChatProtocol(chat_protocol)
        self.namespace = namespace
        self._emitter = emitter
        self._clock = clock or now_ms
        self._connections: Dict[str, ConnectionInfo] = {}

    # =========================================================================
    # Connection bookkeeping
    # =========================================================================

    def connection(self, sid: str) -> Optional[ConnectionInfo]:
        return self._connections.get(sid)

    def connection_state(self, sid: str) -> ConnectionState:
        """State of a connection; unknown sids are reported as DISCONNECTED."""
        info = self._connections.get(sid)
        return info.state if info else ConnectionState.DISCONNECTED

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def is_live(self, player_id: str) -> bool:
        """True when the player has a session and an active connection."""
        return self.connection_state(player_id) == ConnectionState.ACTIVE and player_id in self.registry

    def handler_for(self, event: str) -> Callable[[str, Any], Awaitable[None]]:
        """Dispatcher coroutine for an inbound protocol event name."""
        handlers = {
            events.JOIN: self.on_join,
            events.UPDATE_STATE: self.on_update_state,
            events.UPDATE_APPEARANCE: self.on_update_appearance,
            events.UPDATE_NAME: self.on_update_name,
            events.CHAT_MESSAGE: self.on_chat_message,
        }
        try:
            return handlers[event]
        except KeyError:
            raise ValueError(f"not an inbound relay event: {event!r}")

    def _is_active(self, sid: str) -> bool:
        return self.connection_state(sid) == ConnectionState.ACTIVE

    async def _emit(
        self,
        event: str,
        data: Any,
        to: Optional[str] = None,
        skip_sid: Optional[str] = None,
    ) -> bool:
        """Best-effort emission; a failed delivery is logged, never raised."""
        try:
            await self._emitter.emit(event, data, to=to, skip_sid=skip_sid, namespace=self.namespace)
            return True
        except Exception as e:
            logger.warning("[Dispatcher] Emit failed | event=%s to=%s: %s", event, to or "*", e)
            return False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def on_connect(self, sid: str, environ: Optional[Dict[str, Any]] = None) -> ConnectionInfo:
        """Record a freshly accepted connection in CONNECTED state."""
        info = ConnectionInfo.from_environ(sid, environ)
        self._connections[sid] = info
        logger.info(
            "[Dispatcher] Player connected | sid=%s ip=%s connections=%d",
            sid, info.origin_address, len(self._connections),
        )
        return info

    async def on_join(self, sid: str, payload: Any = None) -> None:
        """Materialize the sender's session and introduce it to the world."""
        state = self.connection_state(sid)
        if state == ConnectionState.DISCONNECTED:
            logger.debug("[Dispatcher] join from closed connection dropped | sid=%s", sid)
            return

        try:
            join = decode_join(payload)
        except PayloadError as e:
            logger.debug("[Dispatcher] Malformed join dropped | sid=%s: %s", sid, e)
            return

        player = self.registry.upsert_on_join(
            sid,
            color=join.color,
            wrap_texture=join.wrapTexture,
            display_name=join.displayName,
        )
        self._connections[sid].state = ConnectionState.ACTIVE

        await self._emit(events.CURRENT_PLAYERS, self.registry.snapshot_all(), to=sid)
        await self._emit(events.PLAYER_JOINED, player, skip_sid=sid)

        logger.info(
            "[Dispatcher] Player joined game | sid=%s name=%r rejoin=%s players=%d",
            sid, player["displayName"], state == ConnectionState.ACTIVE, len(self.registry),
        )

    async def on_disconnect(self, sid: str) -> None:
        """Close the connection and apply the retention policy to its session."""
        info = self._connections.pop(sid, None)
        if info is not None:
            info.state = ConnectionState.DISCONNECTED

        if self.retention_policy == RetentionPolicy.EPHEMERAL:
            if self.registry.remove(sid):
                await self._emit(events.PLAYER_LEFT, sid)
                logger.info("[Dispatcher] Player disconnected, session purged | sid=%s", sid)
            else:
                logger.info("[Dispatcher] Player disconnected before joining | sid=%s", sid)
            return

        retained = sid in self.registry
        logger.info(
            "[Dispatcher] Player disconnected | sid=%s session_retained=%s",
            sid, retained,
        )

    # =========================================================================
    # State and appearance
    # =========================================================================

    async def on_update_state(self, sid: str, payload: Any) -> None:
        """Store client-reported physics state and relay it to the other players."""
        if not self._is_active(sid):
            logger.debug("[Dispatcher] update-state before join dropped | sid=%s", sid)
            return
        try:
            state = decode_state(payload)
        except PayloadError as e:
            logger.debug("[Dispatcher] Malformed update-state dropped | sid=%s: %s", sid, e)
            return

        player = self.registry.apply_state_update(sid, state.position, state.rotation, state.velocity)
        if player is None:
            return

        await self._emit(
            events.PLAYER_UPDATE,
            {
                "id": sid,
                "position": player["position"],
                "rotation": player["rotation"],
                "velocity": player["velocity"],
            },
            skip_sid=sid,
        )

    async def on_update_appearance(self, sid: str, payload: Any) -> None:
        """Store paint/wrap and announce it to everyone, the sender included."""
        if not self._is_active(sid):
            logger.debug("[Dispatcher] update-appearance before join dropped | sid=%s", sid)
            return
        try:
            appearance = decode_appearance(payload)
        except PayloadError as e:
            logger.debug("[Dispatcher] Malformed update-appearance dropped | sid=%s: %s", sid, e)
            return

        player = self.registry.apply_appearance_update(sid, appearance.color, appearance.wrapTexture)
        if player is None:
            return

        await self._emit(
            events.PLAYER_APPEARANCE_UPDATE,
            {"id": sid, "color": player["color"], "wrapTexture": player["wrapTexture"]},
        )
        logger.debug(
            "[Dispatcher] Appearance updated | sid=%s color=%s wrap_len=%d",
            sid, player["color"], len(player["wrapTexture"] or ""),
        )

    async def on_update_name(self, sid: str, payload: Any) -> None:
        """Rename the sender's car and announce it to everyone."""
        if not self._is_active(sid):
            logger.debug("[Dispatcher] update-name before join dropped | sid=%s", sid)
            return
        try:
            name = decode_name(payload)
        except PayloadError as e:
            logger.debug("[Dispatcher] Malformed update-name dropped | sid=%s: %s", sid, e)
            return

        player = self.registry.apply_name_update(sid, name)
        if player is None:
            return

        await self._emit(events.PLAYER_NAME_UPDATE, {"id": sid, "displayName": player["displayName"]})
        logger.info("[Dispatcher] Player renamed | sid=%s name=%r", sid, player["displayName"])

    # =========================================================================
    # Chat
    # =========================================================================

    async def on_chat_message(self, sid: str, payload: Any) -> None:
        """Route a chat message according to the configured chat protocol."""
        try:
            intent = decode_chat(payload)
        except PayloadError as e:
            logger.debug("[Dispatcher] Malformed chat-message dropped | sid=%s: %s", sid, e)
            return

        if intent.mode.value != self.chat_protocol.value:
            logger.debug(
                "[Dispatcher] %s chat-message dropped, server speaks %s | sid=%s",
                intent.mode.value, self.chat_protocol.value, sid,
            )
            return

        if intent.is_directed:
            await self._direct_chat(sid, intent)
        else:
            await self._broadcast_chat(sid, intent)

    async def _broadcast_chat(self, sid: str, intent: ChatIntent) -> None:
        message = {"id": sid, "text": intent.text, "timestamp": self._clock()}
        await self._emit(events.CHAT_MESSAGE, message)
        logger.debug("[Dispatcher] Chat broadcast | sid=%s len=%d", sid, len(intent.text))

    async def _direct_chat(self, sid: str, intent: ChatIntent) -> None:
        message = {"id": sid, "to": intent.to, "text": intent.text, "timestamp": self._clock()}

        # The sender is not part of its own unicast audience, so it gets an echo.
        await self._emit(events.CHAT_MESSAGE, message, to=sid)

        if intent.to == sid:
            return
        if not self.is_live(intent.to):
            logger.debug("[Dispatcher] Chat target offline, echo only | sid=%s to=%s", sid, intent.to)
            return
        await self._emit(events.CHAT_MESSAGE, message, to=intent.to)
        logger.debug("[Dispatcher] Chat delivered | sid=%s to=%s len=%d", sid, intent.to, len(intent.text))
