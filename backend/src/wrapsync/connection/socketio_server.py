"""Socket.IO server for the multiplayer relay.

Socket.IO owns the transport concerns: connection ids (sid), heartbeats,
reconnection and fan-out. This module only wires its events to a
PlayerEventDispatcher, so all protocol policy lives in one place.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import socketio

from wrapsync.config.settings import ServerSettings
from wrapsync.connection.event_dispatcher import PlayerEventDispatcher
from wrapsync.connection.player_registry import PlayerRegistry
from wrapsync.protocol import events

logger = logging.getLogger(__name__)

NAMESPACE = "/"


# =============================================================================
# Socket.IO Server Configuration
# =============================================================================

def create_socketio_server(
    settings: ServerSettings,
    registry: Optional[PlayerRegistry] = None,
) -> Tuple[socketio.AsyncServer, PlayerEventDispatcher]:
    """Create an async Socket.IO server with the relay handlers attached.

    Args:
        settings: Runtime settings (CORS, payload limit, policies)
        registry: Session store to use; a fresh one is created when omitted

    Returns:
        The server and the dispatcher bound to it
    """
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=settings.cors_origins,
        max_http_buffer_size=settings.max_http_buffer_size,
        ping_timeout=30,
        ping_interval=25,
        logger=False,  # socket.io internal logging is too verbose
        engineio_logger=False,
    )
    dispatcher = PlayerEventDispatcher(
        registry if registry is not None else PlayerRegistry(),
        sio,
        retention_policy=settings.retention_policy,
        chat_protocol=settings.chat_protocol,
        namespace=NAMESPACE,
    )
    register_handlers(sio, dispatcher, namespace=NAMESPACE)
    logger.info(
        "[SocketIO] Relay ready | retention=%s chat=%s origins=%s",
        settings.retention_policy.value, settings.chat_protocol.value, settings.cors_origins,
    )
    return sio, dispatcher


# =============================================================================
# Event Handlers
# =============================================================================

def register_handlers(
    sio: socketio.AsyncServer,
    dispatcher: PlayerEventDispatcher,
    namespace: str = NAMESPACE,
) -> None:
    """Attach the relay protocol handlers to a Socket.IO server."""

    async def connect(sid: str, environ: Dict[str, Any], auth: Optional[Dict[str, Any]] = None):
        """Accept every connection; the player stays invisible until it joins."""
        await dispatcher.on_connect(sid, environ)

    async def disconnect(sid: str, reason: Any = None):
        await dispatcher.on_disconnect(sid)

    def relay(handler):
        async def on_event(sid: str, data: Any = None):
            await handler(sid, data)
        return on_event

    sio.on("connect", handler=connect, namespace=namespace)
    sio.on("disconnect", handler=disconnect, namespace=namespace)
    for event in events.INBOUND_EVENTS:
        sio.on(event, handler=relay(dispatcher.handler_for(event)), namespace=namespace)


# =============================================================================
# ASGI App
# =============================================================================

def create_socketio_app(sio: socketio.AsyncServer, other_app):
    """Wrap another ASGI app (FastAPI) so Socket.IO shares its port."""
    return socketio.ASGIApp(sio, other_asgi_app=other_app)
