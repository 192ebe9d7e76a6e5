"""ConnectionInfo data model - accounting metadata for one transport connection."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from wrapsync.models.enums import ConnectionState


@dataclass
class ConnectionInfo:
    """Where a connection came from and where it is in its lifecycle."""
    sid: str
    client_ip: Optional[str] = None
    forwarded_for: Optional[str] = None
    user_agent: Optional[str] = None
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    state: ConnectionState = ConnectionState.CONNECTED

    @classmethod
    def from_environ(cls, sid: str, environ: Optional[Dict[str, Any]]) -> "ConnectionInfo":
        """Build connection metadata from a Socket.IO connect environ.

        Prefers the raw ASGI scope (headers and client tuple) and falls back
        to the WSGI-style keys.
        """
        environ = environ or {}
        scope = environ.get("asgi.scope") or {}

        headers: Dict[str, str] = {}
        for key, value in scope.get("headers", []):
            if isinstance(key, bytes):
                headers[key.decode("latin-1").lower()] = value.decode("latin-1")

        client_ip = None
        client = scope.get("client")
        if client:
            client_ip = client[0]
        if not client_ip:
            client_ip = environ.get("REMOTE_ADDR")

        return cls(
            sid=sid,
            client_ip=client_ip,
            forwarded_for=headers.get("x-forwarded-for") or environ.get("HTTP_X_FORWARDED_FOR"),
            user_agent=headers.get("user-agent") or environ.get("HTTP_USER_AGENT"),
        )

    @property
    def origin_address(self) -> Optional[str]:
        """First hop of X-Forwarded-For when behind a proxy, else the socket peer."""
        if self.forwarded_for:
            return self.forwarded_for.split(",")[0].strip()
        return self.client_ip
