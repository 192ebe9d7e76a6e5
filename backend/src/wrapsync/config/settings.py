"""Environment-driven settings for the relay server.

All values are read once at startup. Unset variables fall back to the
defaults below; malformed values raise ConfigurationError so a bad deploy
fails fast instead of running with a surprise policy.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Union

from wrapsync.models.enums import ChatProtocol, RetentionPolicy


class ConfigurationError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _get_enum(env: Mapping[str, str], name: str, enum_cls, default):
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"{name} must be one of: {choices} (got {raw!r})")


def _get_origins(env: Mapping[str, str]) -> List[str]:
    raw = env.get("WS_ALLOWED_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class ServerSettings:
    """Runtime configuration of the relay process."""
    host: str = "0.0.0.0"
    port: int = 3000
    retention_policy: RetentionPolicy = RetentionPolicy.PERSISTENT
    chat_protocol: ChatProtocol = ChatProtocol.DIRECTED
    static_dir: str = "dist"
    allowed_origins: List[str] = field(default_factory=list)
    max_http_buffer_size: int = 10_000_000  # base64 wrap textures travel inline
    log_level: str = "INFO"
    reload: bool = False

    @property
    def cors_origins(self) -> Union[str, List[str]]:
        """Origins for Socket.IO and CORS middleware; '*' when unrestricted."""
        return self.allowed_origins or "*"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        env = os.environ if env is None else env
        port = _get_int(env, "PORT", 3000)
        if not 0 < port < 65536:
            raise ConfigurationError(f"PORT out of range: {port}")
        return cls(
            host=env.get("HOST", "").strip() or "0.0.0.0",
            port=port,
            retention_policy=_get_enum(env, "RETENTION_POLICY", RetentionPolicy, RetentionPolicy.PERSISTENT),
            chat_protocol=_get_enum(env, "CHAT_PROTOCOL", ChatProtocol, ChatProtocol.DIRECTED),
            static_dir=env.get("STATIC_DIR", "").strip() or "dist",
            allowed_origins=_get_origins(env),
            max_http_buffer_size=_get_int(env, "MAX_HTTP_BUFFER_SIZE", 10_000_000),
            log_level=(env.get("LOG_LEVEL", "").strip() or "INFO").upper(),
            reload=_get_bool(env, "RELOAD", False),
        )
