"""ChatIntent data model - a chat message decoded once at the protocol boundary."""

from dataclasses import dataclass
from typing import Optional

from wrapsync.models.enums import ChatMode


@dataclass(frozen=True)
class ChatIntent:
    """Canonical chat request, independent of the payload shape it came in."""
    mode: ChatMode
    text: str
    to: Optional[str] = None

    @property
    def is_directed(self) -> bool:
        return self.mode == ChatMode.DIRECTED
