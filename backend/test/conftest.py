"""Shared fixtures for relay tests."""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Set

import pytest

from wrapsync.connection.event_dispatcher import PlayerEventDispatcher
from wrapsync.connection.player_registry import PlayerRegistry
from wrapsync.models.enums import ChatProtocol, RetentionPolicy

FIXED_NOW_MS = 1_700_000_000_000


@dataclass
class Emission:
    event: str
    data: Any
    to: Optional[str] = None
    skip_sid: Optional[str] = None
    namespace: Optional[str] = None

    def reaches(self, sid: str) -> bool:
        """Whether a connected socket `sid` would receive this emission."""
        if self.to is not None:
            return self.to == sid
        return self.skip_sid != sid


class RecordingEmitter:
    """Stands in for socketio.AsyncServer and records every emit call."""

    def __init__(self):
        self.emissions: List[Emission] = []
        self.fail_for: Set[str] = set()

    async def emit(self, event, data=None, to=None, skip_sid=None, namespace=None):
        if to is not None and to in self.fail_for:
            raise ConnectionError(f"socket {to} is gone")
        self.emissions.append(Emission(event, data, to=to, skip_sid=skip_sid, namespace=namespace))

    def received_by(self, sid: str, event: Optional[str] = None) -> List[Emission]:
        return [e for e in self.emissions if e.reaches(sid) and (event is None or e.event == event)]

    def events(self) -> List[str]:
        return [e.event for e in self.emissions]

    def clear(self):
        self.emissions.clear()


@pytest.fixture
def registry():
    return PlayerRegistry()


@pytest.fixture
def emitter():
    return RecordingEmitter()


def _make_dispatcher(
    registry: PlayerRegistry,
    emitter: RecordingEmitter,
    retention_policy: RetentionPolicy = RetentionPolicy.PERSISTENT,
    chat_protocol: ChatProtocol = ChatProtocol.DIRECTED,
) -> PlayerEventDispatcher:
    return PlayerEventDispatcher(
        registry,
        emitter,
        retention_policy=retention_policy,
        chat_protocol=chat_protocol,
        clock=lambda: FIXED_NOW_MS,
    )


@pytest.fixture
def dispatcher(registry, emitter):
    return _make_dispatcher(registry, emitter)


async def _join_players(dispatcher: PlayerEventDispatcher, sids: Iterable[str], payload=None):
    for sid in sids:
        await dispatcher.on_connect(sid, {})
        await dispatcher.on_join(sid, payload or {})


@pytest.fixture
def dispatcher_factory(registry, emitter):
    """Build a dispatcher over the shared registry/emitter with a chosen policy."""
    def factory(retention_policy=RetentionPolicy.PERSISTENT, chat_protocol=ChatProtocol.DIRECTED):
        return _make_dispatcher(registry, emitter, retention_policy, chat_protocol)
    return factory


@pytest.fixture
def join_players():
    """Connect and join each sid on a dispatcher."""
    return _join_players


@pytest.fixture
def fixed_now_ms():
    """Timestamp the test dispatcher clock always returns."""
    return FIXED_NOW_MS
