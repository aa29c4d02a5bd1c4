"""Shared message types exchanged between the gossip components."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Generic, TypeVar

# Log level used for end-to-end testing and benchmarking events.
LEVEL_TEST = -8

ConnectionId = str
GossipType = int

T = TypeVar("T")


@dataclass
class Conn(Generic[T]):
    """Arbitrary data tied to the connection it belongs to.

    ``done`` is set once the connection is to be torn down.
    """

    id: ConnectionId
    data: T
    done: threading.Event = field(default_factory=threading.Event)


@dataclass
class RegisteredModule:
    """What is needed to talk to a module registered on the vertical API."""

    main_to_vert: queue.Queue = field(default_factory=queue.Queue)


@dataclass
class GossipAnnounce:
    """A GossipAnnounce packet of the vertical API."""

    ttl: int
    reserved: int
    data_type: GossipType
    data: bytes


@dataclass
class GossipNotification:
    """A GossipNotification packet of the vertical API."""

    message_id: int
    data_type: GossipType
    data: bytes


@dataclass
class GossipNotify:
    """A GossipNotify packet of the vertical API."""

    reserved: int
    data_type: GossipType


@dataclass
class GossipRegister:
    """A GossipNotify message together with the module that registered."""

    data: GossipNotify
    module: Conn[RegisteredModule]


@dataclass(frozen=True)
class GossipUnRegister:
    """Signals that the vertical API connection with this id went away."""

    conn_id: ConnectionId


@dataclass
class GossipValidation:
    """A GossipValidation packet of the vertical API.

    ``valid`` mirrors bit 0 of ``bitfield``.
    """

    message_id: int
    bitfield: int = 0
    valid: bool = False

    def set_valid(self, valid: bool) -> None:
        """Set the valid flag and keep bit 0 of the bitfield in sync."""
        self.valid = valid
        if valid:
            self.bitfield |= 1
        else:
            self.bitfield &= ~1 & 0xFFFF