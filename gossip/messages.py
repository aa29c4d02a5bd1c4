"""Messages passed to and from the horizontal API."""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from typing import Union

from gossip.common import Conn, ConnectionId, GossipType


@dataclass
class Push:
    """A push message received from or sent to a peer."""

    id: ConnectionId = ""
    ttl: int = 0
    gossip_type: GossipType = 0
    message_id: int = 0
    payload: bytes = b""


@dataclass
class ConnReq:
    """Request for a challenge of the initial proof of work."""

    id: ConnectionId = ""


@dataclass
class ConnChall:
    """Challenge for the initial proof of work."""

    id: ConnectionId = ""
    cookie: bytes = b""


@dataclass
class ConnPoW:
    """Solution of the initial proof of work."""

    id: ConnectionId = ""
    pow_nonce: int = 0
    cookie: bytes = b""


@dataclass
class PowReq:
    """Request for a challenge of the periodic proof of work."""

    id: ConnectionId = ""


@dataclass
class PowChall:
    """Challenge for the periodic proof of work."""

    id: ConnectionId = ""
    cookie: bytes = b""


@dataclass
class PowPoW:
    """Solution of the periodic proof of work."""

    id: ConnectionId = ""
    pow_nonce: int = 0
    cookie: bytes = b""


@dataclass(frozen=True)
class Unregister:
    """Signals that the peer connection with this id was closed."""

    conn_id: ConnectionId


@dataclass
class NewConn(Conn[queue.Queue]):
    """A newly accepted peer connection.

    ``data`` is the queue on which messages to be written to that peer are
    put.
    """

    data: queue.Queue = field(default_factory=queue.Queue)


ToHz = Union[Push, ConnReq, ConnChall, ConnPoW, PowReq, PowChall, PowPoW]
FromHz = Union[
    Push, ConnReq, ConnChall, ConnPoW, PowReq, PowChall, PowPoW, Unregister, NewConn
]

_POW_TYPES = (PowReq, PowChall, PowPoW)
_NON_POW_TYPES = (Push, ConnReq, ConnChall, ConnPoW)


def is_pow(message: ToHz) -> bool:
    """Tell whether ``message`` belongs to the periodic proof of work.

    Raises :class:`TypeError` for anything that cannot be sent to a peer.
    """
    if isinstance(message, _POW_TYPES):
        return True
    if isinstance(message, _NON_POW_TYPES):
        return False
    raise TypeError(f"{type(message).__name__} cannot be sent to a peer")