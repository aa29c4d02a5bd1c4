"""Registry of modules interested in notifications of a gossip type."""

from __future__ import annotations

import threading

from gossip.common import Conn, ConnectionId, GossipType, RegisteredModule


class AlreadyRegisteredError(ValueError):
    """The connection is already registered for this gossip type."""


class NotifyMap:
    """Maps each gossip type to the module connections registered for it."""

    def __init__(self) -> None:
        self._data: dict[GossipType, list[Conn[RegisteredModule]]] = {}
        self._lock = threading.Lock()

    def load(self, gossip_type: GossipType) -> list[Conn[RegisteredModule]]:
        """Return the connections registered for ``gossip_type``."""
        with self._lock:
            return list(self._data.get(gossip_type, ()))

    def add_channel_to_type(
        self, gossip_type: GossipType, conn: Conn[RegisteredModule]
    ) -> None:
        """Register ``conn`` for ``gossip_type``.

        Raises :class:`AlreadyRegisteredError` if a connection with the same
        id is already registered for that type.
        """
        with self._lock:
            registered = self._data.setdefault(gossip_type, [])
            if any(existing.id == conn.id for existing in registered):
                raise AlreadyRegisteredError(
                    "tried to register connection multiple times on type"
                )
            registered.append(conn)

    def remove_channel(self, conn_id: ConnectionId) -> Conn[RegisteredModule] | None:
        """Remove the connection with ``conn_id`` from every type.

        Returns the removed connection, or None if none was registered.
        """
        removed = None
        with self._lock:
            for registered in self._data.values():
                for index, conn in enumerate(registered):
                    if conn.id == conn_id:
                        registered[index] = registered[-1]
                        registered.pop()
                        removed = conn
                        break
        return removed