"""Arguments used internally by the application."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Args:
    """Settings of one gossip peer."""

    # Number of peers the current peer exchanges information with.
    degree: int = 30
    # Maximum number of data items held in the peer's knowledge base.
    cache_size: int = 50
    # How often the gossip strategy performs a cycle, if applicable.
    gossip_timer: int = 1
    # Address to listen on for peer connections, ip:port.
    hz_addr: str = "127.0.0.1:6001"
    # Address to listen on for API connections, ip:port.
    vert_addr: str = "127.0.0.1:7001"
    # Horizontal peers to connect to, [ip]:port.
    peer_addrs: list[str] = field(default_factory=list)

    @classmethod
    def defaults(cls) -> "Args":
        """Return arguments with the default values set."""
        return cls()