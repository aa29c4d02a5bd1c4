"""Building blocks for a peer-to-peer gossip node: message types, registration
bookkeeping, a ring buffer, packet counting, a framed binary struct format and
tooling for test topologies and test-level log events."""

__version__ = "0.1.0"

__all__ = [
    "common",
    "args",
    "packetcounter",
    "ringbuffer",
    "notifymap",
    "messages",
    "testlog",
    "wirestruct",
    "graph",
    "events",
]