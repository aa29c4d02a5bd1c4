# gossip

Building blocks for a peer-to-peer gossip node.

## Modules

- `gossip.common` – the message types exchanged between the local API side
  and a gossip strategy: `GossipAnnounce`, `GossipNotification`,
  `GossipNotify`, `GossipRegister`, `GossipUnRegister` and
  `GossipValidation` (whose `set_valid()` keeps bit 0 of `bitfield` in sync
  with `valid`). `Conn` ties data to a connection id and carries a
  `threading.Event` named `done`; `RegisteredModule` holds the queue on which
  a registered module is sent notifications. `LEVEL_TEST` is the log level
  (-8) used for test events.
- `gossip.args` – `Args`, the node's runtime parameters, with
  `Args.defaults()` (degree 30, cache size 50, gossip timer 1, peer address
  `127.0.0.1:6001`, API address `127.0.0.1:7001`, no peers).
- `gossip.notifymap` – `NotifyMap`, a thread-safe registry of the module
  connections registered for each gossip type. Registering the same
  connection id twice for one type raises `AlreadyRegisteredError`.
- `gossip.ringbuffer` – `Ringbuffer`, a fixed-capacity ring that silently
  drops its oldest entry when full, with `insert`, `remove`, `filter`,
  `find_first` and `to_list`; `remove` and `find_first` raise
  `NotPresentError` when nothing matches.
- `gossip.packetcounter` – `Counter`, which counts packets in time buckets
  and calls a callback with the bucket start and count once a later bucket
  begins or `finalize()` is called.
- `gossip.messages` – the peer-to-peer message records `Push`, `ConnReq`,
  `ConnChall`, `ConnPoW`, `PowReq`, `PowChall`, `PowPoW`, plus `Unregister`
  and `NewConn`; `is_pow()` tells whether a message belongs to the periodic
  proof of work.
- `gossip.wirestruct` – a framed single-segment binary struct format:
  `WireStruct` (data section of little-endian scalars, pointer section of
  nested structs or byte blobs), `ObjectSize`, `encode_message()`,
  `decode_message()` and `read_frame()`; malformed input raises
  `DecodeError`. The module also holds the type ids, sizes and field offsets
  of the peer-to-peer structs.
- `gossip.testlog` – `ExactLevelFilter`, a `logging.Filter` that passes only
  records of one exact level.
- `gossip.graph` – `Graph` (nodes as `NodeConfig`, undirected edges) loaded
  with `Graph.from_json()`, breadth-first `calc_distances()`, and
  `DistanceBook`, which caches distances for one start node.
- `gossip.events` – `log_init()` builds a logger that writes test-level
  records as JSON lines; `filter_log()` reads such lines back as `Event`
  objects, skipping entries of any other level.

## Installation

```
pip install .
```

## Examples

A ring buffer holding at most three items:

```python
from gossip.ringbuffer import Ringbuffer, NotPresentError

rb = Ringbuffer(3)
for value in range(4):
    rb.insert(value)
print(rb.to_list())        # [3, 1, 2]

try:
    rb.remove(0)
except NotPresentError:
    print("0 was already dropped")
```

Registering modules for a gossip type:

```python
from gossip.common import Conn, RegisteredModule
from gossip.notifymap import NotifyMap, AlreadyRegisteredError

registry = NotifyMap()
registry.add_channel_to_type(1337, Conn(id="module-a", data=RegisteredModule()))
print([c.id for c in registry.load(1337)])   # ['module-a']
removed = registry.remove_channel("module-a")
print(removed.id, registry.load(1337))       # module-a []
```

Framing a struct and reading it back:

```python
from gossip.wirestruct import (
    PUSH_MSG_SIZE, PUSH_PAYLOAD_POINTER, PUSH_TTL_OFFSET,
    WireStruct, decode_message, encode_message,
)

push = WireStruct(PUSH_MSG_SIZE)
push.write_uint8(PUSH_TTL_OFFSET, 42)
push.write_data(PUSH_PAYLOAD_POINTER, b"\x20\x40")

root = decode_message(encode_message(push))
print(root.read_uint8(PUSH_TTL_OFFSET), root.read_data(PUSH_PAYLOAD_POINTER))
```

Hop distances in a test topology:

```python
from gossip.graph import Graph, NodeConfig

graph = Graph(nodes=[NodeConfig()] * 3, edges=[(0, 1), (1, 2)])
print(graph.calc_distances(0))   # {0: 0, 1: 1, 2: 2}
```

Reading test events from JSON log lines:

```python
from gossip.events import filter_log

lines = ['{"time": "2024-01-01T00:00:00Z", "level": -8, "msg": "received", '
         '"id": "127.0.0.1", "msgId": 7, "msgType": 1337}']
for event in filter_log(lines):
    print(event.msg, event.id, event.msg_id, event.msg_type)
```

## What the package does not do

The package provides the pieces a gossip node is built from, not a running
node. It has no command to start, opens no sockets and does not listen for
or dial peers. It does not map the peer-to-peer message records in
`gossip.messages` onto `WireStruct` frames; callers combine the two
themselves. It loads topologies and collects events but does not compute
dissemination statistics from them.

## Running the tests

```
pip install .[test]
pytest
```