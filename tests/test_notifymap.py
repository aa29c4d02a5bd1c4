import threading

import pytest

from gossip.common import Conn, RegisteredModule
from gossip.notifymap import AlreadyRegisteredError, NotifyMap


def make_conn(conn_id):
    return Conn(id=conn_id, data=RegisteredModule())


def test_concurrent_adding():
    store = NotifyMap()
    vert_type = 42
    conns = [make_conn(str(i)) for i in range(100)]

    threads = [
        threading.Thread(target=store.add_channel_to_type, args=(vert_type, c))
        for c in conns
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    with pytest.raises(AlreadyRegisteredError):
        store.add_channel_to_type(vert_type, make_conn("5"))

    assert len(store.load(vert_type)) == 100


def test_remove_channel():
    store = NotifyMap()
    vert_type1 = 42
    vert_type2 = 420

    store.add_channel_to_type(vert_type1, make_conn("a"))
    store.add_channel_to_type(vert_type1, make_conn("b"))
    with pytest.raises(AlreadyRegisteredError):
        store.add_channel_to_type(vert_type1, make_conn("b"))
    store.add_channel_to_type(vert_type2, make_conn("c"))
    store.add_channel_to_type(vert_type2, make_conn("b"))

    removed = store.remove_channel("b")
    assert removed is not None and removed.id == "b"

    assert all(c.id != "b" for c in store.load(vert_type1))
    assert all(c.id != "b" for c in store.load(vert_type2))
    assert [c.id for c in store.load(vert_type1)] == ["a"]
    assert [c.id for c in store.load(vert_type2)] == ["c"]


def test_remove_unknown_returns_none():
    store = NotifyMap()
    store.add_channel_to_type(1, make_conn("a"))
    assert store.remove_channel("zzz") is None
    assert [c.id for c in store.load(1)] == ["a"]


def test_load_unknown_type_is_empty():
    assert NotifyMap().load(7) == []


def test_load_returns_registered_connection_object():
    store = NotifyMap()
    conn = make_conn("x")
    store.add_channel_to_type(3, conn)
    assert store.load(3)[0] is conn


def test_same_id_allowed_on_different_types():
    store = NotifyMap()
    store.add_channel_to_type(1, make_conn("a"))
    store.add_channel_to_type(2, make_conn("a"))
    assert len(store.load(1)) == 1
    assert len(store.load(2)) == 1