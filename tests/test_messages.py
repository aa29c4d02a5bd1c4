import queue

import pytest

from gossip.messages import (
    ConnChall,
    ConnPoW,
    ConnReq,
    NewConn,
    PowChall,
    PowPoW,
    PowReq,
    Push,
    Unregister,
    is_pow,
)


@pytest.mark.parametrize("message", [PowReq(), PowChall(cookie=b"c"), PowPoW(pow_nonce=7)])
def test_pow_messages_are_pow(message):
    assert is_pow(message) is True


@pytest.mark.parametrize(
    "message",
    [
        Push(ttl=42, gossip_type=10, message_id=99, payload=bytes([0x20, 0x40])),
        ConnReq(),
        ConnChall(cookie=b"c"),
        ConnPoW(pow_nonce=3, cookie=b"c"),
    ],
)
def test_other_messages_are_not_pow(message):
    assert is_pow(message) is False


@pytest.mark.parametrize("message", [Unregister("a"), NewConn(id="a"), "text", None])
def test_is_pow_rejects_non_sendable(message):
    with pytest.raises(TypeError):
        is_pow(message)


def test_push_equality_ignores_nothing():
    sent = Push(ttl=42, gossip_type=10, message_id=99, payload=bytes([0x20, 0x40]))
    received = Push(id="", ttl=42, gossip_type=10, message_id=99, payload=bytes([0x20, 0x40]))
    assert sent == received
    assert Push(id="peer", ttl=42) != Push(id="other", ttl=42)


def test_unregister_is_hashable_and_compares_by_id():
    assert Unregister("a") == Unregister("a")
    assert len({Unregister("a"), Unregister("a"), Unregister("b")}) == 2


def test_new_conn_carries_queue_and_done_event():
    q = queue.Queue()
    conn = NewConn(id="127.0.0.1:5000", data=q)
    conn.data.put(ConnReq(id="x"))
    assert q.get_nowait() == ConnReq(id="x")
    assert conn.done.is_set() is False
    conn.done.set()
    assert conn.done.is_set() is True


def test_new_conn_default_queue_is_fresh():
    first = NewConn(id="a")
    second = NewConn(id="b")
    first.data.put(PowReq())
    assert second.data.empty()
    assert first.data.qsize() == 1