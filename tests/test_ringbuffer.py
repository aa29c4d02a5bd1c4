import pytest

from gossip.ringbuffer import NotPresentError, Ringbuffer


def test_ringbuffer_sequence():
    rb = Ringbuffer(3)
    assert rb.to_list() == []

    rb.insert(0)
    assert rb.to_list() == [0]

    rb.insert(1)
    assert rb.to_list() == [1, 0]

    rb.insert(2)
    assert rb.to_list() == [2, 0, 1]

    rb.insert(3)
    assert rb.to_list() == [3, 1, 2]

    with pytest.raises(NotPresentError):
        rb.remove(0)

    rb.remove(2)
    assert rb.to_list() == [3, 1]

    rb.insert(4)
    assert rb.to_list() == [4, 1, 3]

    rb.remove(4)
    assert rb.to_list() == [1, 3]

    rb.remove(3)
    assert rb.to_list() == [1]

    rb.remove(1)
    assert rb.to_list() == []


def test_filter():
    rb = Ringbuffer(6)
    for i in range(1, 8):
        rb.insert(i)
    assert rb.filter(lambda a: a % 2 == 0) == [2, 4, 6]


def test_find_first():
    rb = Ringbuffer(30)
    for i in range(1, 30):
        rb.insert(i)
    assert rb.find_first(lambda a: a == 29) == 29
    assert rb.find_first(lambda a: a == 23) == 23
    with pytest.raises(NotPresentError):
        rb.find_first(lambda a: a == 50)


def test_remove_from_empty_raises():
    rb = Ringbuffer(3)
    with pytest.raises(NotPresentError):
        rb.remove(1)


def test_find_first_on_empty_raises():
    rb = Ringbuffer(3)
    with pytest.raises(NotPresentError):
        rb.find_first(lambda a: True)


def test_len_never_exceeds_capacity():
    rb = Ringbuffer(4)
    for i in range(20):
        rb.insert(i)
        assert len(rb) <= 4
    assert len(rb) == 4
    assert set(rb) == {16, 17, 18, 19}


def test_iteration_matches_to_list():
    rb = Ringbuffer(5)
    for i in range(7):
        rb.insert(i)
    assert list(rb) == rb.to_list()
    assert rb.to_list()[0] == 6