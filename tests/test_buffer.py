import pytest

from glicol.buffer import Buffer


def test_new_buffer_is_silent():
    buf = Buffer(8)
    assert len(buf) == 8
    assert list(buf) == [0.0] * 8


def test_from_values_and_indexing():
    buf = Buffer([0.1, 0.2, 0.3])
    assert buf[1] == 0.2
    assert buf[-1] == 0.3
    assert buf[0:2] == [0.1, 0.2]


def test_values_become_floats():
    buf = Buffer([1, 2])
    buf[0] = 3
    assert buf == [3.0, 2.0]
    assert all(isinstance(value, float) for value in buf)


def test_silence_clears_the_buffer():
    buf = Buffer([1.0, 2.0, 3.0])
    buf.silence()
    assert buf == Buffer(3)


def test_slice_copy_keeps_length():
    buf = Buffer(4)
    buf[:] = [0.1] * 4
    assert buf == [0.1] * 4
    assert len(buf) == 4


def test_slice_length_mismatch_raises():
    buf = Buffer([1.0, 2.0, 3.0, 4.0])
    with pytest.raises(ValueError):
        buf[:] = [1.0]
    assert buf == [1.0, 2.0, 3.0, 4.0]
    assert len(buf) == 4


def test_index_out_of_range_raises():
    with pytest.raises(IndexError):
        Buffer(4)[4]


def test_negative_size_raises():
    with pytest.raises(ValueError):
        Buffer(-1)


def test_equality_and_unhashable():
    assert Buffer([1.0]) == Buffer([1.0])
    assert not (Buffer([1.0]) == Buffer([2.0]))
    with pytest.raises(TypeError):
        hash(Buffer([1.0]))


def test_repr_shows_samples():
    assert repr(Buffer([0.5])) == "Buffer([0.5])"