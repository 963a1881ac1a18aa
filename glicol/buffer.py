"""Fixed-size block of audio samples used when processing the graph."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import overload


class Buffer(Sequence[float]):
    """A block of samples whose length never changes.

    ``Buffer(n)`` makes a silent buffer of ``n`` samples and
    ``Buffer(values)`` a buffer holding ``values``.  Items and slices can be
    assigned; a slice assignment must keep the length unchanged.
    """

    __slots__ = ("_data",)

    def __init__(self, data: int | Iterable[float] = 0) -> None:
        if isinstance(data, int):
            if data < 0:
                raise ValueError(f"buffer size must not be negative, got {data}")
            self._data = [0.0] * data
        else:
            self._data = [float(value) for value in data]

    def silence(self) -> None:
        """Write silence to the whole buffer."""
        self._data[:] = [0.0] * len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[float]:
        return iter(self._data)

    @overload
    def __getitem__(self, key: int) -> float: ...

    @overload
    def __getitem__(self, key: slice) -> list[float]: ...

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key: int | slice, value) -> None:
        if isinstance(key, slice):
            values = [float(v) for v in value]
            expected = len(range(*key.indices(len(self._data))))
            if len(values) != expected:
                raise ValueError(
                    f"cannot copy {len(values)} samples into a slice of {expected}"
                )
            self._data[key] = values
        else:
            self._data[key] = float(value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Buffer):
            return self._data == other._data
        if isinstance(other, (list, tuple)):
            return self._data == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({self._data!r})"