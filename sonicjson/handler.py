"""Event handlers that build Python values from parser callbacks.

:class:`SAXHandler` builds a full tree of ``dict``, ``list``, ``str``,
``int``, ``float``, ``bool`` and ``None``. :class:`LazySAXHandler` builds
only the top level container, keeping each child as its raw JSON text.
"""

from __future__ import annotations

import enum

__all__ = ["SAXHandler", "LazySAXHandler"]


class _Kind(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"


_PLACEHOLDER = object()


def _text(value) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="surrogatepass")
    return str(value)


def _collect(kind: _Kind, items: list, count: int):
    if kind is _Kind.OBJECT:
        if len(items) != 2 * count:
            raise ValueError(
                f"object expects {count} members, found {len(items) / 2:g}"
            )
        return dict(zip(items[0::2], items[1::2]))
    if len(items) != count:
        raise ValueError(f"array expects {count} elements, found {len(items)}")
    return list(items)


class SAXHandler:
    """Builds a complete value tree from parse events.

    ``capacity`` limits how many nodes (values and keys) may be pending at
    once; exceeding it raises ``MemoryError``.
    """

    def __init__(self, capacity=None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._stack: list = []
        self._open: list[tuple[_Kind, int]] = []

    def _push(self, value) -> None:
        if self._capacity is not None and len(self._stack) >= self._capacity:
            raise MemoryError(f"node stack is full ({self._capacity} nodes)")
        self._stack.append(value)

    def _start(self, kind: _Kind) -> None:
        self._push(_PLACEHOLDER)
        self._open.append((kind, len(self._stack) - 1))

    def _end(self, kind: _Kind, count: int) -> None:
        if not self._open:
            raise ValueError(f"end of {kind.value} without a start")
        open_kind, start = self._open[-1]
        if open_kind is not kind:
            raise ValueError(f"end of {kind.value} closes an open {open_kind.value}")
        container = _collect(kind, self._stack[start + 1 :], count)
        self._open.pop()
        del self._stack[start + 1 :]
        self._stack[start] = container

    def null(self) -> None:
        self._push(None)

    def bool(self, value) -> None:
        self._push(value is True or (value is not False and bool_(value)))

    def uint(self, value) -> None:
        self._push(int_(value))

    def int(self, value) -> None:
        self._push(int_(value))

    def double(self, value) -> None:
        self._push(float(value))

    def key(self, text) -> None:
        self._push(_text(text))

    def string(self, text) -> None:
        self._push(_text(text))

    def start_object(self) -> None:
        self._start(_Kind.OBJECT)

    def start_array(self) -> None:
        self._start(_Kind.ARRAY)

    def end_object(self, pairs) -> None:
        self._end(_Kind.OBJECT, pairs)

    def end_array(self, count) -> None:
        self._end(_Kind.ARRAY, count)

    def result(self):
        """The finished value; ``ValueError`` if it is not complete."""
        if self._open or len(self._stack) != 1:
            raise ValueError("no complete JSON value has been built")
        return self._stack[0]


bool_ = bool
int_ = int


class LazySAXHandler:
    """Builds the top level container only; children stay as raw JSON text.

    An object becomes a ``dict`` of key to raw text, an array a ``list`` of
    raw texts, and a top level scalar is its own raw text.
    """

    def __init__(self) -> None:
        self._stack: list = []
        self._root: _Kind | None = None

    def _start(self, kind: _Kind) -> None:
        if self._stack:
            raise ValueError("a lazy document holds a single top level value")
        self._root = kind
        self._stack.append(_PLACEHOLDER)

    def _end(self, kind: _Kind, count: int) -> None:
        if self._root is not kind or not self._stack:
            raise ValueError(f"end of {kind.value} without a matching start")
        self._stack = [_collect(kind, self._stack[1:], count)]
        self._root = None

    def start_array(self) -> None:
        self._start(_Kind.ARRAY)

    def start_object(self) -> None:
        self._start(_Kind.OBJECT)

    def end_array(self, count) -> None:
        self._end(_Kind.ARRAY, count)

    def end_object(self, pairs) -> None:
        self._end(_Kind.OBJECT, pairs)

    def key(self, text) -> None:
        self._stack.append(_text(text))

    def raw(self, text) -> None:
        self._stack.append(_text(text))

    def result(self):
        """The finished value; ``ValueError`` if it is not complete."""
        if self._root is not None or len(self._stack) != 1:
            raise ValueError("no complete JSON value has been built")
        return self._stack[0]