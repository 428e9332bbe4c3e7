"""The byte sink both renderers write into.

A sink is anything with ``write(bytes)`` and ``close()``: an open binary
file, an :class:`io.BytesIO`, a socket file object.  autodoc only ever
writes to it; the caller creates it and closes it.
"""

from __future__ import annotations

from typing import Optional, Protocol, Union


class Sink(Protocol):
    """Append-only byte destination owned by the caller."""

    def write(self, data: bytes) -> Optional[int]:
        ...

    def close(self) -> None:
        ...


def write_all(sink: Sink, data: Union[bytes, str]) -> None:
    """Write *data* to *sink*, retrying short writes.

    Text is encoded as UTF-8.  Exceptions raised by the sink propagate
    unchanged.  Sinks that return ``None`` from ``write`` are taken to
    have accepted everything.

    Raises:
        OSError: The sink accepted no bytes of a non-empty write.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    while data:
        written = sink.write(data)
        if written is None or written >= len(data):
            return
        if written <= 0:
            raise OSError(f"short write: sink accepted {written} of {len(data)} bytes")
        data = data[written:]
