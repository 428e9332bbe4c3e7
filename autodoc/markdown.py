"""Facade tying one sink to both renderers."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from .sink import Sink
from .table import FieldTableRenderer
from .transport import AsyncTransportMarkdownRecorder, TransportMarkdownRecorder


class Markdown:
    """Markdown documentation written into a caller-owned sink.

    Field tables and HTTP transcripts written through the same instance
    end up in the sink in call order::

        with open("api.md", "wb") as fh:
            md = Markdown(fh)
            md.write_struct_table(CreateItem)
            with httpx.Client(transport=md.transport()) as client:
                client.post(url, json={"name": "x"})
    """

    def __init__(self, sink: Sink) -> None:
        self.sink = sink
        self._types: List[type] = []

    def transport(self, underlying: Optional[Any] = None) -> TransportMarkdownRecorder:
        """Return a recorder wrapping *underlying* (default: a new HTTP transport)."""
        return TransportMarkdownRecorder(self.sink, underlying)

    def async_transport(self, underlying: Optional[Any] = None) -> AsyncTransportMarkdownRecorder:
        """Return an async recorder wrapping *underlying*."""
        return AsyncTransportMarkdownRecorder(self.sink, underlying)

    def register_types(self, *values: Any) -> None:
        """Remember concrete types that implement a shared interface.

        Instances are recorded by their type.  Registered types do not
        change any output yet.
        """
        for value in values:
            self._types.append(value if isinstance(value, type) else type(value))

    @property
    def registered_types(self) -> Tuple[type, ...]:
        return tuple(self._types)

    def write_struct_table(self, record: Any) -> None:
        """Write the field table of *record*, see :mod:`autodoc.table`."""
        FieldTableRenderer(self.sink).write_struct_table(record)
