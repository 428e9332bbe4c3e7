"""Markdown field tables for record types.

Nested records are flattened the way url-encoded forms flatten them:
the fields of a record-typed field ``obj`` are listed as ``obj.x``, and
the fields of the element record of a sequence field ``items`` as
``items[].x``.  Every nested block follows the row that introduced it,
before the next sibling::

    | Field | Type | Description |
    | ----- | ---- | ----------- |
    | id | string (readonly) | Identifier. |
    | owner | Object |  |
    | owner.name | string |  |
    | tags | Array (optional) |  |
    | tags[].label | string |  |
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .classifier import classify, element_type
from .model import FieldDescriptor, Kind, describe, unwrap_indirections
from .sink import Sink, write_all
from .tags import resolve

logger = logging.getLogger(__name__)

TABLE_HEADER = (
    "\n"
    "| Field | Type | Description |\n"
    "| ----- | ---- | ----------- |\n"
)


def iter_field_descriptors(record: Any, prefix: str = "") -> Iterator[FieldDescriptor]:
    """Yield one :class:`FieldDescriptor` per row, depth first.

    Descriptors are produced lazily, so an unsupported field raises only
    when the walk reaches it.

    Raises:
        UnsupportedTypeError: A field type has no markdown kind.
        NotARecordError: A sequence field's element is not a record.
    """
    for f in describe(record).iter_fields():
        tag = resolve(f)
        kind = classify(f.annotation, tag.flags)
        name = prefix + tag.name
        yield FieldDescriptor(
            name=name,
            kind=kind,
            readonly=tag.readonly,
            optional=tag.optional,
            description=tag.description,
        )
        if kind is Kind.OBJECT:
            yield from iter_field_descriptors(unwrap_indirections(f.annotation), name + ".")
        elif kind is Kind.ARRAY:
            yield from iter_field_descriptors(element_type(f.annotation), name + "[].")


def format_row(desc: FieldDescriptor) -> str:
    """Format one table row, newline included."""
    type_cell = str(desc.kind)
    attributes = desc.attributes()
    if attributes:
        type_cell = f"{type_cell} {attributes}"
    return "| {name} | {typ} | {desc} |\n".format(
        name=desc.name,
        typ=type_cell,
        desc=desc.description,
    )


class FieldTableRenderer:
    """Write the field table of a record type into a sink.

    Rows are written as they are produced.  When a field turns out to be
    unsupported, or the sink fails, the rows written so far stay in the
    sink.
    """

    def __init__(self, sink: Sink) -> None:
        self.sink = sink

    def write_struct_table(self, record: Any) -> None:
        """Write the header and one row per field of *record*.

        *record* may be a dataclass, a dataclass instance or a
        :class:`~autodoc.model.RecordType`, optionally wrapped in
        ``Optional``.
        """
        record_type = describe(record)
        logger.debug("Writing field table for %s", record_type)
        write_all(self.sink, TABLE_HEADER)
        rows = 0
        for desc in iter_field_descriptors(record_type):
            write_all(self.sink, format_row(desc))
            rows += 1
        logger.debug("Wrote %d rows for %s", rows, record_type)


def write_struct_table(sink: Sink, record: Any) -> None:
    """Shortcut for ``FieldTableRenderer(sink).write_struct_table(record)``."""
    FieldTableRenderer(sink).write_struct_table(record)
