import dataclasses
import io
import unittest
from typing import Dict, List, Optional

from autodoc.errors import NotARecordError, UnsupportedTypeError
from autodoc.model import Kind, RecordField, RecordType
from autodoc.table import (
    TABLE_HEADER,
    FieldTableRenderer,
    format_row,
    iter_field_descriptors,
    write_struct_table,
)


@dataclasses.dataclass
class Inner:
    Hello: int
    World: str


@dataclasses.dataclass
class Greeting:
    Hello: str
    World: int
    Obj: Optional[Inner] = dataclasses.field(default=None, metadata={"help": "nested"})


@dataclasses.dataclass
class Primitives:
    enabled: bool
    count: int
    ratio: float
    label: str


@dataclasses.dataclass
class Line:
    sku: str = dataclasses.field(metadata={"json": "sku,readonly"})
    qty: int = 1


@dataclasses.dataclass
class Order:
    order_id: str = dataclasses.field(
        metadata={"json": "id,readonly,omitempty", "help": "Server assigned."}
    )
    lines: List[Line] = dataclasses.field(default_factory=list)
    billing: Inner = dataclasses.field(default=None, metadata={"doc": "billingAddress,embed"})
    note: str = dataclasses.field(default="", metadata={"json": "-,omitempty"})


@dataclasses.dataclass
class WithMapping:
    first: str
    attrs: Dict[str, str]
    last: int


@dataclasses.dataclass
class WithScalarList:
    name: str
    tags: List[str]
    after: int


class FailingSink:
    """Sink that raises once a write contains ``marker``."""

    def __init__(self, marker):
        self.marker = marker
        self.buffer = io.BytesIO()

    def write(self, data):
        if self.marker in data:
            raise OSError("disk full")
        return self.buffer.write(data)

    def close(self):
        pass


def render(record):
    sink = io.BytesIO()
    write_struct_table(sink, record)
    return sink.getvalue().decode("utf-8")


def rows(output):
    return [line for line in output.splitlines() if line][2:]


class TestTableFormat(unittest.TestCase):

    def test_header_and_separator(self):
        output = render(Inner)
        lines = output.split("\n")
        self.assertEqual(lines[0], "")
        self.assertEqual(lines[1], "| Field | Type | Description |")
        self.assertEqual(lines[2], "| ----- | ---- | ----------- |")

    def test_greeting_scenario(self):
        """Nested optional record renders a parent row and dotted children."""
        expected = TABLE_HEADER + (
            "| Hello | string |  |\n"
            "| World | number |  |\n"
            "| Obj | Object | nested |\n"
            "| Obj.Hello | number |  |\n"
            "| Obj.World | string |  |\n"
        )
        self.assertEqual(render(Greeting), expected)

    def test_anonymous_record_scenario(self):
        """Explicitly described anonymous records render like dataclasses."""
        inner = RecordType(None, [RecordField("Hello", int), RecordField("World", str)])
        outer = RecordType(None, [
            RecordField("Hello", str),
            RecordField("World", int),
            RecordField("Obj", inner, {"help": "nested"}),
        ])
        self.assertEqual(render(outer), render(Greeting))

    def test_primitive_rows_follow_declaration_order(self):
        self.assertEqual(rows(render(Primitives))[:4], [
            "| enabled | bool |  |",
            "| count | number |  |",
            "| ratio | number |  |",
            "| label | string |  |",
        ])

    def test_attributes_and_names(self):
        output = render(Order)
        self.assertEqual(rows(output), [
            "| id | string (readonly optional) | Server assigned. |",
            "| lines | Array |  |",
            "| lines[].sku | string (readonly) |  |",
            "| lines[].qty | number |  |",
            "| billingAddress | Object |  |",
            "| billingAddress.Hello | number |  |",
            "| billingAddress.World | string |  |",
            "| note | string (optional) |  |",
        ])

    def test_instance_and_optional_root(self):
        self.assertEqual(render(Greeting("a", 1)), render(Greeting))
        self.assertEqual(render(Optional[Greeting]), render(Greeting))


class TestDepthFirstOrder(unittest.TestCase):

    def test_nested_rows_come_before_parent_siblings(self):
        @dataclasses.dataclass
        class Leaf:
            value: int

        @dataclasses.dataclass
        class Middle:
            leaf: Leaf
            tail: str

        record = RecordType("Top", [
            RecordField("middle", Middle),
            RecordField("after", bool),
        ])
        names = [d.name for d in iter_field_descriptors(record)]
        self.assertEqual(names, ["middle", "middle.leaf", "middle.leaf.value", "middle.tail", "after"])


    def test_nested_sequence_flattens_under_one_marker(self):
        @dataclasses.dataclass
        class Grid:
            cells: List[List[Inner]]
            size: int

        names = [d.name for d in iter_field_descriptors(Grid)]
        self.assertEqual(names, ["cells", "cells[].Hello", "cells[].World", "size"])


class TestDescriptors(unittest.TestCase):

    def test_descriptor_fields(self):
        first = next(iter_field_descriptors(Order))
        self.assertEqual(first.name, "id")
        self.assertIs(first.kind, Kind.STRING)
        self.assertTrue(first.readonly)
        self.assertTrue(first.optional)
        self.assertEqual(first.description, "Server assigned.")

    def test_format_row_without_attributes(self):
        desc = next(iter_field_descriptors(Inner))
        self.assertEqual(format_row(desc), "| Hello | number |  |\n")


class TestFailures(unittest.TestCase):

    def test_unsupported_field_keeps_earlier_rows(self):
        sink = io.BytesIO()
        with self.assertRaises(UnsupportedTypeError) as ctx:
            write_struct_table(sink, WithMapping)
        output = sink.getvalue().decode("utf-8")
        self.assertIn("| first | string |  |", output)
        self.assertNotIn("last", output)
        self.assertIn("Dict", ctx.exception.type_name)

    def test_scalar_sequence_fails_after_its_row(self):
        """Sequence fields recurse into their element, which must be a record."""
        sink = io.BytesIO()
        with self.assertRaises(NotARecordError):
            write_struct_table(sink, WithScalarList)
        output = sink.getvalue().decode("utf-8")
        self.assertIn("| tags | Array |  |", output)
        self.assertNotIn("after", output)

    def test_non_record_root_writes_nothing(self):
        sink = io.BytesIO()
        with self.assertRaises(NotARecordError):
            write_struct_table(sink, int)
        self.assertEqual(sink.getvalue(), b"")

    def test_write_failure_aborts(self):
        sink = FailingSink(b"World")
        with self.assertRaises(OSError):
            FieldTableRenderer(sink).write_struct_table(Greeting)
        output = sink.buffer.getvalue().decode("utf-8")
        self.assertIn("| Hello | string |  |", output)
        self.assertNotIn("Obj", output)

    def test_header_write_failure(self):
        sink = FailingSink(b"| Field")
        with self.assertRaises(OSError):
            write_struct_table(sink, Greeting)
        self.assertEqual(sink.buffer.getvalue(), b"")


if __name__ == '__main__':
    unittest.main()
