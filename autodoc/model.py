"""Data model for describing record types.

The table renderer never looks at Python classes directly.  It works on
a :class:`RecordType`, an ordered list of :class:`RecordField` objects
each carrying a declared type annotation and string-keyed tags.  Two
ways lead to a :class:`RecordType`:

* build one by hand, which is how anonymous records are expressed;
* call :func:`describe` on a dataclass (or an instance of one).  Field
  tags then come from ``dataclasses.field(metadata=...)``.

What the renderer produces for each visited field is a
:class:`FieldDescriptor`.  Descriptors are computed on demand while
walking a record and are never stored.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .errors import NotARecordError, UnresolvedAnnotationError

_UNION_ORIGINS: tuple = (Union,)
if hasattr(types, "UnionType"):
    # PEP 604 ``X | None`` spelling, Python 3.10+
    _UNION_ORIGINS += (types.UnionType,)

_NONE_TYPE = type(None)


class Kind(str, Enum):
    """Semantic kind shown in the ``Type`` column of a field table."""

    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "Array"
    OBJECT = "Object"

    def __str__(self) -> str:
        return self.value


@dataclass
class FieldDescriptor:
    """One row of a field table."""

    name: str
    kind: Kind
    readonly: bool = False
    optional: bool = False
    description: str = ""

    def attributes(self) -> str:
        """Return ``(readonly optional)`` for the flags that are set, or ``""``."""
        present = []
        if self.readonly:
            present.append("readonly")
        if self.optional:
            present.append("optional")
        if not present:
            return ""
        return "(" + " ".join(present) + ")"


@dataclass
class RecordField:
    """A named, typed field of a record together with its tags."""

    name: str
    annotation: Any
    tags: Dict[str, str] = field(default_factory=dict)

    def lookup(self, key: str) -> Optional[str]:
        """Return the tag stored under *key*, or ``None`` when absent.

        A tag that is present but empty returns ``""``, which is not the
        same as an absent tag.
        """
        return self.tags.get(key)

    def tag(self, key: str) -> str:
        return self.tags.get(key, "")


class RecordType:
    """Read-only description of a structured type.

    ``name`` is ``None`` for anonymous records.
    """

    def __init__(self, name: Optional[str], fields: List[RecordField]):
        self.name = name
        self.fields = list(fields)

    @property
    def anonymous(self) -> bool:
        return self.name is None

    def iter_fields(self) -> Iterator[RecordField]:
        """Yield the fields in declaration order."""
        return iter(self.fields)

    def __repr__(self) -> str:
        return f"RecordType({self.name!r}, {len(self.fields)} fields)"

    def __str__(self) -> str:
        return self.name or "anonymous record"


def type_name(tp: Any) -> str:
    """Human readable name of a type annotation, for error messages."""
    if isinstance(tp, RecordType):
        return str(tp)
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        return tp.__name__
    return repr(tp)


def unwrap_indirections(tp: Any) -> Any:
    """Strip ``Optional`` and ``Annotated`` wrappers from *tp*.

    ``Optional[X]``, ``Union[X, None]``, ``X | None`` and
    ``Annotated[X, ...]`` all unwrap to ``X``, repeatedly.  Unions with
    more than one non-``None`` member are returned as they are.
    """
    while True:
        origin = typing.get_origin(tp)
        if origin is typing.Annotated:
            tp = typing.get_args(tp)[0]
            continue
        if origin in _UNION_ORIGINS:
            members = [arg for arg in typing.get_args(tp) if arg is not _NONE_TYPE]
            if len(members) == 1:
                tp = members[0]
                continue
        return tp


def is_record(tp: Any) -> bool:
    """True for :class:`RecordType` instances and dataclass types."""
    if isinstance(tp, RecordType):
        return True
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _string_tags(metadata: Mapping[Any, Any]) -> Dict[str, str]:
    return {
        key: value
        for key, value in metadata.items()
        if isinstance(key, str) and isinstance(value, str)
    }


def describe(tp: Any) -> RecordType:
    """Return the :class:`RecordType` for *tp*.

    *tp* may be a :class:`RecordType`, a dataclass, a dataclass instance
    or any of those behind ``Optional``/``Annotated``.  Annotations are
    resolved with :func:`typing.get_type_hints`, so string annotations
    and ``from __future__ import annotations`` work.  ``ClassVar`` and
    ``InitVar`` pseudo-fields are not part of the record.

    Raises:
        NotARecordError: If *tp* does not describe a record.
        UnresolvedAnnotationError: If a field annotation names a type
            that is not visible from the record's module.
    """
    if dataclasses.is_dataclass(tp) and not isinstance(tp, type):
        tp = type(tp)
    tp = unwrap_indirections(tp)
    if isinstance(tp, RecordType):
        return tp
    if not is_record(tp):
        raise NotARecordError(type_name(tp))

    try:
        hints = typing.get_type_hints(tp)
    except NameError as exc:
        missing = getattr(exc, "name", None) or str(exc)
        raise UnresolvedAnnotationError(tp.__name__, missing) from exc
    fields = [
        RecordField(f.name, hints.get(f.name, f.type), _string_tags(f.metadata))
        for f in dataclasses.fields(tp)
    ]
    return RecordType(tp.__name__, fields)
