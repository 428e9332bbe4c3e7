"""Map declared field types onto the kinds shown in a field table.

The rendered schema only distinguishes five kinds (see :class:`Kind`).
Integer and floating point types of any width all become ``number``;
lists, tuples and sets all become ``Array``.  ``Optional`` and
``Annotated`` wrappers are looked through.
"""

from __future__ import annotations

import collections.abc
import decimal
import numbers
import typing
from typing import Any, Iterable

from .errors import NotARecordError, UnsupportedTypeError
from .model import Kind, is_record, type_name, unwrap_indirections

_SEQUENCE_TYPES = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.Set,
)

_BINARY_TYPES = (bytes, bytearray, memoryview)


def _is_sequence(tp: type) -> bool:
    if issubclass(tp, (str,) + _BINARY_TYPES):
        return False
    return issubclass(tp, _SEQUENCE_TYPES)


def classify(annotation: Any, flags: Iterable[str] = ()) -> Kind:
    """Return the :class:`Kind` for a field declared as *annotation*.

    *flags* are the field's tag flags.  ``embed`` asks for a record to be
    shown as ``Object``, which is what every record renders as, named or
    anonymous.

    Raises:
        UnsupportedTypeError: For mappings, callables, ``Any``, binary
            types, multi-member unions and plain classes.
    """
    tp = unwrap_indirections(annotation)
    if is_record(tp):
        return Kind.OBJECT

    origin = typing.get_origin(tp)
    if origin is not None:
        if isinstance(origin, type) and _is_sequence(origin):
            return Kind.ARRAY
        raise UnsupportedTypeError(type_name(tp))

    if not isinstance(tp, type):
        raise UnsupportedTypeError(type_name(tp))
    # bool is an int subclass
    if issubclass(tp, bool):
        return Kind.BOOL
    if issubclass(tp, str):
        return Kind.STRING
    if issubclass(tp, (numbers.Real, decimal.Decimal)):
        return Kind.NUMBER
    if _is_sequence(tp):
        return Kind.ARRAY
    raise UnsupportedTypeError(type_name(tp))


def _is_sequence_annotation(tp: Any) -> bool:
    candidate = typing.get_origin(tp) or tp
    return isinstance(candidate, type) and _is_sequence(candidate) and not is_record(tp)


def element_type(annotation: Any) -> Any:
    """Return the element type of a sequence annotation.

    ``List[X]``, ``Sequence[X]``, ``Set[X]`` and ``Tuple[X, ...]`` all
    give ``X``; for a fixed tuple the first member is used.  Nested
    sequences are looked through, so ``List[List[X]]`` also gives ``X``
    and its fields flatten under a single ``[]``.

    Raises:
        NotARecordError: If the element type is not spelled out, as with
            a bare ``list`` at any depth.
    """
    tp = unwrap_indirections(annotation)
    while True:
        args = typing.get_args(tp)
        if not args or args[0] is Ellipsis:
            raise NotARecordError(type_name(tp))
        elem = unwrap_indirections(args[0])
        if not _is_sequence_annotation(elem):
            return elem
        tp = elem
