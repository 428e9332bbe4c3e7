"""Exception hierarchy for autodoc.

Sink write failures and transport failures are not wrapped: they reach
the caller exactly as the sink or the underlying transport raised them.
The one exception is a failure while recording a response that was
already received, see :class:`ResponseRecordError`.
"""

from __future__ import annotations

from typing import Any, Optional


class AutodocError(Exception):
    """Base class for errors raised by autodoc itself."""


class UnsupportedTypeError(AutodocError, TypeError):
    """A field's declared type has no markdown kind.

    Raised for mappings, callables, ``Any``, unions with more than one
    member and every other type that is neither a primitive, a sequence
    nor a record.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__(f"unsupported field type {type_name}")
        self.type_name = type_name


class NotARecordError(AutodocError, TypeError):
    """Fields were requested from a type that is not a record.

    The table walker hits this when an ``Array`` field's element type is a
    primitive, or when the root passed to the renderer is not a record.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__(f"{type_name} is not a record type")
        self.type_name = type_name


class ResponseRecordError(AutodocError):
    """Recording failed after the underlying transport returned a response.

    The response is attached and the caller owns it, closing included.
    Its body is still readable unless reading the body was what failed:
    either recording stopped before the body was touched, or the body had
    already been captured and replaced by a replayable stream.  The
    original failure is available as ``__cause__``.
    """

    def __init__(self, response: Any, message: Optional[str] = None) -> None:
        super().__init__(message or "failed to record response")
        self.response = response


class UnresolvedAnnotationError(AutodocError, NameError):
    """A record's string annotation names something that is not in scope.

    Typical for dataclasses defined inside a function whose annotations
    are strings (``from __future__ import annotations``) and refer to
    other local classes.
    """

    def __init__(self, record_name: str, missing: str) -> None:
        super().__init__(f"cannot resolve annotation {missing!r} of record {record_name}")
        self.record_name = record_name
        self.missing = missing
