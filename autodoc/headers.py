"""Header filters for recorded transcripts.

A filter decides, per header name, whether the header is left out of a
transcript.  Typical candidates are ``Authorization`` (secrets) and
``Date`` (noise that changes on every run).  For a fixed list of names
use :class:`SkipHeaders`::

    recorder.with_header_filter(SkipHeaders(["Date", "Authorization"]))

Filters are registered in :data:`header_filter_registry` so they can be
picked by key as well.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Pattern, Union

from .registry import Registry

header_filter_registry = Registry("header filter")


class HeadersSkipper(ABC):
    """Decide whether a header is elided from a transcript."""

    @abstractmethod
    def skip_header(self, name: str, values: List[str]) -> bool:
        """Return ``True`` to leave header *name* out.

        Args:
            name: Header name as it was sent or received.
            values: Every value of the header, in order.
        """
        raise NotImplementedError


@header_filter_registry.register("names")
class SkipHeaders(HeadersSkipper):
    """Skip a fixed set of header names, compared case-insensitively.

    Values are ignored.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self.names = tuple(names)
        self._folded = frozenset(name.casefold() for name in self.names)

    def skip_header(self, name: str, values: List[str]) -> bool:
        return name.casefold() in self._folded

    def __repr__(self) -> str:
        return f"SkipHeaders({list(self.names)!r})"


@header_filter_registry.register("pattern")
class SkipHeaderPattern(HeadersSkipper):
    """Skip headers whose whole name matches a regular expression.

    A string pattern is compiled to ignore case, so ``x-.*-token`` skips
    ``X-Api-Token``.  A pre-compiled pattern is used with its own flags.
    """

    def __init__(self, pattern: Union[str, Pattern[str]]) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern, re.IGNORECASE)
        self.pattern = pattern

    def skip_header(self, name: str, values: List[str]) -> bool:
        return self.pattern.fullmatch(name) is not None

    def __repr__(self) -> str:
        return f"SkipHeaderPattern({self.pattern.pattern!r})"


class SkipHeaderPredicate(HeadersSkipper):
    """Adapt a plain ``(name, values) -> bool`` callable."""

    def __init__(self, predicate: Callable[[str, List[str]], bool]) -> None:
        self.predicate = predicate

    def skip_header(self, name: str, values: List[str]) -> bool:
        return bool(self.predicate(name, values))


def as_skipper(value: Any) -> Optional[HeadersSkipper]:
    """Normalize a filter option.

    ``None`` means no header is skipped.  A :class:`HeadersSkipper` is
    returned unchanged and any other callable is wrapped.

    Raises:
        TypeError: For anything else.
    """
    if value is None or isinstance(value, HeadersSkipper):
        return value
    if callable(value):
        return SkipHeaderPredicate(value)
    raise TypeError(f"expected a HeadersSkipper or a callable, got {type(value).__name__}")
