"""Markdown documentation generated from running code.

autodoc writes two kinds of markdown into a caller-owned byte sink:

* **Field tables** describe the shape of a record type (a dataclass or
  an explicit :class:`RecordType`).  See :mod:`autodoc.table`.
* **Transcripts** capture the HTTP requests and responses of an httpx
  client.  See :mod:`autodoc.transport`.

Supporting modules:

* :mod:`autodoc.model` describes record types and table rows.
* :mod:`autodoc.classifier` maps field types to table kinds.
* :mod:`autodoc.tags` parses ``doc``/``json``/``help`` field tags.
* :mod:`autodoc.headers` holds the header filters, registered in a
  :class:`Registry` (:mod:`autodoc.registry`).
* :mod:`autodoc.markdown` ties one sink to both renderers.
"""

from .errors import (
    AutodocError,
    NotARecordError,
    ResponseRecordError,
    UnresolvedAnnotationError,
    UnsupportedTypeError,
)
from .model import FieldDescriptor, Kind, RecordField, RecordType, describe
from .classifier import classify
from .tags import ResolvedTag, resolve
from .registry import Registry
from .headers import (
    HeadersSkipper,
    SkipHeaderPattern,
    SkipHeaderPredicate,
    SkipHeaders,
    header_filter_registry,
)
from .sink import Sink
from .table import FieldTableRenderer, iter_field_descriptors, write_struct_table
from .transport import AsyncTransportMarkdownRecorder, TransportMarkdownRecorder
from .markdown import Markdown

__all__ = [
    "AutodocError",
    "NotARecordError",
    "ResponseRecordError",
    "UnresolvedAnnotationError",
    "UnsupportedTypeError",
    "FieldDescriptor",
    "Kind",
    "RecordField",
    "RecordType",
    "describe",
    "classify",
    "ResolvedTag",
    "resolve",
    "Registry",
    "HeadersSkipper",
    "SkipHeaderPattern",
    "SkipHeaderPredicate",
    "SkipHeaders",
    "header_filter_registry",
    "Sink",
    "FieldTableRenderer",
    "iter_field_descriptors",
    "write_struct_table",
    "AsyncTransportMarkdownRecorder",
    "TransportMarkdownRecorder",
    "Markdown",
]
