"""Field tag parsing.

Each field may carry three string tags:

``doc``
    ``"name,flag,flag"``.  Takes precedence over ``json``.
``json``
    Same syntax; used when there is no ``doc`` tag, so fields that are
    already annotated for serialization need nothing extra.
``help``
    Free text for the ``Description`` column.

Example::

    @dataclass
    class Page:
        page_id: str = field(metadata={"json": "id,readonly"})
        cursor: Optional[str] = field(
            default=None,
            metadata={"json": "cursor,omitempty", "help": "Opaque cursor."},
        )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .model import RecordField

DOC_TAG = "doc"
SERIALIZATION_TAG = "json"
HELP_TAG = "help"

# A name of "-" means "no override", not "hidden".
SKIP_NAME = "-"

READONLY = "readonly"
OMITEMPTY = "omitempty"
EMBED = "embed"


@dataclass(frozen=True)
class ResolvedTag:
    """Name, flags and description resolved for one field."""

    name: str
    flags: Tuple[str, ...] = ()
    description: str = ""

    @property
    def readonly(self) -> bool:
        return READONLY in self.flags

    @property
    def optional(self) -> bool:
        return OMITEMPTY in self.flags

    @property
    def embed(self) -> bool:
        return EMBED in self.flags


def tag_parts(f: RecordField) -> List[str]:
    """Split the naming tag of *f* into its comma separated parts."""
    tag = f.lookup(DOC_TAG)
    if tag is None:
        tag = f.tag(SERIALIZATION_TAG)
    return tag.split(",")


def resolve(f: RecordField) -> ResolvedTag:
    """Resolve the rendered name, flags and description of *f*.

    The declared name is used verbatim when the tag gives no name or the
    skip sentinel.
    """
    parts = tag_parts(f)
    name = parts[0]
    if not name or name == SKIP_NAME:
        name = f.name
    return ResolvedTag(
        name=name,
        flags=tuple(parts[1:]),
        description=f.tag(HELP_TAG),
    )
