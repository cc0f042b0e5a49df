from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence, Tuple, Union


class FieldType(str, Enum):
    """Field-type tags declared by CMS models."""

    BOOLEAN = "Boolean"
    COLOR = "Color"
    DATE = "Date"
    EMBED = "Embed"
    GEO_POINT = "GeoPoint"
    GROUP = "Group"
    IMAGE = "Image"
    INTEGRATION_FIELDS = "IntegrationFields"
    LINK = "Link"
    NUMBER = "Number"
    SELECT = "Select"
    SLICES = "Slices"
    SLICE = "Slice"
    SHARED_SLICE = "SharedSlice"
    SHARED_SLICE_VARIATION = "SharedSliceVariation"
    STRUCTURED_TEXT = "StructuredText"
    TEXT = "Text"
    TIMESTAMP = "Timestamp"
    UID = "UID"
    DOCUMENT = "Document"


def coerce_field_type(tag: Any) -> Union[FieldType, str]:
    """Map a model tag to a FieldType, keeping unknown tags as raw strings."""

    if isinstance(tag, FieldType):
        return tag
    try:
        return FieldType(str(tag))
    except ValueError:
        return str(tag)


@dataclass(frozen=True)
class TypePath:
    """Declared field type for one structural path.

    Identity is the exact path tuple; there is no wildcard matching.
    """

    path: Tuple[str, ...]
    type: Union[FieldType, str]

    @classmethod
    def create(cls, path: Sequence[str], type: Any) -> "TypePath":
        return cls(path=tuple(str(p) for p in path), type=coerce_field_type(type))

    def to_payload(self) -> Dict[str, Any]:
        tag = self.type.value if isinstance(self.type, FieldType) else self.type
        return {"path": list(self.path), "type": tag}
