from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Union

from cmsgraph.core.typepaths import FieldType, TypePath

from .environment import Precedence

RICH_TEXT_BLOCK_TYPES = frozenset(
    {
        "heading1",
        "heading2",
        "heading3",
        "heading4",
        "heading5",
        "heading6",
        "paragraph",
        "preformatted",
        "list-item",
        "o-list-item",
        "image",
        "embed",
    }
)


class FieldShape(str, Enum):
    """Runtime shape of a CMS value, recognized without any schema."""

    LINK = "link"
    IMAGE = "image"
    EMBED = "embed"
    GEO_POINT = "geo_point"
    STRUCTURED_TEXT = "structured_text"
    SLICES = "slices"
    GROUP = "group"
    OBJECT = "object"
    LIST = "list"
    AMBIGUOUS = "ambiguous"


class Strategy(str, Enum):
    """Normalization strategy selected for one value."""

    LINK = "link"
    IMAGE = "image"
    EMBED = "embed"
    GEO_POINT = "geo_point"
    STRUCTURED_TEXT = "structured_text"
    SLICES = "slices"
    GROUP = "group"
    OBJECT = "object"
    LIST = "list"
    OPAQUE = "opaque"
    SCALAR = "scalar"
    PASS_THROUGH = "pass_through"


# Shapes that identify a field kind on their own.
_DISTINCT_SHAPES = {
    FieldShape.LINK: Strategy.LINK,
    FieldShape.IMAGE: Strategy.IMAGE,
    FieldShape.EMBED: Strategy.EMBED,
    FieldShape.GEO_POINT: Strategy.GEO_POINT,
    FieldShape.STRUCTURED_TEXT: Strategy.STRUCTURED_TEXT,
    FieldShape.SLICES: Strategy.SLICES,
}

# Used only when a type path exists but declares no strategy.
_FALLBACK_SHAPES = {
    FieldShape.GROUP: Strategy.GROUP,
    FieldShape.OBJECT: Strategy.OBJECT,
    FieldShape.LIST: Strategy.LIST,
    FieldShape.AMBIGUOUS: Strategy.PASS_THROUGH,
}

_DECLARED = {
    FieldType.LINK: Strategy.LINK,
    FieldType.IMAGE: Strategy.IMAGE,
    FieldType.EMBED: Strategy.EMBED,
    FieldType.GEO_POINT: Strategy.GEO_POINT,
    FieldType.STRUCTURED_TEXT: Strategy.STRUCTURED_TEXT,
    FieldType.SLICES: Strategy.SLICES,
    FieldType.GROUP: Strategy.GROUP,
    FieldType.INTEGRATION_FIELDS: Strategy.OPAQUE,
    FieldType.BOOLEAN: Strategy.SCALAR,
    FieldType.COLOR: Strategy.SCALAR,
    FieldType.DATE: Strategy.SCALAR,
    FieldType.NUMBER: Strategy.SCALAR,
    FieldType.SELECT: Strategy.SCALAR,
    FieldType.TEXT: Strategy.SCALAR,
    FieldType.TIMESTAMP: Strategy.SCALAR,
    FieldType.UID: Strategy.SCALAR,
}


def _is_rich_text_block(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    block_type = value.get("type")
    if block_type not in RICH_TEXT_BLOCK_TYPES:
        return False
    return "text" in value or block_type in {"image", "embed"}


def classify_shape(value: Any) -> FieldShape:
    """Recognize the CMS field kind from a value's runtime shape alone."""

    if isinstance(value, Mapping):
        if "link_type" in value:
            return FieldShape.LINK
        if "embed_url" in value:
            return FieldShape.EMBED
        if "url" in value and isinstance(value.get("dimensions"), Mapping):
            return FieldShape.IMAGE
        if set(value.keys()) == {"latitude", "longitude"}:
            return FieldShape.GEO_POINT
        return FieldShape.OBJECT

    if isinstance(value, list):
        if not value:
            return FieldShape.AMBIGUOUS
        if all(_is_rich_text_block(v) for v in value):
            return FieldShape.STRUCTURED_TEXT
        if all(isinstance(v, Mapping) and "slice_type" in v for v in value):
            return FieldShape.SLICES
        if all(isinstance(v, Mapping) for v in value):
            return FieldShape.GROUP
        return FieldShape.LIST

    return FieldShape.AMBIGUOUS


def declared_strategy(type_path: Optional[TypePath]) -> Optional[Strategy]:
    if type_path is None:
        return None
    tag: Union[FieldType, str] = type_path.type
    if not isinstance(tag, FieldType):
        return None
    return _DECLARED.get(tag)


def select_strategy(shape: FieldShape, type_path: Optional[TypePath], precedence: Precedence) -> Strategy:
    """Pick a strategy from the runtime shape, falling back to the declared type.

    Fields declared as opaque JSON are never walked. Otherwise a distinct
    shape wins under ``Precedence.SHAPE`` and a declared type wins under
    ``Precedence.SCHEMA``. Other shapes, lists of plain mappings included,
    defer to the declaration and pass through unchanged on a lookup miss.
    """

    declared = declared_strategy(type_path)
    if declared is Strategy.OPAQUE:
        return declared

    if shape in _DISTINCT_SHAPES:
        if precedence is Precedence.SCHEMA and declared is not None:
            return declared
        return _DISTINCT_SHAPES[shape]

    if declared is not None:
        return declared
    if type_path is None:
        return Strategy.PASS_THROUGH
    return _FALLBACK_SHAPES[shape]
