"""Normalization engine for CMS documents.

Normalization maps weakly-typed CMS values into node-shaped output. The
runtime shape of a value picks the strategy where it is distinctive; the
type-path registry disambiguates the rest.

Failure policy:
- Never raise for unknown or malformed values.
- Degrade to the raw value and log at DEBUG.
"""

from .documents import is_document, normalize_document
from .environment import (
    HtmlSerializer,
    LinkResolver,
    NormalizationEnvironment,
    Precedence,
    build_environment,
)
from .html import as_text, serialize_html
from .images import build_fluid, build_imgix_url, normalize_image
from .links import normalize_link, resolve_url
from .nodes import NestedNode, NodeAccumulator, NormalizedDocument
from .normalizer import normalize, normalize_fields, normalize_group, normalize_slice, normalize_slices
from .shapes import FieldShape, Strategy, classify_shape, select_strategy
from .structured_text import normalize_structured_text

__all__ = [
    "NormalizationEnvironment",
    "build_environment",
    "Precedence",
    "LinkResolver",
    "HtmlSerializer",
    "FieldShape",
    "Strategy",
    "classify_shape",
    "select_strategy",
    "normalize",
    "normalize_fields",
    "normalize_group",
    "normalize_slice",
    "normalize_slices",
    "normalize_link",
    "resolve_url",
    "normalize_image",
    "build_imgix_url",
    "build_fluid",
    "normalize_structured_text",
    "serialize_html",
    "as_text",
    "normalize_document",
    "is_document",
    "NestedNode",
    "NodeAccumulator",
    "NormalizedDocument",
]
