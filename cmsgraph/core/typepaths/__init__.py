"""Type-path registry: declared field types keyed by structural path."""

from .builders import (
    TransformFieldName,
    custom_type_model_to_type_paths,
    default_transform_field_name,
    shared_slice_model_to_type_paths,
)
from .models import FieldType, TypePath, coerce_field_type
from .registry import TypePathRegistry

__all__ = [
    "FieldType",
    "TypePath",
    "coerce_field_type",
    "TypePathRegistry",
    "TransformFieldName",
    "default_transform_field_name",
    "custom_type_model_to_type_paths",
    "shared_slice_model_to_type_paths",
]
