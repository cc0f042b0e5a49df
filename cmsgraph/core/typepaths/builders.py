from __future__ import annotations

from typing import Any, Callable, List, Mapping, Sequence, Tuple

from cmsgraph.errors import SchemaModelError

from .models import FieldType, TypePath, coerce_field_type

TransformFieldName = Callable[[str], str]


def default_transform_field_name(field_name: str) -> str:
    """Replace dashes so field names are valid identifiers downstream."""
    return field_name.replace("-", "_")


def _require_model(model: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(model, Mapping):
        raise SchemaModelError(f"{kind} model must be a mapping")
    model_id = model.get("id")
    if not isinstance(model_id, str) or not model_id:
        raise SchemaModelError(f"{kind} model is missing a string id")
    return model


def _field_model_type(field_model: Any) -> Any:
    if isinstance(field_model, Mapping):
        return field_model.get("type")
    return None


def _field_config(field_model: Any) -> Mapping[str, Any]:
    if isinstance(field_model, Mapping):
        config = field_model.get("config")
        if isinstance(config, Mapping):
            return config
    return {}


def _fields_to_type_paths(
    fields: Any,
    path: Tuple[str, ...],
    transform_field_name: TransformFieldName,
) -> List[TypePath]:
    if not isinstance(fields, Mapping):
        return []

    out: List[TypePath] = []
    for raw_name, field_model in fields.items():
        out.extend(
            _field_to_type_paths(
                field_model,
                path + (transform_field_name(str(raw_name)),),
                transform_field_name,
            )
        )
    return out


def _slice_choice_to_type_paths(
    choice_model: Any,
    path: Tuple[str, ...],
    transform_field_name: TransformFieldName,
) -> List[TypePath]:
    tag = coerce_field_type(_field_model_type(choice_model))
    out = [TypePath.create(path, tag)]
    if tag == FieldType.SLICE and isinstance(choice_model, Mapping):
        out.extend(_fields_to_type_paths(choice_model.get("non-repeat"), path + ("primary",), transform_field_name))
        out.extend(_fields_to_type_paths(choice_model.get("repeat"), path + ("items",), transform_field_name))
    # Shared slices are described by their own models, rooted at the slice id.
    return out


def _field_to_type_paths(
    field_model: Any,
    path: Tuple[str, ...],
    transform_field_name: TransformFieldName,
) -> List[TypePath]:
    tag = coerce_field_type(_field_model_type(field_model))
    out = [TypePath.create(path, tag)]

    if tag == FieldType.GROUP:
        out.extend(_fields_to_type_paths(_field_config(field_model).get("fields"), path, transform_field_name))
    elif tag == FieldType.SLICES:
        choices = _field_config(field_model).get("choices")
        if isinstance(choices, Mapping):
            for choice_id, choice_model in choices.items():
                out.extend(_slice_choice_to_type_paths(choice_model, path + (str(choice_id),), transform_field_name))

    return out


def custom_type_model_to_type_paths(
    model: Mapping[str, Any],
    transform_field_name: TransformFieldName = default_transform_field_name,
) -> List[TypePath]:
    """Build the type paths declared by a custom-type model.

    Tabs are flattened: a field's path is ``(type_id, field_name)`` whatever
    tab declares it. Group sub-fields extend the group's path; legacy slice
    fields live under ``primary`` and ``items`` of their choice id.
    """

    model = _require_model(model, "custom type")
    type_id = str(model["id"])
    out: List[TypePath] = [TypePath.create((type_id,), FieldType.DOCUMENT)]

    tabs = model.get("json")
    if isinstance(tabs, Mapping):
        for tab in tabs.values():
            out.extend(_fields_to_type_paths(tab, (type_id,), transform_field_name))

    return out


def shared_slice_model_to_type_paths(
    model: Mapping[str, Any],
    transform_field_name: TransformFieldName = default_transform_field_name,
) -> List[TypePath]:
    """Build the type paths declared by a shared-slice model.

    Paths are rooted at the slice id since a shared slice may appear in any
    custom type's slice zone.
    """

    model = _require_model(model, "shared slice")
    slice_id = str(model["id"])
    out: List[TypePath] = [TypePath.create((slice_id,), FieldType.SHARED_SLICE)]

    variations = model.get("variations")
    if not isinstance(variations, Sequence) or isinstance(variations, (str, bytes)):
        return out

    for variation in variations:
        if not isinstance(variation, Mapping) or not isinstance(variation.get("id"), str):
            continue
        root = (slice_id, variation["id"])
        out.append(TypePath.create(root, FieldType.SHARED_SLICE_VARIATION))
        out.extend(_fields_to_type_paths(variation.get("primary"), root + ("primary",), transform_field_name))
        out.extend(_fields_to_type_paths(variation.get("items"), root + ("items",), transform_field_name))

    return out
