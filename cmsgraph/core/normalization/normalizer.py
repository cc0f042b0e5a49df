from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from cmsgraph.core.identity import content_digest

from .environment import NormalizationEnvironment
from .images import normalize_image
from .links import normalize_link
from .nodes import NestedNode
from .shapes import Strategy, classify_shape, select_strategy
from .structured_text import normalize_structured_text

log = logging.getLogger("cmsgraph.normalization")


def normalize(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize one CMS value found at ``path``.

    The runtime shape selects the strategy where it is distinctive; the
    registry is consulted for ambiguous values (scalars, empty lists, plain
    objects). Nothing raises: unknown or malformed values come back as-is.
    """

    path = tuple(path)
    shape = classify_shape(value)
    type_path = env.get_type_path(path)
    strategy = select_strategy(shape, type_path, env.precedence)

    if type_path is None and strategy is Strategy.PASS_THROUGH:
        log.debug("no type path for %s; passing value through", ".".join(path))

    if strategy is Strategy.LINK:
        return normalize_link(value, path, env)
    if strategy is Strategy.IMAGE:
        return normalize_image(value, path, env)
    if strategy is Strategy.STRUCTURED_TEXT:
        return normalize_structured_text(value, path, env)
    if strategy is Strategy.GROUP:
        return normalize_group(value, path, env)
    if strategy is Strategy.SLICES:
        return normalize_slices(value, path, env)
    if strategy is Strategy.EMBED:
        return normalize_embed(value, path, env)
    if strategy is Strategy.GEO_POINT:
        return normalize_geo_point(value)
    if strategy is Strategy.OBJECT:
        return normalize_fields(value, path, env)
    if strategy is Strategy.LIST:
        # Elements share the field's path: the schema is per field.
        return [normalize(v, path, env) for v in value]
    if strategy is Strategy.OPAQUE:
        return deepcopy(value)
    return value


def normalize_fields(fields: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize a mapping field by field, extending the path per field."""

    if not isinstance(fields, Mapping):
        return fields

    out: Dict[str, Any] = {}
    for raw_name, value in fields.items():
        name = env.transform_field_name(str(raw_name))
        if name in out:
            log.debug("field %r at %s overwrites an earlier field named %r", raw_name, ".".join(path), name)
        out[name] = normalize(value, tuple(path) + (name,), env)
    return out


def _record(
    data: Dict[str, Any],
    node_path: Tuple[str, ...],
    type_parts: Sequence[str],
    env: NormalizationEnvironment,
) -> str:
    node = NestedNode.create(
        node_id=env.node_id(*node_path, content_digest(data)),
        node_type=env.node_type(*type_parts),
        path=node_path,
        data=data,
    )
    return env.record(node)


def normalize_group(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize a repeatable group: one nested node per entry."""

    if not isinstance(value, list):
        return value

    path = tuple(path)
    out: List[Any] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            out.append(entry)
            continue
        normalized = normalize_fields(entry, path, env)
        _record(normalized, path, path + ("group_type",), env)
        out.append(normalized)
    return out


def _slice_root(value: Mapping[str, Any], path: Tuple[str, ...]) -> Tuple[str, ...]:
    slice_type = str(value.get("slice_type"))
    variation = value.get("variation")
    if isinstance(variation, str) and variation:
        # Shared slice models are registered under their own id.
        return (slice_type, variation)
    return path + (slice_type,)


def normalize_slice(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize one slice of a slice zone and record it as a nested node."""

    if not isinstance(value, Mapping) or not isinstance(value.get("slice_type"), str):
        return value

    path = tuple(path)
    root = _slice_root(value, path)

    out: Dict[str, Any] = {}
    for key, field_value in value.items():
        if key == "primary":
            out[key] = normalize_fields(field_value, root + ("primary",), env)
        elif key == "items" and isinstance(field_value, list):
            out[key] = [normalize_fields(item, root + ("items",), env) for item in field_value]
        else:
            out[key] = deepcopy(field_value)

    out["node_id"] = _record(out, path + (str(value["slice_type"]),), root + ("slice_type",), env)
    return out


def normalize_slices(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    if not isinstance(value, list):
        return value
    return [normalize_slice(v, path, env) for v in value]


def normalize_embed(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize an oEmbed field; the payload itself is kept untouched."""

    if not isinstance(value, Mapping):
        return value

    path = tuple(path)
    out: Dict[str, Any] = deepcopy(dict(value))
    if not out.get("embed_url"):
        return out
    out["node_id"] = _record(dict(out), path, path + ("embed_type",), env)
    return out


def normalize_geo_point(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value

    out: Dict[str, Any] = {}
    for key in ("latitude", "longitude"):
        coord = value.get(key)
        out[key] = float(coord) if isinstance(coord, (int, float)) and not isinstance(coord, bool) else coord
    return out
