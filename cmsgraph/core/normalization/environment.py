from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from cmsgraph.constants import DEFAULT_IMGIX_PARAMS, DEFAULT_PLACEHOLDER_IMGIX_PARAMS, GLOBAL_TYPE_PREFIX
from cmsgraph.core.identity import create_node_id
from cmsgraph.core.typepaths import TransformFieldName, TypePath, default_transform_field_name
from cmsgraph.utils.naming import pascal_case

from .nodes import NestedNode

LinkResolver = Callable[[Mapping[str, Any]], Optional[str]]
HtmlFunctionSerializer = Callable[[str, Mapping[str, Any], str], Optional[str]]
HtmlMapSerializer = Mapping[str, Callable[[Mapping[str, Any], str], Optional[str]]]
HtmlSerializer = Union[HtmlFunctionSerializer, HtmlMapSerializer]


class Precedence(str, Enum):
    """Which tag wins when a recognized shape and a declared type disagree."""

    SHAPE = "shape"
    SCHEMA = "schema"


@dataclass(frozen=True)
class NormalizationEnvironment:
    """Everything the normalization walk may read.

    The engine never mutates runtime state; nested nodes are handed to
    ``accumulate`` and everything else is read-only.
    """

    get_type_path: Callable[[Sequence[str]], Optional[TypePath]]
    get_node: Callable[[str], Optional[Any]] = lambda _id: None
    accumulate: Optional[Callable[[NestedNode], str]] = None
    transform_field_name: TransformFieldName = default_transform_field_name
    link_resolver: Optional[LinkResolver] = None
    html_serializer: Optional[HtmlSerializer] = None
    image_params: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_IMGIX_PARAMS))
    placeholder_image_params: Mapping[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_PLACEHOLDER_IMGIX_PARAMS)
    )
    type_prefix: str = GLOBAL_TYPE_PREFIX
    precedence: Precedence = Precedence.SHAPE

    def node_id(self, *parts: str) -> str:
        return create_node_id(self.type_prefix, *parts)

    def node_type(self, *parts: str) -> str:
        return pascal_case(self.type_prefix, *parts)

    def record(self, node: NestedNode) -> str:
        if self.accumulate is None:
            return node.id
        return self.accumulate(node)


def build_environment(
    get_type_path: Callable[[Sequence[str]], Optional[TypePath]],
    **overrides: Any,
) -> NormalizationEnvironment:
    """Build an environment, dropping ``None`` overrides so defaults apply."""

    kwargs: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    return NormalizationEnvironment(get_type_path=get_type_path, **kwargs)
