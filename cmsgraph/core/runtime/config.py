from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cmsgraph.constants import DEFAULT_IMGIX_PARAMS, DEFAULT_PLACEHOLDER_IMGIX_PARAMS
from cmsgraph.core.normalization import Precedence
from cmsgraph.core.typepaths import default_transform_field_name
from cmsgraph.errors import ConfigurationError


class RuntimeConfig(BaseModel):
    """Configuration fixed for the lifetime of one Runtime."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid", frozen=True)

    type_prefix: Optional[str] = None
    repository_name: Optional[str] = None
    link_resolver: Optional[Callable[..., Optional[str]]] = None
    html_serializer: Optional[Any] = None
    image_imgix_params: Dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_IMGIX_PARAMS))
    image_placeholder_imgix_params: Dict[str, Any] = Field(
        default_factory=lambda: dict(DEFAULT_PLACEHOLDER_IMGIX_PARAMS)
    )
    transform_field_name: Callable[[str], str] = default_transform_field_name
    precedence: Precedence = Precedence.SHAPE

    @field_validator("html_serializer")
    @classmethod
    def _check_html_serializer(cls, value: Any) -> Any:
        if value is None or callable(value):
            return value
        if isinstance(value, Mapping) and all(callable(fn) for fn in value.values()):
            return value
        raise ValueError("html_serializer must be a callable or a mapping of element type to callable")


def load_runtime_config(path: Union[str, Path], **overrides: Any) -> RuntimeConfig:
    """Load the data-only part of a RuntimeConfig from a JSON file.

    Callables (link resolver, serializer, field-name transform) cannot come
    from a file; pass them as ``overrides``.

    Raises
    - ConfigurationError: unreadable file, invalid JSON or invalid values.
    """

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot read config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"config {path} must contain a JSON object")

    try:
        return RuntimeConfig.model_validate({**raw, **overrides})
    except ValidationError as e:
        raise ConfigurationError(f"invalid config {path}: {e}") from e
