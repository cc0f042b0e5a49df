import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from cmsgraph.constants import DEFAULT_IMGIX_PARAMS, DEFAULT_PLACEHOLDER_IMGIX_PARAMS
from cmsgraph.core.normalization import Precedence
from cmsgraph.core.runtime import RuntimeConfig, load_runtime_config
from cmsgraph.errors import ConfigurationError


def test_defaults():
    config = RuntimeConfig()

    assert config.image_imgix_params == DEFAULT_IMGIX_PARAMS
    assert config.image_placeholder_imgix_params == DEFAULT_PLACEHOLDER_IMGIX_PARAMS
    assert config.transform_field_name("my-field-name") == "my_field_name"
    assert config.precedence is Precedence.SHAPE
    assert config.link_resolver is None


def test_load_runtime_config_from_json(tmp_path: Path):
    p = tmp_path / "config.json"
    p.write_text(
        json.dumps({"type_prefix": "Blog", "precedence": "schema", "image_imgix_params": {"fm": "webp"}}),
        encoding="utf-8",
    )

    config = load_runtime_config(p, link_resolver=lambda link: "/x")

    assert config.type_prefix == "Blog"
    assert config.precedence is Precedence.SCHEMA
    assert config.image_imgix_params == {"fm": "webp"}
    assert config.link_resolver({}) == "/x"


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2]", json.dumps({"unknown_key": 1}), json.dumps({"precedence": "sideways"})],
)
def test_invalid_config_files_raise(tmp_path: Path, content: str):
    p = tmp_path / "config.json"
    p.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_runtime_config(p)


def test_missing_config_file_raises(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        load_runtime_config(tmp_path / "nope.json")


def test_html_serializer_must_be_callable_or_mapping():
    RuntimeConfig(html_serializer={"paragraph": lambda element, children: children})
    with pytest.raises(ValidationError):
        RuntimeConfig(html_serializer="not callable")
