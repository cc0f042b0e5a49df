import logging

import pytest

from cmsgraph.core.normalization import (
    FieldShape,
    Precedence,
    Strategy,
    build_environment,
    classify_shape,
    normalize,
    select_strategy,
)
from cmsgraph.core.typepaths import TypePath, TypePathRegistry


def _env(*type_paths, **overrides):
    registry = TypePathRegistry()
    registry.register(type_paths)
    return build_environment(registry.lookup, **overrides)


@pytest.mark.parametrize(
    "value,shape",
    [
        ({"link_type": "Web", "url": "https://example.com"}, FieldShape.LINK),
        ({"url": "https://img", "dimensions": {"width": 1, "height": 1}}, FieldShape.IMAGE),
        ({"embed_url": "https://youtu.be/x", "type": "video"}, FieldShape.EMBED),
        ({"latitude": 1.5, "longitude": 2.5}, FieldShape.GEO_POINT),
        ([{"type": "paragraph", "text": "hi", "spans": []}], FieldShape.STRUCTURED_TEXT),
        ([{"slice_type": "quote", "primary": {}, "items": []}], FieldShape.SLICES),
        ([{"title": "a"}, {"title": "b"}], FieldShape.GROUP),
        ({"anything": 1}, FieldShape.OBJECT),
        ([1, "two"], FieldShape.LIST),
        ([], FieldShape.AMBIGUOUS),
        ("A", FieldShape.AMBIGUOUS),
        (None, FieldShape.AMBIGUOUS),
        (3.5, FieldShape.AMBIGUOUS),
    ],
)
def test_classify_shape(value, shape):
    assert classify_shape(value) is shape


def test_select_strategy_precedence():
    text = TypePath.create(["page", "f"], "Text")
    opaque = TypePath.create(["page", "f"], "IntegrationFields")

    assert select_strategy(FieldShape.LINK, text, Precedence.SHAPE) is Strategy.LINK
    assert select_strategy(FieldShape.LINK, text, Precedence.SCHEMA) is Strategy.SCALAR
    assert select_strategy(FieldShape.LINK, opaque, Precedence.SHAPE) is Strategy.OPAQUE
    assert select_strategy(FieldShape.AMBIGUOUS, None, Precedence.SHAPE) is Strategy.PASS_THROUGH
    assert select_strategy(FieldShape.OBJECT, None, Precedence.SHAPE) is Strategy.PASS_THROUGH
    assert select_strategy(FieldShape.GROUP, None, Precedence.SHAPE) is Strategy.PASS_THROUGH

    slices = TypePath.create(["page", "body"], "Slices")
    assert select_strategy(FieldShape.GROUP, slices, Precedence.SHAPE) is Strategy.SLICES


@pytest.mark.parametrize("value", ["A", 42, 1.5, True, None, [], "2024-01-01"])
def test_lookup_miss_returns_raw_value(value):
    env = _env()
    assert normalize(value, ["page", "unknown"], env) == value


def test_select_field_normalizes_to_plain_string():
    env = _env(TypePath.create(["page", "my_field"], "Select"))
    assert normalize("A", ["page", "my_field"], env) == "A"


def test_declared_integration_fields_are_opaque():
    value = {"link_type": "not-a-link", "nested": {"some-key": [1, 2]}}
    env = _env(TypePath.create(["page", "shop"], "IntegrationFields"))

    out = normalize(value, ["page", "shop"], env)

    assert out == value
    assert out is not value


def test_schema_precedence_overrides_recognized_shape():
    value = {"link_type": "Web", "url": "https://example.com"}
    tp = TypePath.create(["page", "f"], "Text")

    by_shape = normalize(value, ["page", "f"], _env(tp))
    by_schema = normalize(value, ["page", "f"], _env(tp, precedence=Precedence.SCHEMA))

    assert by_shape["raw"] == value
    assert by_schema == value


def test_empty_list_uses_declared_type():
    env = _env(
        TypePath.create(["page", "body"], "StructuredText"),
        TypePath.create(["page", "cards"], "Group"),
    )

    assert normalize([], ["page", "body"], env) == {"html": "", "text": "", "rich_text": [], "raw": []}
    assert normalize([], ["page", "cards"], env) == []


def test_undeclared_objects_and_lists_pass_through_unchanged():
    env = _env()
    obj = {"og-title": "x", "nested": {"some-key": 1}}
    group = [{"card-title": "One"}]

    assert normalize(obj, ["page", "meta"], env) == obj
    assert normalize(group, ["page", "cards"], env) == group


def test_objects_with_unmapped_declared_tag_recurse_with_transformed_keys():
    env = _env(
        TypePath.create(["page", "meta"], "SeoBlock"),
        TypePath.create(["page", "meta", "og_image"], "Image"),
    )
    value = {"og-image": {}, "plain-value": "x"}

    out = normalize(value, ["page", "meta"], env)

    assert out["plain_value"] == "x"
    assert out["og_image"]["url"] is None


def test_mixed_lists_normalize_elementwise():
    env = _env(TypePath.create(["page", "mixed"], "SeoList"))
    value = ["a", {"link_type": "Web", "url": "https://example.com"}]

    out = normalize(value, ["page", "mixed"], env)

    assert out[0] == "a"
    assert out[1]["url"] == "https://example.com"


def test_geo_point_coordinates_are_floats():
    env = _env()
    assert normalize({"latitude": 1, "longitude": 2}, ["page", "where"], env) == {
        "latitude": 1.0,
        "longitude": 2.0,
    }


def test_malformed_values_never_raise():
    env = _env(
        TypePath.create(["page", "img"], "Image"),
        TypePath.create(["page", "link"], "Link"),
        TypePath.create(["page", "text"], "StructuredText"),
        TypePath.create(["page", "group"], "Group"),
        TypePath.create(["page", "slices"], "Slices"),
    )

    assert normalize("nope", ["page", "img"], env) == "nope"
    assert normalize(7, ["page", "link"], env) == 7
    assert normalize({"x": 1}, ["page", "text"], env) == {"x": 1}
    assert normalize("nope", ["page", "group"], env) == "nope"
    assert normalize([{"no_slice_type": 1}], ["page", "slices"], env) == [{"no_slice_type": 1}]


def test_colliding_field_names_are_logged(caplog):
    env = _env(TypePath.create(["page", "meta"], "SeoBlock"))

    with caplog.at_level(logging.DEBUG, logger="cmsgraph.normalization"):
        out = normalize({"a-b": 1, "a_b": 2}, ["page", "meta"], env)

    assert out == {"a_b": 2}
    assert "overwrites an earlier field named 'a_b'" in caplog.text
