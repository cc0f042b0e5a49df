from cmsgraph.core.normalization import build_environment, normalize_structured_text, serialize_html
from cmsgraph.core.typepaths import TypePathRegistry

PATH = ("page", "body")


def _env(**overrides):
    return build_environment(TypePathRegistry().lookup, **overrides)


def _p(text, spans=()):
    return {"type": "paragraph", "text": text, "spans": list(spans)}


def test_paragraph_with_strong_span():
    blocks = [_p("Hello world", [{"start": 0, "end": 5, "type": "strong"}])]
    assert serialize_html(blocks) == "<p><strong>Hello</strong> world</p>"


def test_nested_spans_render_inside_outer_span():
    blocks = [_p("abcdef", [{"start": 0, "end": 6, "type": "strong"}, {"start": 2, "end": 4, "type": "em"}])]
    assert serialize_html(blocks) == "<p><strong>ab<em>cd</em>ef</strong></p>"


def test_text_is_escaped_and_newlines_become_breaks():
    blocks = [{"type": "heading2", "text": "<b>&\nnext", "spans": []}]
    assert serialize_html(blocks) == "<h2>&lt;b&gt;&amp;<br />next</h2>"


def test_consecutive_list_items_are_grouped():
    blocks = [
        {"type": "list-item", "text": "a", "spans": []},
        {"type": "list-item", "text": "b", "spans": []},
        _p("c"),
        {"type": "o-list-item", "text": "d", "spans": []},
    ]
    assert serialize_html(blocks) == "<ul><li>a</li><li>b</li></ul><p>c</p><ol><li>d</li></ol>"


def test_image_and_embed_blocks():
    blocks = [
        {"type": "image", "url": "https://img/a.png", "alt": "A", "dimensions": {"width": 1, "height": 1}},
        {
            "type": "embed",
            "oembed": {"embed_url": "https://youtu.be/x", "type": "video", "html": "<iframe></iframe>"},
        },
    ]
    assert serialize_html(blocks) == (
        '<p class="block-img"><img src="https://img/a.png" alt="A" /></p>'
        '<div data-oembed="https://youtu.be/x" data-oembed-type="video"><iframe></iframe></div>'
    )


def test_hyperlinks_are_resolved_before_serialization():
    link = {"link_type": "Document", "id": "d1", "uid": "home", "type": "page"}
    blocks = [_p("Go home", [{"start": 0, "end": 7, "type": "hyperlink", "data": link}])]
    env = _env(link_resolver=lambda l: "/" + l["uid"])

    out = normalize_structured_text(blocks, PATH, env)

    assert out["html"] == '<p><a href="/home">Go home</a></p>'
    assert out["text"] == "Go home"
    assert out["rich_text"][0]["spans"][0]["data"]["url"] == "/home"
    assert out["raw"] == blocks
    assert "url" not in out["raw"][0]["spans"][0]["data"]


def test_web_hyperlink_with_target():
    link = {"link_type": "Web", "url": "https://example.com", "target": "_blank"}
    blocks = [_p("x", [{"start": 0, "end": 1, "type": "hyperlink", "data": link}])]

    out = normalize_structured_text(blocks, PATH, _env())

    assert out["html"] == '<p><a href="https://example.com" target="_blank" rel="noopener noreferrer">x</a></p>'


def test_function_serializer_overrides_and_falls_back():
    def serializer(element_type, element, children):
        if element_type == "heading1":
            return f'<h1 class="title">{children}</h1>'
        return None

    blocks = [{"type": "heading1", "text": "T", "spans": []}, _p("body")]
    out = normalize_structured_text(blocks, PATH, _env(html_serializer=serializer))

    assert out["html"] == '<h1 class="title">T</h1><p>body</p>'


def test_map_serializer():
    serializer = {"paragraph": lambda element, children: f"<div>{children}</div>"}
    out = normalize_structured_text([_p("x")], PATH, _env(html_serializer=serializer))
    assert out["html"] == "<div>x</div>"


def test_failing_serializer_degrades_to_no_html():
    def serializer(element_type, element, children):
        raise RuntimeError("boom")

    out = normalize_structured_text([_p("x")], PATH, _env(html_serializer=serializer))

    assert out["html"] is None
    assert out["text"] == "x"
