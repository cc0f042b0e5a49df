from __future__ import annotations

from html import escape
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .environment import HtmlSerializer

_BLOCK_TAGS = {
    "heading1": "h1",
    "heading2": "h2",
    "heading3": "h3",
    "heading4": "h4",
    "heading5": "h5",
    "heading6": "h6",
    "paragraph": "p",
    "preformatted": "pre",
}

_LIST_WRAPPERS = {"list-item": ("list", "ul"), "o-list-item": ("o-list", "ol")}


def _attr(value: Any) -> str:
    return escape(str(value), quote=True)


def _custom(serializer: Optional[HtmlSerializer], element_type: str, element: Mapping[str, Any], children: str) -> Optional[str]:
    if serializer is None:
        return None
    if isinstance(serializer, Mapping):
        fn = serializer.get(element_type)
        return fn(element, children) if fn is not None else None
    return serializer(element_type, element, children)


def _span_range(span: Mapping[str, Any], limit: int) -> Optional[Tuple[int, int]]:
    start, end = span.get("start"), span.get("end")
    if not isinstance(start, int) or not isinstance(end, int):
        return None
    start, end = max(0, start), min(limit, end)
    if end <= start:
        return None
    return start, end


def _serialize_span(span: Mapping[str, Any], children: str, serializer: Optional[HtmlSerializer]) -> str:
    span_type = str(span.get("type"))
    custom = _custom(serializer, span_type, span, children)
    if custom is not None:
        return custom

    if span_type == "strong":
        return f"<strong>{children}</strong>"
    if span_type == "em":
        return f"<em>{children}</em>"
    if span_type == "label":
        data = span.get("data") if isinstance(span.get("data"), Mapping) else {}
        return f'<span class="{_attr(data.get("label", ""))}">{children}</span>'
    if span_type == "hyperlink":
        data = span.get("data") if isinstance(span.get("data"), Mapping) else {}
        url = data.get("url")
        if not url:
            return children
        target = data.get("target")
        target_attr = f' target="{_attr(target)}" rel="noopener noreferrer"' if target else ""
        return f'<a href="{_attr(url)}"{target_attr}>{children}</a>'
    return children


def _text(text: str) -> str:
    return escape(text, quote=False).replace("\n", "<br />")


def serialize_spans(
    text: str,
    spans: Sequence[Mapping[str, Any]],
    serializer: Optional[HtmlSerializer] = None,
    *,
    start: int = 0,
    end: Optional[int] = None,
) -> str:
    """Serialize ``text[start:end]`` with its inline spans.

    Spans nested inside an outer span are rendered inside it. A span that
    crosses the outer span's end is clipped to it.
    """

    end = len(text) if end is None else end
    ranged: List[Tuple[int, int, Mapping[str, Any]]] = []
    for span in spans:
        rng = _span_range(span, end)
        if rng is not None and rng[0] >= start:
            ranged.append((rng[0], rng[1], span))
    ranged.sort(key=lambda r: (r[0], -r[1]))

    out: List[str] = []
    cursor = start
    i = 0
    while i < len(ranged):
        s_start, s_end, span = ranged[i]
        if s_start < cursor:
            i += 1
            continue
        inner = []
        j = i + 1
        while j < len(ranged) and ranged[j][0] < s_end:
            c_start, c_end, child = ranged[j]
            inner.append({**child, "start": c_start, "end": min(c_end, s_end)})
            j += 1
        out.append(_text(text[cursor:s_start]))
        children = serialize_spans(text, inner, serializer, start=s_start, end=s_end)
        out.append(_serialize_span(span, children, serializer))
        cursor = s_end
        i = j
    out.append(_text(text[cursor:end]))
    return "".join(out)


def _serialize_image(block: Mapping[str, Any]) -> str:
    img = f'<img src="{_attr(block.get("url", ""))}" alt="{_attr(block.get("alt") or "")}"'
    if block.get("copyright"):
        img += f' copyright="{_attr(block["copyright"])}"'
    img += " />"
    link = block.get("linkTo")
    if isinstance(link, Mapping) and link.get("url"):
        img = f'<a href="{_attr(link["url"])}">{img}</a>'
    return f'<p class="block-img">{img}</p>'


def _serialize_embed(block: Mapping[str, Any]) -> str:
    oembed = block.get("oembed") if isinstance(block.get("oembed"), Mapping) else {}
    attrs = f' data-oembed="{_attr(oembed.get("embed_url", ""))}"'
    attrs += f' data-oembed-type="{_attr(oembed.get("type", ""))}"'
    if oembed.get("provider_name"):
        attrs += f' data-oembed-provider="{_attr(oembed["provider_name"])}"'
    return f"<div{attrs}>{oembed.get('html') or ''}</div>"


def _serialize_block(block: Mapping[str, Any], serializer: Optional[HtmlSerializer]) -> str:
    block_type = str(block.get("type"))
    text = block.get("text") if isinstance(block.get("text"), str) else ""
    spans = block.get("spans") if isinstance(block.get("spans"), list) else []
    children = serialize_spans(text, spans, serializer)

    custom = _custom(serializer, block_type, block, children)
    if custom is not None:
        return custom

    if block_type in _BLOCK_TAGS:
        tag = _BLOCK_TAGS[block_type]
        label = block.get("label")
        cls = f' class="{_attr(label)}"' if label else ""
        return f"<{tag}{cls}>{children}</{tag}>"
    if block_type in _LIST_WRAPPERS:
        return f"<li>{children}</li>"
    if block_type == "image":
        return _serialize_image(block)
    if block_type == "embed":
        return _serialize_embed(block)
    return children


def serialize_html(blocks: Sequence[Mapping[str, Any]], serializer: Optional[HtmlSerializer] = None) -> str:
    """Render rich-text blocks to HTML.

    Consecutive list items are wrapped in one ``<ul>``/``<ol>``. A custom
    serializer returning ``None`` for an element falls back to the default.
    """

    out: List[str] = []
    i = 0
    while i < len(blocks):
        block = blocks[i]
        block_type = block.get("type") if isinstance(block, Mapping) else None
        if block_type in _LIST_WRAPPERS:
            wrapper_type, tag = _LIST_WRAPPERS[block_type]
            items = []
            while i < len(blocks) and isinstance(blocks[i], Mapping) and blocks[i].get("type") == block_type:
                items.append(_serialize_block(blocks[i], serializer))
                i += 1
            children = "".join(items)
            custom = _custom(serializer, wrapper_type, {"type": wrapper_type}, children)
            out.append(custom if custom is not None else f"<{tag}>{children}</{tag}>")
            continue
        if isinstance(block, Mapping):
            out.append(_serialize_block(block, serializer))
        i += 1
    return "".join(out)


def as_text(blocks: Sequence[Mapping[str, Any]], separator: str = " ") -> str:
    """Plain-text rendering: block texts joined by ``separator``."""

    return separator.join(
        b["text"] for b in blocks if isinstance(b, Mapping) and isinstance(b.get("text"), str)
    )
