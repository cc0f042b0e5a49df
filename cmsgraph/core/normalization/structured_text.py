from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from .environment import NormalizationEnvironment
from .html import as_text, serialize_html
from .links import normalize_link

log = logging.getLogger("cmsgraph.normalization")


def _resolve_span(span: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    if not isinstance(span, Mapping) or span.get("type") != "hyperlink":
        return span
    return {**span, "data": normalize_link(span.get("data"), path, env)}


def _resolve_block(block: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    if not isinstance(block, Mapping):
        return block

    out: Dict[str, Any] = dict(block)
    spans = block.get("spans")
    if isinstance(spans, list):
        out["spans"] = [_resolve_span(s, path, env) for s in spans]
    if isinstance(block.get("linkTo"), Mapping):
        out["linkTo"] = normalize_link(block["linkTo"], path, env)
    return out


def normalize_structured_text(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize a rich-text / title field.

    Output:
    - html: serialized with the configured serializer (or the default one)
    - text: plain text
    - rich_text: blocks with embedded links resolved
    - raw: blocks as received
    """

    if not isinstance(value, list):
        return value

    rich_text = [_resolve_block(b, path, env) for b in value]

    html: Optional[str]
    try:
        html = serialize_html(rich_text, env.html_serializer)
    except Exception as e:
        log.warning("html serializer failed at %s: %s", ".".join(path), e)
        html = None

    return {
        "html": html,
        "text": as_text(rich_text),
        "rich_text": rich_text,
        "raw": list(value),
    }
