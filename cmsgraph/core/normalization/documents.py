from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from .environment import NormalizationEnvironment
from .links import DOCUMENT_LINK_TYPE, normalize_link, resolve_url
from .nodes import NestedNode, NodeAccumulator, NormalizedDocument
from .normalizer import normalize_fields


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def is_document(value: Any) -> bool:
    """True if ``value`` carries the keys needed to identify a document."""

    return (
        isinstance(value, Mapping)
        and isinstance(value.get("id"), str)
        and bool(value.get("id"))
        and isinstance(value.get("type"), str)
        and bool(value.get("type"))
    )


def normalize_document(document: Mapping[str, Any], env: NormalizationEnvironment) -> NormalizedDocument:
    """Normalize a CMS document into its node.

    The path root is the document type. Nested nodes discovered while
    walking ``data`` are collected on the returned node and also handed to
    ``env.accumulate`` when one is configured.

    Callers must check :func:`is_document` first; identity keys are read
    without fallbacks.
    """

    prismic_id = str(document["id"])
    doc_type = str(document["type"])
    path = (doc_type,)

    collected = NodeAccumulator()
    outer = env.accumulate

    def accumulate(node: NestedNode) -> str:
        collected.add(node)
        if outer is not None:
            outer(node)
        return node.id

    doc_env = replace(env, accumulate=accumulate)

    raw_data = document.get("data")
    data: Dict[str, Any] = normalize_fields(raw_data, path, doc_env) if isinstance(raw_data, Mapping) else {}

    alternates: List[Dict[str, Any]] = []
    raw_alternates = document.get("alternate_languages")
    if isinstance(raw_alternates, list):
        for alt in raw_alternates:
            if isinstance(alt, Mapping):
                alternates.append(
                    normalize_link({**alt, "link_type": DOCUMENT_LINK_TYPE}, path + ("alternate_languages",), doc_env)
                )

    tags = document.get("tags")

    return NormalizedDocument.create(
        node_id=env.node_id(prismic_id),
        prismic_id=prismic_id,
        type=doc_type,
        node_type=env.node_type(doc_type),
        uid=_opt_str(document.get("uid")),
        lang=_opt_str(document.get("lang")),
        tags=[t for t in tags if isinstance(t, str)] if isinstance(tags, list) else [],
        url=resolve_url(document, env.link_resolver),
        href=_opt_str(document.get("href")),
        first_publication_date=_opt_str(document.get("first_publication_date")),
        last_publication_date=_opt_str(document.get("last_publication_date")),
        alternate_languages=alternates,
        data=data,
        data_raw=dict(raw_data) if isinstance(raw_data, Mapping) else {},
        nested_nodes=collected.nodes,
    )
