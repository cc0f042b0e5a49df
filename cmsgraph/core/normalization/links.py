from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from .environment import LinkResolver, NormalizationEnvironment

log = logging.getLogger("cmsgraph.normalization")

DOCUMENT_LINK_TYPE = "Document"


def resolve_url(link: Mapping[str, Any], link_resolver: Optional[LinkResolver]) -> Optional[str]:
    """Resolve a document-like mapping to a URL.

    A configured resolver wins; otherwise the URL the CMS already computed
    is used. Resolver failures degrade to ``None``.
    """

    if link_resolver is not None:
        try:
            resolved = link_resolver(link)
        except Exception as e:
            log.warning("link resolver failed for %r: %s", link.get("id"), e)
            return None
        return resolved or None

    url = link.get("url")
    return url if isinstance(url, str) and url else None


def _document_reference(link: Mapping[str, Any], env: NormalizationEnvironment) -> Optional[str]:
    target_id = link.get("id")
    if not isinstance(target_id, str) or not target_id or link.get("isBroken"):
        return None

    node = env.get_node(target_id)
    if node is not None:
        return node.id
    # Not registered yet; ids are derived from the natural key, so the
    # reference is valid once the target is registered.
    return env.node_id(target_id)


def normalize_link(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize a link field.

    Output keeps every key of the CMS link and adds:
    - url: resolved URL, or None when nothing resolves
    - document: node id of the linked document (document links only)
    - raw: the link as received
    """

    if not isinstance(value, Mapping):
        return value

    out: Dict[str, Any] = dict(value)
    if value.get("link_type") == DOCUMENT_LINK_TYPE:
        out["url"] = None if value.get("isBroken") else resolve_url(value, env.link_resolver)
        out["document"] = _document_reference(value, env)
    else:
        url = value.get("url")
        out["url"] = url if isinstance(url, str) and url else None

    if out["url"] is None:
        log.debug("unresolved link at %s", ".".join(path))

    out["raw"] = dict(value)
    return out
