from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cmsgraph.core.identity import content_digest


@dataclass(frozen=True)
class NestedNode:
    """A node discovered while walking a document (group entry, slice, embed).

    The id is content-addressed from the node's path and payload, so the
    same entry at the same path keeps its id across builds.
    """

    id: str
    node_type: str
    path: Tuple[str, ...]
    data: Dict[str, Any]
    content_digest: str

    @classmethod
    def create(cls, *, node_id: str, node_type: str, path: Sequence[str], data: Dict[str, Any]) -> "NestedNode":
        data_copy = deepcopy(data)
        return cls(
            id=node_id,
            node_type=node_type,
            path=tuple(path),
            data=data_copy,
            content_digest=content_digest(data_copy),
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": list(self.path),
            "data": deepcopy(self.data),
            "internal": {"type": self.node_type, "content_digest": self.content_digest},
        }


@dataclass
class NodeAccumulator:
    """Collects nested nodes discovered during one normalization walk."""

    nodes: List[NestedNode] = field(default_factory=list)

    def add(self, node: NestedNode) -> str:
        self.nodes.append(node)
        return node.id

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class NormalizedDocument:
    """
    Normalized node for one CMS document.

    Invariants
    - id is derived from the natural key (prismic_id) and never from content
    - content_digest covers the normalized payload and changes with content
    - data_raw keeps the document's data exactly as received
    """

    id: str
    prismic_id: str
    type: str
    node_type: str
    uid: Optional[str]
    lang: Optional[str]
    tags: Tuple[str, ...]
    url: Optional[str]
    href: Optional[str]
    first_publication_date: Optional[str]
    last_publication_date: Optional[str]
    alternate_languages: Tuple[Dict[str, Any], ...]
    data: Dict[str, Any]
    data_raw: Dict[str, Any]
    nested_nodes: Tuple[NestedNode, ...]
    content_digest: str

    @staticmethod
    def compute_content_digest(
        *,
        node_id: str,
        prismic_id: str,
        type: str,
        uid: Optional[str],
        lang: Optional[str],
        tags: Sequence[str],
        url: Optional[str],
        href: Optional[str],
        first_publication_date: Optional[str],
        last_publication_date: Optional[str],
        alternate_languages: Sequence[Dict[str, Any]],
        data: Dict[str, Any],
    ) -> str:
        return content_digest(
            {
                "id": node_id,
                "prismic_id": prismic_id,
                "type": type,
                "uid": uid,
                "lang": lang,
                "tags": list(tags),
                "url": url,
                "href": href,
                "first_publication_date": first_publication_date,
                "last_publication_date": last_publication_date,
                "alternate_languages": list(alternate_languages),
                "data": data,
            }
        )

    @classmethod
    def create(
        cls,
        *,
        node_id: str,
        prismic_id: str,
        type: str,
        node_type: str,
        uid: Optional[str] = None,
        lang: Optional[str] = None,
        tags: Sequence[str] = (),
        url: Optional[str] = None,
        href: Optional[str] = None,
        first_publication_date: Optional[str] = None,
        last_publication_date: Optional[str] = None,
        alternate_languages: Sequence[Dict[str, Any]] = (),
        data: Optional[Dict[str, Any]] = None,
        data_raw: Optional[Dict[str, Any]] = None,
        nested_nodes: Sequence[NestedNode] = (),
    ) -> "NormalizedDocument":
        data_copy = deepcopy(data or {})
        alternates = tuple(deepcopy(list(alternate_languages)))
        tags_copy = tuple(str(t) for t in tags)

        digest = cls.compute_content_digest(
            node_id=node_id,
            prismic_id=prismic_id,
            type=type,
            uid=uid,
            lang=lang,
            tags=tags_copy,
            url=url,
            href=href,
            first_publication_date=first_publication_date,
            last_publication_date=last_publication_date,
            alternate_languages=alternates,
            data=data_copy,
        )

        return cls(
            id=node_id,
            prismic_id=prismic_id,
            type=type,
            node_type=node_type,
            uid=uid,
            lang=lang,
            tags=tags_copy,
            url=url,
            href=href,
            first_publication_date=first_publication_date,
            last_publication_date=last_publication_date,
            alternate_languages=alternates,
            data=data_copy,
            data_raw=deepcopy(data_raw or {}),
            nested_nodes=tuple(nested_nodes),
            content_digest=digest,
        )

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view handed to the host build system."""

        return {
            "id": self.id,
            "prismic_id": self.prismic_id,
            "type": self.type,
            "uid": self.uid,
            "lang": self.lang,
            "tags": list(self.tags),
            "url": self.url,
            "href": self.href,
            "first_publication_date": self.first_publication_date,
            "last_publication_date": self.last_publication_date,
            "alternate_languages": deepcopy(list(self.alternate_languages)),
            "data": deepcopy(self.data),
            "data_raw": deepcopy(self.data_raw),
            "nested_nodes": [n.snapshot() for n in self.nested_nodes],
            "internal": {"type": self.node_type, "content_digest": self.content_digest},
        }
