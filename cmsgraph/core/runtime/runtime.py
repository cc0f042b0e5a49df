from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from cmsgraph.constants import GLOBAL_TYPE_PREFIX
from cmsgraph.core.normalization import (
    NestedNode,
    NormalizationEnvironment,
    NormalizedDocument,
    is_document,
    normalize,
    normalize_document,
)
from cmsgraph.core.typepaths import (
    TypePath,
    TypePathRegistry,
    custom_type_model_to_type_paths,
    shared_slice_model_to_type_paths,
)
from cmsgraph.errors import DocumentShapeError
from cmsgraph.reporting import report_info, report_verbose

from .config import RuntimeConfig

log = logging.getLogger("cmsgraph.runtime")

SubscriberFn = Callable[[], None]


@dataclass
class Runtime:
    """
    Mutable accumulator for one build session.

    Responsibilities
    - Register schema models as type paths
    - Normalize and register documents as nodes
    - Notify subscribers after every mutation

    Invariants
    - nodes, type paths and subscribers are append-only (except unsubscribe)
    - subscribers run synchronously, in subscription order, after the
      mutation has been fully applied
    - no locking: callers embedding a Runtime in threads must serialize access
    """

    config: RuntimeConfig = field(default_factory=RuntimeConfig)

    _nodes: List[NormalizedDocument] = field(default_factory=list, init=False, repr=False)
    _registry: TypePathRegistry = field(default_factory=TypePathRegistry, init=False, repr=False)
    _subscribers: List[SubscriberFn] = field(default_factory=list, init=False, repr=False)

    @property
    def type_prefix(self) -> str:
        return " ".join(p for p in (GLOBAL_TYPE_PREFIX, self.config.type_prefix) if p)

    @property
    def nodes(self) -> Tuple[NormalizedDocument, ...]:
        return tuple(self._nodes)

    @property
    def type_paths(self) -> Tuple[TypePath, ...]:
        return tuple(self._registry.list_type_paths())

    @property
    def subscribers(self) -> Tuple[SubscriberFn, ...]:
        return tuple(self._subscribers)

    # subscriptions

    def subscribe(self, callback: SubscriberFn) -> None:
        """Add a callback. Subscribing the same callback twice fires it twice."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: SubscriberFn) -> None:
        """Remove every subscription of ``callback`` (identity comparison)."""
        self._subscribers = [s for s in self._subscribers if s is not callback]

    def _notify_subscribers(self) -> None:
        # Snapshot so callbacks may (un)subscribe without affecting this round.
        for subscriber in tuple(self._subscribers):
            subscriber()

    # type paths

    def register_custom_type_model(self, model: Mapping[str, Any]) -> List[TypePath]:
        type_paths = custom_type_model_to_type_paths(model, self.config.transform_field_name)
        return self._commit_type_paths(type_paths)

    def register_custom_type_models(self, models: Iterable[Mapping[str, Any]]) -> List[TypePath]:
        type_paths: List[TypePath] = []
        for model in models:
            type_paths.extend(custom_type_model_to_type_paths(model, self.config.transform_field_name))
        return self._commit_type_paths(type_paths)

    def register_shared_slice_model(self, model: Mapping[str, Any]) -> List[TypePath]:
        type_paths = shared_slice_model_to_type_paths(model, self.config.transform_field_name)
        return self._commit_type_paths(type_paths)

    def register_shared_slice_models(self, models: Iterable[Mapping[str, Any]]) -> List[TypePath]:
        type_paths: List[TypePath] = []
        for model in models:
            type_paths.extend(shared_slice_model_to_type_paths(model, self.config.transform_field_name))
        return self._commit_type_paths(type_paths)

    def register_type_paths(self, type_paths: Iterable[TypePath]) -> None:
        self._commit_type_paths(list(type_paths))

    def _commit_type_paths(self, type_paths: List[TypePath]) -> List[TypePath]:
        self._registry.register(type_paths)
        report_verbose(self.config.repository_name, f"Registered {len(type_paths)} type paths", logger=log)
        self._notify_subscribers()
        return type_paths

    def get_type_path(self, path: Sequence[str]) -> Optional[TypePath]:
        return self._registry.lookup(path)

    # documents

    def register_document(self, document: Mapping[str, Any]) -> NormalizedDocument:
        node = self.normalize_document(document)
        self._nodes.append(node)
        report_verbose(self.config.repository_name, f"Registered document {node.prismic_id}", logger=log)
        self._notify_subscribers()
        return node

    def register_documents(self, documents: Iterable[Mapping[str, Any]]) -> List[NormalizedDocument]:
        """Normalize and register a batch; nothing is stored if any document is malformed."""

        batch = list(documents)
        for document in batch:
            self._check_document(document)

        nodes = [self.normalize_document(d) for d in batch]
        self._nodes.extend(nodes)
        report_info(self.config.repository_name, f"Registered {len(nodes)} documents", logger=log)
        self._notify_subscribers()
        return nodes

    def normalize_document(self, document: Mapping[str, Any]) -> NormalizedDocument:
        self._check_document(document)
        return normalize_document(document, self._environment())

    def normalize(self, value: Any, path: Sequence[str]) -> Any:
        """Normalize a single value at ``path`` without registering anything."""
        return normalize(value, path, self._environment())

    def _check_document(self, document: Any) -> None:
        if not is_document(document):
            raise DocumentShapeError("document must be a mapping with non-empty string 'id' and 'type'")

    def _environment(self) -> NormalizationEnvironment:
        return NormalizationEnvironment(
            get_type_path=self.get_type_path,
            get_node=self.get_node,
            transform_field_name=self.config.transform_field_name,
            link_resolver=self.config.link_resolver,
            html_serializer=self.config.html_serializer,
            image_params=self.config.image_imgix_params,
            placeholder_image_params=self.config.image_placeholder_imgix_params,
            type_prefix=self.type_prefix,
            precedence=self.config.precedence,
        )

    # lookups

    def get_node(self, prismic_id: str) -> Optional[NormalizedDocument]:
        """Return the first registered node for a CMS document id, or None."""
        for node in self._nodes:
            if node.prismic_id == prismic_id:
                return node
        return None

    def has_node(self, prismic_id: str) -> bool:
        return self.get_node(prismic_id) is not None

    def iter_nested_nodes(self) -> Iterator[NestedNode]:
        for node in self._nodes:
            yield from node.nested_nodes


def create_runtime(config: Optional[RuntimeConfig] = None) -> Runtime:
    return Runtime(config=config or RuntimeConfig())
