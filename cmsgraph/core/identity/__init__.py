"""Stable identities and change-detection digests for normalized nodes."""

from .hashing import canonical_json, content_digest, create_node_id, deterministic_id

__all__ = [
    "deterministic_id",
    "create_node_id",
    "content_digest",
    "canonical_json",
]
