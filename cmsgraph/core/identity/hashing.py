from __future__ import annotations

import hashlib
import json
from typing import Any

from cmsgraph.utils.json_safe import to_jsonable


def deterministic_id(value: str) -> str:
    """
    Derive a stable identifier from a string key.

    Same input, same output, across processes and builds.
    """
    return hashlib.sha256(value.encode("utf-8", "surrogatepass")).hexdigest()


def create_node_id(*parts: str) -> str:
    """Node identity for a natural key, namespaced by the leading parts."""
    return deterministic_id(" ".join(p for p in parts if p))


def canonical_json(value: Any) -> str:
    # Key order is kept; ASCII escaping keeps lone surrogates encodable.
    return json.dumps(to_jsonable(value), separators=(",", ":"))


def content_digest(value: Any) -> str:
    """
    Compute a change-detection digest of an arbitrary payload.

    Any change to a value changes the digest. Reordering mapping keys also
    changes it; callers relying on digests must keep upstream order stable.
    """
    return hashlib.sha256(canonical_json(value).encode("utf-8")).hexdigest()
