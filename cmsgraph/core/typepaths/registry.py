from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import TypePath


@dataclass
class TypePathRegistry:
    """Append-only registry of declared field types, keyed by structural path.

    Registration order matters: when two TypePaths share a path, the first
    registered one is returned by lookup and later ones are shadowed.

    - register: O(k) for k new paths
    - lookup: O(1) average
    """

    _type_paths: List[TypePath] = field(default_factory=list, init=False, repr=False)
    _first_by_path: Dict[Tuple[str, ...], TypePath] = field(default_factory=dict, init=False, repr=False)

    def register(self, type_paths: Iterable[TypePath]) -> None:
        """Append type paths. No deduplication."""
        for tp in type_paths:
            self._type_paths.append(tp)
            self._first_by_path.setdefault(tp.path, tp)

    def lookup(self, path: Sequence[str]) -> Optional[TypePath]:
        """Return the first TypePath registered for exactly this path, or None."""
        return self._first_by_path.get(tuple(path))

    def list_type_paths(self) -> List[TypePath]:
        """List type paths in registration order, shadowed entries included."""
        return list(self._type_paths)

    def __len__(self) -> int:
        return len(self._type_paths)
