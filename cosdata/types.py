# cosdata/types.py
"""
Typed models for vectors and index parameters.

Vectors can be passed to the client either as ``Vector`` objects or as plain
dicts in the wire format (``{"id": ..., "values": [...], **metadata}``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Sequence, Union

VectorId = Union[str, int]

# =============================================================================
# Vector Types
# =============================================================================


@dataclass(frozen=True)
class Vector:
    """
    A vector to upsert.

    ``metadata`` entries are sent as extra top-level fields next to
    ``id`` and ``values``. The dimension is checked by the server only.

    Instances are immutable: ``values`` becomes a tuple and ``metadata`` a
    read-only copy. Hashing uses ``id`` and ``values`` only.
    """

    id: VectorId
    values: Sequence[float]
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        reserved = {"id", "values"} & set(self.metadata)
        if reserved:
            raise ValueError(f"metadata may not override {sorted(reserved)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format used by upsert."""
        return {"id": self.id, "values": list(self.values), **self.metadata}


VectorLike = Union[Vector, Mapping[str, Any]]


def vector_to_dict(vector: VectorLike) -> Dict[str, Any]:
    """Normalize a Vector or mapping into a JSON-ready dict."""
    if isinstance(vector, Vector):
        return vector.to_dict()
    if isinstance(vector, Mapping):
        return dict(vector)
    raise TypeError(f"Expected Vector or mapping, got {type(vector).__name__}")


# =============================================================================
# Index Parameters
# =============================================================================


@dataclass
class HNSWParams:
    """Graph-construction and search parameters for a dense HNSW index."""

    num_layers: int = 7
    max_cache_size: int = 1000
    ef_construction: int = 512
    ef_search: int = 256
    neighbors_count: int = 32
    level_0_neighbors_count: int = 64

    def to_dict(self) -> Dict[str, int]:
        return {
            "num_layers": self.num_layers,
            "max_cache_size": self.max_cache_size,
            "ef_construction": self.ef_construction,
            "ef_search": self.ef_search,
            "neighbors_count": self.neighbors_count,
            "level_0_neighbors_count": self.level_0_neighbors_count,
        }
