# cosdata/collection.py
"""Collection handle and dense-index creation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cosdata.exceptions import CollectionFetchError, IndexCreationError
from cosdata.http import CREATED, OK, api_path
from cosdata.index import Index
from cosdata.logging import get_logger
from cosdata.logging_tags import COLLECTION
from cosdata.types import HNSWParams

if TYPE_CHECKING:
    from cosdata.client import Client

logger = get_logger(__name__)


class Collection:
    """
    Local handle for a server-side collection.

    Only the name and dimension are kept locally; everything else is
    read from the server on demand (see get_info()).
    """

    def __init__(self, client: "Client", name: str, dimension: int):
        self.client = client
        self.name = name
        self.dimension = dimension

    def __repr__(self) -> str:
        return f"Collection(name={self.name!r}, dimension={self.dimension})"

    def index(self, distance_metric: str = "cosine") -> Index:
        """
        Create a dense index with default parameters and return it.

        This always sends a creation request; it does not look up an
        existing index first, and two callers racing on the same collection
        may both attempt creation. If the index may already exist, build
        the handle directly with ``Index(client, collection)`` instead.
        """
        return self.create_index(distance_metric=distance_metric)

    def create_index(
        self,
        distance_metric: str = "cosine",
        num_layers: int = 7,
        max_cache_size: int = 1000,
        ef_construction: int = 512,
        ef_search: int = 256,
        neighbors_count: int = 32,
        level_0_neighbors_count: int = 64,
    ) -> Index:
        """
        Create a dense HNSW index for this collection.

        Args:
            distance_metric: Distance metric type (e.g. "cosine", "euclidean")
            num_layers: Number of layers in the HNSW graph
            max_cache_size: Maximum cache size
            ef_construction: ef parameter for index construction
            ef_search: ef parameter for search
            neighbors_count: Number of neighbors to connect to
            level_0_neighbors_count: Number of neighbors at level 0

        Returns:
            Index handle for this collection

        Raises:
            IndexCreationError: If the server rejects the request
        """
        params = HNSWParams(
            num_layers=num_layers,
            max_cache_size=max_cache_size,
            ef_construction=ef_construction,
            ef_search=ef_search,
            neighbors_count=neighbors_count,
            level_0_neighbors_count=level_0_neighbors_count,
        )
        data = {
            "name": self.name,
            "distance_metric_type": distance_metric,
            "quantization": {"type": "auto", "properties": {"sample_threshold": 100}},
            "index": {"type": "hnsw", "properties": params.to_dict()},
        }

        self.client.gateway.post(
            api_path("collections", self.name, "indexes", "dense"),
            json=data,
            expected=CREATED,
            error=IndexCreationError,
            message="Failed to create index",
        )

        logger.info(f"{COLLECTION} Created dense index on '{self.name}' (metric={distance_metric})")
        return Index(self.client, self)

    def get_info(self) -> Any:
        """
        Get the collection document from the server.

        Raises:
            CollectionFetchError: If the collection cannot be read
        """
        return self.client.gateway.get(
            api_path("collections", self.name),
            expected=OK,
            error=CollectionFetchError,
            message="Failed to get collection info",
        )
