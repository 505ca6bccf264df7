# cosdata/client.py
"""
Main entry point for the Cosdata vector database API.

Usage:
    from cosdata import Client

    with Client(host="http://127.0.0.1:8443", username="admin", password="admin") as client:
        collection = client.create_collection("docs", dimension=768)
        index = collection.create_index(distance_metric="cosine")

        index.transaction(lambda txn: txn.upsert(vectors))

        results = index.query(vector=query_vector, nn_count=5)

The client logs in lazily, on the first request that needs a token.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from cosdata.auth import Session
from cosdata.collection import Collection
from cosdata.config import DEFAULT_HOST, ClientConfig
from cosdata.exceptions import CollectionCreationError, CollectionFetchError
from cosdata.http import API_PREFIX, CREATED, OK, Gateway, api_path, create_http_client
from cosdata.logging import get_logger
from cosdata.logging_tags import COLLECTION

logger = get_logger(__name__)

DEFAULT_DIMENSION = 1024


def _dimension_of(collection_info: Any) -> int:
    """Read the dense dimension from a collection document, defaulting to 1024."""
    if not isinstance(collection_info, dict):
        return DEFAULT_DIMENSION
    dense = collection_info.get("dense_vector") or {}
    return dense.get("dimension") or DEFAULT_DIMENSION


class Client:
    """
    Client for a Cosdata server.

    Args:
        host: Server URL (the /vectordb API prefix is added automatically)
        username: Username for authentication
        password: Password for authentication
        verify_ssl: Verify TLS certificates
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests and proxies)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        username: str = "admin",
        password: str = "admin",
        verify_ssl: bool = False,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.host = host.rstrip("/")
        self.verify_ssl = verify_ssl

        self.http_client = create_http_client(
            self.host,
            verify_ssl=verify_ssl,
            timeout=timeout,
            transport=transport,
        )
        self.session = Session(self.http_client, username, password)
        self.gateway = Gateway(self.http_client, self.session)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "Client":
        """Create a client from a ClientConfig."""
        return cls(
            host=config.host,
            username=config.username,
            password=config.password,
            verify_ssl=config.verify_ssl,
            timeout=config.timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"Client(host={self.host!r}, username={self.session.username!r})"

    @property
    def base_url(self) -> str:
        return f"{self.host}{API_PREFIX}"

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self) -> str:
        """Authenticate now and return the access token."""
        return self.session.login()

    def get_headers(self) -> Dict[str, str]:
        """Headers sent with the next request."""
        return self.session.headers()

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def create_collection(
        self,
        name: str,
        dimension: int = DEFAULT_DIMENSION,
        description: Optional[str] = None,
    ) -> Collection:
        """
        Create a new collection for dense vectors.

        Args:
            name: Name of the collection
            dimension: Dimensionality of the vectors stored in it
            description: Optional description

        Returns:
            Collection handle (the server may still be preparing it)

        Raises:
            CollectionCreationError: If the server rejects the request
        """
        data = {
            "name": name,
            "description": description,
            "dense_vector": {
                "enabled": True,
                "auto_create_index": False,
                "dimension": dimension,
            },
            "sparse_vector": {"enabled": False, "auto_create_index": False},
            "metadata_schema": None,
            "config": {"max_vectors": None, "replication_factor": None},
        }

        self.gateway.post(
            api_path("collections"),
            json=data,
            expected=CREATED,
            error=CollectionCreationError,
            message="Failed to create collection",
        )

        logger.info(f"{COLLECTION} Created collection '{name}' (dimension={dimension})")
        return Collection(self, name, dimension)

    def get_collection(self, name: str) -> Collection:
        """
        Get an existing collection.

        Raises:
            CollectionFetchError: If the collection cannot be read
        """
        info = self.gateway.get(
            api_path("collections", name),
            expected=OK,
            error=CollectionFetchError,
            message="Failed to get collection",
        )
        return Collection(self, name, _dimension_of(info))

    def collection(self, name: str) -> Collection:
        """Alias for get_collection()."""
        return self.get_collection(name)

    def list_collections(self) -> Any:
        """
        List all collections as returned by the server.

        Raises:
            CollectionFetchError: If the listing fails
        """
        return self.gateway.get(
            api_path("collections"),
            expected=OK,
            error=CollectionFetchError,
            message="Failed to list collections",
        )

    def collections(self) -> List[Collection]:
        """All collections, wrapped as Collection handles."""
        data = self.list_collections()
        if isinstance(data, dict):
            data = data.get("collections") or []

        collections = []
        for item in data or []:
            if not isinstance(item, dict) or not item.get("name"):
                raise CollectionFetchError(
                    message="Collection listing entry has no name",
                    endpoint=api_path("collections"),
                    details=str(item),
                )
            collections.append(Collection(self, item["name"], _dimension_of(item)))
        return collections

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.http_client.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def create_client(**kwargs: Any) -> Client:
    """
    Create a Client.

    Accepts the same keyword arguments as Client.
    """
    return Client(**kwargs)
