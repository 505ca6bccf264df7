# cosdata/index.py
"""
Dense index handle: transactions, similarity search and point lookup.

An Index holds no server identity of its own, only its Collection. Any
number of handles may point at the same server-side index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Sequence, TypeVar

from cosdata.exceptions import FetchError, QueryError
from cosdata.http import OK, api_path
from cosdata.logging import get_logger
from cosdata.logging_tags import QUERY, TRANSACTION
from cosdata.transaction import Transaction
from cosdata.types import VectorId

if TYPE_CHECKING:
    from cosdata.client import Client
    from cosdata.collection import Collection

logger = get_logger(__name__)

T = TypeVar("T")


class Index:
    """Handle for the dense index of a collection."""

    def __init__(self, client: "Client", collection: "Collection"):
        self.client = client
        self.collection = collection

    def __repr__(self) -> str:
        return f"Index(collection={self.collection.name!r})"

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def create_transaction(self) -> Transaction:
        """Create a new, not yet opened, transaction for this index."""
        return Transaction(self.client.gateway, self.collection.name)

    def transaction(self, callback: Callable[[Transaction], T]) -> T:
        """
        Run ``callback`` inside a fresh transaction.

        Commits when the callback returns and passes its return value
        through. If the callback (or the commit) raises, the transaction
        is aborted and the original exception is re-raised unchanged. A
        failure of that abort is logged and not raised.

        Example:
            index.transaction(lambda txn: txn.upsert(vectors))
        """
        txn = self.create_transaction()
        try:
            result = callback(txn)
            if txn.is_open:
                txn.commit()
            else:
                logger.debug(f"{TRANSACTION} Callback wrote nothing; skipping commit")
        except Exception:
            if txn.is_open:
                try:
                    txn.abort()
                except Exception:
                    logger.warning(
                        f"{TRANSACTION} Abort after failed callback did not succeed "
                        f"for {txn.transaction_id}",
                        exc_info=True,
                    )
            raise
        return result

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def query(self, vector: Sequence[float], nn_count: int = 5) -> Any:
        """
        Search for the nearest neighbors of a vector.

        Args:
            vector: Query vector (dimension is checked by the server)
            nn_count: Number of nearest neighbors to return

        Returns:
            Raw ranked results from the server

        Raises:
            QueryError: If the search fails
        """
        data = {
            "vector_db_name": self.collection.name,
            "vector": [float(v) for v in vector],
            "nn_count": nn_count,
        }

        logger.debug(f"{QUERY} Searching '{self.collection.name}' (nn_count={nn_count})")

        return self.client.gateway.post(
            api_path("search"),
            json=data,
            expected=OK,
            error=QueryError,
            message="Failed to search vector",
        )

    def fetch_vector(self, vector_id: VectorId) -> Any:
        """
        Fetch a single vector by id.

        Raises:
            FetchError: If the vector cannot be fetched (e.g. unknown id)
        """
        data = {"vector_db_name": self.collection.name, "vector_id": vector_id}

        return self.client.gateway.post(
            api_path("fetch"),
            json=data,
            expected=OK,
            error=FetchError,
            message="Failed to fetch vector",
        )
