# cosdata/transaction.py
"""
Write transactions with batched upserts.

A Transaction moves through three states:

    UNOPENED --create()--> OPEN --commit()/abort()--> CLOSED

The server id is requested lazily: the first upsert batch opens the
transaction. CLOSED is terminal; a closed instance accepts no further
writes, commits or aborts. Start a new Transaction instead.

Usage:
    txn = index.create_transaction()
    txn.upsert(vectors)
    txn.commit()

    # Or as a context manager (commit on success, abort on error)
    with index.create_transaction() as txn:
        txn.upsert(vectors)

Instances are not thread-safe. Using one Transaction from several
threads at once is undefined; give each writer its own instance.
Independent transactions on the same collection are coordinated by the
server.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type

from cosdata.exceptions import (
    AbortError,
    CommitError,
    IllegalStateError,
    TransactionCreationError,
    TransactionError,
    UpsertError,
)
from cosdata.http import CREATED, NO_CONTENT, Gateway, api_path
from cosdata.logging import get_logger
from cosdata.logging_tags import TRANSACTION
from cosdata.types import VectorLike, vector_to_dict

logger = get_logger(__name__)

INDEX_TYPE = "dense"

_FINISHED = {"commit": "Committed", "abort": "Aborted"}


class TransactionState(str, Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


def iter_batches(items: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


class Transaction:
    """
    A server-side write transaction on one collection's dense index.

    Args:
        gateway: Authenticated request gateway
        collection_name: Name of the collection written to
    """

    # Maximum vectors per upsert request
    BATCH_SIZE = 200

    def __init__(self, gateway: Gateway, collection_name: str):
        self._gateway = gateway
        self.collection_name = collection_name
        self._transaction_id: Optional[str] = None
        self._state = TransactionState.UNOPENED

    def __repr__(self) -> str:
        return (
            f"Transaction(collection={self.collection_name!r}, "
            f"id={self._transaction_id!r}, state={self._state.value})"
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def transaction_id(self) -> Optional[str]:
        return self._transaction_id

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is TransactionState.OPEN

    def _path(self, *segments: Any) -> str:
        return api_path("collections", self.collection_name, "transactions", *segments)

    def _require_open(self, action: str) -> str:
        if self._state is not TransactionState.OPEN or not self._transaction_id:
            raise IllegalStateError(f"No active transaction to {action}")
        return self._transaction_id

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def create(self) -> str:
        """
        Open the transaction on the server.

        Returns:
            The server-issued transaction id

        Raises:
            IllegalStateError: If this instance was already opened or closed
            TransactionCreationError: If the server rejects the request; the
                instance stays UNOPENED
        """
        if self._state is not TransactionState.UNOPENED:
            raise IllegalStateError(f"Transaction is already {self._state.value}")

        result = self._gateway.post(
            self._path(),
            json={"index_type": INDEX_TYPE},
            expected=CREATED,
            error=TransactionCreationError,
            message="Failed to create transaction",
        )

        transaction_id = result.get("transaction_id") if isinstance(result, dict) else None
        if not transaction_id:
            raise TransactionCreationError(
                message="Transaction response has no transaction_id",
                endpoint=self._path(),
                details=str(result),
            )

        self._transaction_id = str(transaction_id)
        self._state = TransactionState.OPEN
        logger.info(
            f"{TRANSACTION} Opened transaction {self._transaction_id} "
            f"on collection='{self.collection_name}'"
        )
        return self._transaction_id

    def ensure_transaction(self) -> str:
        """
        Return the open transaction id, creating the transaction if needed.

        Raises:
            IllegalStateError: If the transaction is already closed
        """
        if self._state is TransactionState.CLOSED:
            raise IllegalStateError("Transaction is closed; start a new one")
        if self._state is TransactionState.UNOPENED:
            return self.create()
        return self._transaction_id  # type: ignore[return-value]

    def upsert(self, vectors: Sequence[VectorLike]) -> "Transaction":
        """
        Upsert vectors, split into batches of at most BATCH_SIZE.

        Batches are sent one after another in input order. If a batch fails,
        the call stops there: batches already sent stay in the (still open)
        transaction and it is up to the caller to abort or retry.

        Args:
            vectors: Vector objects or dicts with 'id' and 'values'

        Returns:
            This transaction, for chaining

        Raises:
            IllegalStateError: If the transaction is closed
            TransactionCreationError: If opening the transaction fails
            UpsertError: If a batch is rejected
        """
        if self._state is TransactionState.CLOSED:
            raise IllegalStateError("Transaction is closed; start a new one")

        payload = [vector_to_dict(v) for v in vectors]

        for number, batch in enumerate(iter_batches(payload, self.BATCH_SIZE), start=1):
            self._upsert_batch(list(batch), number)

        return self

    def _upsert_batch(self, batch: List[Dict[str, Any]], number: int) -> None:
        transaction_id = self.ensure_transaction()

        self._gateway.post(
            self._path(transaction_id, "upsert"),
            json={"index_type": INDEX_TYPE, "vectors": batch},
            expected=NO_CONTENT,
            error=UpsertError,
            message=f"Failed to upsert vectors (batch {number}, {len(batch)} vectors)",
        )

        logger.debug(f"{TRANSACTION} Upserted batch {number} ({len(batch)} vectors) into {transaction_id}")

    def commit(self) -> Any:
        """
        Commit the transaction.

        Returns:
            Decoded server response, or None for an empty body

        Raises:
            IllegalStateError: If there is no open transaction (no request is sent)
            CommitError: If the server rejects the commit; the transaction
                stays open
        """
        return self._finish("commit", CommitError)

    def abort(self) -> Any:
        """
        Abort the transaction.

        Returns:
            Decoded server response, or None for an empty body

        Raises:
            IllegalStateError: If there is no open transaction (no request is sent)
            AbortError: If the server rejects the abort; the transaction
                stays open
        """
        return self._finish("abort", AbortError)

    def _finish(self, action: str, error: Type[TransactionError]) -> Any:
        transaction_id = self._require_open(action)

        result = self._gateway.post(
            self._path(transaction_id, action),
            json={"index_type": INDEX_TYPE},
            expected=NO_CONTENT,
            error=error,
            message=f"Failed to {action} transaction",
        )

        self._transaction_id = None
        self._state = TransactionState.CLOSED
        logger.info(f"{TRANSACTION} {_FINISHED[action]} transaction {transaction_id}")
        return result

    # -------------------------------------------------------------------------
    # Context manager
    # -------------------------------------------------------------------------

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.is_open:
            return
        if exc_type is not None:
            self._abort_after_failure()
            return
        try:
            self.commit()
        except Exception:
            self._abort_after_failure()
            raise

    def _abort_after_failure(self) -> None:
        try:
            self.abort()
        except Exception:
            logger.warning(
                f"{TRANSACTION} Abort after error failed for {self._transaction_id}",
                exc_info=True,
            )
