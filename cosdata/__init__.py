"""
cosdata - Python client for the Cosdata vector database.

Quick Start:
    >>> from cosdata import Client, Vector
    >>> client = Client(host="http://127.0.0.1:8443", username="admin", password="admin")
    >>> collection = client.create_collection("docs", dimension=4)
    >>> index = collection.create_index()
    >>> index.transaction(lambda txn: txn.upsert([Vector(id=1, values=[0, 0, 0, 1])]))
    >>> index.query(vector=[0, 0, 0, 1], nn_count=1)

Public API:
    Objects:
        - Client: session login and collection management
        - Collection: index creation, collection info
        - Index: transactions, similarity search, vector lookup
        - Transaction: batched upserts, commit, abort

    Types:
        - Vector, HNSWParams

    Configuration:
        - ClientConfig, load_config

Architecture:
    cosdata/
    ├── client.py        # Client facade, collections
    ├── collection.py    # Collection handle, index creation
    ├── index.py         # Transactions, query, fetch
    ├── transaction.py   # Transaction state machine, batching
    ├── auth.py          # Session login / bearer token
    ├── http.py          # Request gateway (headers, status checks)
    ├── config.py        # ClientConfig, YAML/env loading
    ├── exceptions.py    # Error taxonomy
    └── cli.py           # `cosdata` command line
"""

__version__ = "0.1.0"

from cosdata.client import Client, create_client
from cosdata.collection import Collection
from cosdata.config import ClientConfig, ConfigError, load_config
from cosdata.exceptions import (
    AbortError,
    APIError,
    AuthenticationError,
    CollectionCreationError,
    CollectionFetchError,
    CommitError,
    CosdataError,
    FetchError,
    IllegalStateError,
    IndexCreationError,
    QueryError,
    TransactionCreationError,
    TransactionError,
    UpsertError,
)
from cosdata.index import Index
from cosdata.transaction import Transaction, TransactionState
from cosdata.types import HNSWParams, Vector

__all__ = [
    # Objects
    "Client",
    "create_client",
    "Collection",
    "Index",
    "Transaction",
    "TransactionState",
    # Types
    "Vector",
    "HNSWParams",
    # Configuration
    "ClientConfig",
    "ConfigError",
    "load_config",
    # Exceptions
    "CosdataError",
    "APIError",
    "AuthenticationError",
    "CollectionCreationError",
    "CollectionFetchError",
    "IndexCreationError",
    "TransactionError",
    "TransactionCreationError",
    "UpsertError",
    "CommitError",
    "AbortError",
    "QueryError",
    "FetchError",
    "IllegalStateError",
]
