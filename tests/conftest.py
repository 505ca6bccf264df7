# tests/conftest.py
"""
Root conftest - fake Cosdata server and client fixtures.

Unit tests talk to an in-memory FakeCosdataServer through
httpx.MockTransport, so the real request/response path (headers, JSON
bodies, status handling) is exercised without a network.

Live-server tests live in tests/integration/ and are skipped unless
COSDATA_TEST_HOST is set.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from cosdata import Client

TEST_HOST = "http://cosdata.test"

# (method, path regex, action)
_ROUTES = [
    ("POST", r"^/auth/create-session$", "login"),
    ("POST", r"^/vectordb/collections$", "create_collection"),
    ("GET", r"^/vectordb/collections$", "list_collections"),
    ("GET", r"^/vectordb/collections/(?P<name>[^/]+)$", "get_collection"),
    ("POST", r"^/vectordb/collections/(?P<name>[^/]+)/indexes/dense$", "create_index"),
    ("POST", r"^/vectordb/collections/(?P<name>[^/]+)/transactions$", "create_transaction"),
    (
        "POST",
        r"^/vectordb/collections/(?P<name>[^/]+)/transactions/(?P<txn>[^/]+)/(?P<op>upsert|commit|abort)$",
        "transaction_op",
    ),
    ("POST", r"^/vectordb/search$", "search"),
    ("POST", r"^/vectordb/fetch$", "fetch"),
]


def _cosine(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeCosdataServer:
    """
    Minimal in-memory stand-in for the Cosdata HTTP API.

    Records every request as (action, request, json_body). Use fail_next()
    to make the next call of an action return an error status.
    """

    def __init__(self, username: str = "admin", password: str = "admin"):
        self.username = username
        self.password = password
        self.tokens: List[str] = []
        self.log: List[Tuple[str, httpx.Request, Any]] = []
        self.collections: Dict[str, Dict[str, Any]] = {}
        self.indexes: Dict[str, Dict[str, Any]] = {}
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self.vectors: Dict[str, Dict[Any, Dict[str, Any]]] = {}
        self._failures: Dict[str, List[Tuple[int, Any]]] = {}

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def fail_next(self, action: str, status: int = 500, body: Any = None) -> None:
        """Make the next request for ``action`` fail with ``status``."""
        if body is None:
            body = {"error": f"{action} failed"}
        self._failures.setdefault(action, []).append((status, body))

    def calls(self, action: str) -> List[Tuple[httpx.Request, Any]]:
        return [(req, body) for name, req, body in self.log if name == action]

    @property
    def token(self) -> Optional[str]:
        return self.tokens[-1] if self.tokens else None

    # -------------------------------------------------------------------------
    # Transport handler
    # -------------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None

        for method, pattern, action in _ROUTES:
            match = re.match(pattern, request.url.path)
            if request.method == method and match:
                params = match.groupdict()
                if action == "transaction_op":
                    action = params["op"]
                self.log.append((action, request, body))
                return self._dispatch(action, request, body, params)

        return httpx.Response(404, json={"error": f"no route for {request.url.path}"})

    def _dispatch(self, action: str, request: httpx.Request, body: Any, params: Dict[str, str]):
        if self._failures.get(action):
            status, payload = self._failures[action].pop(0)
            return httpx.Response(status, json=payload)

        if action != "login":
            expected = f"Bearer {self.token}" if self.token else None
            if not expected or request.headers.get("Authorization") != expected:
                return httpx.Response(401, json={"error": "unauthorized"})

        handler: Callable[..., httpx.Response] = getattr(self, f"_on_{action}")
        return handler(body, **params)

    def _on_login(self, body: Any) -> httpx.Response:
        if body != {"username": self.username, "password": self.password}:
            return httpx.Response(401, json={"error": "invalid credentials"})
        token = f"token-{len(self.tokens) + 1}"
        self.tokens.append(token)
        return httpx.Response(200, json={"access_token": token})

    def _on_create_collection(self, body: Any) -> httpx.Response:
        name = body["name"]
        if name in self.collections:
            return httpx.Response(409, json={"error": f"collection '{name}' exists"})
        self.collections[name] = body
        self.vectors[name] = {}
        return httpx.Response(201, json={"id": name, "name": name})

    def _on_list_collections(self, body: Any) -> httpx.Response:
        return httpx.Response(200, json=list(self.collections.values()))

    def _on_get_collection(self, body: Any, name: str) -> httpx.Response:
        if name not in self.collections:
            return httpx.Response(404, json={"error": f"collection '{name}' not found"})
        return httpx.Response(200, json=self.collections[name])

    def _on_create_index(self, body: Any, name: str) -> httpx.Response:
        if name not in self.collections:
            return httpx.Response(404, json={"error": f"collection '{name}' not found"})
        if name in self.indexes:
            return httpx.Response(409, json={"error": "index already exists"})
        self.indexes[name] = body
        return httpx.Response(201, json={"collection_name": name})

    def _on_create_transaction(self, body: Any, name: str) -> httpx.Response:
        if name not in self.collections:
            return httpx.Response(404, json={"error": f"collection '{name}' not found"})
        txn_id = f"txn-{len(self.transactions) + 1}"
        self.transactions[txn_id] = {"collection": name, "vectors": [], "status": "open"}
        return httpx.Response(200, json={"transaction_id": txn_id})

    def _open_txn(self, name: str, txn: str) -> Optional[Dict[str, Any]]:
        record = self.transactions.get(txn)
        if record is None or record["collection"] != name or record["status"] != "open":
            return None
        return record

    def _on_upsert(self, body: Any, name: str, txn: str, op: str) -> httpx.Response:
        record = self._open_txn(name, txn)
        if record is None:
            return httpx.Response(400, json={"error": "transaction not open"})
        record["vectors"].extend(body["vectors"])
        return httpx.Response(204)

    def _on_commit(self, body: Any, name: str, txn: str, op: str) -> httpx.Response:
        record = self._open_txn(name, txn)
        if record is None:
            return httpx.Response(400, json={"error": "transaction not open"})
        for vector in record["vectors"]:
            self.vectors[name][vector["id"]] = vector
        record["status"] = "committed"
        return httpx.Response(204)

    def _on_abort(self, body: Any, name: str, txn: str, op: str) -> httpx.Response:
        record = self._open_txn(name, txn)
        if record is None:
            return httpx.Response(400, json={"error": "transaction not open"})
        record["status"] = "aborted"
        return httpx.Response(200, json={"status": "aborted"})

    def _on_search(self, body: Any) -> httpx.Response:
        name = body["vector_db_name"]
        if name not in self.vectors:
            return httpx.Response(404, json={"error": f"collection '{name}' not found"})
        scored = [
            {"id": vid, "score": _cosine(body["vector"], vector["values"])}
            for vid, vector in self.vectors[name].items()
        ]
        scored.sort(key=lambda r: r["score"], reverse=True)
        return httpx.Response(200, json={"results": scored[: body["nn_count"]]})

    def _on_fetch(self, body: Any) -> httpx.Response:
        name = body["vector_db_name"]
        vector = self.vectors.get(name, {}).get(body["vector_id"])
        if vector is None:
            return httpx.Response(404, json={"error": "vector not found"})
        return httpx.Response(200, json=vector)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def server() -> FakeCosdataServer:
    return FakeCosdataServer()


@pytest.fixture
def client(server):
    """Client wired to the fake server."""
    c = Client(host=TEST_HOST, transport=httpx.MockTransport(server.handler))
    yield c
    c.close()


@pytest.fixture
def collection(client):
    """A 4-dimensional collection named 'docs'."""
    return client.create_collection("docs", dimension=4)


@pytest.fixture
def index(collection):
    """Default dense index on the 'docs' collection."""
    return collection.create_index()


@pytest.fixture
def make_vectors() -> Callable[[int], List[Dict[str, Any]]]:
    """Factory for n distinct 4-dimensional vectors with ids 0..n-1."""

    def _make(n: int) -> List[Dict[str, Any]]:
        return [{"id": i, "values": [float(i), 1.0, 0.0, 0.0]} for i in range(n)]

    return _make
