# tests/test_http.py
"""
Tests for the request gateway helpers.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from cosdata.exceptions import APIError, QueryError, UpsertError
from cosdata.http import (
    CREATED,
    NO_CONTENT,
    OK,
    api_path,
    build_headers,
    check_response,
    create_http_client,
    decode_body,
    send,
)


class TestBuildHeaders:
    def test_without_token_has_no_authorization(self):
        headers = build_headers()

        assert headers == {"Content-type": "application/json"}

    def test_empty_token_has_no_authorization(self):
        assert "Authorization" not in build_headers("")

    def test_with_token_adds_bearer(self):
        headers = build_headers("abc")

        assert headers["Authorization"] == "Bearer abc"
        assert headers["Content-type"] == "application/json"


class TestApiPath:
    def test_prefix_and_segments(self):
        assert api_path("collections", "docs", "transactions") == "/vectordb/collections/docs/transactions"

    def test_root_endpoints(self):
        assert api_path("search") == "/vectordb/search"

    def test_segments_are_quoted(self):
        assert api_path("collections", "a b/c") == "/vectordb/collections/a%20b%2Fc"


class TestCheckResponse:
    def test_accepts_expected_status(self):
        response = httpx.Response(201, json={"ok": True})

        assert check_response(response, CREATED, APIError, "boom") == {"ok": True}

    def test_empty_body_decodes_to_none(self):
        response = httpx.Response(204)

        assert check_response(response, NO_CONTENT, UpsertError, "boom") is None

    def test_unexpected_status_raises_operation_error_with_body(self):
        response = httpx.Response(201, text='{"error": "nope"}')

        with pytest.raises(QueryError) as exc_info:
            check_response(response, OK, QueryError, "Failed to search vector", endpoint="/vectordb/search")

        err = exc_info.value
        assert err.status_code == 201
        assert err.details == '{"error": "nope"}'
        assert err.endpoint == "/vectordb/search"
        assert "HTTP 201" in str(err)
        assert "Failed to search vector" in str(err)


class TestDecodeBody:
    def test_non_json_body_returns_text(self):
        assert decode_body(httpx.Response(200, text="plain")) == "plain"


class TestSend:
    def test_transport_error_becomes_operation_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http_client = httpx.Client(base_url="http://cosdata.test", transport=httpx.MockTransport(refuse))

        with pytest.raises(UpsertError) as exc_info:
            send(http_client, "POST", "/x", headers={}, json={}, error=UpsertError, message="Failed")

        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.details
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_http_errors_are_not_raised_by_send(self):
        http_client = httpx.Client(
            base_url="http://cosdata.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        response = send(http_client, "GET", "/x", headers={})

        assert response.status_code == 500


class TestCreateHttpClient:
    @patch("cosdata.http.httpx.Client")
    def test_verify_ssl_is_passed_to_transport(self, mock_client_class):
        mock_client_class.return_value = MagicMock()

        create_http_client("https://db.example.com:8443/", verify_ssl=False, timeout=12.5)

        kwargs = mock_client_class.call_args.kwargs
        assert kwargs["verify"] is False
        assert kwargs["timeout"] == 12.5
        assert kwargs["base_url"] == "https://db.example.com:8443"
        assert "transport" not in kwargs

    @patch("cosdata.http.httpx.Client")
    def test_verify_ssl_enabled(self, mock_client_class):
        create_http_client("https://db.example.com", verify_ssl=True)

        assert mock_client_class.call_args.kwargs["verify"] is True
