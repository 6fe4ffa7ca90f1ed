"""Tests for topicsync.remote.client.ApiClient using httpx.MockTransport."""

import json

import httpx
import pytest

from topicsync.protocols import ApiError, AuthExpiredError
from topicsync.remote.client import ERR_CODE_LOGIN_EXPIRED, ApiClient

BACKEND = "https://api.example.com"


def _client(handler, token="tok-123"):
    return ApiClient(BACKEND + "/", auth_token=token, transport=httpx.MockTransport(handler))


def _envelope(data=None, err_code=0, msg="ok"):
    return httpx.Response(200, json={"err_code": err_code, "msg": msg, "data": data})


class TestApiClientRequests:
    def test_post_sends_json_and_bearer(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return _envelope({"id": 1})

        with _client(handler) as client:
            assert client.post("/api/so/topic/create", {"topic_name": "x"}) == {"id": 1}

        assert seen["method"] == "POST"
        assert seen["url"] == BACKEND + "/api/so/topic/create"
        assert seen["auth"] == "Bearer tok-123"
        assert seen["body"] == {"topic_name": "x"}

    def test_get_sends_params(self):
        def handler(request):
            assert request.url.params["id"] == "7"
            return _envelope({"id": 7})

        with _client(handler) as client:
            assert client.get("/api/so/topic/detail", {"id": 7}) == {"id": 7}

    def test_no_token_no_auth_header(self):
        def handler(request):
            assert "Authorization" not in request.headers
            return _envelope(None)

        with _client(handler, token=None) as client:
            assert client.post("/x") is None

    def test_set_token(self):
        def handler(request):
            return _envelope(request.headers.get("Authorization"))

        with _client(handler, token=None) as client:
            client.set_token("new")
            assert client.post("/x") == "Bearer new"

    def test_backend_url_trailing_slash_stripped(self):
        client = _client(lambda request: _envelope())
        assert client.backend_url == BACKEND
        client.close()


class TestApiClientErrors:
    def test_business_error(self):
        with _client(lambda r: _envelope(err_code=40001, msg="name taken")) as client:
            with pytest.raises(ApiError) as exc_info:
                client.post("/x")
        assert exc_info.value.err_code == 40001
        assert str(exc_info.value) == "name taken"
        assert not isinstance(exc_info.value, AuthExpiredError)

    def test_login_expired(self):
        with _client(lambda r: _envelope(err_code=ERR_CODE_LOGIN_EXPIRED, msg="expired")) as c:
            with pytest.raises(AuthExpiredError) as exc_info:
                c.post("/x")
        assert exc_info.value.err_code == -100004

    def test_http_status_error(self):
        with _client(lambda r: httpx.Response(502, text="bad gateway")) as client:
            with pytest.raises(ApiError) as exc_info:
                client.post("/x")
        assert exc_info.value.status_code == 502
        assert exc_info.value.err_code is None

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(ApiError, match="connection refused"):
                client.post("/x")

    def test_invalid_json(self):
        with _client(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ApiError, match="Invalid JSON"):
                client.post("/x")

    def test_missing_envelope(self):
        with _client(lambda r: httpx.Response(200, json={"data": 1})) as client:
            with pytest.raises(ApiError, match="Malformed"):
                client.post("/x")
