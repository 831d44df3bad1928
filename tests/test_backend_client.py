# tests/test_backend_client.py
"""
Backend client tests – every request is answered by ``httpx.MockTransport``.
"""
import httpx
import pytest

from core.exceptions import TransportError
from services.backend.client import BackendClient, legacy_names_from_actors


def _client(handler, **kwargs):
    return BackendClient(
        "http://backend.test/api",
        token="secret",
        backoff=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_fetch_schema_returns_field_list(wire_fields):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"success": True, "data": {"schema": {"fields": wire_fields}}})

    with _client(handler) as client:
        fields = client.fetch_schema("abc")

    assert fields == wire_fields
    assert seen["path"] == "/api/templates/actors/abc/schema"
    assert seen["auth"] == "Bearer secret"


def test_http_error_becomes_transport_error_with_backend_message():
    def handler(request):
        return httpx.Response(409, json={"success": False, "message": "Template already exists"})

    with _client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            client.save_template({"name": "x"})

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "Template already exists"


def test_success_false_envelope_is_a_failure():
    def handler(request):
        return httpx.Response(200, json={"success": False, "message": "Nope"})

    with _client(handler) as client:
        with pytest.raises(TransportError, match="Nope"):
            client.get_template("t1")


def test_network_errors_are_retried_then_reported():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler, max_retries=3) as client:
        with pytest.raises(TransportError, match="unreachable"):
            client.list_actors()

    assert len(attempts) == 3


def test_non_network_http_errors_are_reported_without_retry():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.DecodingError("malformed gzip body", request=request)

    with _client(handler, max_retries=3) as client:
        with pytest.raises(TransportError, match="malformed gzip body"):
            client.fetch_schema("abc")

    assert len(attempts) == 1


def test_transient_error_then_success():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"success": True, "data": [{"_id": "a1", "name": "A"}]})

    with _client(handler) as client:
        assert client.list_actors() == [{"_id": "a1", "name": "A"}]
    assert len(attempts) == 2


def test_save_uses_put_for_existing_records():
    methods = []

    def handler(request):
        methods.append((request.method, request.url.path))
        return httpx.Response(200, json={"success": True, "data": {"id": "t1"}})

    with _client(handler) as client:
        assert client.save_template({"name": "x"}, "t1") == {"id": "t1"}
        client.save_template({"name": "y"})

    assert methods == [("PUT", "/api/templates/t1"), ("POST", "/api/templates")]


def test_schema_response_without_fields_is_rejected():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {}})

    with _client(handler) as client:
        with pytest.raises(TransportError):
            client.fetch_schema("abc")


def test_legacy_names_from_actor_listing():
    actors = [{"_id": "689464ac10595b979c15002b", "name": "Multi-Website Product Crawler"}, {"name": "No id"}]
    assert legacy_names_from_actors(actors) == {
        "Multi-Website Product Crawler": "689464ac10595b979c15002b"
    }
