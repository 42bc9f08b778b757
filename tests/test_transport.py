"""
tests/test_transport.py — ApiTransport & ApiResult
===================================================

The transport must never raise: network errors, HTTP errors and bad JSON
all come back as ``ApiResult(success=False)``.
"""

from __future__ import annotations

import logging

import httpx
import pytest

from helpers import FakeBackend, run_async
from kelasguru.client.transport import DEFAULT_ERROR, ApiResult, ApiTransport, encode_form


# ---------------------------------------------------------------------------
# Form encoding
# ---------------------------------------------------------------------------
class TestEncodeForm:
    def test_action_is_first_key(self):
        form = encode_form("getSiswa", {"id": "S1", "kelas_id": "C1"})
        assert list(form) == ["action", "id", "kelas_id"]
        assert form["action"] == "getSiswa"

    def test_values_coerced_to_text(self):
        form = encode_form("x", {"page": 2, "paginated": True, "off": False, "empty": None})
        assert form == {
            "action": "x", "page": "2", "paginated": "true", "off": "false", "empty": "",
        }

    def test_params_cannot_override_action(self):
        form = encode_form("getKelas", {"action": "deleteSiswa"})
        assert form == {"action": "getKelas"}


# ---------------------------------------------------------------------------
# Successful round trip
# ---------------------------------------------------------------------------
class TestRequestSuccess:
    def test_posts_form_and_parses_json(self, backend, api):
        backend.replies["getKelas"] = {"success": True, "data": [{"id": "C1"}]}

        result = run_async(api.request("getKelas", {"id": "C1"}))

        assert result.success is True
        assert result.data == [{"id": "C1"}]
        assert backend.calls == [{"action": "getKelas", "id": "C1"}]

    def test_sends_form_urlencoded_post(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True})

        api = ApiTransport("https://backend.test/exec", transport=httpx.MockTransport(handler))
        run_async(api.request("getSiswa"))

        assert seen[0].method == "POST"
        assert seen[0].headers["content-type"] == "application/x-www-form-urlencoded"

    def test_backend_failure_passed_through(self, backend, api):
        backend.replies["studentLogin"] = {"success": False, "error": "NIS tidak ditemukan"}
        result = run_async(api.request("studentLogin", {"nis": "1"}))
        assert result.success is False
        assert result.error == "NIS tidak ditemukan"

    def test_pagination_fields_kept_in_extra(self, backend, api):
        backend.replies["getSiswa"] = {
            "success": True, "data": [], "total": 41, "page": 3, "totalPages": 3,
        }
        result = run_async(api.request("getSiswa"))
        assert result.extra == {"total": 41, "page": 3, "totalPages": 3}
        assert result.to_dict()["total"] == 41


# ---------------------------------------------------------------------------
# Failures become values
# ---------------------------------------------------------------------------
class TestRequestFailures:
    def test_network_error(self, backend, api):
        def boom(form):
            raise httpx.ConnectError("connection refused")

        backend.replies["getSiswa"] = boom
        result = run_async(api.request("getSiswa"))
        assert result.success is False
        assert "connection refused" in result.error

    def test_network_error_without_message_gets_default(self, backend, api):
        def boom(form):
            raise httpx.ConnectError("")

        backend.replies["getSiswa"] = boom
        result = run_async(api.request("getSiswa"))
        assert result.error == DEFAULT_ERROR

    @pytest.mark.parametrize("status", [404, 500, 503])
    def test_http_error_status(self, backend, api, status):
        backend.replies["getSiswa"] = httpx.Response(status, json={"success": True})
        result = run_async(api.request("getSiswa"))
        assert result.success is False
        assert result.error == f"HTTP error! status: {status}"

    def test_invalid_json(self, backend, api):
        backend.replies["getSiswa"] = httpx.Response(200, text="<html>Script error</html>")
        result = run_async(api.request("getSiswa"))
        assert result.success is False
        assert result.error.startswith("Invalid JSON response")

    def test_json_array_body_rejected(self, backend, api):
        backend.replies["getSiswa"] = httpx.Response(200, json=[1, 2, 3])
        result = run_async(api.request("getSiswa"))
        assert result.success is False
        assert "expected an object" in result.error

    def test_malformed_url_becomes_failure(self):
        api = ApiTransport("https://bad host\x00/exec")
        result = run_async(api.request("getKelas"))
        assert result.success is False
        assert result.unreachable is True
        assert result.error

    def test_transport_failures_marked_unreachable(self, backend, api):
        backend.replies["getSiswa"] = httpx.Response(500)
        assert run_async(api.request("getSiswa")).unreachable is True

    def test_backend_failure_without_message_gets_default(self, backend, api):
        backend.replies["getSiswa"] = {"success": False}
        result = run_async(api.request("getSiswa"))
        assert result.success is False
        assert result.unreachable is False
        assert result.error == DEFAULT_ERROR


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
class TestRequestLogging:
    def test_password_redacted_in_debug_log(self, backend, api, caplog):
        backend.replies["studentLogin"] = {"success": True, "data": {}}
        with caplog.at_level(logging.DEBUG, logger="kelasguru.client.transport"):
            run_async(api.request("studentLogin", {"nis": "123", "password": "rahasia"}))
        assert "rahasia" not in caplog.text
        assert "***" in caplog.text


# ---------------------------------------------------------------------------
# ApiResult serialisation
# ---------------------------------------------------------------------------
class TestApiResult:
    def test_failure_omits_data(self):
        assert ApiResult.fail("nope").to_dict() == {"success": False, "error": "nope"}

    def test_success_always_has_data_key(self):
        assert ApiResult.ok().to_dict() == {"success": True, "data": None}

    def test_rows_filters_non_objects(self):
        result = ApiResult.ok([{"id": 1}, "junk", None, {"id": 2}])
        assert result.rows() == [{"id": 1}, {"id": 2}]

    def test_rows_of_non_list_is_empty(self):
        assert ApiResult.ok({"id": 1}).rows() == []

    def test_missing_success_key_is_failure(self):
        assert ApiResult.from_payload({"data": [1]}).success is False

    def test_context_manager_closes_client(self):
        async def scenario():
            async with FakeBackend().transport() as api:
                client = api._client
            return client.is_closed

        assert run_async(scenario()) is True
