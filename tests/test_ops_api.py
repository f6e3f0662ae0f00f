"""
Tests for OpsApi and the HTTP transport underneath it.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest
import requests
from conftest import SERVER, make_response

from fsops.api.api import Api
from fsops.domain.types.op import AsyncOps, UndecodableOpDescription, kind_of
from fsops.exceptions import TransportError


@pytest.fixture
def api():
    return Api(server_address=SERVER, token="secret", retry_count=3, retry_sleep_sec=0)


class TestGetList:

    @patch("fsops.api._api.requests.get")
    def test_returns_descriptions_in_service_order(self, mock_get, api, all_kinds_wire):
        reversed_wire = list(reversed(all_kinds_wire))
        mock_get.return_value = make_response(payload=reversed_wire)

        ops = api.ops.get_list()

        mock_get.assert_called_once_with(
            f"{SERVER}/api/simplefs/ops",
            params=None,
            headers={"Authorization": "Bearer secret"},
        )
        assert [kind_of(op) for op in ops] == list(reversed(list(AsyncOps)))

    @patch("fsops.api._api.requests.get")
    def test_duplicates_are_kept(self, mock_get, api, list_wire):
        mock_get.return_value = make_response(payload=[list_wire, list_wire])
        assert len(api.ops.get_list()) == 2

    @patch("fsops.api._api.requests.get")
    def test_accepts_wrapped_collection(self, mock_get, api, list_wire, read_wire):
        mock_get.return_value = make_response(payload={"items": [list_wire, read_wire]})
        ops = api.ops.get_list()
        assert [kind_of(op) for op in ops] == [AsyncOps.LIST, AsyncOps.READ]

    @patch("fsops.api._api.requests.get")
    def test_empty_listing(self, mock_get, api):
        mock_get.return_value = make_response(payload=[])
        assert api.ops.get_list() == []

    @patch("fsops.api._api.requests.get")
    def test_undecodable_item_does_not_abort(self, mock_get, api, list_wire, unknown_wire):
        mock_get.return_value = make_response(payload=[unknown_wire, list_wire])
        ops = api.ops.get_list()
        assert isinstance(ops[0], UndecodableOpDescription)
        assert kind_of(ops[1]) is AsyncOps.LIST

    @patch("fsops.api._api.requests.get")
    def test_no_token_sends_no_auth_header(self, mock_get, list_wire):
        mock_get.return_value = make_response(payload=[list_wire])
        Api(server_address=SERVER, retry_sleep_sec=0).ops.get_list()
        assert mock_get.call_args.kwargs["headers"] == {}


class TestTransportErrors:

    @patch("fsops.api._api.requests.get")
    def test_retries_server_errors_then_succeeds(self, mock_get, api, list_wire):
        mock_get.side_effect = [
            make_response(status_code=503, reason="Service Unavailable"),
            make_response(payload=[list_wire]),
        ]
        ops = api.ops.get_list()
        assert mock_get.call_count == 2
        assert len(ops) == 1

    @patch("fsops.api._api.requests.get")
    def test_retries_connection_errors_until_limit(self, mock_get, api):
        mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")
        with pytest.raises(TransportError, match="Retry limit exceeded"):
            api.ops.get_list()
        assert mock_get.call_count == 3

    @patch("fsops.api._api.requests.get")
    def test_client_error_is_not_retried(self, mock_get, api):
        mock_get.return_value = make_response(
            status_code=403, reason="Forbidden", payload={"error": "denied"}
        )
        with pytest.raises(TransportError, match="403 Client Error: Forbidden") as exc_info:
            api.ops.get_list()
        assert exc_info.value.status_code == 403
        assert mock_get.call_count == 1

    @patch("fsops.api._api.requests.get")
    def test_unexpected_error_becomes_transport_error(self, mock_get, api):
        mock_get.side_effect = RuntimeError("boom")
        with pytest.raises(TransportError, match="RuntimeError: boom"):
            api.ops.get_list()

    @patch("fsops.api._api.requests.get")
    def test_non_json_body_becomes_transport_error(self, mock_get, api):
        mock_get.return_value = make_response(body=b"<html>maintenance</html>")
        with pytest.raises(TransportError, match="invalid JSON from"):
            api.ops.get_list()
        assert mock_get.call_count == 1

    def test_backoff_is_capped_and_skipped_after_last_attempt(self):
        api = Api(server_address=SERVER, retry_count=10, retry_sleep_sec=1)
        assert api._backoff(0, 10) == 1
        assert api._backoff(3, 10) == 8
        assert api._backoff(8, 10) == 60
        assert api._backoff(9, 10) == 0

    def test_server_address_is_required(self):
        with pytest.raises(ValueError):
            Api(server_address=None)

    def test_internal_client_skips_api_prefix(self):
        api = Api(server_address=f"{SERVER}/", external_client=False)
        assert api._prepare_url("simplefs/ops") == f"{SERVER}/simplefs/ops"


class TestGetListAsync:

    @staticmethod
    def _run(api, handler):
        async def scenario():
            api._async_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            try:
                return await api.ops.get_list_async()
            finally:
                await api.aclose()

        return asyncio.run(scenario())

    def test_fetches_descriptions(self, api, list_wire, copy_wire):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=json.dumps([list_wire, copy_wire]))

        ops = self._run(api, handler)

        assert str(seen[0].url) == f"{SERVER}/api/simplefs/ops"
        assert seen[0].headers["Authorization"] == "Bearer secret"
        assert [kind_of(op) for op in ops] == [AsyncOps.LIST, AsyncOps.COPY]

    def test_retries_then_fails(self, api):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502, content=b"bad gateway")

        with pytest.raises(TransportError, match="Retry limit exceeded"):
            self._run(api, handler)
        assert len(calls) == 3

    def test_client_error_is_not_retried(self, api):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, content=b"no such endpoint")

        with pytest.raises(TransportError, match="404 Client Error") as exc_info:
            self._run(api, handler)
        assert exc_info.value.status_code == 404
        assert len(calls) == 1

    def test_non_json_body_becomes_transport_error(self, api):
        def handler(request):
            return httpx.Response(200, content=b"<html>maintenance</html>")

        with pytest.raises(TransportError, match="invalid JSON from"):
            self._run(api, handler)

    def test_context_manager_closes_async_client(self, list_wire):
        def handler(request):
            return httpx.Response(200, content=json.dumps([list_wire]))

        async def scenario():
            async with Api(server_address=SERVER, retry_sleep_sec=0) as api:
                api._async_httpx_client = httpx.AsyncClient(
                    transport=httpx.MockTransport(handler)
                )
                client = api._async_httpx_client
                ops = await api.ops.get_list_async()
            return api, client, ops

        api, client, ops = asyncio.run(scenario())
        assert len(ops) == 1
        assert client.is_closed
        assert api._async_httpx_client is None
